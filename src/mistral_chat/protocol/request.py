import json
from typing import Any, Dict, List, Literal, Optional, Sequence

from pydantic import Field

from mistral_chat.base import MistralBase
from mistral_chat.exceptions import InvalidJsonSchemaException
from mistral_chat.protocol.messages import APIMessage, ChatMessage

JSON_SCHEMA_NAME = "kestra_schema"


def _reject_constant(constant: str) -> Any:
    raise ValueError(f"`{constant}` is not a valid JSON value")


class JsonSchema(MistralBase):
    r"""A JSON schema the response of the model must conform to.

    Attributes:
        schema_definition: The JSON schema, serialized under `schema`.
        name: The name of the schema.
        strict: Whether the API enforces the schema strictly.

    Examples:
        >>> json_schema = JsonSchema(schema={"type": "object"})
        >>> json_schema.model_dump(by_alias=True)
        {'schema': {'type': 'object'}, 'name': 'kestra_schema', 'strict': True}
    """

    schema_definition: Any = Field(alias="schema")
    name: str = JSON_SCHEMA_NAME
    strict: bool = True


class ResponseFormat(MistralBase):
    r"""The structured output directive of a chat completion request.

    Attributes:
        type: The type of the response format.
        json_schema: The schema wrapper.
    """

    type: Literal["json_schema"] = "json_schema"
    json_schema: JsonSchema

    @classmethod
    def from_json_string(cls, json_response_schema: str) -> "ResponseFormat":
        r"""Parses a JSON schema string and wraps it into a response format.

        Args:
            json_response_schema: The JSON schema as a string.

        Returns:
            The response format embedding the parsed schema verbatim.

        Raises:
            InvalidJsonSchemaException: If the string is not valid JSON.

        Examples:
            >>> ResponseFormat.from_json_string('{"type": "object"}').model_dump(by_alias=True)
            {'type': 'json_schema', 'json_schema': {'schema': {'type': 'object'}, 'name': 'kestra_schema', 'strict': True}}
        """  # noqa: E501
        try:
            schema = json.loads(json_response_schema, parse_constant=_reject_constant)
        except ValueError as e:
            raise InvalidJsonSchemaException(f"Invalid JSON response schema: {e}") from e
        return cls(json_schema=JsonSchema(schema=schema))


class ChatCompletionRequest(MistralBase):
    r"""Body of a request to the chat completions endpoint.

    Attributes:
        model: The model to use for the chat completion.
        messages: The messages, in conversational order.
        response_format: The structured output directive, if any.

    Examples:
        >>> from mistral_chat.protocol.messages import ChatMessageType
        >>> request = ChatCompletionRequest.from_messages(
        ...     model="open-mistral-7b",
        ...     messages=[ChatMessage(type=ChatMessageType.USER, content="Hello!")],
        ... )
        >>> request.to_body()
        {'model': 'open-mistral-7b', 'messages': [{'role': 'user', 'content': 'Hello!'}]}
    """

    model: str
    messages: List[APIMessage]
    response_format: Optional[ResponseFormat] = None

    @classmethod
    def from_messages(
        cls,
        model: str,
        messages: Sequence[ChatMessage],
        json_response_schema: Optional[str] = None,
    ) -> "ChatCompletionRequest":
        r"""Builds a request from declared chat messages.

        Args:
            model: The model to use for the chat completion.
            messages: The declared messages.
            json_response_schema: An optional JSON schema string forcing a structured output.

        Returns:
            The chat completion request.
        """
        response_format = (
            ResponseFormat.from_json_string(json_response_schema) if json_response_schema is not None else None
        )
        return cls(
            model=model,
            messages=[message.to_api() for message in messages],
            response_format=response_format,
        )

    def to_body(self) -> Dict[str, Any]:
        r"""Serializes the request to the JSON body sent to the API.

        `response_format` is left out entirely when no schema was supplied.
        """
        body = self.model_dump(by_alias=True)
        if self.response_format is None:
            body.pop("response_format")
        return body
