import json
import logging
from typing import Any, List, Optional, Union

from pydantic import ConfigDict, Field, ValidationError

from mistral_chat.base import MistralBase
from mistral_chat.client import complete
from mistral_chat.exceptions import InvalidConfigurationException
from mistral_chat.protocol.messages import ChatMessage
from mistral_chat.protocol.response import ChatCompletionOutput
from mistral_chat.run_context import RunContext
from mistral_chat.settings import Settings, get_settings

logger = logging.getLogger(__name__)


class ChatCompletion(MistralBase):
    r"""Task sending a chat completion request to the Mistral API.

    Every string property may hold `{{ ... }}` expressions, resolved by a
    `RunContext` when the task runs. Properties accept the camelCase
    names used in workflow definitions.

    Attributes:
        api_key: The Mistral API key. Defaults to the `MISTRAL_API_KEY` setting.
        model_name: The model to use, e.g. `mistral-small`, `mistral-large-latest`.
        base_url: The base URL of the Mistral API. Defaults to the `MISTRAL_BASE_URL` setting.
        messages: The chat messages in conversational order, or an expression rendering to them.
        json_response_schema: A JSON schema (as a string) forcing a structured output.

    Examples:
        >>> task = ChatCompletion(
        ...     apiKey="{{ secret('MISTRAL_API_KEY') }}",
        ...     modelName="open-mistral-7b",
        ...     messages=[
        ...         ChatMessage(type="SYSTEM", content="You are a helpful assistant, answer concisely."),
        ...         ChatMessage(type="USER", content="What is the capital of France?"),
        ...     ],
        ... )
    """

    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())

    api_key: Optional[str] = Field(default=None, alias="apiKey")
    model_name: Optional[str] = Field(default=None, alias="modelName")
    base_url: Optional[str] = Field(default=None, alias="baseUrl")
    messages: Optional[Union[str, List[Union[ChatMessage, dict]]]] = None
    json_response_schema: Optional[str] = Field(default=None, alias="jsonResponseSchema")

    def _render_messages(self, run_context: RunContext) -> Optional[List[ChatMessage]]:
        if self.messages is None:
            return None

        declared = self.messages
        if isinstance(declared, list):
            declared = [
                message.model_dump() if isinstance(message, ChatMessage) else message for message in declared
            ]
        rendered: Any = run_context.render_native(declared)

        if isinstance(rendered, str):
            try:
                rendered = json.loads(rendered)
            except json.JSONDecodeError as e:
                raise InvalidConfigurationException(f"`messages` must render to a list of messages: {e}") from e
        if not isinstance(rendered, list):
            raise InvalidConfigurationException(
                f"`messages` must render to a list of messages, got {type(rendered).__name__}."
            )

        try:
            return [
                message if isinstance(message, ChatMessage) else ChatMessage.model_validate(message)
                for message in rendered
            ]
        except ValidationError as e:
            raise InvalidConfigurationException(f"Invalid message: {e}") from e

    def run(
        self,
        run_context: Optional[RunContext] = None,
        settings: Optional[Settings] = None,
    ) -> ChatCompletionOutput:
        r"""Renders the properties of the task and sends the chat completion request.

        Args:
            run_context: The context resolving variables and secrets. Defaults to an empty context.
            settings: The settings providing defaults. Defaults to the environment settings.

        Returns:
            The text generated by the model and the raw response body.
        """
        run_context = run_context or RunContext()
        settings = settings or get_settings()

        api_key = run_context.render(self.api_key)
        if not api_key and settings.api_key is not None:
            logger.debug("No API key declared, using the `MISTRAL_API_KEY` setting.")
            api_key = settings.api_key.get_secret_value()

        return complete(
            api_key=api_key,
            model_name=run_context.render(self.model_name),
            messages=self._render_messages(run_context),
            base_url=run_context.render(self.base_url) or settings.base_url,
            json_response_schema=run_context.render(self.json_response_schema),
            timeout=settings.timeout,
        )
