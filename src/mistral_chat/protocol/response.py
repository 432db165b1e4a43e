import json
from typing import Any

from mistral_chat.base import MistralBase
from mistral_chat.exceptions import ResponseExtractionException


class ChatCompletionOutput(MistralBase):
    r"""Output of the chat completion task.

    Attributes:
        response: The text generated by the model.
        raw: The full JSON response body, as returned by the API.

    Examples:
        >>> output = ChatCompletionOutput(response="Paris", raw='{"choices": []}')
    """

    response: str
    raw: str

    @classmethod
    def from_raw(cls, raw: str) -> "ChatCompletionOutput":
        r"""Builds the output from a successful response body.

        Examples:
            >>> ChatCompletionOutput.from_raw('{"choices":[{"message":{"content":"Paris"}}]}').response
            'Paris'
        """
        return cls(response=extract_content(raw), raw=raw)


def _content_to_text(content: Any) -> str:
    if content is None:
        return ""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        return "".join(
            chunk.get("text") or ""
            for chunk in content
            if isinstance(chunk, dict) and chunk.get("type") == "text"
        )
    return json.dumps(content)


def extract_content(raw: str) -> str:
    r"""Extracts `choices[0].message.content` from a chat completion response body.

    A missing or null message or content yields an empty string. Content returned as a list of
    chunks is reduced to the concatenation of its text chunks.

    Args:
        raw: The response body.

    Returns:
        The text of the first choice.

    Raises:
        ResponseExtractionException: If the body is not JSON or has no choices.

    Examples:
        >>> extract_content('{"choices": [{"message": {"content": null}}]}')
        ''
        >>> extract_content('{"choices": [{"message": {"content": [{"type": "text", "text": "Paris"}]}}]}')
        'Paris'
    """
    try:
        body = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ResponseExtractionException(f"Response body is not valid JSON: {e}", raw) from e

    if not isinstance(body, dict):
        raise ResponseExtractionException("Response body is not a JSON object.", raw)

    choices = body.get("choices")
    if not isinstance(choices, list) or not choices:
        raise ResponseExtractionException("Response body has no choices.", raw)

    choice = choices[0]
    if not isinstance(choice, dict):
        raise ResponseExtractionException("First choice of the response is not a JSON object.", raw)

    message = choice.get("message")
    if not isinstance(message, dict):
        return ""
    return _content_to_text(message.get("content"))
