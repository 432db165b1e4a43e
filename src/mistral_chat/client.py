import logging
from typing import Any, List, Mapping, Optional, Sequence, Union

import requests
from pydantic import SecretStr, ValidationError

from mistral_chat.exceptions import (
    InvalidConfigurationException,
    MistralAPIException,
    MistralConnectionException,
)
from mistral_chat.protocol.messages import ChatMessage
from mistral_chat.protocol.request import ChatCompletionRequest
from mistral_chat.protocol.response import ChatCompletionOutput
from mistral_chat.settings import DEFAULT_BASE_URL

logger = logging.getLogger(__name__)


def _secret_value(api_key: Union[str, SecretStr, None]) -> Optional[str]:
    if isinstance(api_key, SecretStr):
        return api_key.get_secret_value()
    return api_key


def _validate_messages(messages: Sequence[Union[ChatMessage, Mapping[str, Any]]]) -> List[ChatMessage]:
    try:
        return [
            message if isinstance(message, ChatMessage) else ChatMessage.model_validate(message)
            for message in messages
        ]
    except ValidationError as e:
        raise InvalidConfigurationException(f"Invalid message: {e}") from e


def complete(
    api_key: Union[str, SecretStr, None],
    model_name: Optional[str],
    messages: Optional[Sequence[Union[ChatMessage, Mapping[str, Any]]]],
    base_url: str = DEFAULT_BASE_URL,
    json_response_schema: Optional[str] = None,
    timeout: int = 60,
) -> ChatCompletionOutput:
    r"""Sends a chat completion request to the Mistral API.

    The request is validated and built before any network call, so a missing configuration value or an
    invalid schema never reaches the API. The HTTP session only lives for the duration of the call.

    Args:
        api_key: The Mistral API key.
        model_name: The model to use, e.g. `open-mistral-7b`.
        messages: The chat messages, in conversational order, as `ChatMessage` or `{type, content}` mappings.
        base_url: The base URL of the Mistral API.
        json_response_schema: An optional JSON schema string forcing a structured output.
        timeout: The timeout of the HTTP client, in seconds.

    Returns:
        The text of the first choice and the raw response body.

    Raises:
        InvalidConfigurationException: If the API key, the model name or the messages are missing or invalid.
        InvalidJsonSchemaException: If `json_response_schema` is not valid JSON.
        MistralAPIException: If the API answers with a status code of 400 or more.
        MistralConnectionException: If the API cannot be reached.
        ResponseExtractionException: If the response body has no choices.
    """
    key = _secret_value(api_key)
    if not key:
        raise InvalidConfigurationException("`api_key` is required.")
    if not model_name:
        raise InvalidConfigurationException("`model_name` is required.")
    if messages is None:
        raise InvalidConfigurationException("`messages` is required.")

    request = ChatCompletionRequest.from_messages(model_name, _validate_messages(messages), json_response_schema)
    body = request.to_body()

    url = f"{(base_url or DEFAULT_BASE_URL).rstrip('/')}/chat/completions"
    headers = {
        "Authorization": f"Bearer {key}",
        "Content-Type": "application/json",
    }

    logger.info(f"Requesting chat completion from model {model_name} at {url}")
    logger.debug(
        f"Request has {len(request.messages)} messages, structured output: {request.response_format is not None}"
    )

    try:
        with requests.Session() as session:
            response = session.post(url, json=body, headers=headers, timeout=timeout)
    except requests.exceptions.Timeout as e:
        raise MistralConnectionException(f"Timeout from Mistral API: {e}") from e
    except requests.exceptions.RequestException as e:
        raise MistralConnectionException(f"Mistral API request error: {e}") from e

    logger.debug(f"Mistral API answered with status {response.status_code}")
    if response.status_code >= 400:
        logger.warning(f"Mistral API error {response.status_code}: {response.text}")
        raise MistralAPIException(response.status_code, response.text)

    return ChatCompletionOutput.from_raw(response.text)
