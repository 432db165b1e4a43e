import json
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import field_validator

from mistral_chat.base import MistralBase


class ChatMessageType(str, Enum):
    r"""Enum for the message types a workflow author declares.

    Attributes:
       SYSTEM: The system prompt.
       ASSISTANT: A previous answer of the assistant.
       USER: A message of the end user.

    Examples:
        >>> message_type = ChatMessageType.USER
    """

    SYSTEM = "SYSTEM"
    ASSISTANT = "ASSISTANT"
    USER = "USER"

    @property
    def role(self) -> "Roles":
        r"""The API role of the message type."""
        return _ROLES[self]


class Roles(str, Enum):
    r"""Enum for the roles of the messages sent to the API.

    Attributes:
       system: The system role.
       assistant: The assistant role.
       user: The user role.

    Examples:
        >>> role = Roles.user
    """

    system = "system"
    assistant = "assistant"
    user = "user"


_ROLES: Dict[ChatMessageType, Roles] = {
    ChatMessageType.SYSTEM: Roles.system,
    ChatMessageType.ASSISTANT: Roles.assistant,
    ChatMessageType.USER: Roles.user,
}


class APIMessage(MistralBase):
    r"""A message in the shape expected by the chat completions endpoint.

    Attributes:
        role: The role of the message.
        content: The content of the message.

    Examples:
        >>> message = APIMessage(role=Roles.user, content="Hello!")
        >>> message.model_dump()
        {'role': 'user', 'content': 'Hello!'}
    """

    role: Roles
    content: str


class ChatMessage(MistralBase):
    r"""A chat message as declared in the task configuration.

    Attributes:
        type: The type of the message.
        content: The content of the message. Absent content is sent as an empty string.

    Examples:
        >>> message = ChatMessage(type=ChatMessageType.USER, content="What is the capital of France?")
        >>> message.to_api().model_dump()
        {'role': 'user', 'content': 'What is the capital of France?'}
        >>> ChatMessage(type="system").to_api().model_dump()
        {'role': 'system', 'content': ''}
    """

    type: ChatMessageType
    content: Optional[str] = None

    @field_validator("type", mode="before")
    @classmethod
    def _validate_type(cls, value: Any) -> Any:
        if isinstance(value, str) and not isinstance(value, ChatMessageType):
            value = value.upper()
        return value

    @field_validator("content", mode="before")
    @classmethod
    def _validate_content(cls, value: Any) -> Any:
        if isinstance(value, (bool, int, float)):
            value = json.dumps(value)
        return value

    def to_api(self) -> APIMessage:
        r"""Converts the message to the format of the chat completions endpoint."""
        return APIMessage(role=ChatMessageType(self.type).role, content=self.content or "")
