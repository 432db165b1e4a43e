import pytest

from mistral_chat.protocol.messages import ChatMessage, ChatMessageType
from mistral_chat.settings import Settings


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("MISTRAL_API_KEY", "MISTRAL_BASE_URL", "MISTRAL_TIMEOUT", "MISTRAL_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None)


@pytest.fixture
def messages() -> list[ChatMessage]:
    return [
        ChatMessage(
            type=ChatMessageType.SYSTEM,
            content="You are a helpful assistant, answer concisely, avoid overly casual language.",
        ),
        ChatMessage(type=ChatMessageType.USER, content="What is the capital of France?"),
    ]


@pytest.fixture
def book_schema() -> str:
    return """
    {
      "type": "object",
      "title": "Book",
      "additionalProperties": false,
      "required": ["name", "authors"],
      "properties": {
        "name": { "type": "string", "title": "Name" },
        "authors": { "type": "array", "title": "Authors", "items": { "type": "string" } }
      }
    }
    """
