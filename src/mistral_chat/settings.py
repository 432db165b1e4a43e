from typing import Optional

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_BASE_URL = "https://api.mistral.ai/v1"


class Settings(BaseSettings):
    r"""Settings of the Mistral chat task, read from `MISTRAL_*` environment variables.

    Attributes:
        api_key: The API key used when a task does not declare one.
        base_url: The base URL of the Mistral API.
        timeout: The timeout of the HTTP client, in seconds.
        log_level: The log level of the command line.
    """

    model_config = SettingsConfigDict(env_prefix="MISTRAL_", env_file=".env", extra="ignore")

    api_key: Optional[SecretStr] = None
    base_url: str = DEFAULT_BASE_URL
    timeout: int = 60
    log_level: str = "WARNING"

    @field_validator("base_url", mode="before")
    @classmethod
    def _validate_base_url(cls, value: str) -> str:
        if isinstance(value, str) and value.endswith("/"):
            value = value[:-1]
        return value


def get_settings() -> Settings:
    r"""Get the settings of the Mistral chat task."""
    return Settings()
