from __future__ import annotations

from pydantic import Field
from pydantic import ValidationError as PydanticValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from infranodus_mcp.utils.exceptions import ConfigurationError


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # InfraNodus
    INFRANODUS_API_KEY: str = Field(min_length=1)
    INFRANODUS_API_BASE: str = "https://infranodus.com/api/v1"
    INFRANODUS_TIMEOUT_SECONDS: float = 60.0

    # Advice generation
    DEFAULT_MODEL: str = "gpt-4o"

    # HTTP/SSE server
    HTTP_HOST: str = "0.0.0.0"
    HTTP_PORT: int = 3000
    SSE_KEEPALIVE_SECONDS: float = 30.0

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = Field(default="json", description="'json' for production, 'console' for dev")


def load_settings() -> Settings:
    """Resolve settings once at startup, failing fast when the API key is missing."""
    try:
        return Settings()
    except PydanticValidationError as exc:
        missing = ", ".join(str(err["loc"][0]) for err in exc.errors() if err.get("loc"))
        raise ConfigurationError(f"Invalid configuration: {missing or exc}") from exc
