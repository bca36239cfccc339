"""Service and harness settings loaded from the environment."""
from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings read from HELLO_WORLD_* variables and an optional .env file."""

    model_config = SettingsConfigDict(
        env_prefix="HELLO_WORLD_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    service_name: str = "hello-world"

    # Logging
    log_level: str = "INFO"

    # Harness
    request_timeout: float = 1.0  # seconds, applied to connect and read
    # The CI module exports the bare API_BASE_URL name
    api_base_url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("HELLO_WORLD_API_BASE_URL", "API_BASE_URL"),
    )


def get_settings() -> Settings:
    """Read settings fresh from the current environment."""
    return Settings()
