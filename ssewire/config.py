from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Parser
    SSE_READ_CHUNK_SIZE: int = Field(default=64 * 1024, gt=0)
    SSE_MAX_LINE_BYTES: int | None = Field(
        default=None,
        gt=0,
        description="Largest accepted line in bytes; unset means the buffer grows without limit",
    )

    # Client
    SSE_CLIENT_TIMEOUT: float = 3600.0

    # Demo stream endpoint
    SSE_DEMO_MAX_EVENTS: int = Field(default=1000, gt=0)
    SSE_QUEUE_SIZE: int = Field(default=16, gt=0, description="Frames buffered ahead of a slow client")

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = Field(default="json", description="'json' for production, 'console' for dev")


def get_settings() -> Settings:
    return Settings()
