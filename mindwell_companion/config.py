"""
Runtime configuration for the MindWell Companion service.

Settings are read from the environment (prefixed with ``MINDWELL_``) and from
an optional ``.env`` file in the working directory.
"""

from functools import lru_cache

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_prefix="MINDWELL_",
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

    # Inference service
    openai_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("MINDWELL_OPENAI_API_KEY", "OPENAI_API_KEY"),
        description="API key for the hosted inference service",
    )
    openai_base_url: str | None = Field(
        default=None, description="Override for the inference service base URL"
    )
    model: str = Field(default="gpt-4o", description="Model used for every call")

    # Generation budgets
    reply_max_tokens: int = Field(default=500, ge=1)
    reply_temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    sentiment_max_tokens: int = Field(default=100, ge=1)
    journal_max_tokens: int = Field(default=150, ge=1)
    journal_temperature: float = Field(default=0.8, ge=0.0, le=2.0)

    # Conversation context
    recent_mood_limit: int = Field(
        default=5, ge=0, description="Mood samples fed into the system prompt"
    )

    # Server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000, ge=1, le=65535)
    log_level: str = Field(default="INFO")


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()
