"""Centralized configuration and secrets management using pydantic-settings."""

from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )

    # Application settings
    APP_ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    # Optional JSON file replacing the built-in vulnerability collection
    SECUREEYE_DATA_FILE: Optional[Path] = None

    # OpenAI configuration. A missing key puts the assistant in offline mode.
    OPENAI_API_KEY: Optional[str] = None
    LLM_MODEL_NAME: str = "gpt-4o"

    @property
    def assistant_configured(self) -> bool:
        """True when a non-blank API key is available."""
        return bool(self.OPENAI_API_KEY and self.OPENAI_API_KEY.strip())


@lru_cache
def get_settings(**kwargs: Any) -> Settings:
    """Get application settings. Cached for performance."""
    return Settings(**kwargs)
