"""Runtime settings loaded from the environment or a .env file."""
from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="STUDY_ASSISTANT_",
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

    # Gemini
    api_key: str = Field(
        default="",
        validation_alias=AliasChoices(
            "STUDY_ASSISTANT_API_KEY", "GEMINI_API_KEY", "GOOGLE_API_KEY", "API_KEY",
        ),
    )
    model: str = "gemini-2.5-flash"
    notes_char_limit: int = 20000

    # Uploads
    max_upload_mb: int = 10

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"

    # Flashcard fade-out / fade-in window
    transition_out_seconds: float = 0.3
    transition_settle_seconds: float = 0.05

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_log_level(cls, value):
        return value.upper() if isinstance(value, str) else value


@lru_cache
def get_settings() -> Settings:
    return Settings()
