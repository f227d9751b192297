from functools import lru_cache
from typing import List

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings; every field can be overridden with a ``VOICENOTES_`` environment variable."""

    model_config = SettingsConfigDict(env_prefix="VOICENOTES_", extra="ignore")

    app_name: str = "Voice Notes"
    api_version: str = "1.0.0"
    environment: str = "development"

    secret_key: str = "CHANGE_ME"
    access_token_expire_minutes: int = 30

    database_url: str = "sqlite:///./voicenotes.db"

    # Origin of the web client; share links point there.
    app_origin: str = "http://localhost:5173"
    log_level: str = "INFO"
    collaborator_write_retries: int = 3

    @field_validator("app_origin")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("collaborator_write_retries")
    @classmethod
    def at_least_one_attempt(cls, value: int) -> int:
        if value < 1:
            raise ValueError("collaborator_write_retries must be at least 1")
        return value

    @property
    def cors_origins(self) -> List[str]:
        return [self.app_origin, "http://127.0.0.1:5173"]


@lru_cache()
def get_settings() -> Settings:
    """Return the cached Settings instance."""
    return Settings()
