"""Application settings powered by ``pydantic-settings``."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .. import __version__ as package_version

PROJECT_DIR = Path(__file__).resolve().parents[3]

EnvironmentName = Literal["development", "test", "ci"]

_ENVIRONMENT_ALIASES: dict[str, EnvironmentName] = {
    "development": "development",
    "dev": "development",
    "test": "test",
    "testing": "test",
    "ci": "ci",
}

_ENVIRONMENT_PROFILES: dict[EnvironmentName, dict[str, Any]] = {
    "development": {
        "log_level": "DEBUG",
        "db_echo": False,
    },
    "test": {
        "log_level": "WARNING",
        "db_echo": False,
        "api_timeout_seconds": 2.0,
    },
    "ci": {
        "log_level": "INFO",
        "db_echo": False,
    },
}


class Settings(BaseSettings):
    """Runtime configuration for the synchronization layer."""

    model_config = SettingsConfigDict(
        env_prefix="STUDYSYNC_",
        env_file=PROJECT_DIR / ".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    project_name: str = "studysync"
    environment: EnvironmentName = Field(default="development")
    version: str = Field(default=package_version)
    log_level: str = Field(default="INFO")

    database_url: str = Field(default="sqlite+aiosqlite:///studysync.db")
    db_echo: bool = Field(default=False)

    api_base_url: str = Field(default="http://localhost:3000/api/")
    api_timeout_seconds: float = Field(default=15.0)

    default_discipline_name: str = Field(default="No discipline")
    default_discipline_color: str = Field(default="#6200EE")

    @field_validator("environment", mode="before")
    @classmethod
    def _normalise_environment(cls, value: object) -> EnvironmentName:
        if isinstance(value, str):
            normalized = value.strip().lower()
        else:
            normalized = ""
        return _ENVIRONMENT_ALIASES.get(normalized, "development")

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalise_log_level(cls, value: object) -> str:
        if not isinstance(value, str):
            return "INFO"
        return value.upper()

    @field_validator("api_base_url", mode="before")
    @classmethod
    def _ensure_trailing_slash(cls, value: object) -> str:
        # httpx joins relative paths onto the base URL, which drops the last
        # segment unless it ends with a slash.
        text = str(value).strip()
        if not text.endswith("/"):
            text = f"{text}/"
        return text

    @field_validator("api_timeout_seconds", mode="before")
    @classmethod
    def _ensure_positive_timeout(cls, value: object) -> float:
        try:
            timeout = float(value)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return 15.0
        return timeout if timeout > 0 else 15.0

    @model_validator(mode="after")
    def _apply_environment_profile(self) -> "Settings":
        profile = _ENVIRONMENT_PROFILES[self.environment]
        fields_set = set(getattr(self, "model_fields_set", set()))
        for field_name, value in profile.items():
            if field_name not in fields_set:
                setattr(self, field_name, value)
        return self


@lru_cache()
def get_settings() -> Settings:
    """Return a cached ``Settings`` instance."""

    return Settings()


__all__ = ["EnvironmentName", "Settings", "get_settings"]
