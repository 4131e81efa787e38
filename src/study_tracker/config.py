"""Application configuration."""

import os
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from study_tracker.errors import DataDirectoryError

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


def default_data_dir() -> Path:
    """Return the per-user application data directory."""
    return Path.home() / ".study-tracker"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    data_dir: Path = default_data_dir()
    sessions_filename: str = "sessions.json"
    screenshots_dirname: str = "screenshots"
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def resolve_data_dir(settings: Settings) -> Path:
    """Create the data directory if needed and return its absolute path."""
    path = settings.data_dir.expanduser()
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise DataDirectoryError(path, str(exc)) from exc
    if not path.is_dir():
        raise DataDirectoryError(path, "not a directory")
    return path.resolve()
