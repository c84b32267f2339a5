"""Application configuration."""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

_BACKEND_DIR = Path(__file__).resolve().parents[1]


class Settings(BaseSettings):
    """Runtime settings loaded from environment variables."""

    app_name: str = "Mat Journal API"
    database_url: str = "sqlite+pysqlite:///./mat_journal.db"
    conflict_window_hours: int = 24
    conflict_min_disagreeing_fields: int = 2
    conflict_fields: tuple[str, ...] = ("position", "technique", "outcome")
    import_quick_add_max_chars: int = 600
    import_section_max_chars: int = 1600
    import_recent_entry_limit: int = 200

    model_config = SettingsConfigDict(
        env_file=str(_BACKEND_DIR / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Return a cached settings instance."""

    return Settings()
