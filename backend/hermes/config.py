from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings

_BACKEND_DIR = Path(__file__).resolve().parents[1]
_ENV_FILES = (
    _BACKEND_DIR / ".env",
    ".env",
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    app_title: str = "Hermes Personnel API"
    app_version: str = "2.0.0"
    app_env: str = "development"
    database_url: str = "sqlite:///data/hermes.db"
    cors_origins: list[str] = ["*"]

    # Insert the sample personnel rows on startup when the table is empty
    seed_sample_data: bool = False

    # Telegram bot (an empty token disables the bot)
    telegram_bot_token: str = ""
    telegram_api_base_url: str = "https://api.telegram.org"
    telegram_poll_timeout: int = 30
    telegram_record_variant: str = "users"

    # Log levels by logger category, see infrastructure/logging/log_config.py
    log_level: str = "INFO"
    log_level_sql: str = "WARNING"
    log_level_http: str = "WARNING"          # getUpdates long polls are noisy at INFO
    log_level_uvicorn: str = "INFO"
    log_level_telegram: str = "INFO"

    model_config = {
        "env_file": _ENV_FILES,
        "env_file_encoding": "utf-8",
    }


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance — reads .env once."""
    return Settings()
