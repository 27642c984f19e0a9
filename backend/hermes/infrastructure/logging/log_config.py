"""Logging setup for the API process and the Telegram poller.

Each category below groups the loggers of one subsystem under a single
``log_level_*`` setting, so a chatty subsystem (SQL echo, the httpx long-poll
requests) can be turned down without hiding application logs.
"""

import logging
import sys

from hermes.config import Settings, get_settings

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

# Category → (Settings field, logger names)
LOG_CATEGORIES: dict[str, tuple[str, tuple[str, ...]]] = {
    "sql": ("log_level_sql", ("sqlalchemy.engine", "sqlalchemy.pool", "aiosqlite", "asyncpg")),
    "http": ("log_level_http", ("httpx", "httpcore")),
    "uvicorn": ("log_level_uvicorn", ("uvicorn", "uvicorn.access", "uvicorn.error")),
    "telegram": (
        "log_level_telegram",
        ("hermes.infrastructure.telegram", "hermes.presentation.telegram"),
    ),
}


def level_from_name(name: str) -> int:
    """Translate ``"debug"`` / ``"WARNING"`` etc. into a level number; unknown names mean INFO."""
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else logging.INFO


def category_levels(settings: Settings) -> dict[str, int]:
    """Resolved level per logger name, for every configured category."""
    levels: dict[str, int] = {}
    for field_name, logger_names in LOG_CATEGORIES.values():
        level = level_from_name(getattr(settings, field_name))
        levels.update({name: level for name in logger_names})
    return levels


def setup_logging(settings: Settings | None = None) -> None:
    """Apply the configured levels. Called once from the FastAPI lifespan."""
    settings = settings or get_settings()

    root = logging.getLogger()
    root.setLevel(level_from_name(settings.log_level))
    # uvicorn installs its own handlers; plain scripts and tests get a stderr one
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)

    for name, level in category_levels(settings).items():
        logging.getLogger(name).setLevel(level)

    logging.getLogger(__name__).debug(
        "Log levels: root=%s %s",
        settings.log_level,
        " ".join(f"{key}={getattr(settings, field)}" for key, (field, _) in LOG_CATEGORIES.items()),
    )
