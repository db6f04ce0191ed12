"""Logging setup for the scheduler service.

Three logger families are configured separately:

- ``progressive``: adaptation decisions, window generation and request
  failures. Its level comes from ``SCHEDULER_LOG_LEVEL`` and falls back to
  ``LOG_LEVEL``.
- ``sqlalchemy.engine``: one line per SQL statement, emitted only when
  ``DEBUG`` is on.
- everything else (uvicorn, alembic, ...) through the root logger at
  ``LOG_LEVEL``.
"""
from __future__ import annotations

from logging.config import dictConfig
from pathlib import Path

from pydantic import ValidationError

from progressive.config import Settings, get_settings

LOG_FILE_NAME = "progressive.log"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
SCHEDULER_LOGGER = "progressive"
SQL_LOGGER = "sqlalchemy.engine"

_configured = False


def build_logging_config(
    log_dir: Path,
    level: str = "INFO",
    scheduler_level: str | None = None,
    debug: bool = False,
) -> dict:
    """Return a ``dictConfig`` mapping for the given levels.

    Handlers carry no level of their own so each logger family decides what
    gets through.
    """
    handlers = ["console", "file"]
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {"format": LOG_FORMAT},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "standard",
            },
            "file": {
                "class": "logging.FileHandler",
                "filename": str(log_dir / LOG_FILE_NAME),
                "encoding": "utf-8",
                "formatter": "standard",
            },
        },
        "loggers": {
            SCHEDULER_LOGGER: {
                "level": scheduler_level or level,
                "handlers": handlers,
                "propagate": False,
            },
            SQL_LOGGER: {
                "level": "INFO" if debug else "WARNING",
            },
        },
        "root": {
            "level": level,
            "handlers": handlers,
        },
    }


def configure_logging(settings: Settings | None = None, force: bool = False) -> None:
    """Configure logging once per process, or again when ``force`` is set."""

    global _configured
    if _configured and not force:
        return

    try:
        settings = settings or get_settings()
    except ValidationError:
        settings = None

    if settings is None:
        # Unreadable environment; keep logging to the default place.
        log_dir = Path("logs")
        config = build_logging_config(log_dir)
    else:
        log_dir = settings.log_dir
        config = build_logging_config(
            log_dir,
            level=settings.log_level,
            scheduler_level=settings.scheduler_log_level,
            debug=settings.debug,
        )
    log_dir.mkdir(parents=True, exist_ok=True)

    dictConfig(config)
    _configured = True
