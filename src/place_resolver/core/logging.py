"""Loguru logging configuration.

Every record carries a ``correlation_id`` extra so one resolution (or one
enrichment item) can be followed across cache, geocoder and places calls.
Records bound with ``json_output=True`` (the per-resolution state events) are
additionally emitted as JSON.
"""

import sys
from pathlib import Path
from typing import Any

from loguru import logger

NO_CORRELATION_ID = "-"

_LOG_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<8} | {extra[correlation_id]} | "
    "{name}:{function}:{line} | {message}"
)

LOG_FILE_NAME = "place-resolver.log"


def _wants_json(record: Any) -> bool:
    return bool(record["extra"].get("json_output", False))


def setup_logging(log_level: str = "INFO", log_dir: str | None = None) -> None:
    """Replace all loguru handlers with the application sinks.

    Args:
        log_level: Minimum log level to emit (case-insensitive).
        log_dir: Optional directory for a rotating log file (rotated every
            24 hours, retained 7 days).
    """
    level = log_level.upper()
    handlers: list[dict[str, Any]] = [
        {"sink": sys.stderr, "level": level, "format": _LOG_FORMAT},
        {"sink": sys.stderr, "level": level, "serialize": True, "filter": _wants_json},
    ]

    if log_dir:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        handlers.append(
            {
                "sink": log_path / LOG_FILE_NAME,
                "level": level,
                "format": _LOG_FORMAT,
                "rotation": "24h",
                "retention": "7 days",
            }
        )

    logger.configure(handlers=handlers, extra={"correlation_id": NO_CORRELATION_ID})
