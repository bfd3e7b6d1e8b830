"""Logging for the FocusLite app: a JSON log file plus plain console output.

Timer code attaches structured fields with ``extra={"_json_<name>": value}``;
they land as top-level keys in the JSON record (``mode``, ``cycles``...).
The level comes from the ``level`` argument, else ``FOCUSLITE_LOG_LEVEL``,
else INFO.
"""

from __future__ import annotations

import json
import logging
import os
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

LOG_DIR_NAME = "logs"
LOG_FILE_BASENAME = "focuslite.log"
LEVEL_ENV_VAR = "FOCUSLITE_LOG_LEVEL"

_EXTRA_PREFIX = "_json_"

logger = logging.getLogger(__name__)


class JsonFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc)
            .replace(microsecond=0)
            .isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key.startswith(_EXTRA_PREFIX):
                payload[key[len(_EXTRA_PREFIX):]] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def resolve_level(level: int | str | None = None) -> int:
    """Turn a level number or name (or the env var) into a level number."""
    if level is None:
        level = os.environ.get(LEVEL_ENV_VAR) or logging.INFO
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def configure_logging(
    base_dir: Path, level: int | str | None = None
) -> Path | None:
    """Log to ``<base_dir>/logs/focuslite.log`` and to the console.

    Returns the log file path, or ``None`` when the log directory cannot
    be created (console logging still works then).  Calling it again
    replaces the handlers instead of stacking them.
    """
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(resolve_level(level))

    console = logging.StreamHandler()
    console.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    root.addHandler(console)

    logfile: Path | None = base_dir / LOG_DIR_NAME / LOG_FILE_BASENAME
    try:
        logfile.parent.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            logfile, maxBytes=512_000, backupCount=5, encoding="utf-8"
        )
    except OSError as exc:
        logger.warning("Log file disabled, cannot write to %s: %s", logfile, exc)
        logfile = None
    else:
        handler.setFormatter(JsonFormatter())
        root.addHandler(handler)

    logger.info(
        "logging initialised",
        extra={
            "_json_phase": "startup",
            "_json_threshold": logging.getLevelName(root.level),
        },
    )
    return logfile


__all__ = ["configure_logging", "resolve_level", "JsonFormatter", "LEVEL_ENV_VAR"]
