"""Logging configuration helpers."""
from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from typing import Any, Dict

from friendforce.core.config import Settings

# Record attributes set by ``logging`` itself; everything else came in through ``extra``.
RESERVED_ATTRIBUTES = frozenset(
    {
        "args",
        "asctime",
        "created",
        "exc_info",
        "exc_text",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "message",
        "msg",
        "name",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "taskName",
        "thread",
        "threadName",
    }
)

# ``extra`` fields grouped under one object per concern.
FIELD_GROUPS: dict[str, frozenset[str]] = {
    "http": frozenset({"method", "path", "status_code"}),
    "cache": frozenset({"key", "prefix", "matched"}),
}


class JSONLogFormatter(logging.Formatter):
    """Format log records as JSON strings.

    Transport fields (``method``, ``path``, ``status_code``) land under ``http``
    and cache fields (``key``, ``prefix``, ``matched``) under ``cache``; other
    ``extra`` fields stay at the top level.
    """

    def __init__(self, app_env: str, version: str = "") -> None:
        super().__init__()
        self.app_env = app_env
        self.version = version

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401 - short description inherited
        log_record: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "environment": self.app_env,
            "version": self.version,
        }

        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key in RESERVED_ATTRIBUTES:
                continue
            group = _group_for(key)
            if group is None:
                log_record[key] = value
            else:
                log_record.setdefault(group, {})[key] = value

        return json.dumps(log_record, ensure_ascii=False, default=str)


def _group_for(field_name: str) -> str | None:
    for group, names in FIELD_GROUPS.items():
        if field_name in names:
            return group
    return None


def configure_logging(settings: Settings) -> None:
    """Configure client logging to emit JSON formatted logs."""
    handler = logging.StreamHandler()
    handler.setFormatter(JSONLogFormatter(settings.app_env, settings.version))

    level = logging.DEBUG if settings.app_env == "dev" else logging.INFO
    logging.basicConfig(level=level, handlers=[handler], force=True)

    # httpx logs every request at INFO; the transport logs failures itself.
    logging.getLogger("httpx").setLevel(logging.WARNING)

    for logger_name in ("uvicorn", "uvicorn.access", "uvicorn.error"):
        uvicorn_logger = logging.getLogger(logger_name)
        uvicorn_logger.handlers = [handler]
        uvicorn_logger.setLevel(logging.INFO)
