"""
Logging utilities for the Airmen Registry.

One configuration shared by the CLI, the lifecycle controller and the
gateway. Lifecycle events carry their context (record id, operation,
counts) as `extra=` fields; both formatters surface those fields, the
console one as trailing ``key=value`` pairs and the JSON one as top-level
keys. Every record is stamped with the deployment environment.

Usage:
    from airmen_registry.utils.logging import configure_logging, get_logger

    configure_logging(level="INFO", json_logs=False, app_env="production")
    log = get_logger(__name__)
    log.info("[APPROVED] 6f1c...", extra={"record_id": "6f1c..."})
"""

from __future__ import annotations

import json
import logging
import logging.config
from typing import Any, Dict, Optional

CONSOLE_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
CONSOLE_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Attributes every LogRecord carries; anything else arrived through `extra=`.
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None)).keys()
) | {"message", "asctime", "app_env"}

# Driver loggers that are chatty at INFO (pool growth, reconnects).
_QUIET_LOGGERS = ("psycopg", "psycopg.pool")


def _extra_fields(record: logging.LogRecord) -> Dict[str, Any]:
    """Context attached through `extra=`, including a legacy nested `extra` dict."""
    fields = {
        key: value
        for key, value in vars(record).items()
        if key not in _RESERVED_ATTRS and key != "extra"
    }
    nested = getattr(record, "extra", None)
    if isinstance(nested, dict):
        fields.update(nested)
    return fields


def _json_formatter(record: logging.LogRecord) -> str:
    """Render a log record as JSON string."""
    payload: Dict[str, Any] = {
        "level": record.levelname,
        "logger": record.name,
        "message": record.getMessage(),
    }
    app_env = getattr(record, "app_env", None)
    if app_env:
        payload["app_env"] = app_env
    payload.update(_extra_fields(record))
    if record.exc_info:
        payload["exc_info"] = logging.Formatter().formatException(record.exc_info)
    if record.stack_info:
        payload["stack_info"] = record.stack_info
    # Bangla names stay readable in shipped logs.
    return json.dumps(payload, default=str, ensure_ascii=False)


class JsonFormatter(logging.Formatter):
    """JSON formatter for structured logs."""

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        return _json_formatter(record)


class ConsoleFormatter(logging.Formatter):
    """Human formatter that appends `extra=` context as ``key=value`` pairs."""

    def __init__(self) -> None:
        super().__init__(fmt=CONSOLE_FORMAT, datefmt=CONSOLE_DATEFMT)

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fields = _extra_fields(record)
        if not fields:
            return line
        context = " ".join(f"{key}={value}" for key, value in sorted(fields.items()))
        head, sep, tail = line.partition("\n")
        return f"{head} | {context}{sep}{tail}"


class AppContextFilter(logging.Filter):
    """Stamp every record with the deployment environment."""

    def __init__(self, app_env: str = "development") -> None:
        super().__init__()
        self.app_env = app_env

    def filter(self, record: logging.LogRecord) -> bool:
        record.app_env = self.app_env
        return True


def configure_logging(
    level: str = "INFO",
    json_logs: bool = False,
    app_env: str = "development",
    force: bool = True,
) -> None:
    """
    Configure root logging.

    Parameters
    ----------
    level : str
        Logging level name (e.g., "DEBUG", "INFO", "WARNING").
    json_logs : bool
        Whether to emit logs as JSON. If False, uses the console formatter.
    app_env : str
        Environment name stamped on every record (APP_ENV).
    force : bool
        Whether to replace handlers configured earlier (recommended in CLI apps).
    """
    root = logging.getLogger()
    if root.handlers and not force:
        return

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "filters": {
                "app_context": {"()": AppContextFilter, "app_env": app_env},
            },
            "formatters": {
                "console": {"()": ConsoleFormatter},
                "json": {"()": JsonFormatter},
            },
            "handlers": {
                "default": {
                    "class": "logging.StreamHandler",
                    "formatter": "json" if json_logs else "console",
                    "filters": ["app_context"],
                    "level": level,
                }
            },
            "loggers": {
                name: {"level": "WARNING"} for name in _QUIET_LOGGERS
            },
            "root": {
                "handlers": ["default"],
                "level": level,
            },
        }
    )


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger with the given name. If name is None, returns the root logger.
    """
    return logging.getLogger(name)


__all__ = [
    "AppContextFilter",
    "ConsoleFormatter",
    "JsonFormatter",
    "configure_logging",
    "get_logger",
]
