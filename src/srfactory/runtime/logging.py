"""Runtime logging utilities."""

from __future__ import annotations

from datetime import datetime, timezone
import logging
from typing import IO, Any, Dict, Mapping

import orjson

REDACTED = "***REDACTED***"

_SECRET_MARKERS = ("password", "user.info", "secret")

_RESERVED_RECORD_ATTRS = {
    "name",
    "msg",
    "args",
    "levelname",
    "levelno",
    "pathname",
    "filename",
    "module",
    "exc_info",
    "exc_text",
    "stack_info",
    "lineno",
    "funcName",
    "created",
    "msecs",
    "relativeCreated",
    "thread",
    "threadName",
    "processName",
    "process",
    "taskName",
}


def is_secret_key(key: str) -> bool:
    lowered = key.lower()
    return any(marker in lowered for marker in _SECRET_MARKERS)


def _mask(key: str, value: Any) -> Any:
    if isinstance(value, Mapping):
        return redact_config(value)
    if is_secret_key(key) and value is not None:
        return REDACTED
    return value


def redact_config(config: Mapping[str, Any]) -> Dict[str, Any]:
    """Copy of ``config`` with secret values masked, safe to log.

    Nested mappings are redacted too.
    """
    return {key: _mask(str(key), value) for key, value in config.items()}


class JsonFormatter(logging.Formatter):
    """One JSON object per record.

    Fields passed through ``extra=`` are included at the top level; values under
    secret-looking names (passwords, user info) are masked, including inside
    nested mappings such as a logged config.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key in _RESERVED_RECORD_ATTRS or key.startswith("_") or key in payload:
                continue
            payload[key] = _mask(key, value)

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        return orjson.dumps(payload, default=repr, option=orjson.OPT_NON_STR_KEYS).decode()


def configure_logging(
    level: str = "INFO",
    *,
    name: str = "srfactory",
    stream: IO[str] | None = None,
) -> logging.Logger:
    """Attach a JSON handler to the ``name`` logger and return it.

    Only the library's own logger is touched, never the root logger. Calling
    it again replaces the handler installed by the previous call.
    """
    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        if isinstance(handler.formatter, JsonFormatter):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(stream)
    handler.setFormatter(JsonFormatter())
    logger.addHandler(handler)
    logger.setLevel(level.upper())
    return logger


__all__ = ["JsonFormatter", "REDACTED", "configure_logging", "is_secret_key", "redact_config"]
