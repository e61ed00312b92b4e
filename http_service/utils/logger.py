"""
Default structured logger.

Builds a standard library logger that writes JSON lines to the console. Each
record carries the default meta (``{"service": "http-service"}`` unless told
otherwise), the structured ``data`` passed through ``extra`` and, for
exceptions, the stack trace.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, MutableMapping, Optional, Tuple

LOGGER_NAME = "http_service"

LOG_LEVELS: Dict[str, int] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


class JsonFormatter(logging.Formatter):
    """Render log records as indented JSON documents."""

    def __init__(self, indent: Optional[int] = 2):
        super().__init__()
        self.indent = indent

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname.lower(),
            "message": record.getMessage(),
            "logger": record.name,
        }
        meta = getattr(record, "meta", None)
        if meta:
            entry["meta"] = meta
        data = getattr(record, "data", None)
        if data is not None:
            entry["data"] = data
        if record.exc_info:
            entry["stack"] = self.formatException(record.exc_info)
        return json.dumps(entry, indent=self.indent, default=str)


class MetaLoggerAdapter(logging.LoggerAdapter):
    """LoggerAdapter that adds default meta without dropping per-call ``extra``."""

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> Tuple[Any, MutableMapping[str, Any]]:
        extra = dict(kwargs.get("extra") or {})
        extra.setdefault("meta", self.extra)
        kwargs["extra"] = extra
        return msg, kwargs


def get_logger(
    level: str = "info",
    meta: Optional[Dict[str, Any]] = None,
    name: str = LOGGER_NAME,
) -> MetaLoggerAdapter:
    """
    Get a JSON console logger.

    Calling this repeatedly reuses the same handler.

    Args:
        level: debug, info, warn or error
        meta: Default metadata attached to every record
        name: Logger name

    Returns:
        MetaLoggerAdapter wrapping the configured logger
    """
    logger = logging.getLogger(name)
    logger.setLevel(LOG_LEVELS.get(level.lower(), logging.INFO))
    if not any(isinstance(h.formatter, JsonFormatter) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(JsonFormatter())
        logger.addHandler(handler)
    return MetaLoggerAdapter(logger, meta if meta is not None else {"service": "http-service"})
