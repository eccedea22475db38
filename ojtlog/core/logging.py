"""One JSON object per log line.

Log calls in this package pass a dotted event name as the message
(``logs.created``) and structured fields through ``extra={"extra_data": ...}``.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Mapping

from ..middlewares import principal_ctx_var, request_id_ctx_var

DEFAULT_SERVICE = "ojtlog"
# chatty at INFO once the root level is lowered
QUIET_LOGGERS = ("aiosqlite", "sqlalchemy.engine")


class JsonLogFormatter(logging.Formatter):
    """Render a record as ``{"ts", "service", "level", "event", ...}``.

    ``user_id`` and ``request_id`` are taken from the request context when set.
    Fields from ``extra_data`` never overwrite the fixed keys.
    """

    def __init__(self, service: str = DEFAULT_SERVICE) -> None:
        super().__init__()
        self.service = service

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc)
            .isoformat(timespec="milliseconds")
            .replace("+00:00", "Z"),
            "service": self.service,
            "level": record.levelname,
            "logger": record.name,
            "event": record.getMessage(),
        }
        request_id = request_id_ctx_var.get()
        if request_id:
            payload["request_id"] = request_id
        user_id = principal_ctx_var.get()
        if user_id:
            payload["user_id"] = user_id
        extra = getattr(record, "extra_data", None)
        if isinstance(extra, Mapping):
            for key, value in extra.items():
                payload.setdefault(key, value)
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, separators=(",", ":"), default=str)


def configure_logging(level: str = "INFO", *, service: str = DEFAULT_SERVICE) -> None:
    handler = logging.StreamHandler()
    handler.setFormatter(JsonLogFormatter(service))
    logging.root.handlers = [handler]
    logging.root.setLevel(level.upper())
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
