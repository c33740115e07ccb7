from __future__ import annotations

import json
import logging
from datetime import datetime, timezone

JSON_HANDLER_ATTR = "_integration_fimbul_json_handler"

# Attributes every LogRecord carries; anything else arrived through ``extra=``.
_RESERVED = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None)).keys()
) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    def __init__(self, service: str | None = None) -> None:
        super().__init__()
        self.service = service

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        data = {
            "time": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
        }
        if self.service:
            data["service"] = self.service
        if record.exc_info:
            data["exc_info"] = self.formatException(record.exc_info)
        for key, value in vars(record).items():
            if key not in _RESERVED and not key.startswith("_"):
                data[key] = value
        return json.dumps(data, default=str)


def configure_logging(level: str = "INFO", service: str | None = None) -> None:
    root = logging.getLogger()
    root.setLevel(level.upper())

    for handler in root.handlers:
        if getattr(handler, JSON_HANDLER_ATTR, False):
            return

    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter(service=service))
    setattr(handler, JSON_HANDLER_ATTR, True)
    root.addHandler(handler)


__all__ = ["JsonFormatter", "configure_logging"]
