"""Structured Logging — one JSON object per line for the capture service.

Invariants:
    - Every line carries ts, level, logger and message
    - Capture fields (entry_id, campaign, error_code, path, method, status_code)
      appear only when the log call supplied them via extra=
    - The timestamp is the record's creation time, not the time it was formatted
    - setup_logging is idempotent: repeated calls replace, not stack, its handler

Design Decisions:
    - Plain logging.Formatter subclass; the gates and the store log through stdlib
      loggers, so any handler the host adds still sees every record
    - setup_logging called once on startup via lifespan; fmt="text" for local runs
"""

import json
import logging
from datetime import datetime, timezone

EXTRA_FIELDS = (
    "entry_id", "campaign", "error_code", "path", "method", "status_code",
)

TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class JSONFormatter(logging.Formatter):
    """Render a LogRecord as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        payload = {
            "ts": created.isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(
            (key, getattr(record, key))
            for key in EXTRA_FIELDS
            if getattr(record, key, None) is not None
        )
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        if record.stack_info:
            payload["stack"] = self.formatStack(record.stack_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


_handler: logging.Handler | None = None


def setup_logging(level: str = "INFO", fmt: str = "json") -> None:
    global _handler
    handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter() if fmt == "json" else logging.Formatter(TEXT_FORMAT))
    root = logging.getLogger()
    if _handler is not None:
        root.removeHandler(_handler)
    root.addHandler(handler)
    _handler = handler
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
