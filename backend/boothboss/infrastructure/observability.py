"""Structured Logging — JSON log lines and per-request access logging.

Invariants:
    - Every line carries timestamp, level, logger and message
    - Known extra fields (user, event URL, storage provider, request timing) are
      copied onto the line when present; anything else passed as extra is dropped
    - setup_logging is idempotent: calling it again replaces its own handler
    - httpx and SQLAlchemy engine chatter is held at WARNING (blob URLs and SQL
      parameters would otherwise land in the log)

Design Decisions:
    - log_request is a plain HTTP middleware function registered in main.py
    - Health probes are not access-logged
"""

import json
import logging
import time
from datetime import datetime, timezone

from starlette.requests import Request

EXTRA_FIELDS: tuple[str, ...] = (
    "user_id", "event_url", "session_id", "error_code", "path",
    "provider", "media_type", "recipient",
    "method", "status_code", "duration_ms",
)

QUIET_LOGGERS: tuple[str, ...] = ("httpx", "httpcore", "sqlalchemy.engine", "aiosqlite")

_HANDLER_NAME = "boothboss"
_access_logger = logging.getLogger("boothboss.access")


class JSONFormatter(logging.Formatter):

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in EXTRA_FIELDS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json") -> logging.Handler:
    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s",
        ))
    for existing in list(logging.root.handlers):
        if existing.get_name() == _HANDLER_NAME:
            logging.root.removeHandler(existing)
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    return handler


async def log_request(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    path = request.url.path
    if not path.startswith("/api/v1/health"):
        _access_logger.info(
            f"{request.method} {path} {response.status_code}",
            extra={
                "method": request.method,
                "path": path,
                "status_code": response.status_code,
                "duration_ms": round((time.perf_counter() - started) * 1000, 2),
            },
        )
    return response
