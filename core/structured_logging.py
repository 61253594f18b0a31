"""
Structured Logging with Request Correlation
===========================================

JSON-structured logging with request correlation for tracing grading calls.

Usage:
    from core.structured_logging import configure_structured_logging, RequestCorrelationMiddleware

    # In main.py startup:
    configure_structured_logging()
    app.add_middleware(RequestCorrelationMiddleware)

    # In any module:
    logger = logging.getLogger(__name__)
    logger.info("Graded game", extra={"game_id": "mlb_745123", "grade": "B+"})
    # Output: {"timestamp": "...", "level": "INFO", "message": "Graded game",
    #          "request_id": "req-xxx", "game_id": "mlb_745123", "grade": "B+"}
"""

import json
import logging
import os
import sys
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

_request_id_ctx: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

REDACTED = "[REDACTED]"
SENSITIVE_KEY_MARKERS = ("key", "token", "secret", "password", "authorization")


def get_request_id() -> Optional[str]:
    return _request_id_ctx.get()


def set_request_id(request_id: str) -> None:
    _request_id_ctx.set(request_id)


def clear_request_id() -> None:
    _request_id_ctx.set(None)


def generate_request_id() -> str:
    return f"req-{uuid.uuid4().hex[:12]}"


def _is_sensitive_key(key: str) -> bool:
    lowered = key.lower()
    return any(marker in lowered for marker in SENSITIVE_KEY_MARKERS)


class JSONFormatter(logging.Formatter):
    """
    One JSON object per record; extra fields are merged in, secrets redacted.
    """

    EXCLUDE_FIELDS = {
        "name", "msg", "args", "created", "filename", "funcName",
        "levelname", "levelno", "lineno", "module", "msecs",
        "pathname", "process", "processName", "relativeCreated",
        "stack_info", "exc_info", "exc_text", "thread", "threadName",
        "message", "taskName",
    }

    def __init__(self, engine_version: Optional[str] = None):
        super().__init__()
        self.engine_version = engine_version

    def format(self, record: logging.LogRecord) -> str:
        log_entry: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        request_id = get_request_id()
        if request_id:
            log_entry["request_id"] = request_id

        log_entry["function"] = record.funcName
        log_entry["line"] = record.lineno

        if self.engine_version:
            log_entry["engine_version"] = self.engine_version

        for key, value in record.__dict__.items():
            if key not in self.EXCLUDE_FIELDS and not key.startswith("_"):
                log_entry[key] = REDACTED if _is_sensitive_key(key) else value

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str, ensure_ascii=False)


class TextFormatter(logging.Formatter):
    """
    Human-readable formatter:
    2026-10-19 18:30:45.123 [INFO] [req-abc123] recommendation_engine:_grade:187 - Graded ...
    """

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]
        request_id = get_request_id() or "-"
        base = (
            f"{timestamp} [{record.levelname}] [{request_id}] "
            f"{record.name}:{record.funcName}:{record.lineno} - {record.getMessage()}"
        )
        if record.exc_info:
            base += f"\n{self.formatException(record.exc_info)}"
        return base


class RequestCorrelationMiddleware(BaseHTTPMiddleware):
    """Propagates or generates X-Request-ID and exposes it to log records."""

    HEADER_NAME = "X-Request-ID"

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get(self.HEADER_NAME) or generate_request_id()
        set_request_id(request_id)
        try:
            response = await call_next(request)
            response.headers[self.HEADER_NAME] = request_id
            return response
        finally:
            clear_request_id()


def configure_structured_logging(
    level: Optional[str] = None,
    format_type: Optional[str] = None,
    engine_version: Optional[str] = None,
) -> None:
    """
    Configure root logging once at startup.

    Args:
        level: DEBUG/INFO/WARNING/ERROR. Defaults to LOG_LEVEL env var.
        format_type: "json" or "text". Defaults to LOG_FORMAT env var.
        engine_version: Stamped on every JSON record when given.
    """
    level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    format_type = format_type or os.getenv("LOG_FORMAT", "json")

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level, logging.INFO))

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    if format_type.lower() == "json":
        handler.setFormatter(JSONFormatter(engine_version=engine_version))
    else:
        handler.setFormatter(TextFormatter())
    root_logger.addHandler(handler)

    for noisy_logger in ["httpx", "httpcore", "uvicorn.access"]:
        logging.getLogger(noisy_logger).setLevel(logging.WARNING)
