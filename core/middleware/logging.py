"""
Structured request logging with PII masking.

Every request produces a ``request_started`` and a ``request_completed`` JSON
line carrying the same request id, which is also echoed in the
``x-request-id`` response header.
"""

import json
import logging
import re
import time
import traceback
import uuid
from typing import Any, Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

logger = logging.getLogger(__name__)


SENSITIVE_FIELD_PATTERNS = [
    re.compile(r"password", re.IGNORECASE),
    re.compile(r"token", re.IGNORECASE),
    re.compile(r"api[_-]?key", re.IGNORECASE),
    re.compile(r"secret", re.IGNORECASE),
    re.compile(r"authorization", re.IGNORECASE),
    re.compile(r"cookie", re.IGNORECASE),
    re.compile(r"session", re.IGNORECASE),
]

PII_PATTERNS = [
    (re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b"), "[EMAIL]"),
    (re.compile(r"\b\d{3}[-.]?\d{3}[-.]?\d{4}\b"), "[PHONE]"),
    (re.compile(r"\+\d{1,3}[-.\s]?\d{1,4}[-.\s]?\d{1,4}[-.\s]?\d{1,9}"), "[PHONE]"),
]

# Probes hit these constantly
SKIP_PATHS = ("/health", "/ready")


def is_sensitive_field(field_name: str) -> bool:
    return any(pattern.search(field_name) for pattern in SENSITIVE_FIELD_PATTERNS)


def mask_sensitive_data(data: Any, depth: int = 0, max_depth: int = 10) -> Any:
    """
    Recursively redact secrets by key and PII by value pattern.

    Args:
        data: Data structure to mask
        depth: Current recursion depth
        max_depth: Maximum recursion depth

    Returns:
        Data structure with sensitive values masked
    """
    if depth > max_depth:
        return "[MAX_DEPTH_EXCEEDED]"

    if isinstance(data, dict):
        return {
            key: "[REDACTED]" if is_sensitive_field(str(key))
            else mask_sensitive_data(value, depth + 1, max_depth)
            for key, value in data.items()
        }
    if isinstance(data, list):
        return [mask_sensitive_data(item, depth + 1, max_depth) for item in data]
    if isinstance(data, str):
        for pattern, replacement in PII_PATTERNS:
            data = pattern.sub(replacement, data)
        return data
    return data


def mask_headers(headers: dict) -> dict:
    """Mask sensitive headers, keeping the auth scheme visible."""
    masked = {}
    for key, value in headers.items():
        if not is_sensitive_field(key):
            masked[key] = value
        elif key.lower() == "authorization" and " " in value:
            masked[key] = f"{value.split(' ', 1)[0]} [REDACTED]"
        else:
            masked[key] = "[REDACTED]"
    return masked


def get_client_ip(request: Request) -> str:
    """Client IPv4 with the last octet masked, honouring x-forwarded-for."""
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        ip = forwarded_for.split(",")[0].strip()
    else:
        ip = request.client.host if request.client else "unknown"

    parts = ip.split(".")
    if len(parts) == 4:
        return f"{parts[0]}.{parts[1]}.{parts[2]}.xxx"
    return "unknown"


class StructuredLoggingMiddleware(BaseHTTPMiddleware):
    """Request/response logging with timing, request ids and masking."""

    def __init__(
        self,
        app: ASGIApp,
        log_request_body: bool = False,
        max_body_size: int = 1024,
    ):
        """
        Args:
            app: The ASGI application
            log_request_body: Whether to log (masked) JSON request bodies
            max_body_size: Bodies larger than this are logged as truncated
        """
        super().__init__(app)
        self.log_request_body = log_request_body
        self.max_body_size = max_body_size

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        request.state.request_id = request_id

        if request.url.path.startswith(SKIP_PATHS):
            response = await call_next(request)
            response.headers["x-request-id"] = request_id
            return response

        start_time = time.perf_counter()
        request_log = {
            "event": "request_started",
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "query_params": mask_sensitive_data(dict(request.query_params)),
            "client_ip": get_client_ip(request),
            "headers": mask_headers(dict(request.headers)),
        }
        if self.log_request_body and request.method in ("POST", "PUT", "PATCH"):
            body = await self._get_request_body(request)
            if body is not None:
                request_log["body"] = mask_sensitive_data(body)
        logger.info(json.dumps(request_log))

        response = None
        error_details = None
        try:
            response = await call_next(request)
        except Exception as exc:
            error_details = {"type": type(exc).__name__}
            raise
        finally:
            duration = time.perf_counter() - start_time
            status_code = response.status_code if response else 500
            response_log = {
                "event": "request_completed",
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "duration_ms": round(duration * 1000, 2),
                "status_code": status_code,
                "performance": "slow" if duration > 5.0 else "moderate" if duration > 1.0 else "fast",
            }
            identity = getattr(request.state, "identity", None)
            if identity is not None:
                response_log["user_id"] = identity.user_id
            if error_details:
                response_log["error"] = error_details

            if status_code >= 500:
                logger.error(json.dumps(response_log))
            elif status_code >= 400:
                logger.warning(json.dumps(response_log))
            else:
                logger.info(json.dumps(response_log))

            if response is not None:
                response.headers["x-request-id"] = request_id

        return response

    async def _get_request_body(self, request: Request) -> Any:
        content_type = request.headers.get("content-type", "")
        if "application/json" not in content_type:
            return {"_content_type": content_type}

        body_bytes = await request.body()
        if len(body_bytes) > self.max_body_size:
            return {"_truncated": True, "_size": len(body_bytes)}
        try:
            return json.loads(body_bytes)
        except ValueError:
            return {"_unparseable": True}


class StructuredFormatter(logging.Formatter):
    """Formats log records as single-line JSON."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if hasattr(record, "request_id"):
            log_data["request_id"] = record.request_id
        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": traceback.format_exception(*record.exc_info),
            }
        return json.dumps(log_data)


def setup_logging(log_level: str = "INFO", json_logs: bool = True):
    """
    Configure application-wide logging on the root logger.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        json_logs: Whether to format logs as JSON
    """
    level = getattr(logging, log_level.upper())
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    if json_logs:
        console_handler.setFormatter(StructuredFormatter())
    else:
        console_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
    root_logger.addHandler(console_handler)

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
