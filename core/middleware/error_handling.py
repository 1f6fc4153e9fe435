"""
Error handling middleware with security-compliant error sanitization.

Translates domain errors (core.errors), request validation failures,
datastore failures and timeouts into one JSON body::

    {"error": {"code", "message", "path", "method", "details"?, "request_id"?}}
"""

import logging
import re
import traceback
from typing import Any, Callable, Optional

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.errors import MarketplaceError

logger = logging.getLogger(__name__)

# Patterns for sensitive data that should never leave the process
SENSITIVE_PATTERNS = [
    re.compile(r'password["\s:=]+[^"\s,}]+', re.IGNORECASE),
    re.compile(r'token["\s:=]+[^"\s,}]+', re.IGNORECASE),
    re.compile(r'api[_-]?key["\s:=]+[^"\s,}]+', re.IGNORECASE),
    re.compile(r'secret["\s:=]+[^"\s,}]+', re.IGNORECASE),
    re.compile(r'authorization["\s:]+[^"\s,}]+', re.IGNORECASE),
    re.compile(r'bearer\s+[A-Za-z0-9\-_\.]+', re.IGNORECASE),
    re.compile(r'(postgres(ql)?|mysql|sqlite)(\+\w+)?://\S+', re.IGNORECASE),
]

HTTP_STATUS_CODES = {
    status.HTTP_400_BAD_REQUEST: "VALIDATION_ERROR",
    status.HTTP_401_UNAUTHORIZED: "UNAUTHENTICATED",
    status.HTTP_403_FORBIDDEN: "FORBIDDEN",
    status.HTTP_404_NOT_FOUND: "NOT_FOUND",
    status.HTTP_405_METHOD_NOT_ALLOWED: "METHOD_NOT_ALLOWED",
    status.HTTP_409_CONFLICT: "DUPLICATE",
}


def sanitize_error_message(message: Any) -> str:
    """
    Remove sensitive information from error messages.

    Args:
        message: Original error message

    Returns:
        Sanitized error message
    """
    sanitized = str(message)
    for pattern in SENSITIVE_PATTERNS:
        sanitized = pattern.sub("[REDACTED]", sanitized)
    return sanitized


def get_safe_error_details(exc: Exception) -> dict[str, Any]:
    """Exception type, sanitized message and traceback (debug mode only)."""
    return {
        "type": type(exc).__name__,
        "message": sanitize_error_message(str(exc)),
        "traceback": traceback.format_exc(),
    }


def format_validation_errors(exc: RequestValidationError) -> list[dict[str, Any]]:
    """
    Format validation errors into a user-friendly structure.

    Args:
        exc: The validation exception

    Returns:
        List of ``{"field", "message", "type"}`` dicts
    """
    errors = []
    for error in exc.errors():
        errors.append({
            "field": ".".join(str(loc) for loc in error["loc"]),
            "message": sanitize_error_message(error["msg"]),
            "type": error["type"],
        })
    return errors


def build_error_response(
    exc: Exception,
    path: str,
    method: str,
    request_id: Optional[str] = None,
    debug: bool = False,
) -> JSONResponse:
    """
    Map an exception onto a status code and the error body.

    Args:
        exc: The exception to translate
        path: Request path for the body
        method: Request method for the body
        request_id: Correlation id, included when known
        debug: Include exception details for unexpected errors

    Returns:
        JSONResponse with error details
    """
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code = "INTERNAL_SERVER_ERROR"
    message = "An unexpected error occurred"
    details = None
    headers = None

    if isinstance(exc, MarketplaceError):
        status_code = exc.status_code
        error_code = exc.code
        message = sanitize_error_message(exc.message)
        details = exc.details
        if exc.status_code == status.HTTP_401_UNAUTHORIZED:
            headers = {"WWW-Authenticate": "Bearer"}
        logger.info(f"{error_code}: {method} {path} - {message}")

    elif isinstance(exc, StarletteHTTPException):
        status_code = exc.status_code
        error_code = HTTP_STATUS_CODES.get(exc.status_code, "HTTP_EXCEPTION")
        message = sanitize_error_message(exc.detail)
        headers = getattr(exc, "headers", None)
        logger.warning(
            f"HTTP exception: {method} {path} - Status: {status_code}, Message: {message}"
        )

    elif isinstance(exc, RequestValidationError):
        status_code = status.HTTP_400_BAD_REQUEST
        error_code = "VALIDATION_ERROR"
        message = "Request validation failed"
        details = format_validation_errors(exc)
        logger.warning(f"Validation error: {method} {path} - Errors: {details}")

    elif isinstance(exc, IntegrityError):
        status_code = status.HTTP_409_CONFLICT
        error_code = "DUPLICATE"
        message = "Database integrity constraint violated"
        logger.error(f"Database integrity error: {method} {path}", exc_info=exc)

    elif isinstance(exc, OperationalError):
        status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        error_code = "UPSTREAM_FAILURE"
        message = "Database service temporarily unavailable"
        logger.error(f"Database operational error: {method} {path}", exc_info=exc)

    elif isinstance(exc, SQLAlchemyError):
        error_code = "UPSTREAM_FAILURE"
        message = "A database error occurred"
        logger.error(f"SQLAlchemy error: {method} {path}", exc_info=exc)

    elif isinstance(exc, TimeoutError):
        status_code = status.HTTP_504_GATEWAY_TIMEOUT
        error_code = "UPSTREAM_FAILURE"
        message = "The request timed out"
        logger.error(f"Timeout error: {method} {path}")

    else:
        logger.error(
            f"Unhandled exception: {method} {path} - "
            f"{type(exc).__name__}: {sanitize_error_message(str(exc))}",
            exc_info=exc,
        )

    if debug and status_code >= 500 and details is None:
        details = get_safe_error_details(exc)

    body: dict[str, Any] = {
        "code": error_code,
        "message": message,
        "path": path,
        "method": method,
    }
    if details is not None:
        body["details"] = details
    if request_id:
        body["request_id"] = request_id

    return JSONResponse(status_code=status_code, content={"error": body}, headers=headers)


def _request_id_from_scope(scope: dict) -> Optional[str]:
    state_id = (scope.get("state") or {}).get("request_id")
    if state_id:
        return state_id
    for name, value in scope.get("headers") or []:
        if name == b"x-request-id":
            return value.decode()
    return None


class ErrorHandlingMiddleware:
    """
    Last line of defence for exceptions no exception handler caught.

    Only answers when the response has not started; otherwise the
    exception is logged and the connection is left to the server.
    """

    def __init__(self, app: Callable, debug: bool = False):
        """
        Args:
            app: The ASGI application
            debug: Whether to include detailed error information
        """
        self.app = app
        self.debug = debug

    async def __call__(self, scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        response_started = False

        async def send_wrapper(message: dict) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        except Exception as exc:
            if response_started:
                logger.error(
                    f"Exception after response started: {scope.get('method')} {scope.get('path')}",
                    exc_info=exc,
                )
                raise
            response = build_error_response(
                exc,
                path=scope.get("path", "unknown"),
                method=scope.get("method", "unknown"),
                request_id=_request_id_from_scope(scope),
                debug=self.debug,
            )
            await response(scope, receive, send)


def setup_error_handlers(app, debug: bool = False):
    """
    Set up exception handlers for FastAPI application.

    Args:
        app: FastAPI application instance
        debug: Whether to include detailed error information
    """

    async def handle(request: Request, exc: Exception) -> JSONResponse:
        return build_error_response(
            exc,
            path=str(request.url.path),
            method=request.method,
            request_id=getattr(request.state, "request_id", None)
            or request.headers.get("x-request-id"),
            debug=debug,
        )

    for exc_class in (
        MarketplaceError,
        StarletteHTTPException,
        RequestValidationError,
        SQLAlchemyError,
    ):
        app.add_exception_handler(exc_class, handle)
