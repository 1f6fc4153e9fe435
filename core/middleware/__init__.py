"""
Core middleware package.

- Error handling with sensitive data sanitization
- Structured logging with PII masking
- Session resolution from bearer tokens
- Per-request timeouts
"""

from core.middleware.error_handling import (
    ErrorHandlingMiddleware,
    build_error_response,
    setup_error_handlers,
    sanitize_error_message,
)

from core.middleware.logging import (
    StructuredLoggingMiddleware,
    setup_logging,
)

from core.middleware.authentication import AuthenticationMiddleware

from core.middleware.timeout import RequestTimeoutMiddleware

__all__ = [
    # Error handling
    "ErrorHandlingMiddleware",
    "build_error_response",
    "setup_error_handlers",
    "sanitize_error_message",
    # Logging
    "StructuredLoggingMiddleware",
    "setup_logging",
    # Authentication
    "AuthenticationMiddleware",
    # Timeouts
    "RequestTimeoutMiddleware",
]
