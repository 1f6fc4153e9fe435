"""
Domain error taxonomy.

Services raise these typed exceptions; the error handling layer in
core.middleware.error_handling turns them into the JSON error body.
"""

from typing import Any


class MarketplaceError(Exception):
    """Base class for all errors surfaced to API clients."""

    code: str = "INTERNAL_SERVER_ERROR"
    status_code: int = 500
    default_message: str = "An unexpected error occurred"

    def __init__(self, message: str | None = None, details: Any = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class Unauthenticated(MarketplaceError):
    code = "UNAUTHENTICATED"
    status_code = 401
    default_message = "Authentication required"


class Forbidden(MarketplaceError):
    code = "FORBIDDEN"
    status_code = 403
    default_message = "You don't have permission to perform this action"


class NotFound(MarketplaceError):
    code = "NOT_FOUND"
    status_code = 404
    default_message = "Resource not found"


class ValidationFailed(MarketplaceError):
    code = "VALIDATION_ERROR"
    status_code = 400
    default_message = "Request validation failed"


class Duplicate(MarketplaceError):
    code = "DUPLICATE"
    status_code = 409
    default_message = "Resource already exists"


class UpstreamFailure(MarketplaceError):
    """A collaborator (datastore, identity provider, object store) failed."""

    code = "UPSTREAM_FAILURE"
    status_code = 503
    default_message = "A dependent service is temporarily unavailable"
