"""
Authentication middleware that resolves the session once per request.

Every request gets ``request.state.identity`` set to an :class:`Identity` or
``None``. Nothing is rejected here: routes decide whether a session is
required through the dependencies in ``api.dependencies``. When a token was
presented but failed verification, ``request.state.auth_error`` records why.
"""

import logging
from typing import Callable, Optional

from starlette.requests import Request

from core.identity import AuthenticationError, JWTIdentityProvider

logger = logging.getLogger(__name__)


class AuthenticationMiddleware:
    """Pure ASGI middleware injecting the caller's identity into request state."""

    def __init__(self, app: Callable, identity_provider: JWTIdentityProvider):
        """
        Args:
            app: ASGI application
            identity_provider: Verifier for bearer session tokens
        """
        self.app = app
        self.identity_provider = identity_provider

    async def __call__(self, scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        state = scope.setdefault("state", {})
        state["identity"] = None
        state["auth_error"] = None

        token = self._extract_token(Request(scope))
        if token:
            try:
                state["identity"] = self.identity_provider.resolve(token)
            except AuthenticationError as e:
                logger.warning(f"Rejected session token on {scope.get('path')}: {e.code}")
                state["auth_error"] = e.code

        await self.app(scope, receive, send)

    @staticmethod
    def _extract_token(request: Request) -> Optional[str]:
        """Read the bearer token from the Authorization header."""
        auth_header = request.headers.get("authorization", "")
        if auth_header.lower().startswith("bearer "):
            token = auth_header[7:].strip()
            return token or None
        return None
