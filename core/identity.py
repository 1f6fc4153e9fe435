"""
Session token verification.

The identity provider issues HS256 JWTs whose ``sub`` claim is the user id.
This module is the single "get current user from token" contract the rest of
the service depends on.
"""

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Optional

import jwt

from core.utils.datetime import now

logger = logging.getLogger(__name__)


class AuthenticationError(Exception):
    """Base exception for authentication errors."""
    code = "TOKEN_INVALID"


class TokenExpiredError(AuthenticationError):
    """Raised when JWT token has expired."""
    code = "TOKEN_EXPIRED"


class TokenInvalidError(AuthenticationError):
    """Raised when JWT token is invalid."""
    code = "TOKEN_INVALID"


@dataclass(frozen=True)
class Identity:
    """The authenticated caller of a request."""

    user_id: str
    email: Optional[str] = None
    role: Optional[str] = None


class JWTIdentityProvider:
    """Verifies session tokens signed with a shared secret."""

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        audience: Optional[str] = None,
    ):
        self.secret = secret
        self.algorithm = algorithm
        self.audience = audience

    def resolve(self, token: str) -> Identity:
        """
        Verify ``token`` and return the identity it carries.

        Raises:
            TokenExpiredError: The token's ``exp`` is in the past
            TokenInvalidError: Bad signature, audience, or missing ``sub``
        """
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                audience=self.audience,
                options={"require": ["sub"], "verify_aud": self.audience is not None},
            )
        except jwt.ExpiredSignatureError:
            raise TokenExpiredError("Token has expired")
        except jwt.InvalidTokenError as e:
            raise TokenInvalidError(f"Invalid token: {e}")

        user_id = str(payload["sub"]).strip()
        if not user_id:
            raise TokenInvalidError("Invalid token: empty subject")

        metadata = payload.get("user_metadata") or {}
        role = metadata.get("role") if isinstance(metadata, dict) else None
        return Identity(user_id=user_id, email=payload.get("email"), role=role)

    def issue_token(
        self,
        user_id: str,
        email: Optional[str] = None,
        role: Optional[str] = None,
        expires_in: timedelta = timedelta(hours=1),
    ) -> str:
        """Mint a token this provider accepts (local development and tests)."""
        issued_at = now()
        payload: dict[str, Any] = {
            "sub": user_id,
            "iat": issued_at,
            "exp": issued_at + expires_in,
        }
        if email:
            payload["email"] = email
        if role:
            payload["user_metadata"] = {"role": role}
        if self.audience:
            payload["aud"] = self.audience
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)
