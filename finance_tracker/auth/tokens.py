"""
Bearer Tokens

Tokens are stateless JWTs: validity is decided by signature and expiry
alone. Nothing is stored server-side, so there is no revocation; a token
for a deleted user still verifies here and is rejected by the user lookup
that follows.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import UUID

import jwt

from finance_tracker.config import AuthSettings
from finance_tracker.errors import AuthError


INVALID_TOKEN_MESSAGE = "Token is not valid"


class TokenService:
    """Issues and verifies signed bearer tokens."""

    def __init__(self, settings: AuthSettings):
        self._settings = settings

    def issue(self, user_id: UUID, now: Optional[datetime] = None) -> str:
        """Create a token for user_id that expires after the configured lifetime."""
        issued_at = now or datetime.now(timezone.utc)
        payload = {
            "sub": str(user_id),
            "iat": issued_at,
            "exp": issued_at + timedelta(minutes=self._settings.token_expire_minutes),
        }
        return jwt.encode(
            payload,
            self._settings.secret_key,
            algorithm=self._settings.algorithm,
        )

    def verify(self, token: str) -> UUID:
        """
        Return the user id encoded in a token.

        Raises:
            AuthError: If the signature is bad, the token expired, or the
                       payload doesn't carry a user id
        """
        try:
            payload = jwt.decode(
                token,
                self._settings.secret_key,
                algorithms=[self._settings.algorithm],
                options={"require": ["exp", "sub"]},
            )
            return UUID(payload["sub"])
        except (jwt.PyJWTError, ValueError, TypeError):
            raise AuthError(INVALID_TOKEN_MESSAGE)
