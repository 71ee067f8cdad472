from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

from ..core.constants import DEFAULT_TOKEN_HOURS
from ..core.exceptions import AuthenticationError
from .scope import Principal

ALGORITHM = "HS256"


class RequestAuthorizer:
    """Issue and decode bearer tokens carrying (user id, username, admin flag)."""

    def __init__(self, secret: str, *, expire_hours: int = DEFAULT_TOKEN_HOURS):
        self._secret = secret
        self._expire_hours = int(expire_hours)

    def issue(self, *, user_id: int, username: str, is_admin: bool, now: Optional[datetime] = None) -> str:
        issued_at = now or datetime.now(timezone.utc)
        claims = {
            "sub": str(user_id),
            "username": username,
            "is_admin": bool(is_admin),
            "iat": issued_at,
            "exp": issued_at + timedelta(hours=self._expire_hours),
        }
        return jwt.encode(claims, self._secret, algorithm=ALGORITHM)

    def decode(self, token: str) -> Principal:
        try:
            claims = jwt.decode(token, self._secret, algorithms=[ALGORITHM])
        except JWTError:
            raise AuthenticationError("invalid or expired token")

        try:
            user_id = int(claims["sub"])
        except (KeyError, TypeError, ValueError):
            raise AuthenticationError("invalid or expired token")
        return Principal(
            user_id=user_id,
            is_admin=bool(claims.get("is_admin", False)),
            username=str(claims.get("username", "")),
        )

    def authorize(self, header: Optional[str]) -> Principal:
        """Decode an ``Authorization: Bearer <token>`` header value."""
        if not header:
            raise AuthenticationError("missing credentials")
        scheme, _, token = header.strip().partition(" ")
        if scheme.lower() != "bearer" or not token.strip():
            raise AuthenticationError("missing credentials")
        return self.decode(token.strip())
