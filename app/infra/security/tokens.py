from __future__ import annotations

from datetime import datetime, timedelta, timezone

import jwt

from app.constants import JWT_ALGORITHM
from app.domain.auth.ports import TokenSigner
from app.domain.common.errors import AuthError


class JwtSigner(TokenSigner):
    """HS256 bearer tokens carrying the user id as `sub`."""

    def __init__(self, secret: str, ttl_minutes: int) -> None:
        self._secret = secret
        self._ttl = timedelta(minutes=ttl_minutes)

    def issue(self, user_id: str) -> str:
        # wall clock: PyJWT checks exp against the real time on decode
        now = datetime.now(timezone.utc)
        payload = {
            "sub": user_id,
            "iat": now,
            "exp": now + self._ttl,
        }
        return jwt.encode(payload, self._secret, algorithm=JWT_ALGORITHM)

    def subject(self, token: str) -> str:
        try:
            payload = jwt.decode(token, self._secret, algorithms=[JWT_ALGORITHM])
        except jwt.ExpiredSignatureError:
            raise AuthError("Token expired.")
        except jwt.InvalidTokenError:
            raise AuthError("Invalid token.")
        sub = payload.get("sub")
        if not isinstance(sub, str) or not sub:
            raise AuthError("Invalid token.")
        return sub
