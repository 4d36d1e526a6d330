from __future__ import annotations

from passlib.context import CryptContext

from app.domain.auth.ports import PasswordHasher


class PasslibHasher(PasswordHasher):
    """pbkdf2_sha256 via passlib; needs no native backend."""

    def __init__(self, schemes: tuple[str, ...] = ("pbkdf2_sha256",)) -> None:
        self._ctx = CryptContext(schemes=list(schemes), deprecated="auto")

    def hash(self, password: str) -> str:
        return self._ctx.hash(password)

    def verify(self, password: str, password_hash: str) -> bool:
        try:
            return self._ctx.verify(password, password_hash)
        except ValueError:
            # unknown or malformed hash
            return False
