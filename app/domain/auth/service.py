from __future__ import annotations

import logging
from typing import Any

from app.domain.auth.ports import PasswordHasher, TokenSigner, UserRepository
from app.domain.auth.rules import validate_password, validate_username
from app.domain.common.errors import AuthError, ConflictError, NotFoundError
from app.domain.common.ports import Clock, IdGenerator
from app.models import User

logger = logging.getLogger(__name__)

_BAD_CREDENTIALS = "Invalid username or password."


class AuthService:
    """Registration, login and bearer-token verification."""

    def __init__(
        self,
        users: UserRepository,
        hasher: PasswordHasher,
        tokens: TokenSigner,
        clock: Clock,
        ids: IdGenerator,
    ) -> None:
        self._users = users
        self._hasher = hasher
        self._tokens = tokens
        self._clock = clock
        self._ids = ids

    async def register(self, username: Any, password: Any) -> tuple[User, str]:
        username = validate_username(username)
        password = validate_password(password)

        if await self._users.get_by_username(username) is not None:
            raise ConflictError("Username is already taken.")

        user = User(
            id=self._ids.new_id(),
            username=username,
            password_hash=self._hasher.hash(password),
            created_at=self._clock.now(),
        )
        await self._users.insert(user)
        logger.info("User registered: user_id=%s username=%s", user.id, user.username)
        return user, self._tokens.issue(user.id)

    async def login(self, username: Any, password: Any) -> tuple[User, str]:
        if not isinstance(username, str) or not isinstance(password, str):
            raise AuthError(_BAD_CREDENTIALS)
        user = await self._users.get_by_username(username.strip())
        if user is None or not self._hasher.verify(password, user.password_hash):
            logger.info("Login failed: username=%s", username)
            raise AuthError(_BAD_CREDENTIALS)
        return user, self._tokens.issue(user.id)

    async def authenticate(self, token: str) -> str:
        user_id = self._tokens.subject(token)
        if await self._users.get(user_id) is None:
            raise AuthError("User no longer exists.")
        return user_id

    async def get_user(self, user_id: str) -> User:
        user = await self._users.get(user_id)
        if user is None:
            raise NotFoundError("User not found.")
        return user

    async def find_user(self, username: Any) -> User:
        if not isinstance(username, str) or not username.strip():
            raise NotFoundError("User not found.")
        user = await self._users.get_by_username(username.strip())
        if user is None:
            raise NotFoundError("User not found.")
        return user
