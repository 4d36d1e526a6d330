from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from app.models import User


class UserRepository(ABC):
    @abstractmethod
    async def insert(self, user: User) -> None: ...

    @abstractmethod
    async def get(self, user_id: str) -> Optional[User]: ...

    @abstractmethod
    async def get_by_username(self, username: str) -> Optional[User]: ...


class PasswordHasher(ABC):
    @abstractmethod
    def hash(self, password: str) -> str: ...

    @abstractmethod
    def verify(self, password: str, password_hash: str) -> bool: ...


class TokenSigner(ABC):
    @abstractmethod
    def issue(self, user_id: str) -> str: ...

    @abstractmethod
    def subject(self, token: str) -> str: ...
