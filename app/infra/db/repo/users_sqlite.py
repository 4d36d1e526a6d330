# app/infra/db/repo/users_sqlite.py
from __future__ import annotations

from typing import Optional

import aiosqlite

from app.domain.auth.ports import UserRepository
from app.domain.common.errors import ConflictError
from app.domain.common.time import from_iso, to_iso
from app.infra.db.connection import Database
from app.models import User


def _row_to_user(r: aiosqlite.Row) -> User:
    return User(
        id=r["id"],
        username=r["username"],
        password_hash=r["password_hash"],
        created_at=from_iso(r["created_at"]),
    )


class UsersSqliteRepo(UserRepository):
    def __init__(self, db: Database) -> None:
        self._db = db

    async def insert(self, user: User) -> None:
        try:
            await self._db.execute(
                "INSERT INTO users(id, username, password_hash, created_at) VALUES (?, ?, ?, ?);",
                (user.id, user.username, user.password_hash, to_iso(user.created_at)),
            )
        except aiosqlite.IntegrityError:
            # lost a race with a concurrent registration of the same username
            raise ConflictError("Username is already taken.")

    async def get(self, user_id: str) -> Optional[User]:
        row = await self._db.fetchone(
            "SELECT id, username, password_hash, created_at FROM users WHERE id = ?;",
            (user_id,),
        )
        return _row_to_user(row) if row else None

    async def get_by_username(self, username: str) -> Optional[User]:
        row = await self._db.fetchone(
            "SELECT id, username, password_hash, created_at FROM users WHERE username = ?;",
            (username,),
        )
        return _row_to_user(row) if row else None
