# app/infra/db/connection.py
from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional, Sequence

import aiosqlite


class Database:
    """
    Async SQLite helper for the task store:
    - one short-lived connection per operation, rows as aiosqlite.Row
    - foreign keys on for every connection (task_shares cascade with their task)
    - WAL journal, switched on when migrations run
    """

    def __init__(self, path: str) -> None:
        self._path = path

    @asynccontextmanager
    async def _connect(self) -> AsyncIterator[aiosqlite.Connection]:
        async with aiosqlite.connect(self._path) as conn:
            conn.row_factory = aiosqlite.Row
            await conn.execute("PRAGMA foreign_keys=ON;")
            yield conn

    async def executescript(self, sql: str) -> None:
        async with self._connect() as conn:
            await conn.execute("PRAGMA journal_mode=WAL;")
            await conn.executescript(sql)
            await conn.commit()

    async def execute(self, sql: str, params: Sequence[Any] = ()) -> int:
        """Run one write statement and commit. Returns the affected row count."""
        async with self._connect() as conn:
            cur = await conn.execute(sql, params)
            await conn.commit()
            return cur.rowcount

    async def fetchone(self, sql: str, params: Sequence[Any] = ()) -> Optional[aiosqlite.Row]:
        async with self._connect() as conn:
            cur = await conn.execute(sql, params)
            return await cur.fetchone()

    async def fetchall(self, sql: str, params: Sequence[Any] = ()) -> list[aiosqlite.Row]:
        async with self._connect() as conn:
            cur = await conn.execute(sql, params)
            return list(await cur.fetchall())
