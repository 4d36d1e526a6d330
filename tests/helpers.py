"""
Shared fakes and temp-DB helpers for the test suite.
"""
from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Awaitable, Callable

from app.domain.common.ports import Clock
from app.domain.common.time import to_iso
from app.domain.tasks.service import TaskService
from app.infra.db.connection import Database
from app.infra.db.repo.tasks_sqlite import TasksSqliteRepo
from app.infra.db.repo.users_sqlite import UsersSqliteRepo
from app.infra.db.schema_version import apply_migrations
from app.infra.ids.uuid_gen import UuidGenerator
from app.models import User
from app.realtime.registry import ChannelRegistry


class FixedClock(Clock):
    def __init__(self, now: datetime) -> None:
        self._now = now

    def now(self) -> datetime:
        return self._now

    def set(self, now: datetime) -> None:
        self._now = now

    def advance(self, **kwargs: float) -> None:
        self._now = self._now + timedelta(**kwargs)


class FakeSubscriber:
    """Stands in for a WebSocket connection; records what it was sent."""

    def __init__(self, fail: bool = False, error: type[Exception] = ConnectionResetError) -> None:
        self.sent: list[Any] = []
        self.closed = False
        self._fail = fail
        self._error = error

    async def send_json(self, data: Any) -> None:
        if self._fail:
            raise self._error("socket is gone")
        self.sent.append(data)

    async def close(self) -> bool:
        self.closed = True
        return True


class ExplodingNotifier:
    async def publish(self, user_id: str, payload: dict) -> int:
        raise RuntimeError("publish failed")


def temp_db_path() -> str:
    fd, path = tempfile.mkstemp(suffix=".db")
    os.close(fd)
    return path


def cleanup_db(path: str) -> None:
    # WAL mode leaves side files next to the database
    for suffix in ("", "-wal", "-shm"):
        if os.path.exists(path + suffix):
            os.unlink(path + suffix)


@dataclass
class Env:
    db: Database
    clock: FixedClock
    users: UsersSqliteRepo
    tasks: TasksSqliteRepo
    registry: ChannelRegistry
    service: TaskService
    user_ids: dict[str, str] = field(default_factory=dict)

    async def add_user(self, username: str) -> str:
        user = User(
            id=UuidGenerator().new_id(),
            username=username,
            password_hash="x",
            created_at=self.clock.now(),
        )
        await self.users.insert(user)
        self.user_ids[username] = user.id
        return user.id


START = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


async def run_with_env(test_fn: Callable[[Env], Awaitable[None]], notifier: Any = None) -> None:
    path = temp_db_path()
    try:
        db = Database(path)
        clock = FixedClock(START)
        await apply_migrations(db, now_iso=to_iso(clock.now()))
        users = UsersSqliteRepo(db)
        tasks = TasksSqliteRepo(db)
        registry = ChannelRegistry()
        service = TaskService(
            repo=tasks,
            users=users,
            notifier=notifier if notifier is not None else registry,
            clock=clock,
            ids=UuidGenerator(),
        )
        await test_fn(Env(db, clock, users, tasks, registry, service))
    finally:
        cleanup_db(path)
