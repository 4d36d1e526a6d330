"""
Tests for task CRUD through TaskService: ownership, validation, deletion, status notifications.

Uses a temporary DB file.
Run with: python -m pytest tests/test_task_service.py -v
"""
from __future__ import annotations

import asyncio
from datetime import date

import pytest

from app.domain.common.errors import ForbiddenError, NotFoundError, ValidationError
from app.models import Attachment, TaskStatus
from tests.helpers import Env, FakeSubscriber, run_with_env


def test_create_task_defaults_and_fields():
    async def run(env: Env):
        owner = await env.add_user("alice")
        task = await env.service.create_task(
            owner,
            {
                "title": "  Buy milk  ",
                "description": "2 litres",
                "dueDate": "2026-10-20",
                "attachments": [{"name": "list.txt", "url": "https://example.com/list.txt"}],
            },
        )
        assert task.title == "Buy milk"
        assert task.status is TaskStatus.PENDING
        assert task.due_date == date(2026, 10, 20)
        assert task.attachments == (Attachment("list.txt", "https://example.com/list.txt"),)

        stored = await env.tasks.get(task.id)
        assert stored == task

    asyncio.run(run_with_env(run))


def test_create_task_requires_title():
    async def run(env: Env):
        owner = await env.add_user("alice")
        with pytest.raises(ValidationError):
            await env.service.create_task(owner, {"title": "   "})
        with pytest.raises(ValidationError):
            await env.service.create_task(owner, {"title": "x", "status": "Done"})
        assert await env.service.list_tasks(owner) == []

    asyncio.run(run_with_env(run))


def test_list_tasks_newest_first_and_status_filter():
    async def run(env: Env):
        owner = await env.add_user("alice")
        other = await env.add_user("bob")
        first = await env.service.create_task(owner, {"title": "first"})
        env.clock.advance(minutes=1)
        second = await env.service.create_task(owner, {"title": "second", "status": "Completed"})
        await env.service.create_task(other, {"title": "not mine"})

        assert [t.id for t in await env.service.list_tasks(owner)] == [second.id, first.id]
        completed = await env.service.list_tasks(owner, status="Completed")
        assert [t.id for t in completed] == [second.id]

    asyncio.run(run_with_env(run))


def test_get_task_visible_to_owner_and_shared_user_only():
    async def run(env: Env):
        owner = await env.add_user("alice")
        bob = await env.add_user("bob")
        eve = await env.add_user("eve")
        task = await env.service.create_task(owner, {"title": "T"})
        await env.service.share_task(owner, task.id, bob)

        assert (await env.service.get_task(owner, task.id)).id == task.id
        assert (await env.service.get_task(bob, task.id)).id == task.id
        with pytest.raises(ForbiddenError):
            await env.service.get_task(eve, task.id)
        with pytest.raises(NotFoundError):
            await env.service.get_task(owner, "missing")

    asyncio.run(run_with_env(run))


def test_update_is_partial_and_owner_only():
    async def run(env: Env):
        owner = await env.add_user("alice")
        bob = await env.add_user("bob")
        task = await env.service.create_task(owner, {"title": "Old", "description": "keep me"})
        await env.service.share_task(owner, task.id, bob)

        with pytest.raises(ForbiddenError):
            await env.service.update_task(bob, task.id, {"title": "Hijacked"})

        env.clock.advance(minutes=5)
        updated = await env.service.update_task(owner, task.id, {"title": "New", "dueDate": None})
        assert updated.title == "New"
        assert updated.description == "keep me"
        assert updated.due_date is None
        assert updated.updated_at > task.updated_at
        assert updated.shared_with == (bob,)
        assert await env.tasks.get(task.id) == updated

    asyncio.run(run_with_env(run))


def test_status_change_notifies_shared_users():
    async def run(env: Env):
        owner = await env.add_user("alice")
        bob = await env.add_user("bob")
        inbox = FakeSubscriber()
        task = await env.service.create_task(owner, {"title": "Ship"})
        await env.service.share_task(owner, task.id, bob)
        env.registry.add(bob, inbox)

        await env.service.update_task(owner, task.id, {"status": "In Progress"})
        await env.service.update_task(owner, task.id, {"title": "Ship it"})

        assert inbox.sent == [{"message": 'Task "Ship" is now In Progress'}]

    asyncio.run(run_with_env(run))


def test_delete_removes_task_from_owner_and_shared_lists():
    async def run(env: Env):
        owner = await env.add_user("alice")
        bob = await env.add_user("bob")
        task = await env.service.create_task(owner, {"title": "Temp"})
        await env.service.share_task(owner, task.id, bob)
        assert [t.id for t in await env.service.list_shared(bob)] == [task.id]

        with pytest.raises(ForbiddenError):
            await env.service.delete_task(bob, task.id)

        await env.service.delete_task(owner, task.id)

        assert await env.service.list_tasks(owner) == []
        assert await env.service.list_shared(bob) == []
        row = await env.db.fetchone("SELECT COUNT(*) AS n FROM task_shares;")
        assert row["n"] == 0
        with pytest.raises(NotFoundError):
            await env.service.delete_task(owner, task.id)

    asyncio.run(run_with_env(run))
