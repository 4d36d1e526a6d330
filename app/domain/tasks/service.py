from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Dict, Mapping, Optional, Sequence

from app.constants import MSG_TASK_SHARED, MSG_TASK_STATUS_CHANGED
from app.domain.auth.ports import UserRepository
from app.domain.common.errors import ForbiddenError, NotFoundError, ValidationError
from app.domain.common.ports import Clock, IdGenerator, Notifier
from app.domain.common.time import to_iso
from app.domain.tasks.ports import TaskRepository
from app.domain.tasks.rules import (
    parse_attachments,
    parse_due_date,
    parse_status,
    validate_description,
    validate_title,
)
from app.models import Task, TaskStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ShareResult:
    task: Task
    added: bool
    # subscribers that received the notification; 0 when nobody was connected
    delivered: int


class TaskService:
    """
    Task CRUD, sharing and change notifications. No aiohttp. No sqlite.
    """

    def __init__(
        self,
        repo: TaskRepository,
        users: UserRepository,
        notifier: Notifier,
        clock: Clock,
        ids: IdGenerator,
    ) -> None:
        self._repo = repo
        self._users = users
        self._notifier = notifier
        self._clock = clock
        self._ids = ids

    async def create_task(self, owner_id: str, payload: Mapping[str, Any]) -> Task:
        now = self._clock.now()
        status = parse_status(payload["status"]) if payload.get("status") is not None else TaskStatus.PENDING
        task = Task(
            id=self._ids.new_id(),
            owner_id=owner_id,
            title=validate_title(payload.get("title")),
            description=validate_description(payload.get("description")),
            status=status,
            due_date=parse_due_date(payload.get("dueDate")),
            attachments=parse_attachments(payload.get("attachments")),
            created_at=now,
            updated_at=now,
        )
        await self._repo.insert(task)
        logger.info("Task created: task_id=%s owner=%s", task.id, owner_id)
        return task

    async def list_tasks(self, owner_id: str, status: Optional[str] = None) -> Sequence[Task]:
        status_filter = parse_status(status) if status else None
        return await self._repo.list_owned(owner_id, status_filter)

    async def list_shared(self, user_id: str) -> Sequence[Task]:
        return await self._repo.list_shared_with(user_id)

    async def get_task(self, user_id: str, task_id: str) -> Task:
        task = await self._load(task_id)
        if not task.is_visible_to(user_id):
            raise ForbiddenError("Not authorized to view this task.")
        return task

    async def update_task(self, user_id: str, task_id: str, changes: Mapping[str, Any]) -> Task:
        task = await self._load_owned(user_id, task_id)

        fields: Dict[str, Any] = {}
        if "title" in changes:
            fields["title"] = validate_title(changes["title"])
        if "description" in changes:
            fields["description"] = validate_description(changes["description"])
        if "status" in changes:
            fields["status"] = parse_status(changes["status"])
        if "dueDate" in changes:
            fields["due_date"] = parse_due_date(changes["dueDate"])
        if "attachments" in changes:
            fields["attachments"] = parse_attachments(changes["attachments"])

        if not fields:
            return task

        updated = replace(task, updated_at=self._clock.now(), **fields)
        await self._repo.update(updated)

        if updated.status is not task.status:
            text = MSG_TASK_STATUS_CHANGED.format(title=updated.title, status=updated.status.value)
            for shared_user in updated.shared_with:
                await self._notify(shared_user, text)

        return updated

    async def delete_task(self, user_id: str, task_id: str) -> None:
        await self._load_owned(user_id, task_id)
        await self._repo.delete(task_id, user_id)
        logger.info("Task deleted: task_id=%s owner=%s", task_id, user_id)

    async def share_task(self, requester_id: str, task_id: str, target_user_id: Any) -> ShareResult:
        # ownership first: a non-owner is always refused, whatever the body holds
        task = await self._load_owned(requester_id, task_id)

        if not isinstance(target_user_id, str) or not target_user_id.strip():
            raise ValidationError("userIdToShare is required.")
        target_user_id = target_user_id.strip()
        if target_user_id == task.owner_id:
            raise ValidationError("A task cannot be shared with its owner.")
        if await self._users.get(target_user_id) is None:
            raise NotFoundError("User to share with not found.")

        added = await self._repo.add_share(task_id, target_user_id, to_iso(self._clock.now()))
        task = await self._load(task_id)
        if not added:
            logger.debug("Share is a no-op: task_id=%s already shared with %s", task_id, target_user_id)
            return ShareResult(task=task, added=False, delivered=0)

        logger.info("Task shared: task_id=%s owner=%s target=%s", task_id, requester_id, target_user_id)
        delivered = await self._notify(target_user_id, MSG_TASK_SHARED.format(title=task.title))
        return ShareResult(task=task, added=True, delivered=delivered)

    async def unshare_task(self, requester_id: str, task_id: str, target_user_id: str) -> Task:
        await self._load_owned(requester_id, task_id)
        removed = await self._repo.remove_share(task_id, target_user_id)
        if removed:
            logger.info("Task unshared: task_id=%s target=%s", task_id, target_user_id)
        return await self._load(task_id)

    async def _load(self, task_id: str) -> Task:
        task = await self._repo.get(task_id)
        if task is None:
            raise NotFoundError("Task not found.")
        return task

    async def _load_owned(self, user_id: str, task_id: str) -> Task:
        task = await self._load(task_id)
        if not task.is_owned_by(user_id):
            raise ForbiddenError("Not authorized: only the owner can modify this task.")
        return task

    async def _notify(self, user_id: str, text: str) -> int:
        # fire-and-forget: the store write has already happened and is not rolled back
        try:
            return await self._notifier.publish(user_id, {"message": text})
        except Exception:
            logger.error(f"Notification publish failed: user_id={user_id}", exc_info=True)
            return 0
