from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from app.models import Task, TaskStatus


class TaskRepository(ABC):
    @abstractmethod
    async def insert(self, task: Task) -> None: ...

    @abstractmethod
    async def get(self, task_id: str) -> Optional[Task]: ...

    @abstractmethod
    async def list_owned(self, owner_id: str, status: Optional[TaskStatus] = None) -> Sequence[Task]: ...

    @abstractmethod
    async def list_shared_with(self, user_id: str) -> Sequence[Task]: ...

    @abstractmethod
    async def update(self, task: Task) -> None: ...

    @abstractmethod
    async def delete(self, task_id: str, owner_id: str) -> bool: ...

    @abstractmethod
    async def add_share(self, task_id: str, user_id: str, now_iso: str) -> bool: ...

    @abstractmethod
    async def remove_share(self, task_id: str, user_id: str) -> bool: ...
