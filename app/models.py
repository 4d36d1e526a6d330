# -*- coding: utf-8 -*-
"""Shared data models (User, Task) and their JSON views."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional


class TaskStatus(str, Enum):
    PENDING = "Pending"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"

    @classmethod
    def parse(cls, raw: str) -> "TaskStatus":
        """Accepts the wire value ('In Progress') or the member name ('IN_PROGRESS')."""
        for status in cls:
            if raw == status.value or raw == status.name:
                return status
        raise ValueError(f"unknown task status: {raw!r}")


@dataclass(frozen=True)
class User:
    id: str
    username: str
    password_hash: str
    created_at: datetime

    def public(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "username": self.username,
            "createdAt": self.created_at.isoformat(),
        }


@dataclass(frozen=True)
class Attachment:
    name: str
    url: str

    def to_dict(self) -> dict[str, str]:
        return {"name": self.name, "url": self.url}


@dataclass(frozen=True)
class Task:
    id: str
    owner_id: str
    title: str
    description: str
    status: TaskStatus
    due_date: Optional[date]
    created_at: datetime
    updated_at: datetime
    shared_with: tuple[str, ...] = ()
    attachments: tuple[Attachment, ...] = ()

    def is_owned_by(self, user_id: str) -> bool:
        return self.owner_id == user_id

    def is_visible_to(self, user_id: str) -> bool:
        return self.owner_id == user_id or user_id in self.shared_with

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "status": self.status.value,
            "dueDate": self.due_date.isoformat() if self.due_date else None,
            "owner": self.owner_id,
            "sharedWith": list(self.shared_with),
            "attachments": [a.to_dict() for a in self.attachments],
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }
