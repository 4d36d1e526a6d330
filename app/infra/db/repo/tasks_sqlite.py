# app/infra/db/repo/tasks_sqlite.py
from __future__ import annotations

import json
from collections import defaultdict
from typing import Any, Optional, Sequence

import aiosqlite

from app.domain.common.time import date_from_iso, date_to_iso, from_iso, to_iso
from app.domain.tasks.ports import TaskRepository
from app.infra.db.connection import Database
from app.models import Attachment, Task, TaskStatus

_TASK_COLUMNS = "t.id, t.owner_id, t.title, t.description, t.status, t.due_date, t.attachments, t.created_at, t.updated_at"


def _attachments_to_json(attachments: Sequence[Attachment]) -> str:
    return json.dumps([a.to_dict() for a in attachments], ensure_ascii=False)


def _attachments_from_json(raw: Optional[str]) -> tuple[Attachment, ...]:
    items = json.loads(raw or "[]")
    return tuple(Attachment(name=i.get("name", ""), url=i.get("url", "")) for i in items)


def _row_to_task(r: aiosqlite.Row, shared_with: Sequence[str]) -> Task:
    return Task(
        id=r["id"],
        owner_id=r["owner_id"],
        title=r["title"],
        description=r["description"] or "",
        status=TaskStatus(r["status"]),
        due_date=date_from_iso(r["due_date"]) if r["due_date"] else None,
        created_at=from_iso(r["created_at"]),
        updated_at=from_iso(r["updated_at"]),
        shared_with=tuple(shared_with),
        attachments=_attachments_from_json(r["attachments"]),
    )


class TasksSqliteRepo(TaskRepository):
    def __init__(self, db: Database) -> None:
        self._db = db

    async def insert(self, task: Task) -> None:
        await self._db.execute(
            """
            INSERT INTO tasks(id, owner_id, title, description, status, due_date, attachments, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?);
            """,
            (
                task.id,
                task.owner_id,
                task.title,
                task.description,
                task.status.value,
                date_to_iso(task.due_date) if task.due_date else None,
                _attachments_to_json(task.attachments),
                to_iso(task.created_at),
                to_iso(task.updated_at),
            ),
        )

    async def get(self, task_id: str) -> Optional[Task]:
        row = await self._db.fetchone(f"SELECT {_TASK_COLUMNS} FROM tasks t WHERE t.id = ?;", (task_id,))
        if not row:
            return None
        shares = await self._shares_for([task_id])
        return _row_to_task(row, shares.get(task_id, []))

    async def list_owned(self, owner_id: str, status: Optional[TaskStatus] = None) -> list[Task]:
        sql = f"SELECT {_TASK_COLUMNS} FROM tasks t WHERE t.owner_id = ?"
        params: list[Any] = [owner_id]
        if status is not None:
            sql += " AND t.status = ?"
            params.append(status.value)
        sql += " ORDER BY t.created_at DESC, t.rowid DESC;"
        rows = await self._db.fetchall(sql, params)
        return await self._hydrate(rows)

    async def list_shared_with(self, user_id: str) -> list[Task]:
        rows = await self._db.fetchall(
            f"""
            SELECT {_TASK_COLUMNS}
            FROM tasks t
            JOIN task_shares s ON s.task_id = t.id
            WHERE s.user_id = ?
            ORDER BY t.created_at DESC, t.rowid DESC;
            """,
            (user_id,),
        )
        return await self._hydrate(rows)

    async def update(self, task: Task) -> None:
        await self._db.execute(
            """
            UPDATE tasks
            SET title=?, description=?, status=?, due_date=?, attachments=?, updated_at=?
            WHERE id=? AND owner_id=?;
            """,
            (
                task.title,
                task.description,
                task.status.value,
                date_to_iso(task.due_date) if task.due_date else None,
                _attachments_to_json(task.attachments),
                to_iso(task.updated_at),
                task.id,
                task.owner_id,
            ),
        )

    async def delete(self, task_id: str, owner_id: str) -> bool:
        # task_shares rows go with the task (ON DELETE CASCADE)
        n = await self._db.execute("DELETE FROM tasks WHERE id=? AND owner_id=?;", (task_id, owner_id))
        return n > 0

    async def add_share(self, task_id: str, user_id: str, now_iso: str) -> bool:
        n = await self._db.execute(
            "INSERT OR IGNORE INTO task_shares(task_id, user_id, created_at) VALUES (?, ?, ?);",
            (task_id, user_id, now_iso),
        )
        return n > 0

    async def remove_share(self, task_id: str, user_id: str) -> bool:
        n = await self._db.execute(
            "DELETE FROM task_shares WHERE task_id=? AND user_id=?;",
            (task_id, user_id),
        )
        return n > 0

    async def _hydrate(self, rows: Sequence[aiosqlite.Row]) -> list[Task]:
        # one query for all share rows (no N+1)
        shares = await self._shares_for([r["id"] for r in rows])
        return [_row_to_task(r, shares.get(r["id"], [])) for r in rows]

    async def _shares_for(self, task_ids: Sequence[str]) -> dict[str, list[str]]:
        out: dict[str, list[str]] = defaultdict(list)
        if not task_ids:
            return out
        placeholders = ",".join("?" for _ in task_ids)
        rows = await self._db.fetchall(
            f"""
            SELECT task_id, user_id
            FROM task_shares
            WHERE task_id IN ({placeholders})
            ORDER BY created_at ASC, rowid ASC;
            """,
            list(task_ids),
        )
        for r in rows:
            out[r["task_id"]].append(r["user_id"])
        return out
