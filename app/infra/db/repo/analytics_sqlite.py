# app/infra/db/repo/analytics_sqlite.py
from __future__ import annotations

from app.domain.analytics.ports import AnalyticsRepository
from app.infra.db.connection import Database


class AnalyticsSqliteRepo(AnalyticsRepository):
    """Single-pass GROUP BY queries over the owner's tasks."""

    def __init__(self, db: Database) -> None:
        self._db = db

    async def count_by_status(self, owner_id: str) -> dict[str, int]:
        rows = await self._db.fetchall(
            """
            SELECT status, COUNT(*) AS count
            FROM tasks
            WHERE owner_id = ?
            GROUP BY status;
            """,
            (owner_id,),
        )
        return {r["status"]: r["count"] for r in rows}

    async def created_per_day(self, owner_id: str, since_iso: str) -> list[tuple[str, int]]:
        # created_at is stored as UTC ISO text, so the first 10 chars are the UTC calendar day
        rows = await self._db.fetchall(
            """
            SELECT substr(created_at, 1, 10) AS day, COUNT(*) AS count
            FROM tasks
            WHERE owner_id = ? AND created_at >= ?
            GROUP BY day
            ORDER BY day ASC;
            """,
            (owner_id, since_iso),
        )
        return [(r["day"], r["count"]) for r in rows]
