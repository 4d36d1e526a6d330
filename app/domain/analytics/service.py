from __future__ import annotations

from datetime import timedelta

from app.constants import TRENDS_WINDOW_DAYS
from app.domain.analytics.ports import AnalyticsRepository
from app.domain.common.ports import Clock
from app.domain.common.time import to_iso
from app.models import TaskStatus


class AnalyticsService:
    """Read-only aggregates over the caller's own tasks, recomputed on every call."""

    def __init__(self, repo: AnalyticsRepository, clock: Clock) -> None:
        self._repo = repo
        self._clock = clock

    async def overview(self, owner_id: str) -> dict[str, int]:
        counts = await self._repo.count_by_status(owner_id)
        # enumeration order; statuses without tasks are omitted
        return {s.value: counts[s.value] for s in TaskStatus if counts.get(s.value)}

    async def trends(self, owner_id: str) -> list[dict[str, object]]:
        since = self._clock.now() - timedelta(days=TRENDS_WINDOW_DAYS)
        rows = await self._repo.created_per_day(owner_id, to_iso(since))
        return [{"date": day, "count": count} for day, count in rows]
