from __future__ import annotations

from datetime import datetime, timezone

from app.domain.common.ports import Clock


class SystemClock(Clock):
    def now(self) -> datetime:
        return datetime.now(timezone.utc)
