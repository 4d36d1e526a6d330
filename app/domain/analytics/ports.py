from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence


class AnalyticsRepository(ABC):
    @abstractmethod
    async def count_by_status(self, owner_id: str) -> dict[str, int]: ...

    @abstractmethod
    async def created_per_day(self, owner_id: str, since_iso: str) -> Sequence[tuple[str, int]]: ...
