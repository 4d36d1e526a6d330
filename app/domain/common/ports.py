from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict


class Clock(ABC):
    @abstractmethod
    def now(self) -> datetime: ...


class IdGenerator(ABC):
    @abstractmethod
    def new_id(self) -> str: ...


class Notifier(ABC):
    """Best-effort per-user event publisher. Returns how many subscribers got the event."""

    @abstractmethod
    async def publish(self, user_id: str, payload: Dict[str, Any]) -> int: ...
