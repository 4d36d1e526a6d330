# app/realtime/registry.py
from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Dict, Protocol

from app.domain.common.ports import Notifier

logger = logging.getLogger(__name__)


class Subscriber(Protocol):
    """What the registry needs from a connection; aiohttp's WebSocketResponse fits."""

    @property
    def closed(self) -> bool: ...

    async def send_json(self, data: Any) -> None: ...

    async def close(self) -> bool: ...


class ChannelRegistry(Notifier):
    """
    Per-user publish/subscribe registry for connected clients.

    - one topic per user id; each open connection of that user is a subscriber
    - publish is best-effort and at-most-once: no subscriber -> event is dropped
    - every subscriber gets its own copy (fan-out across tabs/devices)

    Open connections are tracked separately from topics (attach/detach) so that
    close_all() also reaches sockets that never subscribed.
    """

    def __init__(self) -> None:
        self._topics: Dict[str, set[Subscriber]] = defaultdict(set)
        self._connections: set[Subscriber] = set()

    def attach(self, connection: Subscriber) -> None:
        self._connections.add(connection)

    def detach(self, connection: Subscriber) -> None:
        self._connections.discard(connection)

    def connection_count(self) -> int:
        return len(self._connections)

    def add(self, user_id: str, subscriber: Subscriber) -> None:
        self._topics[user_id].add(subscriber)
        logger.debug("Subscribed: user_id=%s connections=%d", user_id, len(self._topics[user_id]))

    def remove(self, user_id: str, subscriber: Subscriber) -> bool:
        subs = self._topics.get(user_id)
        if not subs or subscriber not in subs:
            return False
        subs.discard(subscriber)
        if not subs:
            del self._topics[user_id]
        logger.debug("Unsubscribed: user_id=%s", user_id)
        return True

    def subscriber_count(self, user_id: str) -> int:
        return len(self._topics.get(user_id, ()))

    def is_subscribed(self, user_id: str, subscriber: Subscriber) -> bool:
        return subscriber in self._topics.get(user_id, ())

    async def publish(self, user_id: str, payload: Dict[str, Any]) -> int:
        """Send payload to every live subscriber of user_id. Returns the delivery count."""
        delivered = 0
        for sub in list(self._topics.get(user_id, ())):
            if sub.closed:
                self.remove(user_id, sub)
                continue
            try:
                await sub.send_json(payload)
            except (ConnectionError, RuntimeError) as e:
                logger.warning(f"Dropping subscriber after failed send: user_id={user_id}, error={e}")
                self.remove(user_id, sub)
                continue
            except Exception as e:
                # one broken subscriber must not starve the others
                logger.error(f"Unexpected send failure: user_id={user_id}, error={e}", exc_info=True)
                self.remove(user_id, sub)
                continue
            delivered += 1
        logger.debug("Published: user_id=%s delivered=%d", user_id, delivered)
        return delivered

    async def close_all(self) -> None:
        everyone = set(self._connections)
        for subs in self._topics.values():
            everyone.update(subs)
        self._topics.clear()
        self._connections.clear()
        for conn in everyone:
            if not conn.closed:
                await conn.close()
