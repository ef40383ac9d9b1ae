"""
Process-wide live snapshot fan-out.

Every write to a collection is followed by a ``publish`` of the *whole*
collection. Subscribers always receive a full replacement of their working
set, never a delta, so a late or slow subscriber only needs the most recent
snapshot.
"""

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import Any

logger = logging.getLogger(__name__)

Snapshot = list[Any]
Callback = Callable[[Snapshot], Awaitable[None] | None]

WORK_LOGS = "work_logs"
ATTENDANCE_RECORDS = "attendance_records"
WORK_SCHEDULES = "work_schedules"
EMPLOYEES = "employees"
NOTIFICATIONS = "notifications"
ACTIVITY_LOGS = "activity_logs"


class Subscription:
    """Handle returned by :meth:`SnapshotHub.subscribe`; ``cancel`` stops delivery."""

    def __init__(self, hub: "SnapshotHub", collection: str, callback: Callback):
        self._hub = hub
        self.collection = collection
        self.callback = callback
        self.active = True

    def cancel(self) -> None:
        if not self.active:
            return
        self.active = False
        self._hub._remove(self)


class SnapshotHub:
    def __init__(self) -> None:
        self._subscribers: dict[str, list[Subscription]] = {}

    def subscribe(self, collection: str, callback: Callback) -> Subscription:
        sub = Subscription(self, collection, callback)
        self._subscribers.setdefault(collection, []).append(sub)
        logger.debug(
            "Subscribed to '%s' (%d active)", collection, len(self._subscribers[collection])
        )
        return sub

    def subscriber_count(self, collection: str) -> int:
        return len(self._subscribers.get(collection, []))

    def _remove(self, sub: Subscription) -> None:
        subs = self._subscribers.get(sub.collection, [])
        if sub in subs:
            subs.remove(sub)

    async def publish(self, collection: str, snapshot: Snapshot) -> None:
        """Deliver ``snapshot`` to every active subscriber of ``collection``."""
        for sub in list(self._subscribers.get(collection, [])):
            if not sub.active:
                continue
            try:
                result = sub.callback(list(snapshot))
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception("Subscriber of '%s' failed on snapshot delivery", collection)

    def open_queue(self, collection: str) -> tuple[Subscription, asyncio.Queue]:
        """
        Subscribe with a single-slot queue. When the reader falls behind the
        pending snapshot is replaced by the newer one.
        """
        queue: asyncio.Queue = asyncio.Queue(maxsize=1)

        def _offer(snapshot: Snapshot) -> None:
            if queue.full():
                queue.get_nowait()
            queue.put_nowait(snapshot)

        return self.subscribe(collection, _offer), queue

    def reset(self) -> None:
        for subs in self._subscribers.values():
            for sub in subs:
                sub.active = False
        self._subscribers.clear()


hub = SnapshotHub()
