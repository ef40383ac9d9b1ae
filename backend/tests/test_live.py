"""
Snapshot hub and SSE encoding.

Tests:
  - test_publish_full_snapshot   : every subscriber gets the whole collection
  - test_cancel_is_idempotent    : cancelled subscriptions stop receiving
  - test_failing_subscriber      : one broken callback does not block others
  - test_queue_keeps_newest      : slow readers only see the latest snapshot
  - test_encode_event            : SSE framing of pydantic snapshots
"""

from __future__ import annotations

import json

from facility_ops.api.streaming import encode_event
from facility_ops.schemas.notification import NotificationResponse
from facility_ops.services.live import SnapshotHub


class TestSnapshotHub:
    async def test_publish_full_snapshot(self) -> None:
        hub = SnapshotHub()
        first: list[list] = []
        second: list[list] = []

        async def async_callback(snapshot: list) -> None:
            second.append(snapshot)

        other: list[list] = []

        hub.subscribe("work_logs", first.append)
        hub.subscribe("work_logs", async_callback)
        hub.subscribe("employees", other.append)

        await hub.publish("work_logs", [1, 2, 3])
        assert first == [[1, 2, 3]]
        assert second == [[1, 2, 3]]
        assert other == []

    async def test_cancel_is_idempotent(self) -> None:
        hub = SnapshotHub()
        received: list[list] = []
        sub = hub.subscribe("work_logs", received.append)

        sub.cancel()
        sub.cancel()
        await hub.publish("work_logs", [1])

        assert received == []
        assert hub.subscriber_count("work_logs") == 0

    async def test_failing_subscriber(self) -> None:
        hub = SnapshotHub()
        received: list[list] = []

        def broken(snapshot: list) -> None:
            raise RuntimeError("boom")

        hub.subscribe("notifications", broken)
        hub.subscribe("notifications", received.append)

        await hub.publish("notifications", ["a"])
        assert received == [["a"]]

    async def test_queue_keeps_newest(self) -> None:
        hub = SnapshotHub()
        sub, queue = hub.open_queue("work_schedules")

        await hub.publish("work_schedules", [1])
        await hub.publish("work_schedules", [1, 2])
        await hub.publish("work_schedules", [1, 2, 3])

        assert queue.qsize() == 1
        assert await queue.get() == [1, 2, 3]

        sub.cancel()
        await hub.publish("work_schedules", [9])
        assert queue.empty()

    async def test_reset_drops_subscribers(self) -> None:
        hub = SnapshotHub()
        received: list[list] = []
        sub = hub.subscribe("employees", received.append)

        hub.reset()
        await hub.publish("employees", [1])

        assert received == []
        assert sub.active is False


def test_encode_event() -> None:
    item = NotificationResponse(
        id=1,
        title="Handover sent",
        message="2 item(s)",
        type="success",
        category="Handover",
        is_read=False,
        created_at="2026-03-02T09:00:00+00:00",
    )
    frame = encode_event([item])

    assert frame.startswith("event: snapshot\ndata: ")
    assert frame.endswith("\n\n")
    payload = json.loads(frame.split("data: ", 1)[1])
    assert payload[0]["title"] == "Handover sent"
