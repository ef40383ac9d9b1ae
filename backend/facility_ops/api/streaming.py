"""
Server-Sent Events endpoints on top of the snapshot hub.

Each stream opens with the current snapshot, then forwards every newer
snapshot of the collection. Keep-alive comments are written while idle.
"""

import asyncio
import json
import logging
from collections.abc import AsyncIterator, Sequence
from typing import Any

from fastapi import Request
from fastapi.responses import StreamingResponse
from pydantic import BaseModel

from facility_ops.core.config import settings
from facility_ops.services.live import SnapshotHub, hub

logger = logging.getLogger(__name__)


def encode_event(snapshot: Sequence[Any], event: str = "snapshot") -> str:
    items = [
        item.model_dump(mode="json") if isinstance(item, BaseModel) else item
        for item in snapshot
    ]
    return f"event: {event}\ndata: {json.dumps(items, ensure_ascii=False)}\n\n"


async def snapshot_events(
    request: Request,
    collection: str,
    initial: Sequence[Any],
    source: SnapshotHub = hub,
) -> AsyncIterator[str]:
    subscription, queue = source.open_queue(collection)
    logger.info("SSE client attached to '%s'", collection)
    try:
        yield encode_event(initial)
        while True:
            if await request.is_disconnected():
                break
            try:
                snapshot = await asyncio.wait_for(
                    queue.get(), timeout=settings.SSE_KEEPALIVE_SEC
                )
            except asyncio.TimeoutError:
                yield ": keep-alive\n\n"
                continue
            yield encode_event(snapshot)
    finally:
        subscription.cancel()
        logger.info("SSE client detached from '%s'", collection)


def snapshot_stream(request: Request, collection: str, initial: Sequence[Any]) -> StreamingResponse:
    return StreamingResponse(
        snapshot_events(request, collection, initial),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )
