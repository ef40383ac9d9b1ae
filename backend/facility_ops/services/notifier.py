"""
Delivery of handover packages to the receiving shift.

With ``HANDOVER_WEBHOOK_URL`` set the package is POSTed there as JSON.
Without it delivery is simulated: a short fixed delay, then success.
Failures are reported once and never retried.
"""

import asyncio
import logging
from typing import Any

import httpx

from facility_ops.core.config import settings
from facility_ops.core.exceptions import DeliveryError

logger = logging.getLogger(__name__)


async def deliver_handover(payload: dict[str, Any]) -> None:
    url = settings.HANDOVER_WEBHOOK_URL
    if not url:
        await asyncio.sleep(settings.HANDOVER_SEND_DELAY_SEC)
        logger.info(
            "Handover delivered (simulated) to %s: %d item(s)",
            payload.get("recipient"), len(payload.get("items", [])),
        )
        return

    try:
        async with httpx.AsyncClient(
            timeout=settings.HANDOVER_WEBHOOK_TIMEOUT_SEC,
            follow_redirects=True,
        ) as client:
            resp = await client.post(url, json=payload)
            resp.raise_for_status()
    except httpx.HTTPError as exc:
        logger.warning("Handover webhook %s failed: %s", url, exc)
        raise DeliveryError("Handover could not be delivered") from exc

    logger.info("Handover delivered to %s via webhook", payload.get("recipient"))
