"""Webhook delivery of decoded events."""

from __future__ import annotations

import logging

import httpx

from evrelay.core.errors import DeliveryError
from evrelay.core.models import DecodedEvent, WebhookPayload

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_S = 30


class WebhookDispatcher:
    """POSTs one JSON notification per decoded event.

    A transport error or a status outside 200-299 raises `DeliveryError`.
    There is no retry here: the scan cycle is aborted and the whole block
    range is retried on the next tick.
    """

    def __init__(
        self,
        url: str,
        *,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.url = url
        self.client = httpx.AsyncClient(timeout=httpx.Timeout(timeout_s), transport=transport)

    async def dispatch(self, event: DecodedEvent) -> None:
        payload = WebhookPayload.from_event(event)
        try:
            body = payload.to_json()
        except (TypeError, ValueError) as e:
            raise DeliveryError(f"error encoding event for tx {payload.tx_hash}: {e}") from e
        try:
            r = await self.client.post(
                self.url,
                content=body,
                headers={"Content-Type": "application/json"},
            )
        except httpx.HTTPError as e:
            raise DeliveryError(f"error sending request for tx {payload.tx_hash}: {e}") from e

        if not 200 <= r.status_code <= 299:
            raise DeliveryError(
                f"webhook answered {r.status_code} for tx {payload.tx_hash}",
                status_code=r.status_code,
            )
        logger.info("found event at tx %s, with params: %s", payload.tx_hash, payload.data)

    async def aclose(self) -> None:
        await self.client.aclose()
