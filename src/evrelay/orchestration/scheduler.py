from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from evrelay.core.errors import DeliveryError, RPCError, TransientScanError
from evrelay.core.interfaces import IChainAccess, ICheckpointStore, ITicker, IWebhookSink
from evrelay.core.models import CycleResult, DecodedEvent, EventLog
from evrelay.decoding.decoder import decode_event
from evrelay.decoding.specs import EventDefinition
from evrelay.orchestration.utils import compute_range

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Domain configuration
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ScanConfig:
    """
    Domain-level configuration for the scan loop.

    Free of infrastructure concerns (no RPC URL, no file paths).
    """

    address: str
    chunk_size: int


# ---------------------------------------------------------------------------
# Stats
# ---------------------------------------------------------------------------


@dataclass(kw_only=True)
class ScanStats:
    """Aggregated counters across cycles."""

    cycles_advanced: int = 0
    cycles_idle: int = 0
    cycles_failed: int = 0
    total_logs: int = 0
    delivered: int = 0

    def record(self, result: CycleResult) -> None:
        self.total_logs += result.logs
        self.delivered += result.delivered
        if result.status == "advanced":
            self.cycles_advanced += 1
        elif result.status == "idle":
            self.cycles_idle += 1
        else:
            self.cycles_failed += 1


# ---------------------------------------------------------------------------
# Scheduler
# ---------------------------------------------------------------------------


class ScanScheduler:
    """
    Periodic scan → decode → deliver driver.

    Each tick runs one cycle: QueryHead → ComputeRange → FetchLogs →
    DecodeAndDispatch → Advance. Any transient failure aborts the cycle
    before Advance, so the checkpoint only ever moves past a block range
    whose matching logs were all delivered. Deliveries made before the
    failure are not rolled back; the next cycle re-sends them
    (at-least-once).

    Cycles never overlap: the next tick is only consumed after the current
    cycle returned. The checkpoint is owned by this object alone.
    """

    def __init__(
        self,
        *,
        chain: IChainAccess,
        store: ICheckpointStore,
        sink: IWebhookSink,
        definition: EventDefinition,
        config: ScanConfig,
    ) -> None:
        self.chain = chain
        self.store = store
        self.sink = sink
        self.definition = definition
        self.config = config
        self.checkpoint = store.load()
        self.stats = ScanStats()

    async def _query_head(self) -> int:
        try:
            return await self.chain.latest_block()
        except TransientScanError:
            raise
        except Exception as e:
            raise RPCError(f"error getting header: {e}") from e

    async def _fetch_logs(self, from_block: int, to_block: int) -> list[EventLog]:
        try:
            return await self.chain.get_logs(
                address=self.config.address,
                from_block=from_block,
                to_block=to_block,
            )
        except TransientScanError:
            raise
        except Exception as e:
            raise RPCError(f"error filtering logs: {e}") from e

    async def _dispatch(self, event: DecodedEvent) -> None:
        try:
            await self.sink.dispatch(event)
        except TransientScanError:
            raise
        except Exception as e:
            raise DeliveryError(f"error delivering tx {event.tx_hash}: {e}") from e

    async def _process_cycle(self, result: CycleResult) -> None:
        head = await self._query_head()
        result.head = head

        rng = compute_range(self.checkpoint, head, self.config.chunk_size)
        if rng is None:
            result.status = "idle"
            logger.info("node head %d is behind checkpoint %d, waiting", head, self.checkpoint)
            return

        from_block, to_block = rng
        result.to_block = to_block
        logger.info("parsing events from %d to %d", from_block, to_block)

        logs = await self._fetch_logs(from_block, to_block)
        result.logs = len(logs)

        # Strictly sequential: delivery order == fetch order.
        for log in logs:
            event = decode_event(self.definition, log)
            if event is None:
                continue
            result.matched += 1
            await self._dispatch(event)
            result.delivered += 1

        # CheckpointWriteError is fatal and propagates.
        await asyncio.to_thread(self.store.save, to_block)
        self.checkpoint = to_block
        result.status = "advanced"

    async def run_cycle(self) -> CycleResult:
        """Run one cycle; transient errors are logged and reported, not raised."""
        result = CycleResult(status="failed", from_block=self.checkpoint)
        try:
            await self._process_cycle(result)
        except TransientScanError as e:
            result.status = "failed"
            result.error = f"{type(e).__name__}: {e}"
            logger.warning(
                "scan cycle from block %d aborted after %d/%d deliveries: %s",
                result.from_block,
                result.delivered,
                result.matched,
                result.error,
            )
        result.checkpoint = self.checkpoint
        self.stats.record(result)
        return result

    async def run(self, ticker: ITicker) -> ScanStats:
        """Run one cycle per tick until the ticker stops."""
        logger.info(
            "starting to work with contract %s and event %s at block %d",
            self.config.address,
            self.definition.name,
            self.checkpoint,
        )
        async for _ in ticker:
            await self.run_cycle()
        return self.stats
