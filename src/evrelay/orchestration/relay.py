from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from aiohttp import web

from evrelay.clients.rpc import RPC
from evrelay.clients.webhook import WebhookDispatcher
from evrelay.core.config import RelayConfig
from evrelay.core.errors import ConfigError
from evrelay.decoding.abi import load_event_definition
from evrelay.health import start_liveness
from evrelay.orchestration.scheduler import ScanConfig, ScanScheduler, ScanStats
from evrelay.orchestration.utils import IntervalTicker
from evrelay.storage.checkpoint import CheckpointStore

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Output DTO
# ---------------------------------------------------------------------------


@dataclass(kw_only=True)
class RelayOutput:
    """High-level output of a relay run (after shutdown)."""

    stats: ScanStats
    checkpoint: int
    chain_id: int


# ---------------------------------------------------------------------------
# Wiring
# ---------------------------------------------------------------------------


async def run_relay(config: RelayConfig, *, stop: asyncio.Event) -> RelayOutput:
    """Build the concrete collaborators and run the scan loop until `stop` is set.

    Startup failures (invalid config, unreachable node, bad ABI, unbindable
    liveness address) raise before any block is scanned. A failed checkpoint
    write propagates out of the loop.
    """
    config.validate()
    definition = load_event_definition(config.abi_path, config.event_name)
    logger.info("watching %s (topic0 %s)", definition.name, definition.topic0)

    rpc = RPC(config.rpc_url, timeout_s=config.rpc_timeout_s)
    dispatcher = WebhookDispatcher(config.webhook_url, timeout_s=config.webhook_timeout_s)
    runner: web.AppRunner | None = None
    try:
        chain_id = await rpc.chain_id()
        logger.info("connected to chain %d at %s", chain_id, config.rpc_url)

        try:
            runner = await start_liveness(config.liveness_addr)
        except OSError as e:
            raise ConfigError(f"cannot bind liveness endpoint {config.liveness_addr}: {e}") from e

        scheduler = ScanScheduler(
            chain=rpc,
            store=CheckpointStore(config.checkpoint_path, default_block=config.start_block),
            sink=dispatcher,
            definition=definition,
            config=ScanConfig(address=config.address, chunk_size=config.chunk_size),
        )
        stats = await scheduler.run(IntervalTicker(config.poll_interval_s, stop))
        return RelayOutput(stats=stats, checkpoint=scheduler.checkpoint, chain_id=chain_id)
    finally:
        if runner is not None:
            await runner.cleanup()
        await dispatcher.aclose()
        await rpc.aclose()
