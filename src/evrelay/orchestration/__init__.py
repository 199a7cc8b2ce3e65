"""Orchestration of the scan → decode → deliver loop.

This package provides:
- ScanScheduler: one cycle per tick, checkpoint advanced only on full success
- Range and ticker utilities
- run_relay: wiring of the concrete RPC, checkpoint, webhook and probe
"""

from evrelay.orchestration.relay import RelayOutput, run_relay
from evrelay.orchestration.scheduler import ScanConfig, ScanScheduler, ScanStats
from evrelay.orchestration.utils import IntervalTicker, compute_range

__all__ = [
    "RelayOutput",
    "run_relay",
    "ScanConfig",
    "ScanScheduler",
    "ScanStats",
    "IntervalTicker",
    "compute_range",
]
