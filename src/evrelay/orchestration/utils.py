"""Block-range and timing utilities for the scan loop.

Functions
---------
- compute_range: bounded [from, to] range for one cycle, or None when the
  node is behind the checkpoint.
- IntervalTicker: fixed-cadence async tick source with a stop signal.

All ranges are inclusive on both ends: [start, end].
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator


def compute_range(checkpoint: int, head: int, chunk_size: int) -> tuple[int, int] | None:
    """Return `(checkpoint, min(checkpoint + chunk_size, head))`.

    Returns None if `head < checkpoint` (lagging node): nothing to scan.
    """
    if chunk_size <= 0:
        raise ValueError("chunk_size must be positive")
    if head < checkpoint:
        return None
    return checkpoint, min(checkpoint + chunk_size, head)


class IntervalTicker:
    """Yield a tick every `interval_s` seconds until `stop` is set.

    The first tick fires one interval after iteration starts. Ticks that fall
    due while the consumer is still busy are dropped, so a slow cycle never
    causes a burst of back-to-back cycles.
    """

    def __init__(self, interval_s: float, stop: asyncio.Event | None = None) -> None:
        if interval_s <= 0:
            raise ValueError("interval_s must be positive")
        self.interval_s = interval_s
        self.stop_event = stop or asyncio.Event()

    def stop(self) -> None:
        self.stop_event.set()

    async def __aiter__(self) -> AsyncIterator[int]:
        loop = asyncio.get_running_loop()
        next_at = loop.time() + self.interval_s
        n = 0
        while not self.stop_event.is_set():
            delay = next_at - loop.time()
            if delay > 0:
                try:
                    await asyncio.wait_for(self.stop_event.wait(), timeout=delay)
                    return
                except asyncio.TimeoutError:
                    pass
            n += 1
            yield n

            now = loop.time()
            next_at += self.interval_s
            if next_at <= now:
                skipped = int((now - next_at) // self.interval_s) + 1
                next_at += skipped * self.interval_s
