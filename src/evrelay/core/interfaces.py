from __future__ import annotations

from collections.abc import AsyncIterator
from typing import List, Protocol, runtime_checkable

from evrelay.core.models import DecodedEvent, EventLog


# ---------------------------------------------------------------------------
# IChainAccess
# ---------------------------------------------------------------------------

@runtime_checkable
class IChainAccess(Protocol):
    """
    Abstract access to an EVM chain.

    Domain expectations:
    - It returns EventLog objects already mapped into internal domain models.
    - It hides the underlying RPC technology.
    - Failures surface as exceptions; the scheduler treats them as transient.
    """

    async def latest_block(self) -> int:
        """Return the current chain head height."""
        ...

    async def get_logs(
        self,
        *,
        address: str,
        from_block: int,
        to_block: int,
    ) -> List[EventLog]:
        """
        Return all logs emitted by `address` over the inclusive block range,
        in chain order.
        """
        ...


# ---------------------------------------------------------------------------
# ICheckpointStore
# ---------------------------------------------------------------------------

@runtime_checkable
class ICheckpointStore(Protocol):
    """
    Durable last-scanned-block pointer.

    Domain expectations:
    - `load` never fails; unusable content falls back to a default.
    - `save` either persists durably or raises CheckpointWriteError.
    """

    def load(self) -> int:
        ...

    def save(self, block: int) -> None:
        ...


# ---------------------------------------------------------------------------
# IWebhookSink
# ---------------------------------------------------------------------------

@runtime_checkable
class IWebhookSink(Protocol):
    """
    Delivery target for decoded events.

    `dispatch` returns only once the subscriber acknowledged the event and
    raises DeliveryError otherwise. No retries happen at this level.
    """

    async def dispatch(self, event: DecodedEvent) -> None:
        ...


# ---------------------------------------------------------------------------
# ITicker
# ---------------------------------------------------------------------------

@runtime_checkable
class ITicker(Protocol):
    """
    Source of scan ticks.

    Iteration ends when the ticker is stopped. Tests inject synthetic tickers
    that yield a fixed number of ticks.
    """

    def __aiter__(self) -> AsyncIterator[int]:
        ...
