"""Core data models.

This module defines:
- `EventLog`: raw log record as returned by the chain, minimally normalized.
- `DecodedEvent`: a matching log with its parameters decoded by name.
- `WebhookPayload`: the JSON body POSTed to the subscriber.
- `CycleResult`: outcome of one scan cycle.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from typing import Any, Literal

CycleStatus = Literal["advanced", "idle", "failed"]


@dataclass(slots=True, frozen=True)
class EventLog:
    """Raw log as fetched from RPC."""

    address: str  # lowercased 0x...
    topics: tuple[str, ...]  # lowercased 0x..., topic0 first
    data_hex: str  # "0x..."
    block_number: int
    tx_hash: str  # lowercased 0x...
    log_index: int


@dataclass(slots=True, frozen=True)
class DecodedEvent:
    """A log that matched the watched event, decoded into named values."""

    name: str
    tx_hash: str
    log_index: int
    block_number: int
    values: dict[str, Any]


@dataclass(slots=True, frozen=True)
class WebhookPayload:
    """Wire shape of one notification."""

    event: str
    tx_hash: str
    log_index: int
    data: dict[str, Any]

    @classmethod
    def from_event(cls, ev: DecodedEvent) -> WebhookPayload:
        return cls(event=ev.name, tx_hash=ev.tx_hash.lower(), log_index=ev.log_index, data=ev.values)

    def to_json(self) -> str:
        """Serialize as a compact JSON object."""
        return json.dumps(asdict(self), separators=(",", ":"))


@dataclass(slots=True)
class CycleResult:
    """Summary of one scan cycle."""

    status: CycleStatus
    from_block: int
    to_block: int | None = None
    head: int | None = None
    logs: int = 0  # raw logs fetched
    matched: int = 0  # logs decoded as the watched event
    delivered: int = 0  # webhooks acknowledged with 2xx
    error: str | None = None
    checkpoint: int = 0  # checkpoint after the cycle
