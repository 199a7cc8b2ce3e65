"""Error taxonomy.

Fatal errors (`ConfigError`, `ChainConnectionError`, `CheckpointWriteError`)
stop the process. `TransientScanError` and its subclasses only abort the
current scan cycle; the same block range is retried on the next tick.
"""

from __future__ import annotations


class RelayError(Exception):
    """Base class for all relay errors."""


class ConfigError(RelayError):
    """A required setting is missing or invalid."""


class ChainConnectionError(RelayError):
    """The chain endpoint or the ABI could not be set up at startup."""


class TransientScanError(RelayError):
    """A recoverable failure inside a scan cycle."""


class RPCError(TransientScanError):
    """Head query or log fetch failed."""


class DecodeError(TransientScanError):
    """A matching log could not be decoded against the event definition."""


class DeliveryError(TransientScanError):
    """The webhook could not be reached or answered with a non-2xx status."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class CheckpointWriteError(RelayError):
    """The advanced checkpoint could not be persisted."""
