"""Core data models, configuration, interfaces and errors.

This package provides:
- Data models (EventLog, DecodedEvent, WebhookPayload, CycleResult)
- Configuration (RelayConfig)
- The error taxonomy (fatal vs. transient)
"""

from evrelay.core.config import RelayConfig
from evrelay.core.errors import (
    ChainConnectionError,
    CheckpointWriteError,
    ConfigError,
    DecodeError,
    DeliveryError,
    RelayError,
    RPCError,
    TransientScanError,
)
from evrelay.core.models import CycleResult, DecodedEvent, EventLog, WebhookPayload

__all__ = [
    "RelayConfig",
    "ChainConnectionError",
    "CheckpointWriteError",
    "ConfigError",
    "DecodeError",
    "DeliveryError",
    "RelayError",
    "RPCError",
    "TransientScanError",
    "CycleResult",
    "DecodedEvent",
    "EventLog",
    "WebhookPayload",
]
