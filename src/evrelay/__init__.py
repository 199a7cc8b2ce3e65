from __future__ import annotations

from .core.config import RelayConfig
from .core.models import DecodedEvent, EventLog, WebhookPayload
from .decoding.abi import load_event_definition
from .decoding.decoder import decode_event
from .decoding.specs import EventDefinition, ParamSpec
from .orchestration.scheduler import ScanConfig, ScanScheduler
from .storage.checkpoint import CheckpointStore

__all__ = [
    "RelayConfig",
    "DecodedEvent",
    "EventLog",
    "WebhookPayload",
    "load_event_definition",
    "decode_event",
    "EventDefinition",
    "ParamSpec",
    "ScanConfig",
    "ScanScheduler",
    "CheckpointStore",
]
