"""Event decoding against an ABI event definition.

This package provides:
- Event definition primitives (EventDefinition, ParamSpec)
- ABI loader building an EventDefinition from a JSON interface description
- Decoder that turns raw logs into DecodedEvent objects
"""

from evrelay.decoding.abi import load_event_definition
from evrelay.decoding.decoder import decode_event
from evrelay.decoding.specs import EventDefinition, ParamSpec

__all__ = [
    "load_event_definition",
    "decode_event",
    "EventDefinition",
    "ParamSpec",
]
