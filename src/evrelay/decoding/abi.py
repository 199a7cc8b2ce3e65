"""ABI loading: JSON interface description → `EventDefinition`."""

from __future__ import annotations

import json
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any, Literal

from eth_utils.abi import event_signature_to_log_topic
from pydantic import BaseModel, ValidationError

from evrelay.core.errors import ChainConnectionError
from evrelay.decoding.specs import EventDefinition, ParamSpec


class AbiInput(BaseModel):
    indexed: bool = False
    internalType: str | None = None
    name: str = ""
    type: str
    components: list[AbiInput] | None = None


AbiInput.model_rebuild()


class AbiEvent(BaseModel):
    anonymous: bool = False
    inputs: Sequence[AbiInput]
    name: str
    type: Literal["event"]


def canonical_type(event_input: AbiInput) -> str:
    """Expand `tuple` types into their `(t1,t2,...)` canonical form."""
    if event_input.type.startswith("tuple"):
        inner = ",".join(canonical_type(c) for c in event_input.components or [])
        return f"({inner}){event_input.type[len('tuple'):]}"
    return event_input.type


def get_event_signature(event: AbiEvent) -> str:
    return f"{event.name}({','.join(canonical_type(event_input) for event_input in event.inputs)})"


def get_event_topic0(event: AbiEvent) -> str:
    return "0x" + event_signature_to_log_topic(get_event_signature(event)).hex()


def _param_specs(inputs: Iterable[AbiInput], *, indexed: bool) -> tuple[ParamSpec, ...]:
    return tuple(
        ParamSpec(event_input.name or f"arg{idx}", canonical_type(event_input))
        for idx, event_input in enumerate(inputs)
        if event_input.indexed is indexed
    )


def get_event_definition(event: AbiEvent) -> EventDefinition:
    return EventDefinition(
        name=event.name,
        topic0=get_event_topic0(event),
        indexed=_param_specs(event.inputs, indexed=True),
        data=_param_specs(event.inputs, indexed=False),
    )


AbiJson = Iterable[dict[str, Any]]
AbiSpec = AbiJson | Path


def _load_abi(abi: AbiSpec) -> AbiJson:
    if isinstance(abi, Path):
        doc = json.loads(abi.read_text())
    else:
        doc = abi
    # Hardhat/Foundry artifacts wrap the ABI under "abi"
    if isinstance(doc, dict):
        doc = doc.get("abi", [])
    return doc


def get_events_from_abi(abi: AbiSpec) -> dict[str, list[AbiEvent]]:
    """Group the ABI events by name; overloads share one entry."""
    events: dict[str, list[AbiEvent]] = {}
    for entry in _load_abi(abi):
        if entry.get("type") == "event":
            event = AbiEvent.model_validate(entry)
            events.setdefault(event.name, []).append(event)
    return events


def load_event_definition(abi: AbiSpec, event_name: str) -> EventDefinition:
    """Load the ABI and return the definition of `event_name`.

    Any failure is a startup error: missing or unreadable file, invalid JSON,
    malformed event entries, unknown, overloaded or anonymous event.
    """
    try:
        events = get_events_from_abi(abi)
    except (OSError, ValueError, ValidationError, KeyError, TypeError, AttributeError) as e:
        raise ChainConnectionError(f"error reading abi: {e}") from e

    overloads = events.get(event_name)
    if not overloads:
        known = ", ".join(sorted(events)) or "none"
        raise ChainConnectionError(f"event {event_name!r} not found in abi (available: {known})")
    if len(overloads) > 1:
        signatures = ", ".join(get_event_signature(e) for e in overloads)
        raise ChainConnectionError(f"event {event_name!r} is ambiguous, abi has overloads: {signatures}")
    event = overloads[0]
    if event.anonymous:
        raise ChainConnectionError(f"event {event_name!r} is anonymous and has no topic0")
    try:
        return get_event_definition(event)
    except ValueError as e:
        raise ChainConnectionError(f"error reading abi: {e}") from e
