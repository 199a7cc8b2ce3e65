"""Event decoder.

Translates a raw `EventLog` into a `DecodedEvent` for the watched
`EventDefinition`:

- topic0 mismatch (or no topics) → the log is skipped (`None`)
- topics[1:] are decoded positionally against the indexed parameters
- the data payload is decoded as one ABI tuple of the non-indexed parameters

Any structural problem with a matching log raises `DecodeError`.
"""

from __future__ import annotations

from typing import Any

from eth_abi import decode as abi_decode
from eth_abi.exceptions import DecodingError, ParseError

from evrelay.core.errors import DecodeError
from evrelay.core.models import DecodedEvent, EventLog
from evrelay.decoding.specs import EventDefinition
from evrelay.decoding.utils import hex_to_bytes, is_hashed_topic_type, to_jsonable

_ABI_ERRORS = (DecodingError, ParseError, ValueError, TypeError, OverflowError)


def _decode_topics(definition: EventDefinition, topics: tuple[str, ...]) -> dict[str, Any]:
    if len(topics) != len(definition.indexed):
        raise DecodeError(
            f"{definition.name}: expected {len(definition.indexed)} indexed topics, got {len(topics)}"
        )

    out: dict[str, Any] = {}
    for param, topic_hex in zip(definition.indexed, topics):
        raw = hex_to_bytes(topic_hex)
        if len(raw) != 32:
            raise DecodeError(f"{definition.name}: topic for {param.name!r} is {len(raw)} bytes, expected 32")
        if is_hashed_topic_type(param.type):
            out[param.name] = "0x" + raw.hex()
            continue
        try:
            (value,) = abi_decode([param.type], raw)
        except _ABI_ERRORS as e:
            raise DecodeError(f"{definition.name}: cannot decode topic {param.name!r} as {param.type}: {e}") from e
        out[param.name] = to_jsonable(value)
    return out


def _decode_data(definition: EventDefinition, data: bytes) -> dict[str, Any]:
    if not definition.data:
        return {}
    try:
        values = abi_decode(definition.data_types, data)
    except _ABI_ERRORS as e:
        raise DecodeError(f"{definition.name}: cannot decode data ({len(data)} bytes): {e}") from e
    return {param.name: to_jsonable(v) for param, v in zip(definition.data, values)}


def decode_event(definition: EventDefinition, log: EventLog) -> DecodedEvent | None:
    """Decode `log` as `definition`, or return None if it is a different event."""
    if not log.topics or not definition.matches(log.topics[0]):
        return None

    values = _decode_topics(definition, log.topics[1:])
    values.update(_decode_data(definition, hex_to_bytes(log.data_hex)))

    return DecodedEvent(
        name=definition.name,
        tx_hash=log.tx_hash.lower(),
        log_index=log.log_index,
        block_number=log.block_number,
        values=values,
    )
