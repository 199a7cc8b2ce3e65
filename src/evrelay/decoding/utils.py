"""Decoding utilities: hex parsing, topic type rules, and JSON-safe values."""

from __future__ import annotations

import re
from decimal import Decimal
from typing import Any

from evrelay.core.errors import DecodeError

_ARRAY_SUFFIX = re.compile(r"\[\d*\]$")


def hex_to_bytes(h: str) -> bytes:
    """Parse a (possibly 0x-prefixed) hex string into bytes."""
    body = h[2:] if h[:2].lower() == "0x" else h
    try:
        return bytes.fromhex(body)
    except ValueError as e:
        raise DecodeError(f"invalid hex {h[:18]!r}: {e}") from e


def is_hashed_topic_type(typ: str) -> bool:
    """Indexed reference types (strings, bytes, arrays, tuples) are stored as their keccak hash."""
    return typ in ("string", "bytes") or typ.startswith("(") or bool(_ARRAY_SUFFIX.search(typ))


def to_jsonable(value: Any) -> Any:
    """Convert an eth_abi decoded value into a JSON-serializable one."""
    if isinstance(value, Decimal):
        return str(value)  # (u)fixedMxN, kept exact
    if isinstance(value, (bytes, bytearray)):
        return "0x" + bytes(value).hex()
    if isinstance(value, (tuple, list)):
        return [to_jsonable(v) for v in value]
    return value
