"""Event definition primitives.

- `ParamSpec`: one event parameter (name + canonical ABI type)
- `EventDefinition`: the watched event (name, topic0, indexed and data params)
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ParamSpec:
    """One event parameter in declaration order."""

    name: str
    type: str  # canonical ABI type, e.g. "address", "uint256", "(address,uint8)[]"


@dataclass(frozen=True)
class EventDefinition:
    """The event being watched, loaded once from the ABI."""

    name: str
    topic0: str  # lowercased 0x-prefixed keccak of the canonical signature
    indexed: tuple[ParamSpec, ...]
    data: tuple[ParamSpec, ...]

    def __post_init__(self) -> None:
        names = [p.name for p in self.indexed + self.data if p.name]
        if len(names) != len(set(names)):
            raise ValueError(f"{self.name} declares duplicate parameter names")

    @property
    def data_types(self) -> list[str]:
        return [p.type for p in self.data]

    def matches(self, topic0: str) -> bool:
        return topic0.lower() == self.topic0
