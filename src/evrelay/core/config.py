from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

import httpx

from evrelay.core.errors import ConfigError

_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")


@dataclass(frozen=True)
class RelayConfig:
    """Configuration for the relay process.

    Built once at startup and passed explicitly to the scheduler, the decoder
    and the dispatcher.
    """

    event_name: str
    rpc_url: str
    address: str
    webhook_url: str
    abi_path: Path = Path("abi.json")
    checkpoint_path: Path = Path("block.txt")
    poll_interval_s: float = 10
    chunk_size: int = 100
    start_block: int = 0
    liveness_addr: str = ":9000"
    webhook_timeout_s: float = 30
    rpc_timeout_s: int = 20

    def validate(self) -> RelayConfig:
        """Raise `ConfigError` on the first invalid setting, else return self."""
        for name in ("event_name", "rpc_url", "address", "webhook_url"):
            if not getattr(self, name):
                raise ConfigError(f"please specify {name.replace('_', ' ')}")
        if not _ADDRESS_RE.match(self.address):
            raise ConfigError(f"invalid contract address: {self.address!r}")
        _check_http_url("webhook url", self.webhook_url)
        if self.poll_interval_s <= 0:
            raise ConfigError("poll interval must be positive")
        if self.chunk_size <= 0:
            raise ConfigError("chunk size must be positive")
        if self.start_block < 0:
            raise ConfigError("starting block must be non-negative")
        if self.webhook_timeout_s <= 0:
            raise ConfigError("webhook timeout must be positive")
        parse_bind_addr(self.liveness_addr)
        return self


def _check_http_url(label: str, url: str) -> None:
    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL as e:
        raise ConfigError(f"invalid {label} {url!r}: {e}") from e
    if parsed.scheme not in ("http", "https") or not parsed.host:
        raise ConfigError(f"invalid {label} {url!r}: expected an http(s) url with a host")


def parse_bind_addr(addr: str) -> tuple[str, int]:
    """Split a `host:port` (or `:port`) bind address; empty host means all interfaces."""
    host, sep, port = addr.rpartition(":")
    if not sep or not port.isdigit():
        raise ConfigError(f"invalid liveness address: {addr!r}")
    return host or "0.0.0.0", int(port)
