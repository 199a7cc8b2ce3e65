"""Lightweight JSON-RPC client for Ethereum-compatible nodes.

This module provides:
- `RPC`: an async client with sane timeouts
- Helper utilities to format block numbers

It returns `EventLog` records ready for downstream decoding. Every failure
(transport, HTTP status, JSON-RPC error object, malformed result) is raised as
`RPCError` so the scheduler can treat it as transient.
"""

from __future__ import annotations

from typing import Any

import httpx

from evrelay.core.errors import ChainConnectionError, RPCError
from evrelay.core.models import EventLog


def to_hex_block(x: int) -> str:
    """Return a 0x-prefixed hex block number."""
    return hex(x)


def _hex_int(v: Any) -> int:
    if isinstance(v, int):
        return v
    return int(v, 16)


def to_event_log(rl: dict[str, Any]) -> EventLog:
    """Map one raw `eth_getLogs` entry into an `EventLog`."""
    topics = tuple((t if isinstance(t, str) else t.decode()).lower() for t in rl.get("topics", []))
    return EventLog(
        address=rl["address"].lower(),
        topics=topics,
        data_hex=str(rl.get("data") or "0x"),
        block_number=_hex_int(rl["blockNumber"]),
        tx_hash=(rl.get("transactionHash") or "").lower(),
        log_index=_hex_int(rl["logIndex"]),
    )


class RPC:
    """Minimal async RPC client.

    Parameters
    ----------
    url : str
        RPC endpoint URL.
    timeout_s : int
        Per-operation timeout in seconds (connect/read/write).
    transport : httpx.AsyncBaseTransport | None
        Optional transport override (tests use `httpx.MockTransport`).
    """

    def __init__(
        self,
        url: str,
        *,
        timeout_s: int = 20,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.url = url
        self._id = 0
        self.client = httpx.AsyncClient(
            timeout=httpx.Timeout(
                connect=timeout_s,
                read=timeout_s,
                write=timeout_s,
                pool=max(30, timeout_s * 3),
            ),
            transport=transport,
        )

    async def _call(self, method: str, params: list[Any]) -> Any:
        self._id += 1
        payload = {"jsonrpc": "2.0", "id": self._id, "method": method, "params": params}
        try:
            r = await self.client.post(self.url, json=payload)
            r.raise_for_status()
            data = r.json()
        except (httpx.HTTPError, ValueError) as e:
            raise RPCError(f"{method} failed: {e}") from e
        if not isinstance(data, dict):
            raise RPCError(f"{method} failed: unexpected response {data!r:.80}")
        if "error" in data:
            e = data["error"]
            if isinstance(e, dict):
                raise RPCError(f"RPC error: {e.get('code')} {e.get('message')}")
            raise RPCError(f"RPC error: {e}")
        if "result" not in data:
            raise RPCError(f"{method} failed: response has no result")
        return data["result"]

    async def chain_id(self) -> int:
        """Return the chain id; used as a connectivity check at startup."""
        try:
            return _hex_int(await self._call("eth_chainId", []))
        except (RPCError, ValueError, TypeError) as e:
            raise ChainConnectionError(f"error dialing ethereum client at {self.url}: {e}") from e

    async def latest_block(self) -> int:
        """Return the latest block number as an int."""
        result = await self._call("eth_blockNumber", [])
        try:
            return _hex_int(result)
        except (ValueError, TypeError) as e:
            raise RPCError(f"eth_blockNumber returned {result!r}") from e

    async def get_logs(
        self,
        *,
        address: str,
        from_block: int,
        to_block: int,
    ) -> list[EventLog]:
        """Fetch all logs emitted by `address` within the inclusive block range."""
        params = [
            {
                "address": address.lower(),
                "fromBlock": to_hex_block(from_block),
                "toBlock": to_hex_block(to_block),
            }
        ]
        result = await self._call("eth_getLogs", params)
        try:
            return [to_event_log(rl) for rl in result or []]
        except (KeyError, ValueError, TypeError, AttributeError) as e:
            raise RPCError(f"eth_getLogs returned a malformed log: {e}") from e

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self.client.aclose()
