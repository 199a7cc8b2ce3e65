import json

import httpx
import pytest
from conftest import CONTRACT, TRANSFER_T0

from evrelay.clients.rpc import RPC, to_event_log
from evrelay.core.errors import ChainConnectionError, RPCError

RAW_LOG = {
    "address": "0x1F9840a85d5aF5bf1D1762F925BDADdC4201F984",
    "topics": [TRANSFER_T0.upper().replace("0X", "0x")],
    "data": "0x",
    "blockNumber": "0x10",
    "transactionHash": "0xABCDEF",
    "logIndex": "0x2",
    "removed": False,
}


def make_rpc(handler) -> RPC:
    return RPC("http://node.test", transport=httpx.MockTransport(handler))


def json_rpc_handler(results: dict, seen: list | None = None):
    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        if seen is not None:
            seen.append(body)
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "result": results[body["method"]]})

    return handler


def test_to_event_log_normalizes() -> None:
    log = to_event_log(RAW_LOG)

    assert log.address == CONTRACT
    assert log.topics == (TRANSFER_T0,)
    assert log.block_number == 16
    assert log.log_index == 2
    assert log.tx_hash == "0xabcdef"


@pytest.mark.asyncio
async def test_latest_block() -> None:
    rpc = make_rpc(json_rpc_handler({"eth_blockNumber": "0x1b4"}))
    try:
        assert await rpc.latest_block() == 436
    finally:
        await rpc.aclose()


@pytest.mark.asyncio
async def test_get_logs_filters_by_address_only() -> None:
    seen: list = []
    rpc = make_rpc(json_rpc_handler({"eth_getLogs": [RAW_LOG]}, seen))
    try:
        logs = await rpc.get_logs(address=CONTRACT.upper().replace("0X", "0x"), from_block=100, to_block=200)
    finally:
        await rpc.aclose()

    assert len(logs) == 1
    assert seen[0]["method"] == "eth_getLogs"
    assert seen[0]["params"] == [{"address": CONTRACT, "fromBlock": "0x64", "toBlock": "0xc8"}]


@pytest.mark.asyncio
async def test_json_rpc_error_is_transient() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "error": {"code": -32005, "message": "limit"}})

    rpc = make_rpc(handler)
    try:
        with pytest.raises(RPCError, match="-32005 limit"):
            await rpc.get_logs(address=CONTRACT, from_block=0, to_block=1)
    finally:
        await rpc.aclose()


@pytest.mark.asyncio
async def test_http_error_is_transient() -> None:
    rpc = make_rpc(lambda request: httpx.Response(502, text="bad gateway"))
    try:
        with pytest.raises(RPCError):
            await rpc.latest_block()
    finally:
        await rpc.aclose()


@pytest.mark.asyncio
async def test_transport_error_is_transient() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    rpc = make_rpc(handler)
    try:
        with pytest.raises(RPCError):
            await rpc.latest_block()
    finally:
        await rpc.aclose()


@pytest.mark.asyncio
async def test_malformed_log_is_transient() -> None:
    rpc = make_rpc(json_rpc_handler({"eth_getLogs": [{"topics": []}]}))
    try:
        with pytest.raises(RPCError, match="malformed"):
            await rpc.get_logs(address=CONTRACT, from_block=0, to_block=1)
    finally:
        await rpc.aclose()


@pytest.mark.asyncio
async def test_chain_id_failure_is_fatal() -> None:
    rpc = make_rpc(lambda request: httpx.Response(500))
    try:
        with pytest.raises(ChainConnectionError):
            await rpc.chain_id()
    finally:
        await rpc.aclose()
