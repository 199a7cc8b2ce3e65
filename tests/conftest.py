from collections.abc import AsyncIterator
from unittest.mock import AsyncMock

import pytest
from eth_abi import encode

from evrelay.core.errors import DeliveryError
from evrelay.core.models import DecodedEvent, EventLog
from evrelay.decoding.abi import load_event_definition
from evrelay.decoding.specs import EventDefinition

TRANSFER_T0 = "0xddf252ad1be2c89b69c2b068fc378daa952ba7f163c4a11628f55a4df523b3ef"
CONTRACT = "0x1f9840a85d5af5bf1d1762f925bdaddc4201f984"

TRANSFER_ABI = [
    {
        "anonymous": False,
        "inputs": [
            {"indexed": True, "internalType": "address", "name": "from", "type": "address"},
            {"indexed": True, "internalType": "address", "name": "to", "type": "address"},
            {"indexed": False, "internalType": "uint256", "name": "value", "type": "uint256"},
        ],
        "name": "Transfer",
        "type": "event",
    },
    {
        "inputs": [{"internalType": "address", "name": "owner", "type": "address"}],
        "name": "balanceOf",
        "outputs": [{"internalType": "uint256", "name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    },
]


def address_topic(addr: str) -> str:
    return "0x" + "0" * 24 + addr.lower()[2:]


def make_transfer_log(
    frm: str,
    to: str,
    value: int,
    *,
    block: int = 1,
    log_index: int = 0,
    tx_hash: str = "0x" + "ab" * 32,
) -> EventLog:
    return EventLog(
        address=CONTRACT,
        topics=(TRANSFER_T0, address_topic(frm), address_topic(to)),
        data_hex="0x" + encode(["uint256"], [value]).hex(),
        block_number=block,
        tx_hash=tx_hash,
        log_index=log_index,
    )


class FakeTicker:
    """Yields a fixed number of ticks without sleeping."""

    def __init__(self, ticks: int) -> None:
        self.ticks = ticks

    async def __aiter__(self) -> AsyncIterator[int]:
        for i in range(self.ticks):
            yield i + 1


class RecordingSink:
    """Webhook sink recording deliveries; fails on the given 1-based call numbers."""

    def __init__(self, fail_on: set[int] | None = None) -> None:
        self.fail_on = fail_on or set()
        self.calls = 0
        self.delivered: list[DecodedEvent] = []

    async def dispatch(self, event: DecodedEvent) -> None:
        self.calls += 1
        if self.calls in self.fail_on:
            raise DeliveryError("webhook answered 500", status_code=500)
        self.delivered.append(event)


@pytest.fixture
def transfer_definition() -> EventDefinition:
    return load_event_definition(TRANSFER_ABI, "Transfer")


@pytest.fixture
def mock_chain():
    chain = AsyncMock()
    chain.get_logs = AsyncMock(return_value=[])
    chain.latest_block = AsyncMock(return_value=1_000)
    return chain
