import asyncio
from decimal import Decimal

import pytest

from evrelay.decoding.utils import is_hashed_topic_type, to_jsonable
from evrelay.orchestration.utils import IntervalTicker, compute_range


@pytest.mark.parametrize(
    ("checkpoint", "head", "chunk", "expected"),
    [
        (0, 1_000, 100, (0, 100)),
        (950, 1_000, 100, (950, 1_000)),
        (1_000, 1_000, 100, (1_000, 1_000)),
        (5, 5_000, 1, (5, 6)),
        (1_001, 1_000, 100, None),
    ],
)
def test_compute_range(checkpoint: int, head: int, chunk: int, expected: tuple[int, int] | None) -> None:
    assert compute_range(checkpoint, head, chunk) == expected


def test_compute_range_bounds() -> None:
    for chunk in (1, 7, 100):
        for checkpoint in range(0, 50, 3):
            for head in range(checkpoint, checkpoint + 250, 11):
                start, end = compute_range(checkpoint, head, chunk)
                assert start == checkpoint
                assert end - start <= chunk
                assert end <= head


def test_compute_range_rejects_bad_chunk() -> None:
    with pytest.raises(ValueError):
        compute_range(0, 10, 0)


@pytest.mark.parametrize(
    ("typ", "hashed"),
    [
        ("address", False),
        ("uint256", False),
        ("bytes32", False),
        ("bool", False),
        ("string", True),
        ("bytes", True),
        ("uint256[]", True),
        ("address[3]", True),
        ("(address,uint256)", True),
    ],
)
def test_is_hashed_topic_type(typ: str, hashed: bool) -> None:
    assert is_hashed_topic_type(typ) is hashed


def test_to_jsonable() -> None:
    assert to_jsonable((b"\x00\x01", (1, "0xab"), True)) == ["0x0001", [1, "0xab"], True]
    assert to_jsonable([Decimal("-0.25"), Decimal("3")]) == ["-0.25", "3"]


@pytest.mark.asyncio
async def test_interval_ticker_ticks_until_stopped() -> None:
    ticker = IntervalTicker(0.01)
    seen: list[int] = []

    async for n in ticker:
        seen.append(n)
        if n == 3:
            ticker.stop()

    assert seen == [1, 2, 3]


@pytest.mark.asyncio
async def test_interval_ticker_stop_before_first_tick() -> None:
    stop = asyncio.Event()
    ticker = IntervalTicker(60, stop)
    seen: list[int] = []

    async def consume() -> None:
        async for n in ticker:
            seen.append(n)

    task = asyncio.create_task(consume())
    await asyncio.sleep(0)
    stop.set()
    await asyncio.wait_for(task, timeout=1)

    assert seen == []


def test_interval_ticker_rejects_bad_interval() -> None:
    with pytest.raises(ValueError):
        IntervalTicker(0)
