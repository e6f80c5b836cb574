# tests/test_concurrency.py
import asyncio
from collections import Counter

import pytest

from services.enrichment.concurrency import map_with_concurrency


def test_five_items_limit_three_aligned_and_exactly_once():
    items = ["a", "b", "c", "d", "e"]
    # earlier items sleep longer, so completion order is roughly reversed
    delays = [0.05, 0.04, 0.03, 0.02, 0.01]
    claims = Counter()
    completed = []
    in_flight = 0
    peak = 0

    async def mapper(item, idx):
        nonlocal in_flight, peak
        claims[idx] += 1
        in_flight += 1
        peak = max(peak, in_flight)
        await asyncio.sleep(delays[idx])
        in_flight -= 1
        completed.append(idx)
        return item.upper()

    results = asyncio.run(map_with_concurrency(items, 3, mapper))

    assert results == ["A", "B", "C", "D", "E"]
    assert claims == Counter({0: 1, 1: 1, 2: 1, 3: 1, 4: 1})
    assert peak == 3
    assert completed != sorted(completed)


def test_limit_larger_than_items_uses_one_worker_per_item():
    peak = 0
    in_flight = 0

    async def mapper(item, idx):
        nonlocal in_flight, peak
        in_flight += 1
        peak = max(peak, in_flight)
        await asyncio.sleep(0.01)
        in_flight -= 1
        return item * 2

    assert asyncio.run(map_with_concurrency([1, 2], 10, mapper)) == [2, 4]
    assert peak == 2


def test_empty_input_returns_empty_list():
    async def mapper(item, idx):  # pragma: no cover - never called
        raise AssertionError("mapper must not run")

    assert asyncio.run(map_with_concurrency([], 3, mapper)) == []


def test_invalid_limit_raises():
    async def mapper(item, idx):  # pragma: no cover - never called
        return item

    with pytest.raises(ValueError):
        asyncio.run(map_with_concurrency([1], 0, mapper))


def test_mapper_exception_propagates_after_other_items_finish():
    done = []

    async def mapper(item, idx):
        if idx == 1:
            raise RuntimeError("boom")
        await asyncio.sleep(0.01)
        done.append(idx)
        return item

    with pytest.raises(RuntimeError, match="boom"):
        asyncio.run(map_with_concurrency([0, 1, 2, 3, 4], 3, mapper))

    # the failing worker stops; the other two drain the rest
    assert sorted(done) == [0, 2, 3, 4]
