# services/enrichment/concurrency.py
import asyncio
import itertools
from typing import Awaitable, Callable, List, Sequence, TypeVar

from loguru import logger

T = TypeVar("T")
R = TypeVar("R")


async def map_with_concurrency(
    items: Sequence[T],
    limit: int,
    mapper: Callable[[T, int], Awaitable[R]],
) -> List[R]:
    """
    Apply ``mapper(item, index)`` to every item with at most ``limit`` calls
    in flight, returning results aligned with ``items``.

    ``min(limit, len(items))`` workers share one claim cursor; each worker
    takes the next unclaimed index, awaits the mapper, and repeats until the
    cursor runs past the end.  An exception raised by the mapper is not
    swallowed: it propagates once every worker has stopped.
    """
    if limit < 1:
        raise ValueError(f"limit must be >= 1, got {limit}")

    total = len(items)
    results: List[R] = [None] * total  # type: ignore[list-item]
    cursor = itertools.count()

    async def worker(worker_id: int) -> None:
        while True:
            # claim and bounds-check happen with no await in between
            idx = next(cursor)
            if idx >= total:
                return
            logger.debug(f"Worker {worker_id} claimed item {idx}")
            results[idx] = await mapper(items[idx], idx)

    workers = min(limit, total)
    if workers:
        outcomes = await asyncio.gather(
            *(worker(n) for n in range(workers)), return_exceptions=True
        )
        for outcome in outcomes:
            if isinstance(outcome, BaseException):
                raise outcome
    return results
