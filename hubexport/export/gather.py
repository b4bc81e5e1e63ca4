"""Ordered parallel map over coroutines."""

import asyncio
from typing import Awaitable, Callable, Iterable, List, TypeVar

T = TypeVar("T")
R = TypeVar("R")


async def ordered_gather(items: Iterable[T], fetch: Callable[[T], Awaitable[R]]) -> List[R]:
    """Run ``fetch`` for every item concurrently; results line up with ``items`` by position.

    The first failure is re-raised and every request still in flight is
    cancelled, so no partial result ever leaves this function.
    """
    tasks = [asyncio.ensure_future(fetch(item)) for item in items]
    if not tasks:
        return []
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            if not task.done():
                task.cancel()
        # Let cancellations settle before the error propagates
        await asyncio.gather(*tasks, return_exceptions=True)
        raise
