"""Batching utilities for the Solana explorer.

Bounded fan-out of coroutines over a single event loop.
"""

import asyncio
from typing import Awaitable, List, TypeVar

# Type variable for task results
R = TypeVar("R")


async def gather_with_concurrency(
    concurrency_limit: int,
    *tasks: Awaitable[R]
) -> List[R]:
    """
    Execute awaitables with a concurrency limit.

    At most ``concurrency_limit`` awaitables run at any one time. Results are
    returned in submission order once all of them have completed.

    Args:
        concurrency_limit: Maximum number of tasks to run concurrently
        tasks: Awaitables to execute

    Returns:
        List of results from the tasks
    """
    semaphore = asyncio.Semaphore(concurrency_limit)

    async def _wrapped_task(task: Awaitable[R]) -> R:
        async with semaphore:
            return await task

    return await asyncio.gather(
        *[_wrapped_task(task) for task in tasks],
        return_exceptions=False
    )
