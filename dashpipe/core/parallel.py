"""Async parallel execution for running many fetches at once."""

import asyncio
from typing import Any, Awaitable, Callable, Iterable, TypeVar

from dashpipe.core.exceptions import DashPipeError

T = TypeVar("T")
R = TypeVar("R")


class AsyncParallelExecutor:
    """Async executor for bounded concurrent work using asyncio.

    Runs a coroutine function over inputs concurrently while maintaining
    order. Uses asyncio.Semaphore to limit concurrency and asyncio.gather()
    to collect results.
    """

    def __init__(self, concurrency: int):
        """Initialize async parallel executor.

        Args:
            concurrency: Maximum number of coroutines running at once
        """
        if concurrency < 1:
            raise ValueError("concurrency must be at least 1")
        self.concurrency = concurrency

    async def map(
        self,
        func: Callable[[T], Awaitable[R]],
        items: Iterable[T],
    ) -> list[R]:
        """Apply ``func`` to every item concurrently.

        Args:
            func: Coroutine function called once per item
            items: Inputs; results come back in the same order

        Returns:
            List of results in input order

        Raises:
            DashPipeError: If any call fails (the first failure by index)
        """
        item_list = list(items)

        if not item_list:
            return []

        # Semaphore is bound to the running loop, so create it per call
        semaphore = asyncio.Semaphore(self.concurrency)

        async def run(item: T) -> R:
            async with semaphore:
                return await func(item)

        results: list[Any] = await asyncio.gather(
            *(run(item) for item in item_list), return_exceptions=True
        )

        for index, result in enumerate(results):
            if isinstance(result, Exception):
                raise DashPipeError(
                    f"Task {index} failed: {result}",
                    context={"task_index": index, "concurrency": self.concurrency},
                ) from result

        return results
