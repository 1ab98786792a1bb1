"""Async utilities for bridging blocking HTTP calls to async callers."""

import asyncio
from typing import Any, Callable, TypeVar

T = TypeVar("T")


async def run_sync(
    func: Callable[..., T], *args: Any, **kwargs: Any
) -> T:
    """Run a synchronous function in a thread pool without blocking the event loop.

    The awaiting task suspends only for the duration of *func*; store
    mutations never happen inside it.

    Args:
        func: Synchronous function to call
        *args: Positional arguments for func
        **kwargs: Keyword arguments for func

    Returns:
        Result of func(*args, **kwargs)

    Example:
        client = ApiClient(config)
        document = await run_sync(client.post_document, "Title", "", "Ann")
    """
    return await asyncio.to_thread(func, *args, **kwargs)
