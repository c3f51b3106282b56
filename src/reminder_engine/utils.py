"""Utility functions for the reminder engine."""

import functools
from collections.abc import Callable
from typing import Any, TypeVar

import anyio

T = TypeVar("T")

_limiter: anyio.CapacityLimiter | None = None


def _get_limiter() -> anyio.CapacityLimiter:
    """Get the capacity limiter, creating if needed."""
    global _limiter
    if _limiter is None:
        _limiter = anyio.CapacityLimiter(1)
    return _limiter


async def run_serialized(fn: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    """Run a blocking call in a worker thread, one call at a time.

    Store access is serialized because EventKit's thread-safety is
    undocumented.
    """
    async with _get_limiter():
        return await anyio.to_thread.run_sync(functools.partial(fn, *args, **kwargs))


def paginate(items: list[T], offset: int = 0, limit: int | None = None) -> list[T]:
    """Apply simple offset/limit pagination; negative values count as 0."""
    if offset > 0:
        items = items[offset:]
    if limit is not None:
        items = items[: max(limit, 0)]
    return items
