from __future__ import annotations

import inspect
from typing import AsyncIterable, AsyncIterator, Awaitable, Callable, TypeVar, Union

T = TypeVar("T")
R = TypeVar("R")


async def async_map(source: AsyncIterable[T], callback: Callable[[T, int], R]) -> AsyncIterator[R]:
    index = 0
    async for value in source:
        yield callback(value, index)
        index += 1


async def one_async_iterator(value: T) -> AsyncIterator[T]:
    yield value


async def transform_async_iterator(
    source: AsyncIterable[T],
    transform: Callable[[T], Union[R, Awaitable[R]]],
) -> AsyncIterator[R]:
    """Apply ``transform`` to every item; awaitable results are awaited."""
    async for value in source:
        result = transform(value)
        if inspect.isawaitable(result):
            result = await result
        yield result  # type: ignore[misc]


__all__ = ["async_map", "one_async_iterator", "transform_async_iterator"]
