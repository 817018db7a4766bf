"""Single-producer / single-consumer async queue.

Bridges push-style sources (SSE callbacks, producer tasks) to ``async for``.
The queue owns its pending items, at most one waiting consumer and a closed
flag. Closing wakes a waiting consumer with a terminal signal.
"""

from __future__ import annotations

import asyncio
import inspect
from collections import deque
from dataclasses import dataclass
from typing import Any, Awaitable, Deque, Generic, Optional, TypeVar, Union

T = TypeVar("T")


class QueueClosedError(RuntimeError):
    """Raised when pushing to an ``EventStream`` that was already closed."""


@dataclass(frozen=True)
class StreamSignal(Generic[T]):
    value: Optional[T] = None
    done: bool = False


class EventStream(Generic[T]):
    def __init__(self) -> None:
        self._queue: Deque[T] = deque()
        self._waiter: Optional[asyncio.Future] = None
        self._closed = False
        self._error: Optional[BaseException] = None

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def pending(self) -> int:
        return len(self._queue)

    def push(self, item: T) -> None:
        if self._closed:
            raise QueueClosedError("Cannot push to a closed stream")
        waiter = self._take_waiter()
        if waiter is not None:
            waiter.set_result(StreamSignal(value=item))
        else:
            self._queue.append(item)

    def close(self, value: Any = None) -> None:
        """Stop accepting items. Already queued items can still be consumed."""
        self._closed = True
        waiter = self._take_waiter()
        if waiter is not None:
            waiter.set_result(StreamSignal(value=value, done=True))

    def fail(self, error: BaseException) -> None:
        """Close with an error raised to the consumer once the queue is drained."""
        self._closed = True
        self._error = error
        waiter = self._take_waiter()
        if waiter is not None:
            waiter.set_exception(error)

    async def next(self) -> StreamSignal[T]:
        if self._queue:
            return StreamSignal(value=self._queue.popleft())
        if self._closed:
            if self._error is not None:
                raise self._error
            return StreamSignal(done=True)
        if self._waiter is not None and not self._waiter.done():
            raise RuntimeError("EventStream supports a single waiting consumer")

        waiter = asyncio.get_running_loop().create_future()
        self._waiter = waiter
        try:
            return await waiter
        finally:
            if self._waiter is waiter:
                self._waiter = None

    async def cancel(self, value: Union[Any, Awaitable[Any]] = None) -> StreamSignal[T]:
        """Consumer-side early termination; discards everything still queued."""
        self._closed = True
        self._queue.clear()
        if inspect.isawaitable(value):
            value = await value
        signal: StreamSignal[T] = StreamSignal(value=value, done=True)
        waiter = self._take_waiter()
        if waiter is not None:
            waiter.set_result(signal)
        return signal

    async def aclose(self) -> None:
        await self.cancel()

    def _take_waiter(self) -> Optional[asyncio.Future]:
        waiter = self._waiter
        self._waiter = None
        if waiter is None or waiter.done():
            return None
        return waiter

    def __aiter__(self) -> "EventStream[T]":
        return self

    async def __anext__(self) -> T:
        signal = await self.next()
        if signal.done:
            raise StopAsyncIteration(signal.value)
        return signal.value  # type: ignore[return-value]


__all__ = ["EventStream", "StreamSignal", "QueueClosedError"]
