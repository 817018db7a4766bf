"""
EventStream tests: FIFO delivery, direct hand-off to a waiting consumer,
close / cancel / fail terminal signals.
"""

import asyncio
from contextlib import suppress

import pytest

from llmcore.streaming import EventStream, QueueClosedError, StreamSignal


def _run(coro):
    return asyncio.run(asyncio.wait_for(coro, timeout=2))


def test_items_pushed_before_consumer_are_fifo_then_done_after_close():
    async def scenario():
        stream = EventStream()
        for item in ("a", "b", "c"):
            stream.push(item)
        received = [(await stream.next()).value for _ in range(3)]
        stream.close()
        final = await stream.next()
        return received, final

    received, final = _run(scenario())
    assert received == ["a", "b", "c"]
    assert final.done is True


def test_waiting_consumer_receives_push_directly():
    async def scenario():
        stream = EventStream()
        consumer = asyncio.create_task(stream.next())
        await asyncio.sleep(0)
        stream.push("x")
        signal = await consumer
        return signal, stream.pending

    signal, pending = _run(scenario())
    assert signal == StreamSignal(value="x")
    assert pending == 0


def test_close_wakes_waiting_consumer_with_final_value():
    async def scenario():
        stream = EventStream()
        consumer = asyncio.create_task(stream.next())
        await asyncio.sleep(0)
        stream.close("final")
        return await consumer

    signal = _run(scenario())
    assert signal.done is True
    assert signal.value == "final"


def test_push_after_close_raises():
    stream = EventStream()
    stream.close()
    with pytest.raises(QueueClosedError):
        stream.push("late")


def test_queued_items_survive_close():
    async def scenario():
        stream = EventStream()
        stream.push(1)
        stream.push(2)
        stream.close()
        return [item async for item in stream]

    assert _run(scenario()) == [1, 2]


def test_cancel_discards_pending_items():
    async def scenario():
        stream = EventStream()
        stream.push("a")
        stream.push("b")
        signal = await stream.cancel("stopped")
        after = await stream.next()
        return signal, after, stream.pending

    signal, after, pending = _run(scenario())
    assert signal == StreamSignal(value="stopped", done=True)
    assert after.done is True
    assert pending == 0


def test_cancel_awaits_awaitable_value():
    async def value():
        await asyncio.sleep(0)
        return 42

    async def scenario():
        stream = EventStream()
        return await stream.cancel(value())

    assert _run(scenario()).value == 42


def test_cancel_releases_waiting_consumer():
    async def scenario():
        stream = EventStream()
        consumer = asyncio.create_task(stream.next())
        await asyncio.sleep(0)
        await stream.cancel("stop")
        return await consumer

    signal = _run(scenario())
    assert signal.done is True
    assert signal.value == "stop"


def test_second_waiting_consumer_is_rejected():
    async def scenario():
        stream = EventStream()
        first = asyncio.create_task(stream.next())
        await asyncio.sleep(0)
        with pytest.raises(RuntimeError):
            await stream.next()
        stream.push("only")
        return await first

    assert _run(scenario()).value == "only"


def test_cancelled_consumer_frees_waiting_slot():
    async def scenario():
        stream = EventStream()
        consumer = asyncio.create_task(stream.next())
        await asyncio.sleep(0)
        consumer.cancel()
        with suppress(asyncio.CancelledError):
            await consumer
        stream.push("kept")
        return await stream.next()

    assert _run(scenario()).value == "kept"


def test_fail_raises_in_waiting_consumer():
    async def scenario():
        stream = EventStream()
        consumer = asyncio.create_task(stream.next())
        await asyncio.sleep(0)
        stream.fail(ValueError("transport down"))
        with pytest.raises(ValueError, match="transport down"):
            await consumer

    _run(scenario())


def test_fail_raises_after_queue_is_drained():
    async def scenario():
        stream = EventStream()
        stream.push("a")
        stream.fail(ValueError("late failure"))
        received = []
        with pytest.raises(ValueError):
            async for item in stream:
                received.append(item)
        return received

    assert _run(scenario()) == ["a"]


def test_async_iteration_with_concurrent_producer():
    async def producer(stream):
        for i in range(5):
            await asyncio.sleep(0)
            stream.push(i)
        stream.close()

    async def scenario():
        stream = EventStream()
        task = asyncio.create_task(producer(stream))
        items = [item async for item in stream]
        await task
        return items

    assert _run(scenario()) == [0, 1, 2, 3, 4]
