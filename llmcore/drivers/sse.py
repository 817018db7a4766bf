"""Server-sent events decoding.

Lines read from an HTTP response are framed into events by a producer task
and pushed into an ``EventStream`` the driver iterates with ``async for``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import AsyncIterable, List, Optional

from llmcore.streaming import EventStream


@dataclass
class ServerSentEvent:
    data: str
    event: Optional[str] = None
    id: Optional[str] = None


class SSEDecoder:
    def __init__(self) -> None:
        self._data: List[str] = []
        self._event: Optional[str] = None
        self._id: Optional[str] = None

    def decode(self, line: str) -> Optional[ServerSentEvent]:
        """Feed one line; returns an event when a blank line dispatches one."""
        if not line:
            if not self._data and self._event is None:
                return None
            sse = ServerSentEvent(data="\n".join(self._data), event=self._event, id=self._id)
            self._data = []
            self._event = None
            return sse

        if line.startswith(":"):
            return None

        name, _, value = line.partition(":")
        if value.startswith(" "):
            value = value[1:]

        if name == "data":
            self._data.append(value)
        elif name == "event":
            self._event = value
        elif name == "id":
            self._id = value
        return None

    def flush(self) -> Optional[ServerSentEvent]:
        return self.decode("")


async def pump_events(lines: AsyncIterable[str], events: EventStream[ServerSentEvent]) -> None:
    """Decode ``lines`` into ``events`` until the source ends or the consumer cancels.

    Source failures are forwarded to the consumer through ``events.fail``.
    """
    decoder = SSEDecoder()
    try:
        async for line in lines:
            if events.closed:
                return
            sse = decoder.decode(line.rstrip("\r"))
            if sse is not None:
                events.push(sse)
        tail = decoder.flush()
        if tail is not None and not events.closed:
            events.push(tail)
    except Exception as exc:
        events.fail(exc)
        return
    events.close()


__all__ = ["ServerSentEvent", "SSEDecoder", "pump_events"]
