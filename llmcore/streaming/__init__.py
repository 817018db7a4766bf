from .async_utils import async_map, one_async_iterator, transform_async_iterator
from .completion_stream import (
    CompletionStream,
    DefaultCompletionStream,
    FallbackCompletionStream,
    StreamState,
    result_as_text,
    serialize_prompt,
)
from .event_stream import EventStream, QueueClosedError, StreamSignal

__all__ = [
    "async_map",
    "one_async_iterator",
    "transform_async_iterator",
    "CompletionStream",
    "DefaultCompletionStream",
    "FallbackCompletionStream",
    "StreamState",
    "result_as_text",
    "serialize_prompt",
    "EventStream",
    "QueueClosedError",
    "StreamSignal",
]
