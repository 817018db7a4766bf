"""Completion streams.

A completion stream re-emits text chunks to the caller as they arrive and,
once the source is exhausted, exposes a single ``completion`` record shaped
like the blocking execution result.

States: idle -> streaming -> finalizing -> done, or idle -> streaming -> failed.
Each new ``async for`` restarts from idle: accumulated chunks and the previous
completion are wiped and the driver request is replayed.
"""

from __future__ import annotations

import json
import logging
import time
from enum import Enum
from typing import TYPE_CHECKING, Any, AsyncIterator, List, Optional

from pydantic import BaseModel

from llmcore.observability import counter, histogram
from llmcore.types import ExecutionOptions, ExecutionResponse, ExecutionTokenUsage

if TYPE_CHECKING:
    from llmcore.drivers.base import AbstractDriver

logger = logging.getLogger(__name__)


class StreamState(str, Enum):
    IDLE = "idle"
    STREAMING = "streaming"
    FINALIZING = "finalizing"
    DONE = "done"
    FAILED = "failed"


def _json_default(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, Enum):
        return value.value
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def serialize_prompt(prompt: Any) -> str:
    if isinstance(prompt, str):
        return prompt
    return json.dumps(prompt, default=_json_default)


def result_as_text(result: Any) -> str:
    if isinstance(result, str):
        return result
    return json.dumps(result, default=_json_default)


class CompletionStream:
    def __init__(self, driver: "AbstractDriver", prompt: Any, options: ExecutionOptions) -> None:
        self.driver = driver
        self.prompt = prompt
        self.options = options
        self.completion: Optional[ExecutionResponse] = None
        self.state = StreamState.IDLE

    def __aiter__(self) -> AsyncIterator[str]:
        raise NotImplementedError


class DefaultCompletionStream(CompletionStream):
    """Aggregates a driver's chunk source into a validated completion."""

    def __init__(self, driver: "AbstractDriver", prompt: Any, options: ExecutionOptions) -> None:
        super().__init__(driver, prompt, options)
        self.chunks: List[str] = []

    async def __aiter__(self) -> AsyncIterator[str]:
        self.completion = None
        self.chunks = []
        chunks = self.chunks
        self.state = StreamState.STREAMING

        logger.debug(
            "[STREAM] streaming execution",
            extra={"provider": self.driver.provider, "model": self.options.model},
        )

        start = time.monotonic()
        try:
            source = await self.driver.request_completion_stream(self.prompt, self.options)
            async for chunk in source:
                if chunk:
                    chunks.append(chunk)
                    yield chunk
        except Exception:
            self.state = StreamState.FAILED
            logger.warning(
                "[STREAM] chunk source failed",
                extra={"provider": self.driver.provider, "model": self.options.model, "chunks": len(chunks)},
            )
            raise

        self.state = StreamState.FINALIZING
        content = "".join(chunks)
        prompt_tokens = len(serialize_prompt(self.prompt))
        result_tokens = len(content)
        execution_time = int((time.monotonic() - start) * 1000)

        self.completion = ExecutionResponse(
            result=content,
            prompt=self.prompt,
            execution_time=execution_time,
            token_usage=ExecutionTokenUsage(
                prompt=prompt_tokens,
                result=result_tokens,
                total=prompt_tokens + result_tokens,
            ),
        )
        self.driver.validate_result(self.completion, self.options)
        self.state = StreamState.DONE

        labels = {"provider": self.driver.provider, "mode": "stream"}
        counter("completion.stream.chunks", len(chunks), labels)
        histogram("completion.execution_time_ms", execution_time, labels)


class FallbackCompletionStream(CompletionStream):
    """Replays a blocking execution as a single chunk."""

    async def __aiter__(self) -> AsyncIterator[str]:
        self.completion = None
        self.state = StreamState.STREAMING

        logger.debug(
            "[STREAM] streaming not supported, falling back to blocking execution",
            extra={"provider": self.driver.provider, "model": self.options.model},
        )

        try:
            completion = await self.driver.execute_prompt(self.prompt, self.options)
        except Exception:
            self.state = StreamState.FAILED
            raise

        yield result_as_text(completion.result)

        self.completion = completion
        self.state = StreamState.DONE


__all__ = [
    "CompletionStream",
    "DefaultCompletionStream",
    "FallbackCompletionStream",
    "StreamState",
    "result_as_text",
    "serialize_prompt",
]
