"""In-process driver replaying scripted output.

Two reserved model names simulate failures:
- ``execution-error``: the request fails with ``TransportError``
- ``validation-error``: the blocking call returns an already-errored completion
"""

from __future__ import annotations

import asyncio
from enum import Enum
from typing import Any, AsyncIterator, Optional, Sequence

from llmcore.streaming import one_async_iterator, result_as_text, serialize_prompt
from llmcore.types import Completion, CompletionError, ExecutionOptions, ExecutionTokenUsage

from .base import AbstractDriver
from .errors import TransportError


class FakeDriverModels(str, Enum):
    EXECUTION_ERROR = "execution-error"
    VALIDATION_ERROR = "validation-error"


def create_validation_error_completion() -> Completion:
    return Completion(
        result="An invalid result",
        error=CompletionError(code="validation_error", message="Result cannot be validated!"),
        token_usage=ExecutionTokenUsage(prompt=10, result=10, total=20),
    )


class FakeDriver(AbstractDriver):
    provider = "fake"

    def __init__(
        self,
        chunks: Sequence[str] = (),
        *,
        result: Any = None,
        streaming: bool = True,
        delay_seconds: float = 0.0,
        fail_after: Optional[int] = None,
    ) -> None:
        """
        Args:
            chunks: text fragments replayed by the chunk source
            result: blocking result; defaults to the concatenated chunks
            streaming: whether ``stream`` may use the chunk source at all
            delay_seconds: pause before every chunk and blocking call
            fail_after: raise ``TransportError`` after this many chunks
        """
        self.chunks = list(chunks)
        self.result = result
        self.streaming = streaming
        self.delay_seconds = delay_seconds
        self.fail_after = fail_after
        self.completion_requests = 0
        self.stream_requests = 0

    async def can_stream(self, options: ExecutionOptions) -> bool:
        return self.streaming

    async def _pause(self) -> None:
        if self.delay_seconds > 0:
            await asyncio.sleep(self.delay_seconds)

    def _blocking_result(self) -> Any:
        if self.result is not None:
            return self.result
        return "".join(self.chunks)

    async def request_completion(self, prompt: Any, options: ExecutionOptions) -> Completion:
        self.completion_requests += 1
        await self._pause()
        if options.model == FakeDriverModels.EXECUTION_ERROR.value:
            raise TransportError("Testing completion error.", provider=self.provider)
        if options.model == FakeDriverModels.VALIDATION_ERROR.value:
            return create_validation_error_completion()

        result = self._blocking_result()
        prompt_tokens = len(serialize_prompt(prompt))
        result_tokens = len(result_as_text(result))
        return Completion(
            result=result,
            token_usage=ExecutionTokenUsage(
                prompt=prompt_tokens,
                result=result_tokens,
                total=prompt_tokens + result_tokens,
            ),
        )

    async def request_completion_stream(self, prompt: Any, options: ExecutionOptions) -> AsyncIterator[str]:
        self.stream_requests += 1
        if options.model == FakeDriverModels.EXECUTION_ERROR.value:
            raise TransportError("Testing stream completion error.", provider=self.provider)
        if not self.chunks and self.result is not None:
            return one_async_iterator(result_as_text(self.result))
        return self._replay()

    async def _replay(self) -> AsyncIterator[str]:
        for index, chunk in enumerate(self.chunks):
            if self.fail_after is not None and index >= self.fail_after:
                break
            await self._pause()
            yield chunk
        if self.fail_after is not None:
            raise TransportError("Testing chunk source failure.", provider=self.provider)


__all__ = ["FakeDriver", "FakeDriverModels", "create_validation_error_completion"]
