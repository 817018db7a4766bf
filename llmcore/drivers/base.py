"""Driver abstraction shared by every provider.

A driver turns prompt segments into a provider prompt, performs blocking or
streaming requests and validates results against the caller's schema.
"""

from __future__ import annotations

import json
import logging
import time
from abc import ABC, abstractmethod
from typing import Any, AsyncIterable, Dict, List, Sequence

from jsonschema.exceptions import SchemaError

from llmcore.observability import counter
from llmcore.streaming import CompletionStream, DefaultCompletionStream, FallbackCompletionStream
from llmcore.types import (
    Completion,
    CompletionError,
    ExecutionOptions,
    ExecutionResponse,
    PromptRole,
    PromptSegment,
)
from llmcore.validation import ResultValidationError, validate_result

logger = logging.getLogger(__name__)

_CHAT_ROLES = {
    PromptRole.SAFETY: "system",
    PromptRole.SYSTEM: "system",
    PromptRole.USER: "user",
    PromptRole.ASSISTANT: "assistant",
}


class AbstractDriver(ABC):
    provider: str = "abstract"

    def create_prompt(self, segments: Sequence[PromptSegment], options: ExecutionOptions) -> Any:
        """Build a generic chat prompt: a list of ``{"role", "content"}`` messages."""
        messages: List[Dict[str, str]] = [
            {"role": _CHAT_ROLES[segment.role], "content": segment.content} for segment in segments
        ]
        if options.result_schema:
            messages.append(
                {
                    "role": "system",
                    "content": "Return only a JSON value matching this JSON Schema:\n"
                    + json.dumps(options.result_schema),
                }
            )
        return messages

    async def execute(self, segments: Sequence[PromptSegment], options: ExecutionOptions) -> ExecutionResponse:
        prompt = self.create_prompt(segments, options)
        return await self.execute_prompt(prompt, options)

    async def execute_prompt(self, prompt: Any, options: ExecutionOptions) -> ExecutionResponse:
        logger.debug("[DRIVER] executing", extra={"provider": self.provider, "model": options.model})
        try:
            start = time.monotonic()
            completion = await self.request_completion(prompt, options)
            self.validate_result(completion, options)
            execution_time = int((time.monotonic() - start) * 1000)
        except Exception as exc:
            exc.prompt = prompt  # type: ignore[attr-defined]
            raise
        return ExecutionResponse(
            result=completion.result,
            token_usage=completion.token_usage,
            error=completion.error,
            prompt=prompt,
            execution_time=execution_time,
        )

    async def stream(self, segments: Sequence[PromptSegment], options: ExecutionOptions) -> CompletionStream:
        prompt = self.create_prompt(segments, options)
        if await self.can_stream(options):
            return DefaultCompletionStream(self, prompt, options)
        return FallbackCompletionStream(self, prompt, options)

    async def can_stream(self, options: ExecutionOptions) -> bool:
        """Override and return False for models that cannot stream.

        A non-streaming model is served by a blocking execution replayed as a
        single chunk.
        """
        return True

    def validate_result(self, completion: Completion, options: ExecutionOptions) -> None:
        if completion.error is not None or not options.result_schema:
            return
        try:
            completion.result = validate_result(completion.result, options.result_schema)
        except ResultValidationError as exc:
            logger.error(
                f"[{self.provider}] [{options.model}] [{exc.code}] Result validation error",
                extra={"error": exc.message},
            )
            counter("completion.validation_error", 1, {"provider": self.provider, "code": exc.code})
            completion.error = CompletionError(code=exc.code, message=exc.message, data=completion.result)
        except SchemaError as exc:
            logger.error(
                f"[{self.provider}] [{options.model}] [validation_error] Invalid result schema",
                extra={"error": exc.message},
            )
            counter("completion.validation_error", 1, {"provider": self.provider, "code": "schema_error"})
            completion.error = CompletionError(
                code="validation_error",
                message=f"Invalid result schema: {exc.message}",
                data=completion.result,
            )

    @abstractmethod
    async def request_completion(self, prompt: Any, options: ExecutionOptions) -> Completion:
        """
        Execute a blocking completion request.

        Raises:
            TransportError: On network or provider failures
        """

    @abstractmethod
    async def request_completion_stream(self, prompt: Any, options: ExecutionOptions) -> AsyncIterable[str]:
        """
        Open a streaming completion request.

        Returns:
            An async iterable of text fragments; it ends normally at end of
            stream and raises ``TransportError`` on transport failure.
        """


__all__ = ["AbstractDriver"]
