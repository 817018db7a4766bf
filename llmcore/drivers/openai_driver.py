"""OpenAI chat completions driver."""

from __future__ import annotations

import asyncio
import json
from contextlib import suppress
from typing import Any, AsyncIterator, Dict, Optional

import httpx

from llmcore.streaming import EventStream, transform_async_iterator
from llmcore.types import Completion, ExecutionOptions, ExecutionTokenUsage

from .base import AbstractDriver
from .errors import DriverError, TransportError
from .sse import ServerSentEvent, pump_events

DEFAULT_BASE_URL = "https://api.openai.com/v1/chat/completions"

_DONE = object()


def _delta_text(sse: ServerSentEvent) -> Any:
    if sse.data.strip() == "[DONE]":
        return _DONE
    try:
        chunk = json.loads(sse.data)
        return chunk["choices"][0]["delta"].get("content")
    except (json.JSONDecodeError, KeyError, IndexError, TypeError, AttributeError):
        return None


def _token_usage(usage: Optional[Dict[str, Any]]) -> Optional[ExecutionTokenUsage]:
    if not usage:
        return None
    return ExecutionTokenUsage(
        prompt=usage.get("prompt_tokens"),
        result=usage.get("completion_tokens"),
        total=usage.get("total_tokens"),
    )


class OpenAIDriver(AbstractDriver):
    """OpenAI API driver.

    Also serves any endpoint that implements the OpenAI chat completions wire
    format (see ``OpenAICompatibleDriver``).
    """

    provider = "openai"

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout_seconds: float = 30.0,
        connect_timeout_seconds: float = 10.0,
        streaming_enabled: bool = True,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url
        self.timeout_seconds = timeout_seconds
        self.connect_timeout_seconds = connect_timeout_seconds
        self.streaming_enabled = streaming_enabled
        self._transport = transport

    async def can_stream(self, options: ExecutionOptions) -> bool:
        return self.streaming_enabled

    def _client(self) -> httpx.AsyncClient:
        timeout = httpx.Timeout(
            self.timeout_seconds,
            connect=self.connect_timeout_seconds,
        )
        return httpx.AsyncClient(timeout=timeout, transport=self._transport)

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    def _payload(self, prompt: Any, options: ExecutionOptions, stream: bool) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "model": options.model,
            "messages": prompt,
        }
        if options.temperature is not None:
            payload["temperature"] = options.temperature
        if options.max_tokens:
            payload["max_tokens"] = options.max_tokens
        if stream:
            payload["stream"] = True
        if options.extra_params:
            payload.update(options.extra_params)
        return payload

    async def request_completion(self, prompt: Any, options: ExecutionOptions) -> Completion:
        payload = self._payload(prompt, options, stream=False)

        try:
            async with self._client() as client:
                resp = await client.post(self.base_url, headers=self._headers(), json=payload)
                resp.raise_for_status()
                data = resp.json()
        except httpx.TimeoutException as exc:
            raise TransportError(
                f"{self.provider} request timeout",
                provider=self.provider,
                original_error=exc,
            ) from exc
        except httpx.HTTPError as exc:
            raise TransportError(
                f"{self.provider} HTTP error: {exc}",
                provider=self.provider,
                original_error=exc,
            ) from exc
        except json.JSONDecodeError as exc:
            raise DriverError(
                f"{self.provider} returned invalid JSON",
                provider=self.provider,
                original_error=exc,
            ) from exc

        try:
            text = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as exc:
            raise DriverError(
                f"{self.provider} response missing expected fields: {exc}",
                provider=self.provider,
                original_error=exc,
            ) from exc
        return Completion(result=text, token_usage=_token_usage(data.get("usage")))

    async def request_completion_stream(self, prompt: Any, options: ExecutionOptions) -> AsyncIterator[str]:
        return self._stream_chunks(self._payload(prompt, options, stream=True))

    async def _stream_chunks(self, payload: Dict[str, Any]) -> AsyncIterator[str]:
        events: EventStream[ServerSentEvent] = EventStream()
        try:
            async with self._client() as client:
                async with client.stream("POST", self.base_url, headers=self._headers(), json=payload) as resp:
                    resp.raise_for_status()
                    producer = asyncio.create_task(pump_events(resp.aiter_lines(), events))
                    try:
                        async for text in transform_async_iterator(events, _delta_text):
                            if text is _DONE:
                                break
                            if text:
                                yield text
                    finally:
                        await events.cancel()
                        producer.cancel()
                        with suppress(asyncio.CancelledError):
                            await producer
        except httpx.TimeoutException as exc:
            raise TransportError(
                f"{self.provider} streaming timeout",
                provider=self.provider,
                original_error=exc,
            ) from exc
        except httpx.HTTPError as exc:
            raise TransportError(
                f"{self.provider} streaming HTTP error: {exc}",
                provider=self.provider,
                original_error=exc,
            ) from exc


class OpenAICompatibleDriver(OpenAIDriver):
    """
    Driver for any service exposing the OpenAI chat completions API
    (vLLM, Ollama, LM Studio, Groq, Together AI, ...).

    Usage:
        driver = OpenAICompatibleDriver(
            api_key="your-key",
            base_url="https://api.groq.com/openai/v1/chat/completions",
        )
    """

    provider = "openai_compat"

    def __init__(
        self,
        api_key: str,
        base_url: str,
        timeout_seconds: float = 30.0,
        connect_timeout_seconds: float = 10.0,
        streaming_enabled: bool = True,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(
            api_key=api_key,
            base_url=base_url,
            timeout_seconds=timeout_seconds,
            connect_timeout_seconds=connect_timeout_seconds,
            streaming_enabled=streaming_enabled,
            transport=transport,
        )


__all__ = ["DEFAULT_BASE_URL", "OpenAIDriver", "OpenAICompatibleDriver"]
