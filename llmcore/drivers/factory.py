"""Driver factory for creating drivers from settings."""

from __future__ import annotations

from typing import Optional

from llmcore.config import Settings, get_settings

from .base import AbstractDriver
from .fake import FakeDriver
from .openai_driver import DEFAULT_BASE_URL, OpenAICompatibleDriver, OpenAIDriver


def create_driver(settings: Optional[Settings] = None) -> AbstractDriver:
    """
    Create a driver from settings (environment variables / ``.env``).

    Environment variables:
        LLM_PROVIDER: "openai", "openai_compat" or "fake" (default: "openai")
        LLM_API_KEY: API key for the provider (required except for "fake")
        LLM_BASE_URL: endpoint URL (optional for openai, required for openai_compat)
        LLM_TIMEOUT / LLM_CONNECT_TIMEOUT: timeouts in seconds
        LLM_STREAMING_ENABLED: set to false to force blocking execution

    Raises:
        ValueError: If required settings are missing or the provider is unknown
    """
    s = settings or get_settings()
    provider = s.llm_provider

    if provider == "fake":
        return FakeDriver(streaming=s.llm_streaming_enabled)

    if not s.llm_api_key:
        raise ValueError("LLM_API_KEY environment variable is required")

    if provider == "openai":
        return OpenAIDriver(
            api_key=s.llm_api_key,
            base_url=s.llm_base_url or DEFAULT_BASE_URL,
            timeout_seconds=s.llm_timeout_seconds,
            connect_timeout_seconds=s.llm_connect_timeout_seconds,
            streaming_enabled=s.llm_streaming_enabled,
        )

    if provider == "openai_compat":
        if not s.llm_base_url:
            raise ValueError("LLM_BASE_URL is required for openai_compat provider")
        return OpenAICompatibleDriver(
            api_key=s.llm_api_key,
            base_url=s.llm_base_url,
            timeout_seconds=s.llm_timeout_seconds,
            connect_timeout_seconds=s.llm_connect_timeout_seconds,
            streaming_enabled=s.llm_streaming_enabled,
        )

    raise ValueError(f"Unknown LLM_PROVIDER: {provider}. Must be 'openai', 'openai_compat' or 'fake'")


__all__ = ["create_driver"]
