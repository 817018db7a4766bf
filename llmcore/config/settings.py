from __future__ import annotations

import functools
from typing import Any, Dict, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    log_level: str = Field("INFO", alias="LOG_LEVEL")

    # Driver
    llm_provider: str = Field("openai", alias="LLM_PROVIDER")
    llm_api_key: Optional[str] = Field(None, alias="LLM_API_KEY")
    llm_base_url: Optional[str] = Field(None, alias="LLM_BASE_URL")
    llm_model: str = Field("gpt-4", alias="LLM_MODEL")
    llm_timeout_seconds: float = Field(30.0, alias="LLM_TIMEOUT")
    llm_connect_timeout_seconds: float = Field(10.0, alias="LLM_CONNECT_TIMEOUT")
    llm_streaming_enabled: bool = Field(True, alias="LLM_STREAMING_ENABLED")

    @field_validator("llm_timeout_seconds", "llm_connect_timeout_seconds")
    @classmethod
    def clamp_non_negative(cls, v: float) -> float:
        return max(0.0, v)

    @field_validator("llm_provider")
    @classmethod
    def normalize_provider(cls, v: str) -> str:
        return (v or "openai").strip().lower()

    @field_validator("log_level")
    @classmethod
    def normalize_level(cls, v: str) -> str:
        return (v or "INFO").strip().upper()


@functools.lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


def settings_public_summary(settings: Optional[Settings] = None) -> Dict[str, Any]:
    s = settings or get_settings()
    return {
        "provider": s.llm_provider,
        "model": s.llm_model,
        "base_url": s.llm_base_url,
        "api_key_set": bool(s.llm_api_key),
        "timeout_seconds": s.llm_timeout_seconds,
        "connect_timeout_seconds": s.llm_connect_timeout_seconds,
        "streaming_enabled": s.llm_streaming_enabled,
    }


__all__ = ["Settings", "get_settings", "settings_public_summary"]
