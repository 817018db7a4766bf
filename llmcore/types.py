from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from llmcore.validation import ValidationErrorCode


class PromptRole(str, Enum):
    SAFETY = "safety"
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class PromptSegment(BaseModel):
    role: PromptRole
    content: str


class ExecutionTokenUsage(BaseModel):
    prompt: Optional[int] = None
    result: Optional[int] = None
    total: Optional[int] = None


class CompletionError(BaseModel):
    """Set on a completion only when a result schema was given and validation failed."""

    code: ValidationErrorCode
    message: str
    data: Optional[Any] = None


class Completion(BaseModel):
    result: Any = None
    token_usage: Optional[ExecutionTokenUsage] = None
    error: Optional[CompletionError] = None


class ExecutionResponse(Completion):
    prompt: Any = None
    # milliseconds
    execution_time: Optional[int] = None


class ExecutionOptions(BaseModel):
    model: str
    result_schema: Optional[Dict[str, Any]] = None
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    extra_params: Dict[str, Any] = Field(default_factory=dict)


__all__ = [
    "PromptRole",
    "PromptSegment",
    "ExecutionTokenUsage",
    "CompletionError",
    "Completion",
    "ExecutionResponse",
    "ExecutionOptions",
]
