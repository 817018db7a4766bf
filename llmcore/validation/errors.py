from __future__ import annotations

from typing import Any, Literal, Optional

ValidationErrorCode = Literal["json_error", "validation_error"]

JSON_ERROR: ValidationErrorCode = "json_error"
VALIDATION_ERROR: ValidationErrorCode = "validation_error"


class ResultValidationError(Exception):
    """Raised when a model result cannot be parsed or does not match its schema."""

    def __init__(self, code: ValidationErrorCode, message: str, data: Optional[Any] = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.data = data


__all__ = ["ResultValidationError", "ValidationErrorCode", "JSON_ERROR", "VALIDATION_ERROR"]
