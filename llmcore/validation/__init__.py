from .errors import JSON_ERROR, VALIDATION_ERROR, ResultValidationError, ValidationErrorCode
from .validator import format_violations, validate_result

__all__ = [
    "JSON_ERROR",
    "VALIDATION_ERROR",
    "ResultValidationError",
    "ValidationErrorCode",
    "format_violations",
    "validate_result",
]
