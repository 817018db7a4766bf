"""Lenient JSON extraction, schema validation and streaming completions for LLM output."""

from llmcore.parsing import Json, extract_and_parse_json, extract_json_from_text, parse_json
from llmcore.validation import ResultValidationError, validate_result

__all__ = [
    "Json",
    "extract_and_parse_json",
    "extract_json_from_text",
    "parse_json",
    "ResultValidationError",
    "validate_result",
]
