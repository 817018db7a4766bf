"""Schema validation of model results.

Raw strings are extracted and parsed first; structured values are validated
as-is against a JSON Schema.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Mapping

from jsonschema import FormatChecker
from jsonschema.exceptions import ValidationError as SchemaViolation
from jsonschema.validators import validator_for

from llmcore.parsing import Json, extract_and_parse_json

from .errors import JSON_ERROR, VALIDATION_ERROR, ResultValidationError

_FORMAT_CHECKER = FormatChecker()


def _instance_path(violation: SchemaViolation) -> str:
    return "/" + "/".join(str(part) for part in violation.absolute_path)


def format_violations(violations: Iterable[SchemaViolation]) -> str:
    return ",\n".join(f"{_instance_path(v)}: {v.message}" for v in violations)


def validate_result(data: Any, schema: Mapping[str, Any]) -> Json:
    """Return ``data`` (parsed if it was a string) when it conforms to ``schema``.

    Raises:
        ResultValidationError: ``json_error`` when a string cannot be parsed,
            ``validation_error`` listing every violation otherwise.
        jsonschema.SchemaError: the schema itself is malformed.
    """
    if isinstance(data, str):
        try:
            value = extract_and_parse_json(data)
        except ValueError as exc:
            raise ResultValidationError(JSON_ERROR, str(exc), data) from exc
    else:
        value = data

    schema_dict: Dict[str, Any] = dict(schema)
    validator_cls = validator_for(schema_dict)
    validator_cls.check_schema(schema_dict)
    validator = validator_cls(schema_dict, format_checker=_FORMAT_CHECKER)

    violations = sorted(validator.iter_errors(value), key=lambda v: list(map(str, v.absolute_path)))
    if violations:
        raise ResultValidationError(VALIDATION_ERROR, format_violations(violations) or "Unknown validation error", value)
    return value


__all__ = ["validate_result", "format_violations"]
