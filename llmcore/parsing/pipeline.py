"""Parse entry points for model output.

Strict ``json.loads`` is always tried first. The relaxed parser is only a
fallback; when both fail the strict error is the one raised.
"""

from __future__ import annotations

import json
import logging

from .lenient import Json, JsonParser, JsonSyntaxError

logger = logging.getLogger(__name__)


def extract_json_from_text(text: str) -> str:
    """Slice ``text`` from the first ``{`` to the last ``}`` and drop literal ``\\n``.

    The span is not brace-balanced: free text holding several JSON-looking
    fragments can select the wrong one. Returns ``""`` when no span exists.
    """
    start = text.find("{")
    end = text.rfind("}")
    if start < 0 or end < start:
        return ""
    return text[start:end + 1].replace("\\n", "")


def _reject_constant(name: str) -> float:
    # NaN and Infinity are not JSON
    raise json.JSONDecodeError(f"Invalid constant {name}", name, 0)


def parse_json(text: str) -> Json:
    text = text.strip()
    try:
        return json.loads(text, parse_constant=_reject_constant)
    except json.JSONDecodeError as err:
        try:
            return JsonParser.parse(text)
        except JsonSyntaxError as relaxed_err:
            logger.debug("[JSON] relaxed parse failed", extra={"error": str(relaxed_err)})
            raise err from None


def extract_and_parse_json(text: str) -> Json:
    return parse_json(extract_json_from_text(text))


__all__ = ["extract_json_from_text", "parse_json", "extract_and_parse_json"]
