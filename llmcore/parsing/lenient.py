"""Relaxed JSON parser for LLM output.

Accepts a superset of JSON:
- object keys may be double-quoted, single-quoted or bare identifiers
- string values may be double- or single-quoted
- raw newlines / carriage returns inside string values
- numbers are ``-?digits(.digits)?`` (no exponent)

The parser is a one-token-lookahead recursive descent over a cursor. It never
backtracks and never returns a partial value: any malformed token raises
``JsonSyntaxError`` with the offset and the unconsumed text.
"""

from __future__ import annotations

import json
import re
from typing import Dict, List, Optional, Union

Json = Union[None, bool, int, float, str, List["Json"], Dict[str, "Json"]]

PUNCTUATION = frozenset("[]{}:,")
_DIGITS = frozenset("0123456789")
_IDENT_START = frozenset("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ_$")
_IDENT_PART = _IDENT_START | _DIGITS
_UNESCAPED_DQUOTE = re.compile(r'(?<!\\)"')

_MAX_ERROR_CONTEXT = 200


class JsonSyntaxError(ValueError):
    """Raised when the relaxed grammar cannot read a token."""

    def __init__(self, expected: str, pos: int, remaining: str) -> None:
        super().__init__(
            f"Expected {expected} at position {pos} but found {remaining[:_MAX_ERROR_CONTEXT]!r}"
        )
        self.expected = expected
        self.pos = pos
        self.remaining = remaining


def fix_text(literal: str) -> str:
    # raw line breaks are not legal inside a JSON string literal
    return literal.replace("\n", "\\n").replace("\r", "\\r")


def decode_single_quoted(literal: str) -> str:
    """Decode a ``'...'`` literal by rewriting it as a double-quoted one.

    Unescaped ``"`` inside the body are escaped, then the result is decoded as a
    regular JSON string. ``\\'`` is not a valid JSON escape and is rejected.
    """
    body = _UNESCAPED_DQUOTE.sub(r'\\"', literal[1:-1])
    return json.loads('"' + body + '"')


class JsonParser:
    def __init__(self, text: str) -> None:
        self._text = text
        self.pos = 0

    @property
    def remaining(self) -> str:
        return self._text[self.pos:]

    def _error(self, expected: str, pos: Optional[int] = None) -> JsonSyntaxError:
        at = self.pos if pos is None else pos
        return JsonSyntaxError(expected, at, self._text[at:])

    def _peek(self) -> str:
        return self._text[self.pos:self.pos + 1]

    def try_read_punctuation(self) -> Optional[str]:
        """Consume ``\\s* <punct> \\s*`` and return the punctuation, if present.

        Leading whitespace is only consumed when a punctuation token follows.
        """
        text = self._text
        n = len(text)
        i = self.pos
        while i < n and text[i].isspace():
            i += 1
        if i < n and text[i] in PUNCTUATION:
            punct = text[i]
            i += 1
            while i < n and text[i].isspace():
                i += 1
            self.pos = i
            return punct
        return None

    def _scan_quoted(self, quote: str) -> Optional[str]:
        text = self._text
        n = len(text)
        i = self.pos + 1
        while i < n:
            ch = text[i]
            if ch == "\\":
                i += 2
                continue
            if ch == quote:
                literal = text[self.pos:i + 1]
                self.pos = i + 1
                return literal
            i += 1
        return None

    def _scan_identifier(self) -> Optional[str]:
        text = self._text
        n = len(text)
        start = self.pos
        if start >= n or text[start] not in _IDENT_START:
            return None
        i = start + 1
        while i < n and text[i] in _IDENT_PART:
            i += 1
        self.pos = i
        return text[start:i]

    def _scan_number(self) -> Optional[str]:
        text = self._text
        n = len(text)
        start = i = self.pos
        if i < n and text[i] == "-":
            i += 1
        digits_start = i
        while i < n and text[i] in _DIGITS:
            i += 1
        if i == digits_start:
            return None
        if i + 1 < n and text[i] == "." and text[i + 1] in _DIGITS:
            i += 2
            while i < n and text[i] in _DIGITS:
                i += 1
        self.pos = i
        return text[start:i]

    def _decode(self, literal: str, start: int, single: bool) -> str:
        try:
            if single:
                return decode_single_quoted(literal)
            return json.loads(literal)
        except json.JSONDecodeError as exc:
            raise self._error(f"a valid string literal ({exc.msg})", start) from exc

    def read_key(self) -> str:
        start = self.pos
        first = self._peek()
        key: Optional[str] = None
        if first == '"':
            literal = self._scan_quoted('"')
            if literal is not None:
                key = self._decode(literal, start, single=False)
        elif first == "'":
            literal = self._scan_quoted("'")
            if literal is not None:
                key = self._decode(literal, start, single=True)
        else:
            key = self._scan_identifier()
        if not key:
            raise self._error("a key", start)
        return key

    def read_scalar(self) -> Json:
        start = self.pos
        first = self._peek()
        if first == '"':
            literal = self._scan_quoted('"')
            if literal is not None:
                return self._decode(fix_text(literal), start, single=False)
        elif first == "'":
            literal = self._scan_quoted("'")
            if literal is not None:
                return self._decode(fix_text(literal), start, single=True)
        else:
            number = self._scan_number()
            if number is not None:
                return float(number)
            rest = self.remaining
            if rest.startswith("true"):
                self.pos += 4
                return True
            if rest.startswith("false"):
                self.pos += 5
                return False
            if rest.startswith("null"):
                self.pos += 4
                return None
        raise self._error("a value", start)

    def read_object(self) -> Dict[str, Json]:
        obj: Dict[str, Json] = {}
        while True:
            punct = self.try_read_punctuation()
            if punct == "}":
                return obj
            if punct == ",":
                continue
            if punct is not None:
                raise self._error("a key")
            key = self.read_key()
            if self.try_read_punctuation() != ":":
                raise self._error("a colon")
            obj[key] = self.read_value()

    def read_array(self) -> List[Json]:
        arr: List[Json] = []
        while True:
            punct = self.try_read_punctuation()
            if punct == ",":
                continue
            if punct == "]":
                return arr
            if punct == "[":
                arr.append(self.read_array())
            elif punct == "{":
                arr.append(self.read_object())
            elif punct is None:
                arr.append(self.read_scalar())
            else:
                raise self._error("a value")

    def read_value(self) -> Json:
        punct = self.try_read_punctuation()
        if punct == "{":
            return self.read_object()
        if punct == "[":
            return self.read_array()
        if punct is None:
            return self.read_scalar()
        raise self._error("a value")

    @classmethod
    def parse(cls, text: str) -> Json:
        return cls(text).read_value()


__all__ = ["Json", "JsonParser", "JsonSyntaxError", "decode_single_quoted", "fix_text"]
