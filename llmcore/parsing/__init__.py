from .lenient import Json, JsonParser, JsonSyntaxError
from .pipeline import extract_and_parse_json, extract_json_from_text, parse_json

__all__ = [
    "Json",
    "JsonParser",
    "JsonSyntaxError",
    "extract_and_parse_json",
    "extract_json_from_text",
    "parse_json",
]
