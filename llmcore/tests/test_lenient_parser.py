"""
Relaxed JSON parser tests.

Covers the grammar relaxations (quotes, bare keys, raw newlines) and the
offset reported on malformed input.
"""

import pytest

from llmcore.parsing.lenient import JsonParser, JsonSyntaxError, decode_single_quoted


class TestRelaxedGrammar:
    """Inputs strict JSON rejects but the relaxed parser accepts."""

    def test_bare_keys_and_single_quotes(self):
        value = JsonParser.parse("{key1: 'value1 \" test', key2: \"value2\"}")
        assert value == {"key1": 'value1 " test', "key2": "value2"}

    def test_nested_array_and_object(self):
        value = JsonParser.parse("{a:[1,2,{nested:'object'}]}")
        assert value["a"][:2] == [1.0, 2.0]
        assert value["a"][2]["nested"] == "object"

    def test_single_quoted_key(self):
        assert JsonParser.parse("{'my key': 'v'}") == {"my key": "v"}

    def test_identifier_keys_allow_dollar_and_underscore(self):
        assert JsonParser.parse("{$ref: 1, _id2: 2}") == {"$ref": 1.0, "_id2": 2.0}

    def test_raw_newline_inside_string(self):
        value = JsonParser.parse('{key4: "value4\nwith new line", key5: \'a\rb\'}')
        assert value["key4"] == "value4\nwith new line"
        assert value["key5"] == "a\rb"

    def test_literals(self):
        assert JsonParser.parse("{a: true, b: false, c: null}") == {"a": True, "b": False, "c": None}

    def test_numbers_are_floats(self):
        value = JsonParser.parse("[-1.5, 2, 0.25]")
        assert value == [-1.5, 2.0, 0.25]
        assert all(isinstance(v, float) for v in value)

    def test_trailing_and_repeated_commas_are_skipped(self):
        assert JsonParser.parse("{a: 1,}") == {"a": 1.0}
        assert JsonParser.parse("[1,,2,]") == [1.0, 2.0]

    def test_whitespace_around_punctuation(self):
        assert JsonParser.parse("{ a : [ 1 , 2 ] , b : { } }") == {"a": [1.0, 2.0], "b": {}}

    def test_empty_object_and_array_are_distinct(self):
        assert JsonParser.parse("{}") == {}
        assert isinstance(JsonParser.parse("{}"), dict)
        assert JsonParser.parse("[]") == []
        assert isinstance(JsonParser.parse("[]"), list)

    def test_key_order_preserved_and_last_write_wins(self):
        value = JsonParser.parse("{b: 1, a: 2, b: 3}")
        assert list(value) == ["b", "a"]
        assert value["b"] == 3.0

    def test_trailing_text_after_value_is_ignored(self):
        assert JsonParser.parse("{a: 1} and some commentary") == {"a": 1.0}

    def test_escaped_characters_in_double_quotes(self):
        assert JsonParser.parse("{a: 'tab\\there', b: \"q\\\"uote\"}") == {"a": "tab\there", "b": 'q"uote'}


class TestSingleQuoteDecoding:
    def test_unescaped_double_quotes_are_escaped(self):
        assert decode_single_quoted("'say \"hi\"'") == 'say "hi"'

    def test_already_escaped_double_quote_kept(self):
        assert decode_single_quoted("'say \\\"hi'") == 'say "hi'

    def test_escaped_single_quote_is_rejected(self):
        with pytest.raises(ValueError):
            decode_single_quoted("'it\\'s'")


class TestSyntaxErrors:
    """Every failure raises with the offset and the unconsumed text."""

    def test_exponent_is_not_supported(self):
        with pytest.raises(JsonSyntaxError) as info:
            JsonParser.parse("[1e5]")
        assert info.value.pos == 2
        assert info.value.remaining == "e5]"

    def test_missing_colon(self):
        with pytest.raises(JsonSyntaxError) as info:
            JsonParser.parse("{a 1}")
        assert info.value.expected == "a colon"

    def test_unterminated_string(self):
        with pytest.raises(JsonSyntaxError) as info:
            JsonParser.parse("{a: 'abc")
        assert info.value.pos == 4
        assert info.value.remaining == "'abc"

    def test_invalid_key(self):
        with pytest.raises(JsonSyntaxError) as info:
            JsonParser.parse("{1: 2}")
        assert info.value.expected == "a key"
        assert info.value.pos == 1

    @pytest.mark.parametrize("text", ["{'': 1}", "{\"\": 1}", "{a: 1, '': 2}"])
    def test_empty_key_is_rejected(self, text):
        with pytest.raises(JsonSyntaxError) as info:
            JsonParser.parse(text)
        assert info.value.expected == "a key"
        assert info.value.remaining.startswith(("''", "\"\""))

    def test_unexpected_top_level_punctuation(self):
        with pytest.raises(JsonSyntaxError):
            JsonParser.parse("}")

    def test_missing_value(self):
        with pytest.raises(JsonSyntaxError):
            JsonParser.parse("{a: }")

    def test_unclosed_containers(self):
        for text in ("{a: 1", "[1, 2", "[", "{"):
            with pytest.raises(JsonSyntaxError):
                JsonParser.parse(text)

    def test_message_mentions_position(self):
        with pytest.raises(JsonSyntaxError) as info:
            JsonParser.parse("[oops]")
        assert "position 1" in str(info.value)
        assert "oops" in str(info.value)

    def test_invalid_escape_reports_token_start(self):
        with pytest.raises(JsonSyntaxError) as info:
            JsonParser.parse('[1, "bad \\q"]')
        assert info.value.pos == 4
