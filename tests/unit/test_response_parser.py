"""Unit tests for the model response parser."""

import pytest

from lessongen.errors import ParseError
from lessongen.parsers.response_parser import parse_lesson_payload, strip_code_fences


class TestStripCodeFences:
    """Tests for markdown fence removal."""

    def test_json_tagged_fence(self):
        assert strip_code_fences('```json\n{"t": "x"}\n```') == '{"t": "x"}'

    def test_untagged_fence(self):
        assert strip_code_fences('```\n{"t": "x"}\n```') == '{"t": "x"}'

    def test_surrounding_whitespace(self):
        assert strip_code_fences('  \n```json\n{"t": "x"}\n```\n  ') == '{"t": "x"}'

    def test_plain_text_untouched(self):
        assert strip_code_fences('{"t": "x"}') == '{"t": "x"}'


class TestParseLessonPayload:
    """Tests for JSON decoding into the wire model."""

    def test_fenced_and_plain_parse_identically(self):
        fenced = parse_lesson_payload('```json\n{"t":"x"}\n```')
        plain = parse_lesson_payload('{"t":"x"}')
        assert fenced == plain
        assert plain.t == "x"

    def test_parses_full_payload(self, daily_payload_json):
        payload = parse_lesson_payload(daily_payload_json)
        assert payload.t == "Im Supermarkt"
        assert len(payload.voc) == 4
        assert payload.voc[0].de == "kaufen"
        assert payload.q[1].ans == 1
        assert payload.pts == ["What you bought", "What was expensive", "When you go again"]

    def test_missing_fields_are_none(self):
        payload = parse_lesson_payload('{"t": "Greetings"}')
        assert payload.voc is None
        assert payload.txt is None
        assert payload.q is None

    def test_unknown_keys_ignored(self):
        payload = parse_lesson_payload('{"t": "x", "extra": 1}')
        assert not hasattr(payload, "extra")

    def test_invalid_json_raises(self):
        with pytest.raises(ParseError) as exc_info:
            parse_lesson_payload('{"t": "x", "voc": [')
        assert "Invalid JSON" in str(exc_info.value)
        assert exc_info.value.raw_text == '{"t": "x", "voc": ['

    def test_truncated_fence_raises(self):
        with pytest.raises(ParseError):
            parse_lesson_payload("```json\n{\"t\": ")

    @pytest.mark.parametrize("raw_text", ["", "   ", None])
    def test_empty_text_raises(self, raw_text):
        with pytest.raises(ParseError):
            parse_lesson_payload(raw_text)

    def test_non_object_raises(self):
        with pytest.raises(ParseError) as exc_info:
            parse_lesson_payload('[{"t": "x"}]')
        assert "Expected a JSON object" in str(exc_info.value)

    def test_vocabulary_not_a_list_reads_as_absent(self):
        payload = parse_lesson_payload('{"t": "x", "voc": "Hallo"}')
        assert payload.voc is None


class TestTypeCoercion:
    """Valid JSON with mistyped fields still parses."""

    def test_numeric_options_become_strings(self):
        payload = parse_lesson_payload(
            '{"t": "Zahlen", "q": [{"qu": "Wie alt ist Anna?", "ops": [18, 19, 20, 21], "ans": 1}]}'
        )
        assert payload.q[0].ops == ["18", "19", "20", "21"]
        assert payload.q[0].ans == 1

    @pytest.mark.parametrize("raw_answer,expected", [('"2"', 2), ("2.0", 2), ('"second"', None), ("true", None)])
    def test_answer_index_coercion(self, raw_answer, expected):
        payload = parse_lesson_payload(f'{{"q": [{{"qu": "Wo?", "ans": {raw_answer}}}]}}')
        assert payload.q[0].ans == expected

    def test_scalar_text_fields(self):
        payload = parse_lesson_payload(
            '{"t": 2024, "l": "A1", "voc": [{"de": "zwölf", "en": 12, "hi": "barah", "ex": null}], "pts": "Einkaufen"}'
        )
        assert payload.t == "2024"
        assert payload.voc[0].en == "12"
        assert payload.voc[0].ex is None
        assert payload.pts == ["Einkaufen"]

    def test_non_object_items_dropped(self):
        payload = parse_lesson_payload('{"voc": ["Hallo", {"de": "Tschüss"}], "q": "none"}')
        assert [v.de for v in payload.voc] == ["Tschüss"]
        assert payload.q is None
