import pytest

from valuation.errors import ParseError, ParseErrorKind
from valuation.json_extract import locate_json_object, parse_json_object


def test_parse_embedded_object_surrounded_by_prose():
    out = parse_json_object('blah {"condition":"poor","reasons":["rip"]} thanks')
    assert out == {"condition": "poor", "reasons": ["rip"]}


def test_parse_markdown_fenced_object():
    text = '```json\n{"condition": "good", "reasons": []}\n```'
    assert parse_json_object(text) == {"condition": "good", "reasons": []}


def test_nested_braces_kept_inside_outer_object():
    out = parse_json_object('Result: {"condition": "moderate", "meta": {"seat": "front"}} Thanks!')
    assert out["meta"] == {"seat": "front"}


@pytest.mark.parametrize("text", ["no json here", "", None, "} before {", "only { open"])
def test_missing_braces_is_empty_or_malformed(text):
    with pytest.raises(ParseError) as exc_info:
        parse_json_object(text)
    assert exc_info.value.kind is ParseErrorKind.EMPTY_OR_MALFORMED


def test_invalid_json_carries_decoder_message():
    with pytest.raises(ParseError) as exc_info:
        parse_json_object('{"condition": bad json,}')
    assert exc_info.value.kind is ParseErrorKind.INVALID_JSON
    assert "Expecting value" in str(exc_info.value)


def test_brace_span_that_is_not_json_is_invalid_json():
    with pytest.raises(ParseError) as exc_info:
        parse_json_object("{1}, {2}")
    assert exc_info.value.kind is ParseErrorKind.INVALID_JSON


def test_two_objects_in_one_response_are_merged_and_fail():
    text = 'first {"condition": "good"} then {"condition": "poor"}'
    assert locate_json_object(text) == '{"condition": "good"} then {"condition": "poor"}'
    with pytest.raises(ParseError) as exc_info:
        parse_json_object(text)
    assert exc_info.value.kind is ParseErrorKind.INVALID_JSON


def test_deeply_nested_payload_is_invalid_json():
    text = '{"condition":' + "[" * 100000 + "]" * 100000 + "}"
    with pytest.raises(ParseError) as exc_info:
        parse_json_object(text)
    assert exc_info.value.kind is ParseErrorKind.INVALID_JSON
