r"""Unit tests for the response body pipeline."""

from __future__ import annotations

import pytest

from w3r.pipeline.formatting import format_json, format_response_body, parse_json_body

#####################################
#     Tests for parse_json_body     #
#####################################


def test_parse_json_body_object() -> None:
    assert parse_json_body('{"a": [1, 2.5, null, true]}') == {"a": [1, 2.5, None, True]}


@pytest.mark.parametrize("body", ["NaN", "[Infinity]", '{"a": -Infinity}'])
def test_parse_json_body_rejects_non_finite(body: str) -> None:
    with pytest.raises(ValueError, match=r"is not valid JSON"):
        parse_json_body(body)


@pytest.mark.parametrize("body", ["", "hello", "{broken", "<html></html>"])
def test_parse_json_body_invalid(body: str) -> None:
    with pytest.raises(ValueError):
        parse_json_body(body)


@pytest.mark.parametrize("body", ['{"a":"\\ud800"}', '["\\udfff"]', '"x\\udc00y"'])
def test_parse_json_body_rejects_unpaired_surrogate(body: str) -> None:
    with pytest.raises(ValueError, match=r"unpaired surrogate"):
        parse_json_body(body)


def test_parse_json_body_accepts_surrogate_pair() -> None:
    assert parse_json_body('{"a":"\\ud83d\\ude00"}') == {"a": "\U0001f600"}


#################################
#     Tests for format_json     #
#################################


def test_format_json_compact() -> None:
    assert format_json({"b": 1, "a": [1, 2]}) == '{"b":1,"a":[1,2]}'


def test_format_json_pretty() -> None:
    assert format_json({"a": {"b": [1]}}, pretty=True) == (
        '{\n  "a": {\n    "b": [\n      1\n    ]\n  }\n}'
    )


def test_format_json_keeps_non_ascii() -> None:
    assert format_json({"name": "café"}) == '{"name":"café"}'


def test_format_json_null() -> None:
    assert format_json(None) == "null"


##########################################
#     Tests for format_response_body     #
##########################################


def test_format_response_body_compacts_json() -> None:
    assert format_response_body('{ "a" : 1 ,\n "b": [1, 2] }') == '{"a":1,"b":[1,2]}'


def test_format_response_body_pretty() -> None:
    assert format_response_body('{"a":1}', pretty=True) == '{\n  "a": 1\n}'


def test_format_response_body_filter() -> None:
    body = '{"data": {"items": ["x", "y"]}}'
    assert format_response_body(body, json_filter="data.items[1]") == '"y"'


def test_format_response_body_filter_identity() -> None:
    assert format_response_body('{"a": [1]}', json_filter=".") == '{"a":[1]}'


def test_format_response_body_filter_missing() -> None:
    assert format_response_body('{"a": 1}', json_filter="a.b.c") == "null"


def test_format_response_body_filter_pretty() -> None:
    body = '{"data": {"user": {"id": 7}}}'
    assert format_response_body(body, json_filter="data.user", pretty=True) == (
        '{\n  "id": 7\n}'
    )


@pytest.mark.parametrize("body", ["plain text", "", "<html>oops</html>", "NaN"])
def test_format_response_body_non_json_passthrough(body: str) -> None:
    assert format_response_body(body, json_filter="a.b", pretty=True) == body


def test_format_response_body_unpaired_surrogate_passthrough() -> None:
    body = '{"a":"\\ud800"}'
    assert format_response_body(body, pretty=True) == body


def test_format_response_body_round_trip() -> None:
    body = '{"z":1,"a":{"k":[true,null,"é"]}}'
    assert format_response_body(body) == body
    pretty = format_response_body(body, pretty=True)
    assert format_response_body(pretty) == body
