r"""Unit tests for the JSON path queries."""

from __future__ import annotations

from typing import Any

import pytest

from w3r.pipeline.json_path import extract_json_path, split_path

DOCUMENT = {
    "data": {
        "items": [
            {"id": 1, "name": "first"},
            {"id": 2, "name": "second"},
        ],
        "total": 2,
        "empty": None,
    },
    "tags": ["a", "b", "c"],
    "matrix": [[1, 2], [3, 4]],
    "a[x]": "literal",
}

################################
#     Tests for split_path     #
################################


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        (".", []),
        ("  .  ", []),
        ("", []),
        ("a", ["a"]),
        (".a.b", ["a", "b"]),
        ("a..b.", ["a", "b"]),
        ("items[0].name", ["items[0]", "name"]),
        ("[1]", ["[1]"]),
    ],
)
def test_split_path(path: str, expected: list[str]) -> None:
    assert split_path(path) == expected


#######################################
#     Tests for extract_json_path     #
#######################################


def test_extract_json_path_identity() -> None:
    assert extract_json_path(DOCUMENT, ".") is DOCUMENT


def test_extract_json_path_empty_path_is_identity() -> None:
    assert extract_json_path(DOCUMENT, "") is DOCUMENT


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("data.total", 2),
        (".data.total", 2),
        ("data.items[0].name", "first"),
        ("data.items[1]", {"id": 2, "name": "second"}),
        ("tags[2]", "c"),
        ("matrix[1]", [3, 4]),
        ("data..total", 2),
    ],
)
def test_extract_json_path_found(path: str, expected: Any) -> None:
    assert extract_json_path(DOCUMENT, path) == expected


@pytest.mark.parametrize(
    "path",
    [
        "missing",
        "a.b.c",
        "data.missing.deeper",
        "data.total.inner",
        "tags[3]",
        "tags[99].name",
        "data[0]",
        "data.empty.inner",
        "tags.name",
    ],
)
def test_extract_json_path_absent_is_none(path: str) -> None:
    assert extract_json_path(DOCUMENT, path) is None


def test_extract_json_path_bare_index() -> None:
    assert extract_json_path(["x", "y"], "[1]") == "y"


def test_extract_json_path_bare_index_on_object() -> None:
    assert extract_json_path({"0": "zero"}, "[0]") is None


def test_extract_json_path_only_first_bracket_is_used() -> None:
    assert extract_json_path(DOCUMENT, "matrix[1][0]") == [3, 4]


@pytest.mark.parametrize("path", ["a[x]", ".a[x]"])
def test_extract_json_path_invalid_index_is_a_key(path: str) -> None:
    assert extract_json_path(DOCUMENT, path) == "literal"


@pytest.mark.parametrize("path", ["tags[-1]", "tags[+1]", "tags[1", "tags[]"])
def test_extract_json_path_malformed_index(path: str) -> None:
    assert extract_json_path(DOCUMENT, path) is None


def test_extract_json_path_scalar_root() -> None:
    assert extract_json_path(42, "a") is None
    assert extract_json_path(None, "a[0]") is None


def test_extract_json_path_null_value() -> None:
    assert extract_json_path(DOCUMENT, "data.empty") is None
