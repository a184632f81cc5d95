r"""Null-safe path queries over parsed JSON values.

Grammar: ``.`` returns the whole value. Otherwise the path is a
dot-separated list of segments (one leading dot is optional, empty
segments are ignored). A segment is a field name (``name``), a field
followed by an array index (``name[2]``) or a bare index (``[2]``).

Evaluation is left to right and never fails: a missing key, a field
access on a non-object, an index on a non-array or an out-of-range index
yields ``None``, and every following segment applied to ``None`` yields
``None`` again.
"""

from __future__ import annotations

__all__ = ["extract_json_path", "split_path"]

from typing import Any

from w3r.core.config import JSON_PATH_ROOT


def split_path(path: str) -> list[str]:
    """Split a path query into its segments.

    Example:
        ```pycon
        >>> from w3r.pipeline.json_path import split_path
        >>> split_path(".data.items[0].name")
        ['data', 'items[0]', 'name']
        >>> split_path(".")
        []

        ```
    """
    path = path.strip()
    if path == JSON_PATH_ROOT:
        return []
    path = path.removeprefix(".")
    return [part for part in path.split(".") if part]


def _get_field(value: Any, name: str) -> Any:
    if isinstance(value, dict):
        return value.get(name)
    return None


def _get_index(value: Any, index: int) -> Any:
    if isinstance(value, list) and index < len(value):
        return value[index]
    return None


def _parse_index(part: str) -> tuple[str, int] | None:
    bracket_pos = part.find("[")
    if bracket_pos < 0:
        return None
    index_part = part[bracket_pos + 1 :]
    close_bracket = index_part.find("]")
    if close_bracket < 0:
        return None
    index_str = index_part[:close_bracket]
    if not index_str.isascii() or not index_str.isdigit():
        return None
    return part[:bracket_pos], int(index_str)


def _apply_segment(value: Any, part: str) -> Any:
    parsed = _parse_index(part)
    if parsed is None:
        # Not a well-formed ``name[index]``: the whole segment is a key
        return _get_field(value, part)
    field_name, index = parsed
    if field_name:
        value = _get_field(value, field_name)
    return _get_index(value, index)


def extract_json_path(value: Any, path: str) -> Any:
    """Evaluate a path query against a parsed JSON value.

    Args:
        value: The parsed JSON value.
        path: The path query.

    Returns:
        The selected value, or ``None`` when any segment is absent.

    Example:
        ```pycon
        >>> from w3r.pipeline.json_path import extract_json_path
        >>> doc = {"items": ["x", "y", "z"], "meta": {"count": 3}}
        >>> extract_json_path(doc, "items[1]")
        'y'
        >>> extract_json_path(doc, ".meta.count")
        3
        >>> extract_json_path(doc, "meta.count.missing") is None
        True
        >>> extract_json_path(doc, ".") is doc
        True

        ```
    """
    for part in split_path(path):
        value = _apply_segment(value, part)
    return value
