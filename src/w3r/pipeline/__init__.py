r"""Response post-processing: JSON path queries and formatting."""

from __future__ import annotations

__all__ = ["extract_json_path", "format_json", "format_response_body", "parse_json_body"]

from w3r.pipeline.formatting import format_json, format_response_body, parse_json_body
from w3r.pipeline.json_path import extract_json_path
