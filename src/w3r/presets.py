r"""Preset files: named request specifications stored in TOML.

A preset file holds one table per preset::

    [preset.create-item]
    url = "https://api.example.com/items"
    method = "POST"
    headers = ["Accept: application/json"]
    json = '{"name": "widget"}'
    retry = 3
    basic_auth = { user = "admin", pass = "secret" }
    proxy = { host = "proxy.local", port = 3128 }

Every field is optional. The effective specification is resolved field by
field with the precedence invocation value > preset value > default.
"""

from __future__ import annotations

__all__ = [
    "PRESET_FIELDS",
    "load_presets",
    "preset_to_overrides",
    "resolve_spec",
    "select_preset",
]

import json
import logging
import tomllib
from typing import TYPE_CHECKING, Any

from w3r.core.config import BasicAuthConfig, ProxyConfig, RequestSpec
from w3r.exceptions import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

logger: logging.Logger = logging.getLogger(__name__)

PRESET_FIELDS = (
    "url",
    "method",
    "headers",
    "timeout",
    "pretty_json",
    "timing",
    "verbose",
    "silent",
    "retry",
    "retry_delay",
    "max_backoff",
    "json",
    "json_filter",
    "form_data",
    "form",
    "cookies",
    "output",
    "dry_run",
    "basic_auth",
    "proxy",
)

_STRING_FIELDS = frozenset({"url", "method", "json_filter", "form_data", "output"})
_BOOL_FIELDS = frozenset({"pretty_json", "timing", "verbose", "silent", "dry_run"})
_NUMBER_FIELDS = frozenset({"timeout", "retry_delay", "max_backoff"})
_LIST_FIELDS = frozenset({"headers", "form", "cookies"})
_TABLE_FIELDS = frozenset({"basic_auth", "proxy"})


def _expected_type(key: str, value: Any) -> str | None:
    r"""Return the expected type of a preset field if ``value`` does not
    match it, otherwise ``None``.

    ``json`` accepts any value.
    """
    if key in _STRING_FIELDS:
        return None if isinstance(value, str) else "a string"
    if key in _BOOL_FIELDS:
        return None if isinstance(value, bool) else "a boolean"
    if key == "retry":
        return None if isinstance(value, int) and not isinstance(value, bool) else "an integer"
    if key in _NUMBER_FIELDS:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return None
        return "a number"
    if key in _LIST_FIELDS:
        if isinstance(value, list) and all(isinstance(item, str) for item in value):
            return None
        return "a list of strings"
    if key in _TABLE_FIELDS:
        return None if isinstance(value, dict) else "a table"
    return None


def load_presets(path: str | Path) -> dict[str, dict[str, Any]]:
    """Load the presets of a TOML file.

    Args:
        path: The path of the preset file.

    Returns:
        The preset tables by name, in file order.

    Raises:
        ConfigurationError: If the file cannot be read or parsed.
    """
    try:
        with open(path, "rb") as file:
            data = tomllib.load(file)
    except OSError as exc:
        msg = f"Failed to read config file {path}: {exc}"
        raise ConfigurationError(msg) from exc
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid config file {path}: {exc}"
        raise ConfigurationError(msg) from exc

    presets = data.get("preset", {})
    if not isinstance(presets, dict) or not all(isinstance(v, dict) for v in presets.values()):
        msg = f"Invalid config file {path}: 'preset' must hold tables"
        raise ConfigurationError(msg)
    logger.debug(f"Loaded {len(presets)} preset(s) from {path}")
    return presets


def select_preset(presets: Mapping[str, dict[str, Any]], name: str | None = None) -> dict[str, Any]:
    """Select a preset.

    Args:
        presets: The presets by name.
        name: The requested preset. If ``None`` the first preset is used.

    Returns:
        The preset table.

    Raises:
        ConfigurationError: If the requested preset is missing or if there
            are no presets at all.

    Example:
        ```pycon
        >>> from w3r.presets import select_preset
        >>> presets = {"get": {"method": "GET"}, "post": {"method": "POST"}}
        >>> select_preset(presets, "post")
        {'method': 'POST'}
        >>> select_preset(presets)
        {'method': 'GET'}

        ```
    """
    if name is not None:
        if name not in presets:
            msg = f"Preset '{name}' not found in config file"
            raise ConfigurationError(msg)
        return presets[name]
    if not presets:
        msg = "No presets found in config file"
        raise ConfigurationError(msg)
    return next(iter(presets.values()))


def _to_basic_auth(value: Mapping[str, Any]) -> BasicAuthConfig | None:
    user, password = value.get("user"), value.get("pass")
    if user is None or password is None:
        logger.debug("Ignoring basic_auth without both user and pass")
        return None
    return BasicAuthConfig(user=str(user), password=str(password))


def _to_proxy(value: Mapping[str, Any]) -> ProxyConfig | None:
    host, port = value.get("host"), value.get("port")
    if host is None or port is None:
        logger.debug("Ignoring proxy without both host and port")
        return None
    user, password = value.get("user"), value.get("pass")
    return ProxyConfig(
        host=str(host),
        port=str(port),
        user=None if user is None else str(user),
        password=None if password is None else str(password),
    )


def preset_to_overrides(preset: Mapping[str, Any]) -> dict[str, Any]:
    """Convert a preset table into ``RequestSpec`` field values.

    Unknown keys are ignored. Known keys must hold a value of the type of
    their field: a string, a boolean, a number, a list of strings or a
    table. ``json`` accepts any value, and a string is parsed as JSON.

    Args:
        preset: The preset table.

    Returns:
        Field values for ``RequestSpec.merge``.

    Raises:
        ConfigurationError: If a field holds a value of the wrong type or
            invalid JSON.

    Example:
        ```pycon
        >>> from w3r.presets import preset_to_overrides
        >>> preset_to_overrides({"method": "POST", "json": '{"a": 1}', "colour": "red"})
        {'method': 'POST', 'json': {'a': 1}}

        ```
    """
    overrides: dict[str, Any] = {}
    for key, value in preset.items():
        if key not in PRESET_FIELDS:
            logger.debug(f"Ignoring unknown preset key {key!r}")
            continue
        expected = _expected_type(key, value)
        if expected is not None:
            msg = (
                f"Invalid type for preset field '{key}': expected {expected}, "
                f"got {type(value).__name__}"
            )
            raise ConfigurationError(msg)
        if key == "basic_auth":
            value = _to_basic_auth(value)
        elif key == "proxy":
            value = _to_proxy(value)
        elif key == "json" and isinstance(value, str):
            try:
                value = json.loads(value)
            except ValueError as exc:
                msg = f"Invalid JSON in preset field 'json': {exc}"
                raise ConfigurationError(msg) from exc
        overrides[key] = value
    return overrides


def resolve_spec(
    overrides: Mapping[str, Any], preset: Mapping[str, Any] | None = None
) -> RequestSpec:
    """Resolve the effective request specification.

    Precedence is invocation value > preset value > default; ``None``
    means "not given" at every level.

    Args:
        overrides: Invocation-time values by field name.
        preset: Optional preset table.

    Returns:
        The effective specification.

    Raises:
        ConfigurationError: If a value is invalid.

    Example:
        ```pycon
        >>> from w3r.presets import resolve_spec
        >>> preset = {"url": "https://api.example.com", "method": "POST"}
        >>> resolve_spec({"method": None}, preset).method
        'POST'
        >>> resolve_spec({"method": "GET"}, preset).method
        'GET'

        ```
    """
    try:
        spec = RequestSpec()
        if preset is not None:
            spec = spec.merge(**preset_to_overrides(preset))
        return spec.merge(**overrides)
    except (TypeError, ValueError) as exc:
        msg = f"Invalid configuration: {exc}"
        raise ConfigurationError(msg) from exc
