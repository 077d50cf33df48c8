"""
Extraction of a JSON configuration blob stored in another source.

A single reserved key, ``conf.json``, may hold a JSON object. Applications
use it to pass structured configuration through a single flag or variable
(``--conf.json='{"port": 80}'`` or ``CONF_JSON=...``).
"""

from __future__ import annotations

import json as _json

import confschema.constants as constants
import confschema.errors as errors
import confschema.keys as keys
import confschema.sources.base as base
import confschema.sources.data as data

JSON_CONF_KEY = keys.ConfigurationKey(constants.JSON_CONF_KEY_PATH)
"""The reserved key holding a JSON configuration blob."""


def load_json_conf(
    source: base.ConfigurationSource,
    key: keys.ConfigurationKey = JSON_CONF_KEY,
) -> data.DataSource | None:
    """
    Parse the JSON object stored in ``source`` under ``key``.

    Args:
        source: The source to read the JSON string from.
        key: The key holding the JSON string.

    Returns:
        A DataSource described by the key's description in ``source``, or
        None if ``source`` has no value under ``key``.

    Raises:
        ConfigurationError: If the value is not valid JSON or the top-level
            JSON value is not an object.
    """
    json_string = source.get(key)
    if json_string is None:
        return None

    try:
        parsed = _json.loads(json_string)
    except _json.JSONDecodeError as e:
        raise errors.ConfigurationError(
            f"Failed to parse JSON: {e.msg} (line {e.lineno}, column {e.colno})",
            source=source,
            key=key,
        ) from e

    if not isinstance(parsed, dict):
        raise errors.ConfigurationError(
            f"Expected JSON value to be an object, but got {_json_type_name(parsed)}.",
            source=source,
            key=key,
        )

    return data.DataSource(parsed, description=source.describe_key(key))


def _json_type_name(value: object) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    return type(value).__name__
