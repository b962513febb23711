"""Shared serialization helpers for camelCase conversion.

Provides ``camel_case`` for single keys and ``keys_to_camel_case``
for rewriting every object key inside an arbitrary JSON value
decoded from a Sendblue response.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any, TypeAlias

JSONValue: TypeAlias = "dict[str, JSONValue] | list[JSONValue] | str | int | float | bool | None"

# A separator directly followed by a letter; trailing separators are kept.
_SEPARATOR_PATTERN = re.compile(r"[-_]([A-Za-z])")


def camel_case(key: str) -> str:
    """Convert a snake_case or kebab-case string to camelCase.

    Every hyphen or underscore immediately followed by a letter is
    dropped and the letter is uppercased.  Anything else, including
    a separator followed by a digit or at the end of the string, is
    left untouched.

    Args:
        key: An identifier such as ``"media_url"`` or ``"no-sep"``.

    Returns:
        The camelCase equivalent, e.g. ``"mediaUrl"``.
    """
    return _SEPARATOR_PATTERN.sub(lambda match: match.group(1).upper(), key)


def keys_to_camel_case(value: Any) -> Any:
    """Recursively convert mapping keys to camelCase.

    Mappings are rebuilt with converted keys in their original
    iteration order; when two keys collapse to the same camelCase
    key the later one wins.  Lists and tuples are rebuilt as lists
    of the same length.  Every other value, strings included, is
    returned as-is.
    """
    if isinstance(value, Mapping):
        result: dict[Any, Any] = {}
        for key, item in value.items():
            new_key = camel_case(key) if isinstance(key, str) else key
            result[new_key] = keys_to_camel_case(item)
        return result
    if isinstance(value, (list, tuple)):
        return [keys_to_camel_case(item) for item in value]
    return value
