"""Helpers for picking values out of decoded JSON data."""

from __future__ import annotations

import copy
from typing import Any


def json_array_string(val: Any, entry: int) -> str | None:
    """Return the string at index entry of a JSON array, or None.

    None is returned when val is not a list, the index is out of range,
    or the element there is not a string.
    """
    if not isinstance(val, list):
        return None
    if entry < 0 or entry >= len(val):
        return None
    item = val[entry]
    return item if isinstance(item, str) else None


def json_object_dup(val: Any, entry: str) -> Any:
    """Return a shallow copy of the member entry of a JSON object, or None."""
    if not isinstance(val, dict) or entry not in val:
        return None
    return copy.copy(val[entry])