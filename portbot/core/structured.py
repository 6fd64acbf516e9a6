"""Typed access to parsed TOML tables.

``tomllib`` returns plain dicts and lists typed as ``Any``; these helpers
check the shape of each value before config code uses it. A value of the
wrong type reads as missing, so the caller falls back to its default.
"""

from __future__ import annotations

from typing import Mapping, cast

StrDict = dict[str, object]


def as_str_dict(obj: object) -> StrDict | None:
    """Return obj as a table if it is a dict with string keys."""
    if not isinstance(obj, dict):
        return None
    table = cast(dict[object, object], obj)
    if not all(isinstance(k, str) for k in table):
        return None
    return cast(StrDict, table)


def get_table(table: Mapping[str, object], key: str) -> StrDict | None:
    return as_str_dict(table.get(key))


def get_str(table: Mapping[str, object], key: str) -> str | None:
    """Stripped string at key; None if missing, not a str or blank."""
    value = table.get(key)
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def get_bool(table: Mapping[str, object], key: str) -> bool | None:
    value = table.get(key)
    return value if isinstance(value, bool) else None


def get_str_list(table: Mapping[str, object], key: str) -> tuple[str, ...] | None:
    """Stripped strings at key.

    None if the key is missing, the value is not a list, or any item is
    not a non-blank string. An empty list is a valid, empty result.
    """
    value = table.get(key)
    if not isinstance(value, list):
        return None
    items: list[str] = []
    for item in cast(list[object], value):
        if not isinstance(item, str) or not item.strip():
            return None
        items.append(item.strip())
    return tuple(items)
