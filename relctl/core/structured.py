"""Typed reads from parsed TOML (`relctl.toml`) and YAML (branch exclusions).

Loaders hand untyped documents to these helpers, which narrow them or return
None; the loader decides whether None means "unset" or "invalid".
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import cast

StrDict = dict[str, object]


def as_str_dict(obj: object) -> StrDict | None:
    """`obj` as a string-keyed dict, None for any other shape."""
    if not isinstance(obj, dict):
        return None
    d = cast(dict[object, object], obj)
    if any(not isinstance(k, str) for k in d):
        return None
    return cast(StrDict, d)


def get_table(table: Mapping[str, object], key: str) -> StrDict | None:
    return as_str_dict(table.get(key))


def get_str(table: Mapping[str, object], key: str) -> str | None:
    """Stripped string value; None when missing, not a string, or blank."""
    value = table.get(key)
    if not isinstance(value, str):
        return None
    return value.strip() or None


def get_int(table: Mapping[str, object], key: str) -> int | None:
    value = table.get(key)
    # bool is an int subclass; `window_days = true` is not a number of days
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


def get_str_list(table: Mapping[str, object], key: str) -> list[str] | None:
    """Non-blank stripped strings from a list value.

    None when the value is not a list or holds anything but strings.
    """
    value = table.get(key)
    if not isinstance(value, list):
        return None
    items = cast(list[object], value)
    if any(not isinstance(item, str) for item in items):
        return None
    return [s for s in (cast(str, item).strip() for item in items) if s]
