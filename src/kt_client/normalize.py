"""
Response normalization.

The SOAP layer hands back a mix of compound-value objects, ordered dicts,
lists and plain scalars. Everything the client returns goes through
``normalize`` first so callers only ever see dicts, lists and scalars.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any

SCALAR_TYPES = (str, bytes, int, float, bool, Decimal, datetime, date, time)


def is_scalar(value: Any) -> bool:
    return value is None or isinstance(value, SCALAR_TYPES)


def normalize(value: Any, strict: bool = False) -> Any:
    """Convert a wire response into nested dicts and lists.

    Containers keep their keys (mappings, objects) or their order (lists,
    tuples). A bare scalar at the top level is wrapped in a one-element
    list, and ``None`` or ``""`` become an empty list. With ``strict=True``
    a bare scalar is rejected with ``TypeError`` instead.
    """
    if is_scalar(value):
        if strict:
            raise TypeError(f"Cannot normalize a bare {type(value).__name__} response")
        if value is None or value == "":
            return []
        return [value]
    return _convert(value)


def normalize_list(value: Any) -> list[Any]:
    """Normalize a listing. A lone record (one hit, one user) comes back as a one-element list."""
    result = normalize(value)
    if isinstance(result, dict):
        return [result]
    return result


def _convert(value: Any) -> Any:
    if is_scalar(value):
        return value
    if isinstance(value, Mapping):
        return {key: _convert(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_convert(item) for item in value]
    # zeep compound values keep their fields in __values__
    fields = getattr(value, "__values__", None)
    if isinstance(fields, Mapping):
        return {key: _convert(item) for key, item in fields.items()}
    if hasattr(value, "__dict__"):
        return {
            key: _convert(item)
            for key, item in vars(value).items()
            if not key.startswith("_")
        }
    return value
