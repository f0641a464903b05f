"""Dotted-path resolution over source records.

The same recursion walks structured values (pydantic models, dataclasses,
plain objects) and string-keyed mappings, one segment at a time.
"""

from __future__ import annotations

from collections.abc import Mapping
from decimal import Decimal
from typing import Any

from forcemap.core.exceptions import FieldAccessError


def is_empty(value: Any) -> bool:
    """True for ``None`` and zero values (``""``, ``0``, ``False``, empty containers)."""
    if value is None:
        return True
    if isinstance(value, (bool, int, float, Decimal)):
        return value == 0
    if isinstance(value, (str, bytes, Mapping, list, tuple, set, frozenset)):
        return len(value) == 0
    return False


def _segment(source: Any, segment: str, path: str) -> Any:
    if isinstance(source, Mapping):
        return source.get(segment)
    try:
        return getattr(source, segment)
    except AttributeError:
        raise FieldAccessError(path, segment) from None


def resolve_path(source: Any, path: str) -> Any:
    """Follow ``path`` into ``source``.

    Returns ``None`` as soon as an empty intermediate value is reached; a
    missing key in a mapping is empty too.

    Raises:
        FieldAccessError: If a segment names an attribute a structured
            intermediate value does not have.
    """
    return _resolve(source, path, path)


def _resolve(source: Any, remaining: str, path: str) -> Any:
    head, _, rest = remaining.partition(".")
    value = _segment(source, head, path)
    if not rest:
        return value
    if is_empty(value):
        return None
    return _resolve(value, rest, path)
