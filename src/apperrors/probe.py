"""Guarded structural access for untyped error values.

Classification inspects values it does not own: dicts parsed from JSON,
exceptions from arbitrary libraries, response objects with lazy
properties. Every read here turns a failure into ``None`` so the
dispatcher can move on to its next heuristic.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

logger = logging.getLogger(__name__)

# Values with no inspectable fields
_SCALARS = (str, bytes, bytearray, int, float, complex, type(None))


def safe_invoke[T](fn: Callable[[], T]) -> T | None:
    """Run ``fn``; return its result, or None if it raised."""
    try:
        return fn()
    except Exception:
        logger.debug("Guarded call failed", exc_info=True)
        return None


def get_field(value: Any, name: str) -> Any:
    """Read ``name`` from a mapping key or an object attribute.

    Scalars have no fields. Raising properties and broken
    ``__getattr__``/``get`` implementations read as None.
    """
    if isinstance(value, _SCALARS):
        return None
    if isinstance(value, Mapping):
        return safe_invoke(lambda: value.get(name))
    return safe_invoke(lambda: getattr(value, name, None))


def has_fields(value: Any) -> bool:
    """True for values that can carry named fields."""
    return not isinstance(value, _SCALARS)


def is_array(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def is_int(value: Any) -> bool:
    # bool is an int subclass but never a status
    return isinstance(value, int) and not isinstance(value, bool)


def get_string(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def normalize_string(value: Any) -> str | None:
    """Trimmed string, or None for non-strings and blank text."""
    if not isinstance(value, str):
        return None
    trimmed = value.strip()
    return trimmed or None


def first_int(value: Any, *names: str) -> int | None:
    """First integer-valued field among ``names``."""
    for name in names:
        candidate = get_field(value, name)
        if is_int(candidate):
            return candidate
    return None


def first_string(value: Any, *names: str) -> str | None:
    """First non-blank string field among ``names`` (untrimmed)."""
    for name in names:
        candidate = get_field(value, name)
        if normalize_string(candidate):
            return candidate
    return None
