from __future__ import annotations

"""
Value Stringification.

Turns arbitrary log arguments into text. `plain_string` feeds the file
destination, `pretty_string` feeds the console. Both are total over the
values a caller can reasonably hand to a log method.

Zero-argument callables are evaluated lazily and their result stringified
instead. A callable that returns itself recurses until RecursionError.
"""

import dataclasses
import inspect
import json
import math
from collections.abc import Mapping
from concurrent.futures import Future
from decimal import Decimal
from typing import Any


class _Undefined:
    """Marker for an argument that was never given a value."""

    _instance = None

    def __new__(cls) -> "_Undefined":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNDEFINED"


UNDEFINED = _Undefined()

UNKNOWN_TEXT = "[unknown]"


# ==============================================================================
# PUBLIC API
# ==============================================================================

def plain_string(value: Any) -> str:
    """
    Stringify a value for file output.

    Args:
        value: Any log argument.

    Returns:
        str: Undecorated, compact representation.
    """
    return _stringify(value, pretty=False)


def pretty_string(value: Any) -> str:
    """
    Stringify a value for console output.

    Booleans get check marks, numbers are grouped by thousands and
    containers are indented.

    Args:
        value: Any log argument.

    Returns:
        str: Human-friendly representation.
    """
    return _stringify(value, pretty=True)


# ==============================================================================
# PRIVATE HELPERS
# ==============================================================================

def _stringify(value: Any, pretty: bool) -> str:
    if _is_deferred(value):
        return _stringify(value(), pretty)

    if value is UNDEFINED:
        return "undefined"
    if value is None:
        return "null"

    if isinstance(value, bool):
        if pretty:
            return "✔ true" if value else "✗ false"
        return "true" if value else "false"

    if isinstance(value, Future):
        if not value.done() or value.cancelled() or value.exception() is not None:
            return UNKNOWN_TEXT
        return _stringify(value.result(), pretty)

    if inspect.isawaitable(value) or _is_bad_number(value):
        return UNKNOWN_TEXT

    if _is_container(value):
        return _to_json(value, pretty)

    if isinstance(value, (int, float, Decimal)):
        return _group_number(value) if pretty else str(value)

    return str(value)


def _is_deferred(value: Any) -> bool:
    """True for callables (but not classes) that accept zero arguments."""
    if not callable(value) or isinstance(value, type):
        return False
    try:
        inspect.signature(value).bind()
    except TypeError:
        return False
    except ValueError:
        # No introspectable signature (some builtins); assume it can be called bare
        return True
    return True


def _is_bad_number(value: Any) -> bool:
    if isinstance(value, float):
        return math.isnan(value) or math.isinf(value)
    if isinstance(value, Decimal):
        return not value.is_finite()
    return False


def _is_container(value: Any) -> bool:
    if isinstance(value, (Mapping, list, tuple, set, frozenset)):
        return True
    return dataclasses.is_dataclass(value) and not isinstance(value, type)


def _json_default(obj: Any) -> Any:
    if isinstance(obj, (set, frozenset)):
        return list(obj)
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        # Shallow; nested members come back through this hook
        return {f.name: getattr(obj, f.name) for f in dataclasses.fields(obj)}
    return str(obj)


def _to_json(value: Any, pretty: bool) -> str:
    try:
        if isinstance(value, (set, frozenset)) or dataclasses.is_dataclass(value):
            value = _json_default(value)
        if isinstance(value, Mapping) and not isinstance(value, dict):
            value = dict(value)
        if pretty:
            return json.dumps(value, indent=2, ensure_ascii=False, default=_json_default)
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=_json_default)
    except (TypeError, ValueError):
        # Non-string keys or circular references
        return str(value)


def _group_number(value: Any) -> str:
    """Group digits by thousands with at most three fraction digits."""
    if isinstance(value, int):
        return f"{value:,}"
    text = f"{value:,.3f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text
