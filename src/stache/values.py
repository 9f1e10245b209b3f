"""Value helpers shared by the resolver, the renderer and the directives.

Template data is plain Python: ``None``, ``bool``, numbers, ``str``,
sequences and mappings, plus objects read through their public attributes.
Nothing here copies caller data.

Thread-Safety:
All functions are pure.

"""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from typing import Any


class _Missing:
    """Sentinel for a path that did not resolve.

    Distinct from ``None``, which is a legitimate (null) value.
    """

    __slots__ = ()
    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = object.__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"

    def __reduce__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


def is_sequence(value: Any) -> bool:
    """True for list-like values; strings and bytes are scalars here."""
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


def is_truthy(value: Any, include_zero: bool = False) -> bool:
    """Truthiness used by control-flow directives to pick a branch.

    ========================  =====================================
    value                     truthy?
    ========================  =====================================
    ``None`` / ``MISSING``    no
    ``bool``                  the bool itself
    number                    non-zero; zero only if ``include_zero``
    ``NaN``                   no
    str / sequence / mapping  non-empty
    anything else             yes
    ========================  =====================================
    """
    if value is None or value is MISSING:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        if isinstance(value, float) and math.isnan(value):
            return False
        return include_zero or value != 0
    if isinstance(value, (str, bytes, Mapping)) or is_sequence(value):
        return len(value) > 0
    return True


def render_value(value: Any) -> str:
    """Convert a value to its text form for output.

    ``None`` and ``MISSING`` render empty, booleans as ``true``/``false``,
    and arrays and objects as ``[object]``.
    """
    if value is None or value is MISSING:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, Mapping) or is_sequence(value):
        return "[object]"
    return str(value)


def iter_items(value: Any) -> list[tuple[Any, Any]] | None:
    """Return ``(key, element)`` pairs for ``each``, or None if not iterable.

    Sequences yield ``(index, element)`` in ascending order. Mappings yield
    ``(key, element)`` in insertion order.
    """
    if isinstance(value, Mapping):
        return list(value.items())
    if is_sequence(value):
        return list(enumerate(value))
    return None
