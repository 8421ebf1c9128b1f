"""
Primitive default table.

Python has no non-nullable primitives, so the zero-value semantics are
keyed on the *declared* return annotation of a reader.  A bare ``int``
annotation behaves like a primitive and reads as ``0`` when never written;
``Optional[int]`` (or any other annotation) reads as ``None``.

``char``, ``byte``, ``short`` and ``long`` are ``NewType`` aliases so that
contracts can state the narrower intent and still get a zero value.
"""
from __future__ import annotations

from types import MappingProxyType
from typing import Any, Mapping, NewType

char = NewType("char", str)
byte = NewType("byte", int)
short = NewType("short", int)
long = NewType("long", int)

NUL = "\u0000"

PRIMITIVE_DEFAULTS: Mapping[Any, Any] = MappingProxyType({
    int:     0,
    long:    0,
    short:   0,
    byte:    0,
    bool:    False,
    float:   0.0,
    complex: 0j,
    char:    NUL,
})


def is_primitive(annotation: Any) -> bool:
    """Return True if *annotation* is a key of :data:`PRIMITIVE_DEFAULTS`."""
    try:
        return annotation in PRIMITIVE_DEFAULTS
    except TypeError:  # unhashable annotation objects
        return False


def default_for(annotation: Any) -> Any:
    """Zero value for a primitive *annotation*, ``None`` for anything else."""
    if is_primitive(annotation):
        return PRIMITIVE_DEFAULTS[annotation]
    return None
