"""Classify decoded JSON values and format HCL scalar literals.

Values reaching the renderer come straight out of ``json.loads`` (or a
transform applied to it), so the only shapes expected are ``None``, ``str``,
``int``, ``float``, ``bool``, lists and mappings. Anything else is a caller
bug and raises ``UnsupportedValueError``.
"""

import math
import re
from collections.abc import Mapping
from enum import Enum
from typing import Any

from ..errors import UnsupportedValueError

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_-]*$")

_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}


class ValueKind(Enum):
    """Shape of a value as far as HCL rendering is concerned."""

    ABSENT = "absent"
    STRING = "string"
    NUMBER = "number"
    BOOL = "bool"
    SEQUENCE = "sequence"
    MAPPING = "mapping"

    @property
    def is_scalar(self) -> bool:
        return self in (ValueKind.STRING, ValueKind.NUMBER, ValueKind.BOOL)


def classify(value: Any) -> ValueKind:
    """Return the ``ValueKind`` of *value* without modifying it.

    ``None`` is absent; an empty string is still a string. ``bool`` is tested
    before numbers because it subclasses ``int``.
    """
    if value is None:
        return ValueKind.ABSENT
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, bool):
        return ValueKind.BOOL
    if isinstance(value, int):
        return ValueKind.NUMBER
    if isinstance(value, float):
        if not math.isfinite(value):
            raise UnsupportedValueError(value, reason="non-finite number")
        return ValueKind.NUMBER
    if isinstance(value, (list, tuple)):
        return ValueKind.SEQUENCE
    if isinstance(value, Mapping):
        return ValueKind.MAPPING
    raise UnsupportedValueError(value)


def format_number(value) -> str:
    """Render a number, dropping a zero fractional part (``1.0`` -> ``1``)."""
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return repr(value)
    return str(value)


def quote_string(value: str) -> str:
    """Return *value* as a double-quoted HCL string literal.

    Backslashes, quotes and control characters are escaped, and template
    sequences are doubled (``${`` -> ``$${``) so the literal parses back to
    exactly *value*.
    """
    out = []
    length = len(value)
    for i, ch in enumerate(value):
        nxt = value[i + 1] if i + 1 < length else ""
        if ch in _ESCAPES:
            out.append(_ESCAPES[ch])
        elif ord(ch) < 0x20 or ch == "\x7f":
            out.append(f"\\u{ord(ch):04x}")
        elif ch in "$%" and nxt == "{":
            out.append(ch + ch)
        else:
            out.append(ch)
    return '"' + "".join(out) + '"'


def format_scalar(value: Any) -> str:
    """Render a scalar as an HCL literal."""
    kind = classify(value)
    if kind is ValueKind.STRING:
        return quote_string(value)
    if kind is ValueKind.BOOL:
        return "true" if value else "false"
    if kind is ValueKind.NUMBER:
        return format_number(value)
    raise UnsupportedValueError(value, reason=f"expected a scalar, got {kind.value}")


def format_key(key: Any) -> str:
    """Render an object key, quoting it when it is not a bare identifier."""
    if not isinstance(key, str):
        raise UnsupportedValueError(key, reason="mapping keys must be strings")
    if _IDENTIFIER_RE.match(key):
        return key
    return quote_string(key)
