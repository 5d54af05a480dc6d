"""Scalar formatting and parsing for the wire format.

Rendering rules::

    +------------------+-------------------------------+
    | Kind             | Wire form                     |
    +------------------+-------------------------------+
    | signed integer   | -1234                         |
    | unsigned integer | "0x1234abcd" (quoted, lower)  |
    | boolean          | true / false                  |
    | double           | 77.1234567 (shortest repr)    |
    | string           | "Hello World." (no escaping)  |
    +------------------+-------------------------------+

Parsing works on the raw token text captured by the parser. Numeric and
boolean parsers accept a token wrapped in one pair of double quotes, since
unsigned values travel quoted.
"""

from __future__ import annotations

import math
import re
from typing import Union

_DECIMAL_RE = re.compile(r"[+-]?\d+")
_HEX_RE = re.compile(r"([+-]?)0[xX]([0-9a-fA-F]+)")
_FLOAT_RE = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")
_NUMERIC_RE = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)")


class UInt(int):
    """An integer that renders as quoted lowercase hexadecimal."""

    def __new__(cls, value: int = 0) -> UInt:
        value = int(value)
        if value < 0:
            raise ValueError(f"Unsigned value must be >= 0, got {value}")
        return super().__new__(cls, value)

    def __repr__(self) -> str:
        return f"UInt(0x{int(self):x})"


Scalar = Union[bool, UInt, int, float, str]


# ─── FORMATTING ──────────────────────────────────────────────────────

def format_int(value: int) -> str:
    return str(int(value))


def format_unsigned(value: int) -> str:
    if value < 0:
        raise ValueError(f"Unsigned value must be >= 0, got {value}")
    return f'"0x{int(value):x}"'


def format_bool(value: bool) -> str:
    return "true" if value else "false"


def format_double(value: float) -> str:
    """Render a double with enough digits to round-trip.

    Raises:
        ValueError: For ``nan`` and infinities, which have no wire literal.
    """
    value = float(value)
    if not math.isfinite(value):
        raise ValueError(f"Cannot encode non-finite double {value!r}")
    return repr(value)


def format_string(value: str) -> str:
    return f'"{value}"'


def format_scalar(value: Scalar) -> str:
    """Render any supported scalar.

    Raises:
        TypeError: If ``value`` is not one of the supported scalar types.
    """
    # bool is an int subclass, UInt too; order matters.
    if isinstance(value, bool):
        return format_bool(value)
    if isinstance(value, UInt):
        return format_unsigned(value)
    if isinstance(value, int):
        return format_int(value)
    if isinstance(value, float):
        return format_double(value)
    if isinstance(value, str):
        return format_string(value)
    raise TypeError(f"Unsupported scalar type: {type(value).__name__}")


# ─── PARSING ─────────────────────────────────────────────────────────

def is_quoted(raw: str) -> bool:
    return len(raw) >= 2 and raw[0] == '"' and raw[-1] == '"'


def unquote(raw: str) -> str:
    """Strip one pair of surrounding double quotes, if present."""
    return raw[1:-1] if is_quoted(raw) else raw


def parse_string(raw: str) -> str:
    """Return the raw token unchanged, quotes included."""
    return raw


def parse_int(raw: str) -> int:
    text = unquote(raw)
    if _DECIMAL_RE.fullmatch(text):
        return int(text, 10)
    match = _HEX_RE.fullmatch(text)
    if match:
        sign, digits = match.groups()
        value = int(digits, 16)
        return -value if sign == "-" else value
    raise ValueError(f"Not an integer: {raw!r}")


def parse_unsigned(raw: str) -> UInt:
    text = unquote(raw)
    if text.startswith("-"):
        raise ValueError(f"Not an unsigned integer: {raw!r}")
    return UInt(parse_int(text))


def parse_bool(raw: str) -> bool:
    text = unquote(raw).lower()
    if text == "true":
        return True
    if text == "false":
        return False
    raise ValueError(f"Not a boolean: {raw!r}")


def parse_double(raw: str) -> float:
    text = unquote(raw)
    if not _FLOAT_RE.fullmatch(text):
        raise ValueError(f"Not a double: {raw!r}")
    return float(text)


def is_numeric(text: str) -> bool:
    """True for a plain decimal integer or fraction such as ``1.2345``."""
    return _NUMERIC_RE.fullmatch(text) is not None


def is_object(text: str) -> bool:
    """True when ``text`` looks like a braced object."""
    text = text.strip()
    return len(text) >= 2 and text[0] == "{" and text[-1] == "}"
