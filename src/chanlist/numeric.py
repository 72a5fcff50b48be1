"""Tolerant text-to-number conversion for vendor channel-list fields.

Vendor exports mix hexadecimal and decimal encodings and are full of
blank or malformed fields.  Every function here is total: it never
raises and returns zero for anything it cannot read, so format plugins
can parse field by field without threading errors through.

Example
-------
::

    from chanlist.numeric import parse_decimal, parse_int

    parse_int("0x1A")      # 26
    parse_int("  -7 ")     # -7
    parse_int("n/a")       # 0
    parse_decimal("3.14")  # Decimal('3.14')
"""
from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation

_HEX_DIGITS = re.compile(r"\s*([0-9a-fA-F]+)\s*", re.ASCII)
_SIGNED_DECIMAL = re.compile(r"\s*[+-]?[0-9]+\s*", re.ASCII)
_UNSIGNED_FRACTION = re.compile(r"(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)", re.ASCII)

INT32_BITS = 32
INT64_BITS = 64


def _is_hex_literal(text: str) -> bool:
    return len(text) > 2 and text[0] == "0" and text[1] in "xX"


def _parse_hex(digits: str, bits: int) -> int:
    """Read *digits* as an unsigned hex number reinterpreted as signed *bits* wide."""
    match = _HEX_DIGITS.fullmatch(digits)
    if match is None:
        return 0
    value = int(match.group(1), 16)
    if value >> bits:
        return 0
    if value >> (bits - 1):
        value -= 1 << bits
    return value


def _parse_signed(text: str, bits: int) -> int:
    if _SIGNED_DECIMAL.fullmatch(text) is None:
        return 0
    value = int(text)
    limit = 1 << (bits - 1)
    if not -limit <= value < limit:
        return 0
    return value


def _parse_integer(text: str | None, bits: int) -> int:
    if text is None or not text.strip():
        return 0
    if _is_hex_literal(text):
        return _parse_hex(text[2:], bits)
    return _parse_signed(text, bits)


def parse_int(text: str | None) -> int:
    """Parse a 32-bit integer field.

    ``0x``/``0X`` prefixed text is read as hexadecimal; eight hex digits
    wrap to a negative value the way a 32-bit register would.  Anything
    else is read as a signed base-10 number.

    Parameters
    ----------
    text:
        Raw field text; ``None`` is accepted.

    Returns
    -------
    int
        The parsed value, or ``0`` when *text* is blank, malformed, or out
        of the signed 32-bit range.
    """
    return _parse_integer(text, INT32_BITS)


def parse_long(text: str | None) -> int:
    """Parse a 64-bit integer field.  Same rules as :func:`parse_int`."""
    return _parse_integer(text, INT64_BITS)


def parse_decimal(text: str | None) -> Decimal:
    """Parse a fixed-point field such as a frequency or symbol rate.

    Only plain digits with an optional single ``.`` are accepted.  Signs,
    exponents, thousands separators and surrounding whitespace are all
    rejected, matching the invariant-culture form vendors write.

    Returns
    -------
    Decimal
        The parsed value, or ``Decimal(0)`` on blank or malformed input.
    """
    if text is None or not text.strip():
        return Decimal(0)
    if _UNSIGNED_FRACTION.fullmatch(text) is None:
        return Decimal(0)
    try:
        return Decimal(text)
    except InvalidOperation:
        return Decimal(0)


__all__ = ["parse_int", "parse_long", "parse_decimal"]
