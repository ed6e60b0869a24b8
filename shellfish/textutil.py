"""Small text helpers with the exact semantics the shell relies on."""

from __future__ import annotations

_WHITESPACE = frozenset(" \t\n\v\f\r")


def _wrap(value: int, bits: int) -> int:
    """Wrap an integer into a signed two's-complement range of ``bits`` bits."""
    modulus = 1 << bits
    value %= modulus
    if value >= modulus >> 1:
        value -= modulus
    return value


def _parse_leading_int(text: str) -> int:
    """Parse optional whitespace, an optional sign and leading decimal digits."""
    pos = 0
    length = len(text)
    while pos < length and text[pos] in _WHITESPACE:
        pos += 1
    sign = 1
    if pos < length and text[pos] in "+-":
        if text[pos] == "-":
            sign = -1
        pos += 1
    start = pos
    while pos < length and "0" <= text[pos] <= "9":
        pos += 1
    digits = text[start:pos]
    return sign * int(digits) if digits else 0


def atoi(text: str) -> int:
    """Leading integer of ``text`` as a 32-bit signed value; 0 if there is none."""
    return _wrap(_parse_leading_int(text), 32)


def atoll(text: str) -> int:
    """Leading integer of ``text`` as a 64-bit signed value; 0 if there is none."""
    return _wrap(_parse_leading_int(text), 64)


def split(text: str, sep: str) -> list[str]:
    """Split ``text`` on ``sep``, dropping empty pieces."""
    return [piece for piece in text.split(sep) if piece]


def strncmp(a: str, b: str, n: int) -> int:
    """Compare at most ``n`` characters; the end of a string acts as a NUL."""
    for pos in range(n):
        ca = ord(a[pos]) if pos < len(a) else 0
        cb = ord(b[pos]) if pos < len(b) else 0
        if ca != cb or ca == 0:
            return ca - cb
    return 0