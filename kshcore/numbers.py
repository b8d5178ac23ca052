"""Number conversions used throughout the shell."""

from __future__ import annotations

import errno
import re

__all__ = ["NumberError", "to_base", "parse_decimal", "strtonum"]

_DIGITS = "0123456789ABCDEF"
_U64_MASK = (1 << 64) - 1
_INT_MIN = -(1 << 31)
_INT_MAX = (1 << 31) - 1
_LLONG_MIN = -(1 << 63)
_LLONG_MAX = (1 << 63) - 1

_INTEGER = re.compile(r"[ \t\n\r\f\v]*[+-]?[0-9]+")


class NumberError(ValueError):
    """A string could not be converted to a number."""

    def __init__(self, message: str, reason: str, err: int) -> None:
        super().__init__(message)
        self.reason = reason
        self.errno = err


def to_base(n: int, base: int) -> str:
    """Render ``n`` as an unsigned 64-bit number in ``base`` (2 to 16)."""
    if not 2 <= base <= 16:
        raise ValueError(f"base {base} out of range")
    n &= _U64_MASK
    digits = []
    while True:
        n, rem = divmod(n, base)
        digits.append(_DIGITS[rem])
        if n == 0:
            break
    return "".join(reversed(digits))


def parse_decimal(text: str) -> int:
    """Parse a decimal number that fits strictly inside the int range."""
    if _INTEGER.fullmatch(text) is None:
        raise NumberError(f"{text}: bad number", "bad number", errno.EINVAL)
    value = int(text)
    if value <= _INT_MIN or value >= _INT_MAX:
        raise NumberError(f"{text}: bad number", "bad number", errno.EINVAL)
    return value


def strtonum(text: str, minval: int, maxval: int) -> int:
    """Parse a decimal integer and check it lies in ``[minval, maxval]``.

    Raises NumberError whose ``reason`` is "invalid", "too small" or
    "too large".
    """
    if minval > maxval or _INTEGER.fullmatch(text) is None:
        raise NumberError("invalid", "invalid", errno.EINVAL)
    value = int(text)
    if value < _LLONG_MIN or value < minval:
        raise NumberError("too small", "too small", errno.ERANGE)
    if value > _LLONG_MAX or value > maxval:
        raise NumberError("too large", "too large", errno.ERANGE)
    return value