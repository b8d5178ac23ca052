"""printf-style formatting with the shell's own rules.

The conversions follow the shell's formatter rather than Python's ``%``
operator. Flags and widths may come in any order before the conversion
character. An uppercase conversion character selects uppercase hex digits.
A precision on a number that is wider than the number replaces the field
width and turns on zero padding.
"""

from __future__ import annotations

from enum import IntFlag
from typing import Any, Iterator

__all__ = ["format_printf", "format_truncated"]


class _Fl(IntFlag):
    HASH = 0x001
    PLUS = 0x002
    RIGHT = 0x004
    BLANK = 0x008
    SHORT = 0x010
    LONG = 0x020
    LLONG = 0x040
    ZERO = 0x080
    DOT = 0x100
    UPPER = 0x200
    NUMBER = 0x400


_NULL_STRING = "(null %s)"


def _next_arg(args: Iterator[Any]) -> Any:
    try:
        return next(args)
    except StopIteration:
        raise TypeError("not enough arguments for format string") from None


def _format_number(conv: str, flags: _Fl, value: int) -> str:
    bits = 64 if flags & (_Fl.LONG | _Fl.LLONG) else 32
    value &= (1 << bits) - 1
    if conv in "di":
        if value >> (bits - 1):
            value -= 1 << bits
        negative = value < 0
        digits = str(-value if negative else value)
        if negative:
            return "-" + digits
        if flags & _Fl.PLUS:
            return "+" + digits
        if flags & _Fl.BLANK:
            return " " + digits
        return digits
    if conv == "u":
        return str(value)
    if conv == "o":
        digits = format(value, "o")
        if flags & _Fl.HASH and digits[0] != "0":
            digits = "0" + digits
        return digits
    upper = bool(flags & _Fl.UPPER)
    digits = format(value, "X" if upper else "x")
    if flags & _Fl.HASH:
        digits = ("0X" if upper else "0x") + digits
    return digits


def format_printf(fmt: str, *args: Any) -> str:
    """Format ``args`` according to ``fmt`` and return the text."""
    out: list[str] = []
    argv = iter(args)
    i = 0
    n = len(fmt)
    while i < n:
        c = fmt[i]
        i += 1
        if c != "%":
            out.append(c)
            continue

        flags = _Fl(0)
        field = 0
        precision = 0
        while i < n:
            c = fmt[i]
            i += 1
            if c == "#":
                flags |= _Fl.HASH
            elif c == "+":
                flags |= _Fl.PLUS
            elif c == "-":
                flags |= _Fl.RIGHT
            elif c == " ":
                flags |= _Fl.BLANK
            elif c == "0":
                if not flags & _Fl.DOT:
                    flags |= _Fl.ZERO
            elif c == ".":
                flags |= _Fl.DOT
                precision = 0
            elif c == "*":
                tmp = int(_next_arg(argv))
                if flags & _Fl.DOT:
                    precision = tmp
                else:
                    field = tmp
                    if field < 0:
                        field = -field
                        flags |= _Fl.RIGHT
            elif c == "l":
                if i < n and fmt[i] == "l":
                    i += 1
                    flags |= _Fl.LLONG
                else:
                    flags |= _Fl.LONG
            elif c == "h":
                flags |= _Fl.SHORT
            elif "0" <= c <= "9":
                j = i
                while j < n and "0" <= fmt[j] <= "9":
                    j += 1
                tmp = int(fmt[i - 1:j])
                i = j
                if flags & _Fl.DOT:
                    precision = tmp
                else:
                    field = tmp
            else:
                break
        else:
            c = ""

        if precision < 0:
            precision = 0
        if not c:
            break

        if "A" <= c <= "Z":
            flags |= _Fl.UPPER
            c = c.lower()

        if c in "pdioux":
            if c == "p":
                flags = (flags & ~(_Fl.LLONG | _Fl.SHORT)) | _Fl.LONG
            flags |= _Fl.NUMBER
            s = _format_number(c, flags, int(_next_arg(argv)))
            if flags & _Fl.DOT:
                if precision > len(s):
                    field = precision
                    flags |= _Fl.ZERO
                else:
                    precision = len(s)
        elif c == "s":
            value = _next_arg(argv)
            s = _NULL_STRING if value is None else str(value)
        elif c == "c":
            flags &= ~_Fl.DOT
            value = _next_arg(argv)
            s = chr(value & 0xFF) if isinstance(value, int) else str(value)[:1]
        else:
            s = c

        length = len(s)
        if not flags & _Fl.DOT or length < precision:
            precision = length
        pos = 0
        pad = " "
        if field > precision:
            field -= precision
            if not flags & _Fl.RIGHT:
                if flags & _Fl.ZERO and flags & _Fl.NUMBER:
                    if s[0] in "+- ":
                        out.append(s[0])
                        pos = 1
                        precision -= 1
                    elif s[0] == "0":
                        out.append(s[0])
                        pos = 1
                        precision -= 1
                        if precision > 0 and s[pos] in "xX":
                            out.append(s[pos])
                            pos += 1
                            precision -= 1
                    pad = "0"
                else:
                    pad = "0" if flags & _Fl.ZERO else " "
                out.append(pad * field)
                field = 0
        else:
            field = 0

        if precision > 0:
            out.append(s[pos:pos + precision])
        if field > 0:
            out.append(pad * field)

    return "".join(out)


def format_truncated(size: int, fmt: str, *args: Any) -> tuple[str, int]:
    """Format into a buffer of ``size`` bytes, one kept for the terminator.

    Returns the text that fits (at most ``size - 1`` characters) and the
    length the full text would have had.
    """
    if size <= 0:
        raise ValueError(f"format_truncated: bad size {size}")
    text = format_printf(fmt, *args)
    return text[:size - 1], len(text)