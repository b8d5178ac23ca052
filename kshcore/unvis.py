"""Decoding of text encoded with vis-style escapes."""

from __future__ import annotations

from enum import Enum, auto

__all__ = ["UnvisError", "UnvisDecoder", "strunvis"]


class UnvisError(ValueError):
    """An escape sequence could not be decoded."""


class _State(Enum):
    GROUND = auto()
    START = auto()
    META = auto()
    META1 = auto()
    CTRL = auto()
    OCTAL2 = auto()
    OCTAL3 = auto()


class _Status(Enum):
    NONE = auto()
    VALID = auto()
    PUSH = auto()
    NOCHAR = auto()


_SIMPLE = {
    "\\": "\\",
    '"': '"',
    "n": "\n",
    "r": "\r",
    "b": "\b",
    "a": "\007",
    "v": "\v",
    "t": "\t",
    "f": "\f",
    "s": " ",
    "E": "\033",
}

_OCTAL = "01234567"


class UnvisDecoder:
    """Incremental decoder fed one character at a time."""

    def __init__(self) -> None:
        self._state = _State.GROUND
        self._cp = 0

    def _fail(self, message: str) -> UnvisError:
        self._state = _State.GROUND
        return UnvisError(message)

    def _out(self) -> str:
        return chr(self._cp & 0xFF)

    def _step(self, c: str) -> tuple[_Status, str]:
        state = self._state
        if state is _State.GROUND:
            self._cp = 0
            if c == "\\":
                self._state = _State.START
                return _Status.NONE, ""
            return _Status.VALID, c

        if state is _State.START:
            self._state = _State.GROUND
            if c == "-":
                self._cp = 0
                return _Status.NONE, ""
            if c in _SIMPLE:
                return _Status.VALID, _SIMPLE[c]
            if c in _OCTAL:
                self._cp = ord(c) - ord("0")
                self._state = _State.OCTAL2
                return _Status.NONE, ""
            if c == "M":
                self._cp = 0o200
                self._state = _State.META
                return _Status.NONE, ""
            if c == "^":
                self._state = _State.CTRL
                return _Status.NONE, ""
            if c in "\n$":
                return _Status.NOCHAR, ""
            raise self._fail(f"bad escape sequence: \\{c}")

        if state is _State.META:
            if c == "-":
                self._state = _State.META1
            elif c == "^":
                self._state = _State.CTRL
            else:
                raise self._fail(f"bad meta sequence: \\M{c}")
            return _Status.NONE, ""

        if state is _State.META1:
            self._state = _State.GROUND
            self._cp |= ord(c) & 0xFF
            return _Status.VALID, self._out()

        if state is _State.CTRL:
            self._state = _State.GROUND
            if c == "?":
                self._cp |= 0o177
            else:
                self._cp |= ord(c) & 0o37
            return _Status.VALID, self._out()

        if state is _State.OCTAL2:
            if c in _OCTAL:
                self._cp = (self._cp << 3) + ord(c) - ord("0")
                self._state = _State.OCTAL3
                return _Status.NONE, ""
            self._state = _State.GROUND
            return _Status.PUSH, self._out()

        # OCTAL3
        self._state = _State.GROUND
        if c in _OCTAL:
            self._cp = (self._cp << 3) + ord(c) - ord("0")
            return _Status.VALID, self._out()
        return _Status.PUSH, self._out()

    def feed(self, c: str) -> str:
        """Decode one character and return the characters it completes."""
        if len(c) != 1:
            raise ValueError("feed expects a single character")
        out = []
        while True:
            status, ch = self._step(c)
            if status is _Status.VALID:
                out.append(ch)
            elif status is _Status.PUSH:
                out.append(ch)
                continue
            break
        return "".join(out)

    def end(self) -> str:
        """Finish the input and return any character still pending."""
        if self._state in (_State.OCTAL2, _State.OCTAL3):
            self._state = _State.GROUND
            return self._out()
        if self._state is _State.GROUND:
            return ""
        raise UnvisError("incomplete escape sequence")


def strunvis(src: str) -> str:
    """Decode ``src``; input stops at the first NUL character."""
    src = src.split("\0", 1)[0]
    decoder = UnvisDecoder()
    parts = [decoder.feed(c) for c in src]
    parts.append(decoder.end())
    return "".join(parts)