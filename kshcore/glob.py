"""Shell pattern matching on patterns marked up with MAGIC characters.

Pattern characters that are active (not quoted) are preceded by ``MAGIC``.
The extended operators ``*( +( ?( @( !(`` are written as ``MAGIC`` followed
by the operator character with its top bit set (0x80). A plain ``(`` group
uses a space with the top bit set. Alternatives are separated by
``MAGIC |`` and a group ends with ``MAGIC )``. There is no ``(`` character
after the operator.
"""

from __future__ import annotations

from typing import Callable, Optional

__all__ = ["MAGIC", "gmatch", "has_globbing", "debunk"]

MAGIC = "\x07"
_EXT_OPS = "*+?@! "
_NUL = "\0"


def _x(op: str) -> str:
    return chr(0x80 | ord(op))


_X_STAR = _x("*")
_X_PLUS = _x("+")
_X_QUEST = _x("?")
_X_AT = _x("@")
_X_SPACE = _x(" ")
_X_BANG = _x("!")

_CLASSES: dict[str, Callable[[str], bool]] = {
    "alnum": lambda c: c.isascii() and c.isalnum(),
    "alpha": lambda c: c.isascii() and c.isalpha(),
    "blank": lambda c: c in " \t",
    "cntrl": lambda c: ord(c) < 32 or ord(c) == 127,
    "digit": lambda c: "0" <= c <= "9",
    "graph": lambda c: 33 <= ord(c) <= 126,
    "lower": lambda c: "a" <= c <= "z",
    "print": lambda c: 32 <= ord(c) <= 126,
    "punct": lambda c: 33 <= ord(c) <= 126 and not c.isalnum(),
    "space": lambda c: c in " \t\n\r\f\v",
    "upper": lambda c: "A" <= c <= "Z",
    "xdigit": lambda c: c in "0123456789abcdefABCDEF",
}


def _at(p: str, i: int) -> str:
    return p[i] if 0 <= i < len(p) else _NUL


def _high(c: str) -> bool:
    return 0x80 <= ord(c) <= 0xFF


def _is_ext(c: str) -> bool:
    return _high(c) and chr(ord(c) & 0x7F) in _EXT_OPS


def gmatch(string: Optional[str], pattern: Optional[str], isfile: bool = False) -> bool:
    """Return True if ``string`` matches the marked-up ``pattern``.

    Unless ``isfile`` is set, a pattern without valid globbing is compared
    literally after its markup is removed.
    """
    if string is None or pattern is None:
        return False
    if not isfile and not has_globbing(pattern):
        return debunk(pattern) == string
    return _match(string, 0, len(string), pattern, 0, len(pattern))


def has_globbing(pattern: str) -> bool:
    """Return True if ``pattern`` holds pattern characters and is well formed."""
    p = pattern
    pe = len(p)
    i = 0
    nest = bnest = 0
    saw_glob = False
    in_bracket = False
    while i < pe:
        if p[i] != MAGIC:
            i += 1
            continue
        i += 1
        c = _at(p, i)
        if c in ("*", "?"):
            saw_glob = True
        elif c == "[":
            if not in_bracket:
                saw_glob = True
                in_bracket = True
                if _at(p, i + 1) == MAGIC and _at(p, i + 2) == "!":
                    i += 2
                if _at(p, i + 1) == MAGIC and _at(p, i + 2) == "]":
                    i += 2
        elif c == "]":
            if in_bracket:
                if bnest:
                    return False
                in_bracket = False
        elif _is_ext(c):
            saw_glob = True
            if in_bracket:
                bnest += 1
            else:
                nest += 1
        elif c == "|":
            if in_bracket and not bnest:
                return False
        elif c == ")":
            if in_bracket:
                if bnest == 0:
                    return False
                bnest -= 1
            elif nest:
                nest -= 1
        i += 1
    return saw_glob and not in_bracket and not nest


def debunk(pattern: str) -> str:
    """Remove the markup from ``pattern``, spelling extended groups as ``op(``."""
    if MAGIC not in pattern:
        return pattern
    out: list[str] = []
    i = 0
    n = len(pattern)
    while i < n:
        ch = pattern[i]
        if ch == MAGIC:
            i += 1
            if i >= n:
                break
            ch = pattern[i]
            if _is_ext(ch):
                op = chr(ord(ch) & 0x7F)
                if op != " ":
                    out.append(op)
                out.append("(")
                i += 1
                continue
        out.append(ch)
        i += 1
    return "".join(out)


def _pat_scan(p: str, pi: int, pe: int, match_sep: bool) -> Optional[int]:
    """Find the end of a group (or the next alternative) starting at ``pi``."""
    nest = 0
    while pi < pe:
        if p[pi] != MAGIC:
            pi += 1
            continue
        pi += 1
        c = _at(p, pi)
        if c == ")":
            if nest == 0:
                return pi + 1
            nest -= 1
        elif c == "|" and match_sep and nest == 0:
            return pi + 1
        if _is_ext(c):
            nest += 1
        pi += 1
    return None


def _posix_cclass(p: str, pi: int, test: str) -> tuple[int, int]:
    """Check a ``[:name:]`` class; returns (result, position after it)."""
    colon = p.find(":", pi)
    if colon < 0 or _at(p, colon + 1) != MAGIC:
        return -1, pi - 2
    end = colon + 3
    check = _CLASSES.get(p[pi:colon])
    if check is None:
        return -2, end
    return (1 if check(test) else 0), end


def _cclass(p: str, pi: int, sub: str) -> Optional[int]:
    orig = pi
    negate = False
    found = False
    if _at(p, pi) == MAGIC:
        pi += 1
        if _at(p, pi) == "!":
            negate = True
            pi += 1
    while True:
        if (_at(p, pi) == MAGIC and _at(p, pi + 1) == "[" and _at(p, pi + 2) == ":") or (
            _at(p, pi) == "[" and _at(p, pi + 1) == ":"
        ):
            while True:
                pp = pi + (1 if _at(p, pi) == MAGIC else 0) + 2
                rv, pi = _posix_cclass(p, pp, sub)
                if rv == 1:
                    found = True
                elif rv == -2:
                    return None
                if not (
                    rv != -1
                    and _at(p, pi) == MAGIC
                    and _at(p, pi + 1) == "["
                    and _at(p, pi + 2) == ":"
                ):
                    break
            if _at(p, pi) == MAGIC and _at(p, pi + 1) == "]":
                break

        c = _at(p, pi)
        pi += 1
        if c == MAGIC:
            c = _at(p, pi)
            pi += 1
            if _high(c):
                c = chr(ord(c) & 0x7F)
                if c == " ":
                    c = "("
        if c == _NUL:
            # No closing bracket: treat the opening one as literal.
            return orig if sub == "[" else None
        if _at(p, pi) == MAGIC and _at(p, pi + 1) == "-" and (
            _at(p, pi + 2) != MAGIC or _at(p, pi + 3) != "]"
        ):
            pi += 2
            d = _at(p, pi)
            pi += 1
            if d == MAGIC:
                d = _at(p, pi)
                pi += 1
                if _high(d):
                    d = chr(ord(d) & 0x7F)
            if c > d:
                return None
        else:
            d = c
        if c == sub or c <= sub <= d:
            found = True
        if _at(p, pi) == MAGIC and _at(p, pi + 1) == "]":
            break
    return pi + 2 if found != negate else None


def _match(s: str, si: int, se: int, p: str, pi: int, pe: int) -> bool:
    while pi < pe:
        pc = p[pi]
        pi += 1
        sc = s[si] if si < se else _NUL
        si += 1
        if pc != MAGIC:
            if sc != pc:
                return False
            continue
        op = _at(p, pi)
        pi += 1

        if op == "[":
            if sc == _NUL:
                return False
            nxt = _cclass(p, pi, sc)
            if nxt is None:
                return False
            pi = nxt

        elif op == "?":
            if sc == _NUL:
                return False

        elif op == "*":
            while _at(p, pi) == MAGIC and _at(p, pi + 1) == "*":
                pi += 2
            if pi == pe:
                return True
            k = si - 1
            while True:
                if _match(s, k, se, p, pi, pe):
                    return True
                if k >= se:
                    return False
                k += 1

        elif op in (_X_PLUS, _X_STAR):
            prest = _pat_scan(p, pi, pe, False)
            if prest is None:
                return False
            si -= 1
            if op == _X_STAR and _match(s, si, se, p, prest, pe):
                return True
            psub = pi
            while True:
                pnext = _pat_scan(p, psub, pe, True)
                if pnext is None:
                    return False
                for srest in range(si, se + 1):
                    if _match(s, si, srest, p, psub, pnext - 2) and (
                        _match(s, srest, se, p, prest, pe)
                        or (si != srest and _match(s, srest, se, p, pi - 2, pe))
                    ):
                        return True
                if pnext == prest:
                    break
                psub = pnext
            return False

        elif op in (_X_QUEST, _X_AT, _X_SPACE):
            prest = _pat_scan(p, pi, pe, False)
            if prest is None:
                return False
            si -= 1
            if op == _X_QUEST and _match(s, si, se, p, prest, pe):
                return True
            psub = pi
            while True:
                pnext = _pat_scan(p, psub, pe, True)
                if pnext is None:
                    return False
                first = se if prest == pe else si
                for srest in range(first, se + 1):
                    if _match(s, si, srest, p, psub, pnext - 2) and _match(
                        s, srest, se, p, prest, pe
                    ):
                        return True
                if pnext == prest:
                    break
                psub = pnext
            return False

        elif op == _X_BANG:
            prest = _pat_scan(p, pi, pe, False)
            if prest is None:
                return False
            si -= 1
            for srest in range(si, se + 1):
                matched = False
                psub = pi
                while True:
                    pnext = _pat_scan(p, psub, pe, True)
                    if pnext is None:
                        break
                    if _match(s, si, srest, p, psub, pnext - 2):
                        matched = True
                        break
                    if pnext == prest:
                        break
                    psub = pnext
                if not matched and _match(s, srest, se, p, prest, pe):
                    return True
            return False

        else:
            if sc != op:
                return False
    return si == se