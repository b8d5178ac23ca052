"""Command trees: the parsed form of shell input, and how they print.

Words in a tree are strings of prefix codes. Each unquoted character is
written as ``CHAR`` and the character, each quoted one as ``QCHAR`` and the
character, and a word ends with ``EOS``. ``$(...)`` and ``$((...))`` bodies
follow ``COMSUB``/``EXPRSUB`` and end with a NUL. ``${`` substitutions are
``OSUBST`` plus ``{`` (or another marker), the name and a NUL, then the
word part, then ``CSUBST`` plus ``}``. Extended patterns are ``OPAT`` plus
the operator character, alternatives split by ``SPAT`` and closed by ``CPAT``.
The end of the string counts as ``EOS``.
"""

from __future__ import annotations

import warnings
from dataclasses import dataclass
from enum import IntEnum, IntFlag
from typing import Any, Optional, Sequence

from .numbers import to_base

__all__ = [
    "NodeType",
    "IoWord",
    "Op",
    "EvalFlag",
    "ExecFlag",
    "EOS",
    "CHAR",
    "QCHAR",
    "COMSUB",
    "EXPRSUB",
    "OQUOTE",
    "CQUOTE",
    "OSUBST",
    "CSUBST",
    "OPAT",
    "SPAT",
    "CPAT",
    "IOTYPE",
    "IOREAD",
    "IOWRITE",
    "IORDWR",
    "IOHERE",
    "IOCAT",
    "IODUP",
    "IOEVAL",
    "IOSKIP",
    "IOCLOB",
    "IORDUP",
    "IONAMEXP",
    "wdscan",
    "wdstrip",
    "wdcopy",
    "format_word",
    "format_ioword",
    "format_tree",
    "tcopy",
]

INDENT = 4

# Prefix codes for words.
EOS = "\x00"
CHAR = "\x01"
QCHAR = "\x02"
COMSUB = "\x03"
EXPRSUB = "\x04"
OQUOTE = "\x05"
CQUOTE = "\x06"
OSUBST = "\x07"
CSUBST = "\x08"
OPAT = "\x09"
SPAT = "\x0a"
CPAT = "\x0b"

# Redirection flags.
IOTYPE = 0xF
IOREAD = 0x1
IOWRITE = 0x2
IORDWR = 0x3
IOHERE = 0x4
IOCAT = 0x5
IODUP = 0x6
IOEVAL = 1 << 4
IOSKIP = 1 << 5
IOCLOB = 1 << 6
IORDUP = 1 << 7
IONAMEXP = 1 << 8


class NodeType(IntEnum):
    """Kinds of tree node."""

    TEOF = 0
    TCOM = 1
    TPAREN = 2
    TPIPE = 3
    TLIST = 4
    TOR = 5
    TAND = 6
    TBANG = 7
    TDBRACKET = 8
    TFOR = 9
    TSELECT = 10
    TCASE = 11
    TIF = 12
    TWHILE = 13
    TUNTIL = 14
    TELIF = 15
    TPAT = 16
    TBRACE = 17
    TASYNC = 18
    TFUNCT = 19
    TTIME = 20
    TEXEC = 21
    TCOPROC = 22


class EvalFlag(IntFlag):
    """How the words of a command are expanded."""

    NONE = 0
    DOBLANK = 1 << 0
    DOGLOB = 1 << 1
    DOPAT = 1 << 2
    DOTILDE = 1 << 3
    DONTRUNCOMMAND = 1 << 4
    DOASNTILDE = 1 << 5
    DOBRACE = 1 << 6
    DOMAGIC = 1 << 7
    DOTEMP = 1 << 8
    DOVACHECK = 1 << 9
    DOMARKDIRS = 1 << 10


class ExecFlag(IntFlag):
    """How a tree is executed."""

    NONE = 0
    XEXEC = 1 << 0
    XFORK = 1 << 1
    XBGND = 1 << 2
    XPIPEI = 1 << 3
    XPIPEO = 1 << 4
    XPIPE = XPIPEI | XPIPEO
    XXCOM = 1 << 5
    XPCLOSE = 1 << 6
    XCCLOSE = 1 << 7
    XERROK = 1 << 8
    XCOPROC = 1 << 9
    XTIME = 1 << 10


@dataclass
class IoWord:
    """One redirection."""

    unit: int
    flag: int
    name: Optional[str] = None
    delim: Optional[str] = None
    heredoc: Optional[str] = None


@dataclass
class Op:
    """A node of a command tree."""

    type: int
    args: Optional[list[str]] = None
    vars: Optional[list[str]] = None
    ioact: Optional[list[IoWord]] = None
    left: Optional["Op"] = None
    right: Optional["Op"] = None
    str: Optional[str] = None
    lineno: int = 0
    evalflags: int = 0
    ksh_func: bool = False


def _at(wp: str, i: int) -> str:
    return wp[i] if i < len(wp) else EOS


def wdscan(wp: str, start: int, c: str) -> int:
    """Return the index just after the prefix code ``c`` at nesting level 0."""
    nest = 0
    i = start
    while True:
        code = _at(wp, i)
        i += 1
        if code == EOS:
            return i
        if code in (CHAR, QCHAR):
            i += 1
        elif code in (COMSUB, EXPRSUB):
            while _at(wp, i) != EOS:
                i += 1
            i += 1
        elif code in (OQUOTE, CQUOTE):
            pass
        elif code == OSUBST:
            nest += 1
            while _at(wp, i) != EOS:
                i += 1
            i += 1
        elif code == CSUBST:
            i += 1
            if c == CSUBST and nest == 0:
                return i
            nest -= 1
        elif code == OPAT:
            nest += 1
            i += 1
        elif code in (SPAT, CPAT):
            if c == code and nest == 0:
                return i
            if code == CPAT:
                nest -= 1
        else:
            warnings.warn(
                f"wdscan: unknown char 0x{ord(code):x} (carrying on)", RuntimeWarning
            )


def wdcopy(wp: str) -> str:
    """Return the word at the start of ``wp``, up to and including its EOS."""
    word = wp[: wdscan(wp, 0, EOS)]
    if not word.endswith(EOS):
        word += EOS
    return word


def wdstrip(wp: str) -> str:
    """Return the word as plain text, without markup or quote characters."""
    out: list[str] = []
    i = 0
    while True:
        code = _at(wp, i)
        i += 1
        if code == EOS:
            return "".join(out)
        if code in (CHAR, QCHAR):
            out.append(_at(wp, i))
            i += 1
        elif code == COMSUB:
            out.append("$(")
            while _at(wp, i) != EOS:
                out.append(wp[i])
                i += 1
            out.append(")")
        elif code == EXPRSUB:
            out.append("$((")
            while _at(wp, i) != EOS:
                out.append(wp[i])
                i += 1
            out.append("))")
        elif code == OSUBST:
            out.append("$")
            if _at(wp, i) == "{":
                out.append("{")
            i += 1
            while (ch := _at(wp, i)) != EOS:
                out.append(ch)
                i += 1
            i += 1
        elif code == CSUBST:
            if _at(wp, i) == "}":
                out.append("}")
            i += 1
        elif code == OPAT:
            out.append(_at(wp, i))
            out.append("(")
            i += 1
        elif code == SPAT:
            out.append("|")
        elif code == CPAT:
            out.append(")")


def _visible(c: str) -> str:
    """Spell control characters as ^X (or $X for the high half)."""
    n = ord(c)
    if n > 0xFF:
        return c
    lead = "$" if n & 0x80 else "^"
    if n & 0x60 == 0:
        return lead + chr((n & 0x7F) | 0x40)
    if n & 0x7F == 0x7F:
        return lead + "?"
    return c


class _Printer:
    def __init__(self, as_string: bool) -> None:
        self.as_string = as_string
        self.out: list[str] = []

    def put(self, s: str) -> None:
        self.out.append(s)

    def text(self) -> str:
        return "".join(self.out)

    def word(self, wp: str) -> None:
        quoted = False
        i = 0
        while True:
            code = _at(wp, i)
            i += 1
            if code == EOS:
                return
            if code == CHAR:
                self.put(_visible(_at(wp, i)))
                i += 1
            elif code == QCHAR:
                ch = _at(wp, i)
                i += 1
                if not quoted or ch in '"`$':
                    self.put("\\")
                self.put(_visible(ch))
            elif code in (COMSUB, EXPRSUB):
                double = code == EXPRSUB
                self.put("$((" if double else "$(")
                while _at(wp, i) != EOS:
                    self.put(_visible(wp[i]))
                    i += 1
                self.put("))" if double else ")")
                i += 1
            elif code == OQUOTE:
                quoted = True
                self.put('"')
            elif code == CQUOTE:
                quoted = False
                self.put('"')
            elif code == OSUBST:
                self.put("$")
                if _at(wp, i) == "{":
                    self.put("{")
                i += 1
                while (ch := _at(wp, i)) != EOS:
                    self.put(_visible(ch))
                    i += 1
                i += 1
            elif code == CSUBST:
                if _at(wp, i) == "}":
                    self.put("}")
                i += 1
            elif code == OPAT:
                self.put(_at(wp, i))
                self.put("(")
                i += 1
            elif code == SPAT:
                self.put("|")
            elif code == CPAT:
                self.put(")")

    def fmt(self, indent: int, fmt: str, *args: Any) -> None:
        values = iter(args)
        i = 0
        n = len(fmt)
        while i < n:
            c = fmt[i]
            i += 1
            if c != "%":
                self.put(c)
                continue
            if i >= n:
                break
            c = fmt[i]
            i += 1
            if c == "c":
                self.put(next(values))
            elif c == "d":
                v = int(next(values))
                self.put("-" + to_base(-v, 10) if v < 0 else to_base(v, 10))
            elif c == "u":
                self.put(to_base(int(next(values)) & 0xFFFFFFFF, 10))
            elif c == "s":
                self.put(next(values))
            elif c == "S":
                self.word(next(values))
            elif c == "T":
                self.tree(next(values), indent)
            elif c in ";N":
                if self.as_string:
                    if c == ";":
                        self.put(";")
                    self.put(" ")
                else:
                    self.put("\n" + "\t" * (indent // 8) + " " * (indent % 8))
            elif c == "R":
                self.ioword(next(values), indent)
            else:
                self.put(c)

    def ioword(self, iop: IoWord, indent: int) -> None:
        flag = iop.flag
        kind = flag & IOTYPE
        if kind in (IOREAD, IORDWR, IOHERE):
            expected = 0
        elif kind in (IOCAT, IOWRITE):
            expected = 1
        elif kind == IODUP and iop.unit == (0 if flag & IORDUP else 1):
            expected = iop.unit
        else:
            expected = iop.unit + 1
        if iop.unit != expected:
            self.put(chr(ord("0") + iop.unit))

        if kind == IOREAD:
            self.fmt(indent, "< ")
        elif kind == IOHERE:
            self.fmt(indent, "<<- " if flag & IOSKIP else "<< ")
        elif kind == IOCAT:
            self.fmt(indent, ">> ")
        elif kind == IOWRITE:
            self.fmt(indent, ">| " if flag & IOCLOB else "> ")
        elif kind == IORDWR:
            self.fmt(indent, "<> ")
        elif kind == IODUP:
            self.fmt(indent, "<&" if flag & IORDUP else ">&")

        if kind == IOHERE:
            if iop.delim:
                self.fmt(indent, "%S ", iop.delim)
        elif iop.name:
            self.fmt(indent, "%s " if flag & IONAMEXP else "%S ", iop.name)

    def tree(self, t: Optional[Op], indent: int) -> None:
        f = self.fmt
        while t is not None:
            kind = t.type
            if kind == NodeType.TCOM:
                if t.vars is not None:
                    for w in t.vars:
                        f(indent, "%S ", w)
                else:
                    f(indent, "#no-vars# ")
                if t.args is not None:
                    for w in t.args:
                        f(indent, "%S ", w)
                else:
                    f(indent, "#no-args# ")
            elif kind == NodeType.TEXEC:
                t = t.left
                continue
            elif kind == NodeType.TPAREN:
                f(indent + 2, "( %T) ", t.left)
            elif kind == NodeType.TPIPE:
                f(indent, "%T| ", t.left)
                t = t.right
                continue
            elif kind == NodeType.TLIST:
                f(indent, "%T%;", t.left)
                t = t.right
                continue
            elif kind in (NodeType.TOR, NodeType.TAND):
                f(indent, "%T%s %T", t.left, "||" if kind == NodeType.TOR else "&&", t.right)
            elif kind == NodeType.TBANG:
                f(indent, "! ")
                t = t.right
                continue
            elif kind == NodeType.TDBRACKET:
                f(indent, "[[")
                for w in t.args or ():
                    f(indent, " %S", w)
                f(indent, " ]] ")
            elif kind in (NodeType.TSELECT, NodeType.TFOR):
                f(indent, "select %s " if kind == NodeType.TSELECT else "for %s ", t.str)
                if t.vars is not None:
                    f(indent, "in ")
                    for w in t.vars:
                        f(indent, "%S ", w)
                    f(indent, "%;")
                f(indent + INDENT, "do%N%T", t.left)
                f(indent, "%;done ")
            elif kind == NodeType.TCASE:
                f(indent, "case %S in", t.str)
                t1 = t.left
                while t1 is not None:
                    f(indent, "%N(")
                    patterns = t1.vars or []
                    for k, w in enumerate(patterns):
                        f(indent, "%S%c", w, "|" if k + 1 < len(patterns) else ")")
                    f(indent + INDENT, "%;%T%N;;", t1.left)
                    t1 = t1.right
                f(indent, "%Nesac ")
            elif kind in (NodeType.TIF, NodeType.TELIF):
                f(indent + 3, "if %T", t.left)
                while True:
                    t = t.right
                    if t.left is not None:
                        f(indent, "%;")
                        f(indent + INDENT, "then%N%T", t.left)
                    if t.right is None or t.right.type != NodeType.TELIF:
                        break
                    t = t.right
                    f(indent, "%;")
                    f(indent + 5, "elif %T", t.left)
                if t.right is not None:
                    f(indent, "%;")
                    f(indent + INDENT, "else%;%T", t.right)
                f(indent, "%;fi ")
            elif kind in (NodeType.TWHILE, NodeType.TUNTIL):
                f(indent + 6, "%s %T", "while" if kind == NodeType.TWHILE else "until", t.left)
                f(indent, "%;do")
                f(indent + INDENT, "%;%T", t.right)
                f(indent, "%;done ")
            elif kind == NodeType.TBRACE:
                f(indent + INDENT, "{%;%T", t.left)
                f(indent, "%;} ")
            elif kind == NodeType.TCOPROC:
                f(indent, "%T|& ", t.left)
            elif kind == NodeType.TASYNC:
                f(indent, "%T& ", t.left)
            elif kind == NodeType.TFUNCT:
                f(indent, "function %s %T" if t.ksh_func else "%s() %T", t.str, t.left)
            elif kind == NodeType.TTIME:
                f(indent, "time %T", t.left)
            else:
                f(indent, "<botch>")

            if t.ioact is not None:
                need_nl = False
                for iop in t.ioact:
                    self.ioword(iop, indent)
                # Here documents go after everything else.
                for iop in t.ioact:
                    if iop.flag & IOTYPE == IOHERE and iop.heredoc:
                        self.put("\n")
                        self.put(iop.heredoc)
                        f(indent, "%s", wdstrip(iop.delim or ""))
                        need_nl = True
                if need_nl:
                    self.put("\n")
            return


def format_word(wp: str) -> str:
    """Return the word as shell text, keeping its quoting."""
    printer = _Printer(True)
    printer.word(wp)
    return printer.text()


def format_ioword(iop: IoWord) -> str:
    """Return a redirection as shell text."""
    printer = _Printer(True)
    printer.ioword(iop, 0)
    return printer.text()


def format_tree(t: Optional[Op], indent: int = 0, as_string: bool = False) -> str:
    """Return the tree as shell text.

    With ``as_string`` separators are written as ``"; "`` and spaces on one
    line; otherwise as newlines indented to ``indent``.
    """
    printer = _Printer(as_string)
    printer.tree(t, indent)
    return printer.text()


def _copy_words(words: Optional[Sequence[str]]) -> Optional[list[str]]:
    return None if words is None else [wdcopy(w) for w in words]


def _copy_io(iop: IoWord) -> IoWord:
    return IoWord(
        unit=iop.unit,
        flag=iop.flag,
        name=None if iop.name is None else wdcopy(iop.name),
        delim=None if iop.delim is None else wdcopy(iop.delim),
        heredoc=iop.heredoc,
    )


def tcopy(t: Optional[Op]) -> Optional[Op]:
    """Return a deep copy of the tree."""
    if t is None:
        return None
    if t.type == NodeType.TCASE and t.str is not None:
        s: Optional[str] = wdcopy(t.str)
    else:
        s = t.str
    return Op(
        type=t.type,
        args=_copy_words(t.args),
        vars=_copy_words(t.vars),
        ioact=None if t.ioact is None else [_copy_io(i) for i in t.ioact],
        left=tcopy(t.left),
        right=tcopy(t.right),
        str=s,
        lineno=t.lineno,
        evalflags=t.evalflags,
        ksh_func=t.ksh_func,
    )