"""Shell options: the option table, ``set``/command-line parsing and helpers."""

from __future__ import annotations

import contextlib
import os
import re
from dataclasses import dataclass, field
from enum import IntFlag
from typing import Callable, Optional, Sequence, Union

from .getopt import Getopt, GetoptError, GetoptFlag

__all__ = [
    "OptionScope",
    "ShellOption",
    "ParseResult",
    "OptionError",
    "Options",
    "OPTIONS",
    "option_index",
    "print_columns",
    "quote_value",
    "strip_nuls",
    "is_restricted",
]


class OptionScope(IntFlag):
    """Where an option may be changed."""

    NONE = 0
    CMDLINE = 0x1
    SET = 0x2
    SPECIAL = 0x4
    INTERNAL = 0x8
    ANY = CMDLINE | SET | SPECIAL


@dataclass(frozen=True)
class ShellOption:
    """One entry of the option table."""

    name: Optional[str]
    char: Optional[str]
    scope: OptionScope


_ANY = OptionScope.ANY
_CMD = OptionScope.CMDLINE

OPTIONS: tuple[ShellOption, ...] = (
    ShellOption("allexport", "a", _ANY),
    ShellOption("braceexpand", None, _ANY),
    ShellOption("bgnice", None, _ANY),
    ShellOption(None, "c", _CMD),
    ShellOption("csh-history", None, _ANY),
    ShellOption("emacs", None, _ANY),
    ShellOption("errexit", "e", _ANY),
    ShellOption("gmacs", None, _ANY),
    ShellOption("ignoreeof", None, _ANY),
    ShellOption("interactive", "i", _CMD),
    ShellOption("keyword", "k", _ANY),
    ShellOption("login", "l", _CMD),
    ShellOption("markdirs", "X", _ANY),
    ShellOption("monitor", "m", _ANY),
    ShellOption("noclobber", "C", _ANY),
    ShellOption("noexec", "n", _ANY),
    ShellOption("noglob", "f", _ANY),
    ShellOption("nohup", None, _ANY),
    ShellOption("nolog", None, _ANY),
    ShellOption("notify", "b", _ANY),
    ShellOption("nounset", "u", _ANY),
    ShellOption("physical", None, _ANY),
    ShellOption("pipefail", None, _ANY),
    ShellOption("posix", None, _ANY),
    ShellOption("privileged", "p", _ANY),
    ShellOption("restricted", "r", _CMD),
    ShellOption("sh", None, _ANY),
    ShellOption("stdin", "s", _CMD),
    ShellOption("trackall", "h", _ANY),
    ShellOption("verbose", "v", _ANY),
    ShellOption("vi", None, _ANY),
    ShellOption("viraw", None, _ANY),
    ShellOption("vi-show8", None, _ANY),
    ShellOption("vi-tabcomplete", None, _ANY),
    ShellOption("vi-esccomplete", None, _ANY),
    ShellOption("xtrace", "x", _ANY),
    ShellOption(None, None, OptionScope.INTERNAL),  # internal interactive flag
)

_CMD_OPTS = "o:" + "".join(
    o.char for o in OPTIONS if o.char and o.scope & OptionScope.CMDLINE
)
_SET_OPTS = "A:o;s" + "".join(
    o.char for o in OPTIONS if o.char and o.scope & OptionScope.SET
)

_QUOTE_CHARS = frozenset(" \n\t\"#$&'()*;<>?[\\`|")
_IDENT = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_RESTRICTED = frozenset({"rsh", "rksh", "rpdksh", "pdrksh"})


def option_index(name: str) -> Optional[int]:
    """Return the table index of the option called ``name``, or None."""
    for i, opt in enumerate(OPTIONS):
        if opt.name is not None and opt.name == name:
            return i
    return None


def _idx(name: str) -> int:
    i = option_index(name)
    assert i is not None
    return i


_F_MONITOR = _idx("monitor")
_F_VI = _idx("vi")
_F_EMACS = _idx("emacs")
_F_GMACS = _idx("gmacs")
_F_PRIVILEGED = _idx("privileged")
_F_POSIX = _idx("posix")
_F_BRACEEXPAND = _idx("braceexpand")
_F_TALKING = _idx("interactive")
_F_LOGIN = _idx("login")
_F_VERBOSE = _idx("verbose")
_F_XTRACE = _idx("xtrace")
_F_TALKING_I = len(OPTIONS) - 1


class OptionError(ValueError):
    """A bad option or option argument."""


@dataclass
class ParseResult:
    """Outcome of ``Options.parse_args``.

    ``args`` are the remaining arguments (sorted for ``set -s``, the array
    values for ``set -A``); ``setargs`` says whether the positional
    parameters should be replaced; ``listing`` holds the option listing
    asked for by a lone ``-o`` or ``+o``.
    """

    optind: int
    args: list[str] = field(default_factory=list)
    setargs: bool = False
    array: Optional[str] = None
    arrayset: int = 0
    listing: Optional[str] = None


class Options:
    """The current values of the shell's options."""

    def __init__(
        self,
        on_monitor_change: Optional[Callable[[], None]] = None,
        toplevel: bool = True,
    ) -> None:
        self.flags: list[int] = [0] * len(OPTIONS)
        self.on_monitor_change = on_monitor_change
        self.toplevel = toplevel
        self._dropped_privileges = False
        self._euid = os.geteuid()

    @staticmethod
    def _index(flag: Union[int, str]) -> int:
        if isinstance(flag, str):
            i = option_index(flag)
            if i is None:
                raise KeyError(flag)
            return i
        if not 0 <= flag < len(OPTIONS):
            raise IndexError(f"no option {flag}")
        return flag

    def __getitem__(self, flag: Union[int, str]) -> int:
        return self.flags[self._index(flag)]

    def __setitem__(self, flag: Union[int, str], value: int) -> None:
        self.flags[self._index(flag)] = int(value)

    @property
    def interactive_internal(self) -> int:
        """The internal copy of the interactive flag."""
        return self.flags[_F_TALKING_I]

    def _drop_privileges(self) -> None:
        if not hasattr(os, "setresgid"):
            return
        if os.getuid() == self._euid and os.getgid() == os.getegid():
            return
        gid = os.getgid()
        with contextlib.suppress(OSError):
            os.setresgid(gid, gid, gid)
        with contextlib.suppress(OSError):
            os.setgroups([gid])
        with contextlib.suppress(OSError):
            os.setresuid(self._euid, self._euid, self._euid)
        self._dropped_privileges = True

    def change_flag(self, flag: Union[int, str], what: OptionScope, newval: int) -> None:
        """Set an option and carry out what changing it entails."""
        f = self._index(flag)
        newval = int(newval)
        oldval = self.flags[f]
        self.flags[f] = newval
        if f == _F_MONITOR:
            if what != OptionScope.CMDLINE and newval != oldval and self.on_monitor_change:
                self.on_monitor_change()
        elif f in (_F_VI, _F_EMACS, _F_GMACS):
            if newval:
                self.flags[_F_VI] = self.flags[_F_EMACS] = self.flags[_F_GMACS] = 0
                self.flags[f] = newval
        elif f == _F_PRIVILEGED and oldval and not newval and not self._dropped_privileges:
            self._drop_privileges()
        elif f == _F_POSIX and newval:
            self.flags[_F_BRACEEXPAND] = 0
        if f == _F_TALKING and what in (OptionScope.CMDLINE, OptionScope.SET) and self.toplevel:
            self.flags[_F_TALKING_I] = newval

    def getoptions(self) -> str:
        """Return the letters of the options that are on, as in ``$-``."""
        return "".join(
            opt.char for opt, val in zip(OPTIONS, self.flags) if opt.char and val
        )

    def parse_args(self, argv: Sequence[str], what: OptionScope) -> ParseResult:
        """Parse command-line (CMDLINE) or ``set`` (SET) options in ``argv``."""
        argv = list(argv)
        if what == OptionScope.CMDLINE:
            arg0 = argv[0] if argv else ""
            slash = arg0.rfind("/")
            self.flags[_F_LOGIN] = int(
                arg0.startswith("-") or (slash >= 0 and arg0[slash + 1:slash + 2] == "-")
            )
            opts = _CMD_OPTS
        else:
            opts = _SET_OPTS

        go = Getopt(GetoptFlag.ERROR | GetoptFlag.PLUSOPT)
        array: Optional[str] = None
        arrayset = 0
        sortargs = False
        listing: Optional[str] = None
        while True:
            try:
                optc = go.getopt(argv, opts)
            except GetoptError as exc:
                raise OptionError(str(exc)) from None
            if optc is None:
                break
            on = 0 if go.plus else 1
            if optc == "A":
                arrayset = 1 if on else -1
                array = go.optarg
            elif optc == "o":
                if go.optarg is None:
                    listing = self.format_options(bool(on))
                    continue
                i = option_index(go.optarg)
                if i is not None and on == self.flags[i]:
                    continue
                if i is not None and OPTIONS[i].scope & what:
                    self.change_flag(i, what, on)
                else:
                    raise OptionError(f"{go.optarg}: bad option")
            elif optc == "?":
                raise OptionError("bad option")
            elif what == OptionScope.SET and optc == "s":
                sortargs = True
            else:
                for i, opt in enumerate(OPTIONS):
                    if opt.char == optc and what & opt.scope:
                        self.change_flag(i, what, on)
                        break
                else:
                    raise OptionError(f"parse_args: `{optc}'")

        optind = go.optind
        nxt = argv[optind] if optind < len(argv) else None
        if not go.minusminus and nxt in ("-", "+"):
            if nxt == "-" and not self.flags[_F_POSIX]:
                self.flags[_F_VERBOSE] = self.flags[_F_XTRACE] = 0
            optind += 1

        setargs = not arrayset and (go.minusminus or optind < len(argv))
        if arrayset and (not array or _IDENT.fullmatch(array) is None):
            raise OptionError(f"{array}: is not an identifier")
        args = argv[optind:]
        if sortargs:
            args.sort()
        if arrayset:
            optind = len(argv)
        return ParseResult(optind, args, setargs, array, arrayset, listing)

    def format_options(self, verbose: bool, columns: int = 80) -> str:
        """Return the option listing printed by ``set -o`` or ``set +o``."""
        named = [(opt.name, val) for opt, val in zip(OPTIONS, self.flags) if opt.name]
        if verbose:
            width = max(len(name) for name, _ in named)
            items = [f"{name:<{width}} {'on' if val else 'off'}" for name, val in named]
            return "Current option settings\n" + print_columns(items, width + 5, True, columns)
        body = "".join(f" {'-' if val else '+'}o {name}" for name, val in named)
        return f"set{body}\n"


def print_columns(
    items: Sequence[str], max_width: int, prefcol: bool, columns: int = 80
) -> str:
    """Lay ``items`` out in rows and columns on a screen ``columns`` wide."""
    n = len(items)
    cols = columns // (max_width + 1) or 1
    rows = (n + cols - 1) // cols
    if prefcol and n and cols > rows:
        rows, cols = cols, rows
        rows = min(rows, n)
    col_width = 0 if cols == 1 else max_width
    nspace = (columns - max_width * cols) // cols
    if nspace <= 0:
        nspace = 1
    lines = []
    for r in range(rows):
        parts = []
        for c in range(cols):
            i = c * rows + r
            if i < n:
                parts.append(f"{items[i][:max_width]:<{col_width}}")
                if c + 1 < cols:
                    parts.append(" " * nspace)
        lines.append("".join(parts) + "\n")
    return "".join(lines)


def quote_value(s: str) -> str:
    """Quote ``s`` so that the shell reads it back unchanged."""
    if not any(ch in _QUOTE_CHARS for ch in s):
        return s
    out: list[str] = []
    inquote = False
    for ch in s:
        if ch == "'":
            out.append("'\\'" if inquote else "\\'")
            inquote = False
        else:
            if not inquote:
                out.append("'")
                inquote = True
            out.append(ch)
    if inquote:
        out.append("'")
    return "".join(out)


def strip_nuls(data: Union[bytes, str]) -> Union[bytes, str]:
    """Return ``data`` with every NUL removed."""
    if isinstance(data, str):
        return data.replace("\0", "")
    return bytes(data).replace(b"\0", b"")


def is_restricted(name: str) -> bool:
    """Return True if ``name`` is the name of a restricted shell."""
    return name.rpartition("/")[2] in _RESTRICTED