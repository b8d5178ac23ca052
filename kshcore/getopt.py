"""Option parsing for built-in commands, ``getopts`` and the command line.

Beyond the usual ``:`` (required argument) the option string understands:

* ``;`` the argument is optional; ``optarg`` is None if it is missing.
* ``,`` the argument is attached to the option and may be empty.
* ``#`` an optional argument that must start with a digit or be
  "unlimited"; otherwise ``optarg`` is None and parsing carries on.

A leading ``:`` in the option string suppresses messages: ``?`` or ``:`` is
returned and ``optarg`` holds the offending option character.
"""

from __future__ import annotations

import sys
from enum import IntFlag
from typing import Optional, Sequence

__all__ = ["GetoptFlag", "GetoptError", "Getopt"]

_SPECIAL = "?:;,#"


class GetoptFlag(IntFlag):
    """Behaviour flags for a Getopt parser."""

    NONE = 0
    ERROR = 0x1  # raise GetoptError on bad options
    PLUSOPT = 0x2  # accept +c as well as -c
    NONAME = 0x4  # leave argv[0] out of messages


class GetoptError(ValueError):
    """A bad option or a missing option argument."""


class Getopt:
    """Incremental option parser state."""

    def __init__(self, flags: GetoptFlag = GetoptFlag.NONE) -> None:
        self.reset(flags)

    def reset(self, flags: GetoptFlag = GetoptFlag.NONE) -> None:
        """Start parsing again from the first argument."""
        self.optind = 1
        self.optarg: Optional[str] = None
        self.flags = GetoptFlag(flags)
        self.plus = False
        self.minusminus = False
        self._p = 0

    def _complain(self, argv: Sequence[str], text: str) -> None:
        if self.flags & GetoptFlag.NONAME or not argv:
            message = text
        else:
            message = f"{argv[0]}: {text}"
        if self.flags & GetoptFlag.ERROR:
            raise GetoptError(message)
        print(message, file=sys.stderr)

    def getopt(self, argv: Sequence[str], options: str) -> Optional[str]:
        """Return the next option character, or None when options end."""
        if self._p == 0 or self._p >= len(argv[self.optind - 1]):
            arg = argv[self.optind] if self.optind < len(argv) else None
            self._p = 1
            if arg == "--":
                self.optind += 1
                self._p = 0
                self.minusminus = True
                return None
            flag = arg[:1] if arg else ""
            if (
                arg is None
                or (flag != "-" and (not self.flags & GetoptFlag.PLUSOPT or flag != "+"))
                or len(arg) < 2
            ):
                self._p = 0
                return None
            self.optind += 1
            self.plus = flag == "+"
        current = argv[self.optind - 1]
        c = current[self._p]
        self._p += 1

        pos = -1 if c in _SPECIAL else options.find(c)
        if pos < 0:
            if options.startswith(":"):
                self.optarg = c
            else:
                self._complain(argv, f"-{c}: unknown option")
            return "?"

        spec = options[pos + 1] if pos + 1 < len(options) else ""
        if spec in (":", ";"):
            if self._p < len(current):
                self.optarg = current[self._p:]
            elif self.optind < len(argv):
                self.optarg = argv[self.optind]
                self.optind += 1
            elif spec == ";":
                self.optarg = None
            else:
                if options.startswith(":"):
                    self.optarg = c
                    return ":"
                self._complain(argv, f"-`{c}' requires argument")
                return "?"
            self._p = 0
        elif spec == ",":
            self.optarg = current[self._p:]
            self._p = 0
        elif spec == "#":
            if self._p < len(current):
                rest = current[self._p:]
                if "0" <= rest[0] <= "9" or rest == "unlimited":
                    self.optarg = rest
                    self._p = 0
                else:
                    self.optarg = None
            else:
                nxt = argv[self.optind] if self.optind < len(argv) else None
                if nxt and ("0" <= nxt[0] <= "9" or nxt == "unlimited"):
                    self.optarg = nxt
                    self.optind += 1
                    self._p = 0
                else:
                    self.optarg = None
        return c