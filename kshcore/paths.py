"""Path building for ``cd`` searches and path simplification."""

from __future__ import annotations

import errno
import os
from dataclasses import dataclass
from typing import Optional

__all__ = ["MadePath", "make_path", "simplify_path", "get_phys_path"]

_SYMLINK_DEPTH = 32


@dataclass(frozen=True)
class MadePath:
    """Result of ``make_path``.

    ``path`` is the built name, ``phys_start`` the offset in it where the
    part after the current directory begins, ``used_cdpath`` whether a
    non-empty search-path element was put in, and ``cdpath_rest`` what is
    left of the search path (None when there is nothing more to try).
    """

    path: str
    phys_start: int
    used_cdpath: bool
    cdpath_rest: Optional[str]


def make_path(cwd: Optional[str], file: Optional[str], cdpath: Optional[str]) -> MadePath:
    """Build a name for ``file`` from the first element of ``cdpath``.

    An absolute ``file``, or one starting with ``./`` or ``../``, does not
    use the search path. A relative search element is taken from ``cwd``.
    """
    if file is None:
        file = ""
    used = False
    use_cdpath = True
    rest: Optional[str] = None
    phys_start = 0
    parts: list[str] = []

    if file.startswith("/"):
        use_cdpath = False
    else:
        if file.startswith("."):
            c = file[1:2]
            if c == ".":
                c = file[2:3]
            if c in ("/", ""):
                use_cdpath = False

        element = ""
        if cdpath is None:
            use_cdpath = False
        elif use_cdpath:
            head, sep, tail = cdpath.partition(":")
            element = head
            rest = tail if sep else None

        if (not use_cdpath or not element or not element.startswith("/")) and cwd:
            parts.append(cwd)
            if not cwd.endswith("/"):
                parts.append("/")
        phys_start = len("".join(parts))
        if use_cdpath and element:
            parts.append(element)
            if not element.endswith("/"):
                parts.append("/")
            used = True

    parts.append(file)
    if not use_cdpath:
        rest = None
    return MadePath("".join(parts), phys_start, used, rest)


def simplify_path(path: str) -> str:
    """Remove ``.`` and ``..`` components and repeated slashes lexically.

    ``/a/b/c/./../d/..`` becomes ``/a/b``; leading ``..`` components of a
    relative path are kept.
    """
    if not path:
        return path
    rooted = path.startswith("/")
    very_start = 1 if rooted else 0
    out: list[str] = ["/"] if rooted else []
    start = very_start
    n = len(path)
    t = very_start
    while True:
        while t < n and path[t] == "/":
            t += 1
        if t >= n:
            if not out:
                out.append(".")
            break
        if path[t] == ".":
            nxt = path[t + 1:t + 2]
            if nxt in ("", "/"):
                t += 1
                continue
            if nxt == "." and path[t + 2:t + 3] in ("", "/"):
                if not rooted and len(out) == start:
                    if len(out) != very_start:
                        out.append("/")
                    out.extend("..")
                    start = len(out)
                elif len(out) != start:
                    cur = len(out) - 1
                    while cur > start and out[cur] != "/":
                        cur -= 1
                    del out[cur:]
                t += 2
                continue
        if len(out) != very_start:
            out.append("/")
        end = path.find("/", t)
        if end < 0:
            end = n
        out.extend(path[t:end])
        t = end
    return "".join(out)


def _resolve(built: str, path: str, depth: int) -> Optional[str]:
    if depth > _SYMLINK_DEPTH:
        return None
    for comp in path.split("/"):
        if not comp or comp == ".":
            continue
        if comp == "..":
            cut = built.rfind("/")
            built = built[:cut] if cut >= 0 else ""
            continue
        saved = built
        built = built + "/" + comp
        try:
            target = os.readlink(built)
        except OSError as exc:
            if exc.errno != errno.EINVAL:
                return None
            continue
        base = "" if target.startswith("/") else saved
        resolved = _resolve(base, target, depth + 1)
        if resolved is None:
            return None
        built = resolved
    return built


def get_phys_path(path: str) -> Optional[str]:
    """Return ``path`` with every symbolic link resolved.

    Returns None if a component cannot be examined.
    """
    resolved = _resolve("", path, 0)
    if resolved is None:
        return None
    return resolved or "/"