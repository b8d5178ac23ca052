"""Signal names and descriptions."""

from __future__ import annotations

import signal

__all__ = ["signal_name", "signal_message"]

_NAMES = (
    "HUP", "INT", "QUIT", "ILL", "TRAP", "ABRT", "EMT", "FPE", "KILL",
    "BUS", "SEGV", "SYS", "PIPE", "ALRM", "TERM", "URG", "STOP", "TSTP",
    "CONT", "CHLD", "TTIN", "TTOU", "IO", "XCPU", "XFSZ", "VTALRM", "PROF",
    "WINCH", "INFO", "USR1", "USR2", "PWR", "STKFLT",
)

_MESSAGES = {
    "HUP": "Hangup",
    "INT": "Interrupt",
    "QUIT": "Quit",
    "ILL": "Illegal instruction",
    "TRAP": "Trace/BPT trap",
    "ABRT": "Abort trap",
    "EMT": "EMT trap",
    "FPE": "Floating point exception",
    "KILL": "Killed",
    "BUS": "Bus error",
    "SEGV": "Segmentation fault",
    "SYS": "Bad system call",
    "PIPE": "Broken pipe",
    "ALRM": "Alarm clock",
    "TERM": "Terminated",
    "URG": "Urgent I/O condition",
    "STOP": "Suspended (signal)",
    "TSTP": "Suspended",
    "CONT": "Continued",
    "CHLD": "Child exited",
    "TTIN": "Stopped (tty input)",
    "TTOU": "Stopped (tty output)",
    "IO": "I/O possible",
    "XCPU": "Cputime limit exceeded",
    "XFSZ": "Filesize limit exceeded",
    "VTALRM": "Virtual timer expired",
    "PROF": "Profiling timer expired",
    "WINCH": "Window size changes",
    "INFO": "Information request",
    "USR1": "User defined signal 1",
    "USR2": "User defined signal 2",
    "THR": "Thread AST",
}


def _build_table() -> dict[int, str]:
    table: dict[int, str] = {}
    for name in _NAMES:
        number = getattr(signal, "SIG" + name, None)
        if number is not None:
            table.setdefault(int(number), name)
    return table


_BY_NUMBER = _build_table()


def signal_name(sig: int) -> str:
    """Return the short name of ``sig`` (without SIG), or "UNKNOWN"."""
    if sig == 0:
        return "Signal 0"
    return _BY_NUMBER.get(sig, "UNKNOWN")


def signal_message(sig: int) -> str:
    """Return a human-readable description of ``sig``."""
    if sig == 0:
        return "Signal 0"
    name = _BY_NUMBER.get(sig)
    if name in _MESSAGES:
        return _MESSAGES[name]
    try:
        text = signal.strsignal(sig)
    except ValueError:
        text = None
    return text or f"Unknown signal {sig}"