"""Console logging that can be silenced with a single switch."""

from __future__ import annotations

import sys
from datetime import datetime
from typing import NoReturn

_quiet = False


def set_quiet(quiet: bool) -> None:
    """Turn all log output off (True) or back on (False)."""
    global _quiet
    _quiet = bool(quiet)


def is_quiet() -> bool:
    """Return whether log output is currently suppressed."""
    return _quiet


def log(message: object) -> None:
    """Write a timestamped line to standard error unless quiet."""
    if _quiet:
        return
    stamp = datetime.now().strftime("%Y/%m/%d %H:%M:%S")
    text = str(message)
    if not text.endswith("\n"):
        text += "\n"
    sys.stderr.write(f"{stamp} {text}")
    sys.stderr.flush()


def fatal(message: object) -> NoReturn:
    """Log the message (unless quiet) and exit with status 1."""
    log(message)
    raise SystemExit(1)