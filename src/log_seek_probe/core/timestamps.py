"""Reference-time helpers for timestamped log file names.

Converts user-friendly time expressions into epoch seconds and expands
date(1)-like macros in a file name pattern.
"""

from __future__ import annotations

import logging
import re
import time

logger = logging.getLogger(__name__)

_NUMERIC_RE = re.compile(r"^\s*\d+\s*$")
_KNOWN_WORDS_RE = re.compile(r"(sec|min|hour|day|week|mon|now|yesterday)", re.IGNORECASE)
_MACRO_RE = re.compile(r"%([YymdHMSwj])")

_UNIT_SECONDS = {
    "mon": 30 * 86400,
    "week": 7 * 86400,
    "day": 86400,
    "hour": 3600,
    "min": 60,
    "sec": 1,
}


def parse_reference_time(expr: str | int | float | None, *, now: float | None = None) -> float:
    """Return the epoch seconds an expression refers to.

    Accepts epoch seconds, ``now``, ``yesterday`` and quantities such as
    ``"2 hours ago"``; with several units the finest one wins. Anything else
    means now.
    """
    current = time.time() if now is None else now
    if expr is None:
        return current
    if isinstance(expr, (int, float)):
        return float(expr)
    if _NUMERIC_RE.match(expr):
        return float(expr.strip())
    if not _KNOWN_WORDS_RE.search(expr):
        logger.debug("timestamp %r not valid, using 'now'", expr)
        return current

    # One unit applies: units are tried coarse to fine and the last one found
    # wins, so "1 day, 6 hours ago" means six hours ago.
    delta = 0
    if re.search(r"yesterday", expr, re.IGNORECASE):
        delta = 86400
    for unit, seconds in _UNIT_SECONDS.items():
        if m := re.search(rf"(\d+)\s*{unit}", expr, re.IGNORECASE):
            delta = int(m.group(1)) * seconds

    ref = current - delta
    logger.debug("new reference timestamp: %s", time.ctime(ref))
    return ref


def expand_macros(pattern: str, reference: float) -> str:
    """Substitute %Y, %y, %m, %d, %H, %M, %S, %w and %j from local time."""
    if "%" not in pattern:
        return pattern

    tm = time.localtime(reference)
    values = {
        "Y": f"{tm.tm_year}",
        "y": f"{tm.tm_year % 100:02d}",
        "m": f"{tm.tm_mon:02d}",
        "d": f"{tm.tm_mday:02d}",
        "H": f"{tm.tm_hour:02d}",
        "M": f"{tm.tm_min:02d}",
        "S": f"{tm.tm_sec:02d}",
        # Sunday is 0, as in date(1).
        "w": f"{(tm.tm_wday + 1) % 7}",
        # Zero-based day of year (000-365).
        "j": f"{tm.tm_yday - 1:03d}",
    }
    return _MACRO_RE.sub(lambda m: values[m.group(1)], pattern)
