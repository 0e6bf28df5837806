"""Probe fault taxonomy.

Each fault maps onto exactly one verdict; see ``core.probe.run_check``.
"""

from __future__ import annotations

from .models import Verdict


class ProbeError(Exception):
    """Base class for all probe faults."""


class UsageError(ProbeError, ValueError):
    """Invalid invocation (missing pattern/target, bad regex, bad option)."""


class ProbeIOError(ProbeError, OSError):
    """Fatal I/O fault: target, pattern, classifier or seek file unusable."""


class TargetMissingError(ProbeIOError):
    """The resolved target is not a readable regular file."""

    def __init__(self, path: str, *, alternative: str | None = None) -> None:
        self.path = path
        self.alternative = alternative
        if alternative and alternative != path:
            msg = f"Cannot read {path} or {alternative}"
        else:
            msg = f"Cannot read {path}"
        super().__init__(msg)


class NoGrowthDetected(ProbeError):
    """The target has not grown since the last scan."""

    def __init__(self, verdict: Verdict) -> None:
        self.verdict = verdict
        super().__init__("Log file not written to since last check")


class ProbeTimeout(ProbeError):
    """The global execution-time budget was exceeded."""

    def __init__(self, seconds: float) -> None:
        self.seconds = seconds
        super().__init__(f"Plug-in error: time out after {seconds:g} seconds")
