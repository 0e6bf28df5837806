"""Core data models for the log probe."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum

_THRESHOLD_RE = re.compile(r"^\s*(?P<value>\d+(?:\.\d+)?)\s*(?P<pct>%)?\s*$")
_CONTEXT_AFTER_RE = re.compile(r"\+(\d+)")
_CONTEXT_BEFORE_RE = re.compile(r"-(\d+)")
_CONTEXT_BOTH_RE = re.compile(r"(\d+)")


class Verdict(str, Enum):
    """Health outcome of one probe run, ordered by severity."""

    OK = "OK"
    WARNING = "WARNING"
    CRITICAL = "CRITICAL"
    UNKNOWN = "UNKNOWN"

    @property
    def exit_code(self) -> int:
        return _EXIT_CODES[self]


_EXIT_CODES = {
    Verdict.OK: 0,
    Verdict.WARNING: 1,
    Verdict.CRITICAL: 2,
    Verdict.UNKNOWN: 3,
}


@dataclass(frozen=True, slots=True)
class Threshold:
    """Alert threshold, either an absolute line count or a percentage."""

    value: float
    percent: bool = False

    @classmethod
    def parse(cls, raw: str | int | float | Threshold) -> Threshold:
        if isinstance(raw, Threshold):
            return raw
        if isinstance(raw, bool):
            raise ValueError(f"Invalid threshold: {raw!r}")
        if isinstance(raw, (int, float)):
            if raw < 0:
                raise ValueError(f"Threshold must be >= 0: {raw!r}")
            return cls(value=float(raw))
        m = _THRESHOLD_RE.match(raw)
        if not m:
            raise ValueError(f"Invalid threshold: {raw!r} (expected e.g. 3 or 40%)")
        return cls(value=float(m.group("value")), percent=m.group("pct") is not None)

    def __str__(self) -> str:
        return f"{self.value:g}{'%' if self.percent else ''}"


@dataclass(frozen=True, slots=True)
class ContextSpec:
    """How many lines of context to report around a match."""

    before: int = 0
    after: int = 0

    @classmethod
    def parse(cls, raw: str | int | ContextSpec | None) -> ContextSpec:
        """Parse ``N`` (both sides), ``+N`` (after only) or ``-N`` (before only)."""
        if raw is None:
            return cls()
        if isinstance(raw, ContextSpec):
            return raw
        if isinstance(raw, int):
            return cls(before=raw, after=raw)
        if m := _CONTEXT_AFTER_RE.search(raw):
            return cls(after=int(m.group(1)))
        if m := _CONTEXT_BEFORE_RE.search(raw):
            return cls(before=int(m.group(1)))
        if m := _CONTEXT_BOTH_RE.search(raw):
            n = int(m.group(1))
            return cls(before=n, after=n)
        raise ValueError(f"Invalid context spec: {raw!r} (expected N, +N or -N)")

    @property
    def enabled(self) -> bool:
        return self.before > 0 or self.after > 0


@dataclass(frozen=True, slots=True)
class SeekRecord:
    """Persisted read position for one seek key."""

    offset: int
    path: str | None = None  # resolved target the offset belongs to


@dataclass(slots=True)
class ScanResult:
    """Counters and retained text accumulated by one scan."""

    target: str
    total_lines: int = 0
    match_count: int = 0
    classified_count: int = 0
    match_text: str = ""
    classified_text: str = ""
    metric_text: str | None = None  # set only by a classifier
    start_offset: int = 0
    end_offset: int = 0
    classifier_errors: list[str] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class CheckOutcome:
    """Final verdict plus the text printed for it."""

    verdict: Verdict
    message: str
    metric: str | None = None
    result: ScanResult | None = None

    def render(self) -> str:
        if self.metric is None:
            return self.message
        return f"{self.message}|{self.metric}"
