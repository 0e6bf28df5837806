"""Regex match/ignore filtering of log lines."""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from pathlib import Path

from .errors import ProbeIOError, UsageError

logger = logging.getLogger(__name__)


def read_pattern_file(path: str | Path) -> list[str]:
    """Return the non-blank lines of a pattern file, one regex per line."""
    try:
        text = Path(path).read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        raise ProbeIOError(f"Unable to open {path}: {e.strerror or e}") from e
    return [line for line in text.splitlines() if line.strip()]


def _compile(pattern: str, flags: int) -> re.Pattern[str]:
    try:
        return re.compile(pattern, flags)
    except re.error as e:
        raise UsageError(f"Invalid regular expression {pattern!r}: {e}") from e


class LineMatcher:
    """A line matches when the match expression hits and no ignore expression does."""

    def __init__(
        self,
        match: str | None,
        ignore: Sequence[str] = (),
        *,
        case_insensitive: bool = False,
    ):
        flags = re.IGNORECASE if case_insensitive else 0
        self.case_insensitive = case_insensitive
        self._match = _compile(match, flags) if match else None
        self._ignore = tuple(_compile(p, flags) for p in ignore if p)

    @classmethod
    def from_sources(
        cls,
        *,
        pattern: str | None = None,
        pattern_file: str | Path | None = None,
        ignore: str | None = None,
        ignore_file: str | Path | None = None,
        case_insensitive: bool = False,
    ) -> LineMatcher:
        """Build a matcher; file sources take precedence over inline patterns."""
        if pattern_file:
            logger.debug("using pattern file %s", pattern_file)
            lines = read_pattern_file(pattern_file)
            if not lines:
                raise UsageError("Regular expression not specified.")
            pattern = "|".join(lines)

        if ignore_file:
            logger.debug("using ignore pattern file %s", ignore_file)
            ignores: list[str] = read_pattern_file(ignore_file)
        else:
            ignores = [ignore] if ignore else []

        return cls(pattern, ignores, case_insensitive=case_insensitive)

    @property
    def has_pattern(self) -> bool:
        return self._match is not None

    def is_ignored(self, line: str) -> bool:
        return any(p.search(line) for p in self._ignore)

    def matches(self, line: str) -> bool:
        if self._match is None or not self._match.search(line):
            return False
        return not self.is_ignored(line)
