"""Resolve a configured log file setting to one concrete target file.

The setting is a base path plus an optional glob pattern appended to it (for
rotated or timestamped logs). A base path that is a directory behaves as if
the pattern ``/*`` was given.
"""

from __future__ import annotations

import glob
import logging
import os
from dataclasses import dataclass, field
from enum import Enum

from .timestamps import expand_macros, parse_reference_time

logger = logging.getLogger(__name__)


class SelectStrategy(str, Enum):
    """How to pick one file when a pattern matches several."""

    LAST_MATCH = "last_match"
    FIRST_MATCH = "first_match"
    MOST_RECENT = "most_recent"

    @classmethod
    def coerce(cls, raw: str | SelectStrategy | None) -> SelectStrategy:
        """Map user input to a strategy; unknown or empty means last_match."""
        if isinstance(raw, SelectStrategy):
            return raw
        name = (raw or "").strip().lower()
        try:
            return cls(name)
        except ValueError:
            if name:
                logger.debug("%s not supported, using default", raw)
            return cls.LAST_MATCH


@dataclass(frozen=True, slots=True)
class TargetSelection:
    """Outcome of file selection."""

    path: str
    candidates: tuple[str, ...] = field(default_factory=tuple)
    pattern_path: str | None = None  # base + expanded pattern, when a pattern was used

    @property
    def missing(self) -> bool:
        return not os.path.isfile(self.path)


def _pick(candidates: list[str], strategy: SelectStrategy) -> str:
    ordered = sorted(candidates)
    if strategy is SelectStrategy.FIRST_MATCH:
        logger.debug("picking first match")
        return ordered[0]
    if strategy is SelectStrategy.MOST_RECENT:
        logger.debug("picking most recent match")
        chosen = ordered[-1]
        latest = float("-inf")
        for path in ordered:
            try:
                mtime = os.stat(path).st_mtime
            except OSError as e:
                logger.debug("cannot stat %s: %s", path, e)
                continue
            logger.debug("considering %s (%s)", path, mtime)
            # >= so that ties go to the later entry in sorted order
            if mtime >= latest:
                latest = mtime
                chosen = path
        return chosen
    logger.debug("picking last match")
    return ordered[-1]


def select_target(
    base: str,
    pattern: str | None = None,
    *,
    strategy: str | SelectStrategy | None = SelectStrategy.LAST_MATCH,
    reference: str | int | float | None = None,
) -> TargetSelection:
    """Resolve ``base`` (+ optional glob ``pattern``) to a single file path.

    When nothing matches, the literal ``base + pattern`` string (or ``base``)
    is returned; callers detect that case through ``TargetSelection.missing``.
    """
    chosen_strategy = SelectStrategy.coerce(strategy)

    if pattern:
        expanded = expand_macros(pattern, parse_reference_time(reference)) if "%" in pattern else pattern
        wanted = f"{base}{expanded}"
    elif os.path.isdir(base):
        logger.debug("%s is a directory, assuming %s/*", base, base)
        wanted = os.path.join(base, "*")
    else:
        return TargetSelection(path=base)

    logger.debug("looking for files matching %s", wanted)
    candidates = [p for p in glob.glob(wanted) if os.path.isfile(p)]

    if not candidates:
        fallback = wanted if pattern else base
        logger.debug("no matching files found, trying just %s", fallback)
        return TargetSelection(path=fallback, pattern_path=wanted if pattern else None)

    if len(candidates) == 1:
        logger.debug("only one matching file")
        path = candidates[0]
    else:
        logger.debug("found %d files matching selection", len(candidates))
        path = _pick(candidates, chosen_strategy)

    return TargetSelection(
        path=path,
        candidates=tuple(sorted(candidates)),
        pattern_path=wanted if pattern else None,
    )
