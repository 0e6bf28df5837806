"""Threshold evaluation."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .models import ScanResult, Threshold, Verdict

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class VerdictEngine:
    """Turns scan counters into OK / WARNING / CRITICAL.

    Warning and critical are evaluated independently, so one may be a
    percentage while the other is an absolute count.
    """

    warning: Threshold = Threshold(1)
    critical: Threshold = Threshold(0)
    classifier_active: bool = False

    def percentage(self, result: ScanResult) -> float | None:
        """classified/match when classifying, else match/total; None if undefined."""
        if self.classifier_active:
            if result.match_count > 0:
                return result.classified_count / result.match_count * 100
            return None
        if result.total_lines > 0:
            return result.match_count / result.total_lines * 100
        return None

    def _met(self, threshold: Threshold, result: ScanResult) -> bool:
        if threshold.percent:
            pct = self.percentage(result)
            return pct is not None and pct >= threshold.value
        count = result.classified_count if self.classifier_active else result.match_count
        return count >= threshold.value

    def evaluate(self, result: ScanResult) -> Verdict:
        if result.match_count == 0:
            return Verdict.OK

        verdict = Verdict.OK
        if self._met(self.warning, result):
            verdict = Verdict.WARNING
        if self.critical.value > 0 and self._met(self.critical, result):
            verdict = Verdict.CRITICAL

        logger.debug(
            "found matches %d total %d classified %d, limits: warn %s crit %s -> %s",
            result.match_count,
            result.total_lines,
            result.classified_count,
            self.warning,
            self.critical,
            verdict.value,
        )
        return verdict
