from __future__ import annotations

from log_seek_probe.core.models import ScanResult, Threshold, Verdict
from log_seek_probe.core.verdict import VerdictEngine


def _result(total: int, matches: int, classified: int = 0) -> ScanResult:
    return ScanResult(target="app.log", total_lines=total, match_count=matches, classified_count=classified)


def test_threshold_boundaries() -> None:
    engine = VerdictEngine(warning=Threshold(3), critical=Threshold(5))
    assert engine.evaluate(_result(20, 2)) is Verdict.OK
    assert engine.evaluate(_result(20, 3)) is Verdict.WARNING
    assert engine.evaluate(_result(20, 4)) is Verdict.WARNING
    assert engine.evaluate(_result(20, 5)) is Verdict.CRITICAL


def test_defaults_warn_on_first_match_and_never_critical() -> None:
    engine = VerdictEngine()
    assert engine.evaluate(_result(10, 1)) is Verdict.WARNING
    assert engine.evaluate(_result(10, 10)) is Verdict.WARNING


def test_percentage_of_total_lines() -> None:
    engine = VerdictEngine(warning=Threshold(40, percent=True))
    assert engine.percentage(_result(10, 5)) == 50.0
    assert engine.evaluate(_result(10, 5)) is Verdict.WARNING
    assert engine.evaluate(_result(10, 3)) is Verdict.OK


def test_percentage_of_matches_when_classifying() -> None:
    engine = VerdictEngine(warning=Threshold(50, percent=True), classifier_active=True)
    assert engine.percentage(_result(100, 4, 2)) == 50.0
    assert engine.evaluate(_result(100, 4, 2)) is Verdict.WARNING
    assert engine.evaluate(_result(100, 4, 1)) is Verdict.OK
    assert engine.percentage(_result(100, 0, 0)) is None


def test_classifier_counts_gate_absolute_thresholds() -> None:
    engine = VerdictEngine(classifier_active=True)
    assert engine.evaluate(_result(10, 4, 0)) is Verdict.OK
    assert engine.evaluate(_result(10, 4, 1)) is Verdict.WARNING


def test_mixed_thresholds_are_independent() -> None:
    engine = VerdictEngine(warning=Threshold(50, percent=True), critical=Threshold(3))
    assert engine.evaluate(_result(100, 3)) is Verdict.CRITICAL
    assert engine.evaluate(_result(100, 2)) is Verdict.OK
    assert engine.evaluate(_result(4, 2)) is Verdict.WARNING


def test_zero_matches_is_ok_even_with_zero_warning() -> None:
    engine = VerdictEngine(warning=Threshold(0))
    assert engine.evaluate(_result(10, 0)) is Verdict.OK
    assert engine.evaluate(_result(0, 0)) is Verdict.OK
