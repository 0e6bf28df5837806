from __future__ import annotations

import pytest

from log_seek_probe.core.models import CheckOutcome, ContextSpec, Threshold, Verdict


def test_threshold_parse_count_and_percent() -> None:
    assert Threshold.parse("3") == Threshold(3.0)
    assert Threshold.parse(" 40% ") == Threshold(40.0, percent=True)
    assert Threshold.parse("2.5%") == Threshold(2.5, percent=True)
    assert Threshold.parse(5) == Threshold(5.0)


def test_threshold_str_keeps_percent_sign() -> None:
    assert str(Threshold.parse("40%")) == "40%"
    assert str(Threshold.parse("3")) == "3"


@pytest.mark.parametrize("raw", ["abc", "-1", "%", "3 lines", True])
def test_threshold_parse_rejects_garbage(raw) -> None:
    with pytest.raises(ValueError):
        Threshold.parse(raw)


def test_context_spec_forms() -> None:
    assert ContextSpec.parse("+2") == ContextSpec(before=0, after=2)
    assert ContextSpec.parse("-3") == ContextSpec(before=3, after=0)
    assert ContextSpec.parse("2") == ContextSpec(before=2, after=2)
    assert not ContextSpec.parse(None).enabled
    assert not ContextSpec.parse("0").enabled


def test_context_spec_rejects_garbage() -> None:
    with pytest.raises(ValueError, match="context"):
        ContextSpec.parse("lots")


def test_verdict_exit_codes() -> None:
    assert [v.exit_code for v in Verdict] == [0, 1, 2, 3]


def test_outcome_render() -> None:
    assert CheckOutcome(Verdict.OK, "OK - No matches found.", "lines=0").render() == (
        "OK - No matches found.|lines=0"
    )
    assert CheckOutcome(Verdict.OK, "No log file found").render() == "No log file found"
