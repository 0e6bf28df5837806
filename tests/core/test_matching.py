from __future__ import annotations

from pathlib import Path

import pytest

from log_seek_probe.core.errors import ProbeIOError, UsageError
from log_seek_probe.core.matching import LineMatcher


def test_match_and_ignore() -> None:
    m = LineMatcher("[Ee]rror", ["nrpe"])
    assert m.matches("kernel: Error on disk")
    assert not m.matches("nrpe: error talking to server")
    assert not m.matches("all good")


def test_case_toggle_applies_to_both_patterns() -> None:
    sensitive = LineMatcher("ERROR", ["NOISE"])
    assert not sensitive.matches("error happened")
    assert sensitive.matches("ERROR noise")

    insensitive = LineMatcher("ERROR", ["NOISE"], case_insensitive=True)
    assert insensitive.matches("error happened")
    assert not insensitive.matches("ERROR noise")


def test_no_pattern_never_matches() -> None:
    m = LineMatcher(None)
    assert not m.has_pattern
    assert not m.matches("ERROR")


def test_pattern_file_is_or_combined_and_wins(tmp_path: Path) -> None:
    pf = tmp_path / "patterns.txt"
    pf.write_text("timeout\n\nrefused\n", encoding="utf-8")

    m = LineMatcher.from_sources(pattern="ERROR", pattern_file=pf)
    assert m.matches("connection refused")
    assert m.matches("read timeout")
    assert not m.matches("ERROR")


def test_ignore_file_wins_over_inline(tmp_path: Path) -> None:
    nf = tmp_path / "ignore.txt"
    nf.write_text("harmless\nexpected\n", encoding="utf-8")

    m = LineMatcher.from_sources(pattern="ERROR", ignore="fatal", ignore_file=nf)
    assert not m.matches("ERROR harmless")
    assert not m.matches("ERROR expected")
    assert m.matches("ERROR fatal")


def test_empty_pattern_file_is_usage_error(tmp_path: Path) -> None:
    pf = tmp_path / "patterns.txt"
    pf.write_text("\n\n", encoding="utf-8")
    with pytest.raises(UsageError):
        LineMatcher.from_sources(pattern_file=pf)


def test_unreadable_pattern_file_is_io_error(tmp_path: Path) -> None:
    with pytest.raises(ProbeIOError, match="Unable to open"):
        LineMatcher.from_sources(pattern_file=tmp_path / "nope.txt")


def test_invalid_regex_is_usage_error() -> None:
    with pytest.raises(UsageError, match="Invalid regular expression"):
        LineMatcher("ERROR(")
    with pytest.raises(UsageError):
        LineMatcher("ERROR", ["[unclosed"])
