from __future__ import annotations

import time

from log_seek_probe.core.timestamps import expand_macros, parse_reference_time

NOW = 1_700_000_000.0


def test_numeric_expression_is_epoch_seconds() -> None:
    assert parse_reference_time("1600000000", now=NOW) == 1_600_000_000.0
    assert parse_reference_time(42, now=NOW) == 42.0


def test_relative_quantities() -> None:
    assert parse_reference_time("2 days ago", now=NOW) == NOW - 2 * 86400
    assert parse_reference_time("1 month ago", now=NOW) == NOW - 30 * 86400
    assert parse_reference_time("10 minutes", now=NOW) == NOW - 600


def test_finest_unit_wins() -> None:
    assert parse_reference_time("1 day, 6 hours ago", now=NOW) == NOW - 6 * 3600
    assert parse_reference_time("3 weeks 10 minutes", now=NOW) == NOW - 600
    assert parse_reference_time("yesterday, 2 hours", now=NOW) == NOW - 2 * 3600


def test_shortcuts() -> None:
    assert parse_reference_time("now", now=NOW) == NOW
    assert parse_reference_time("yesterday", now=NOW) == NOW - 86400
    assert parse_reference_time(None, now=NOW) == NOW


def test_unrecognised_expression_means_now() -> None:
    assert parse_reference_time("whenever", now=NOW) == NOW


def test_expand_macros_from_local_time() -> None:
    ref = time.mktime((2024, 1, 1, 12, 30, 45, 0, 0, -1))
    assert expand_macros("access.%Y%m%d.log", ref) == "access.20240101.log"
    assert expand_macros("%y-%H%M%S", ref) == "24-123045"
    # 2024-01-01 was a Monday; day of year is zero-based
    assert expand_macros("%w/%j", ref) == "1/000"


def test_expand_macros_leaves_plain_patterns_alone() -> None:
    assert expand_macros(".*.log", NOW) == ".*.log"
    assert expand_macros("%Q", NOW) == "%Q"
