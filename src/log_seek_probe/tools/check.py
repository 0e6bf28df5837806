"""MCP tool implementations.

Keep this layer thin: validate inputs, translate them into core calls, and
return JSON-serializable data structures.
"""

from __future__ import annotations

from typing import Any

from log_seek_probe.core.models import CheckOutcome
from log_seek_probe.core.probe import check_log


def _outcome_to_dict(outcome: CheckOutcome) -> dict[str, Any]:
    """Convert a CheckOutcome into a JSON-serializable dict."""
    d: dict[str, Any] = {
        "verdict": outcome.verdict.value,
        "exit_code": outcome.verdict.exit_code,
        "line": outcome.render(),
        "message": outcome.message,
        "metric": outcome.metric,
    }
    result = outcome.result
    if result is not None:
        d["target"] = result.target
        d["counts"] = {
            "total_lines": result.total_lines,
            "match_count": result.match_count,
            "classified_count": result.classified_count,
        }
        d["offsets"] = {"start": result.start_offset, "end": result.end_offset}
        if result.classifier_errors:
            d["classifier_errors"] = list(result.classifier_errors)
    return d


def check_log_impl(
    *,
    log_target: str,
    match_pattern: str | None = None,
    match_pattern_file: str | None = None,
    ignore_pattern: str | None = None,
    ignore_pattern_file: str | None = None,
    case_insensitive: bool = False,
    log_file_pattern: str | None = None,
    file_select_strategy: str = "last_match",
    seek_key: str | None = None,
    warn_threshold: str = "1",
    crit_threshold: str = "0",
    no_growth_warn: bool = False,
    no_growth_crit: bool = False,
    classifier_code: str | None = None,
    classifier_file: str | None = None,
    output_all: bool = False,
    context_spec: str | None = None,
    stop_first_match: bool = False,
    always_ok: bool = False,
    missing_ok: bool = False,
    missing_message: str | None = None,
    timeout_seconds: float | None = None,
    reference_timestamp: str | None = None,
) -> dict[str, Any]:
    """Implementation for the `check_log` MCP tool.

    Unset optional arguments fall back to the probe defaults (including the
    ``LOG_PROBE_TIMEOUT`` budget); faults come back as UNKNOWN/CRITICAL
    verdicts rather than exceptions.
    """
    fields: dict[str, Any] = {
        "log_target": log_target,
        "match_pattern": match_pattern,
        "match_pattern_file": match_pattern_file,
        "ignore_pattern": ignore_pattern,
        "ignore_pattern_file": ignore_pattern_file,
        "case_insensitive": case_insensitive,
        "log_file_pattern": log_file_pattern,
        "file_select_strategy": file_select_strategy,
        "seek_key": seek_key,
        "warn_threshold": warn_threshold,
        "crit_threshold": crit_threshold,
        "no_growth_warn": no_growth_warn,
        "no_growth_crit": no_growth_crit,
        "classifier_code": classifier_code,
        "classifier_file": classifier_file,
        "output_all": output_all,
        "context_spec": context_spec,
        "stop_first_match": stop_first_match,
        "always_ok": always_ok,
        "missing_ok": missing_ok,
        "reference_timestamp": reference_timestamp,
    }
    if missing_message is not None:
        fields["missing_message"] = missing_message
    if timeout_seconds is not None:
        fields["timeout_seconds"] = timeout_seconds

    return _outcome_to_dict(check_log(**fields))
