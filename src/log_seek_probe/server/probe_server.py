"""MCP server entrypoint (stdio transport).

Exposes the probe as a tool so an MCP client can run checks on demand.

Run locally (stdio):
    python -m log_seek_probe.server.probe_server
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any

from mcp.server.fastmcp import FastMCP

from log_seek_probe.core.config import LOG_LEVEL_ENV
from log_seek_probe.resources.registry import register_resources
from log_seek_probe.tools.check import check_log_impl

LOGGER = logging.getLogger(__name__)


def _configure_logging() -> None:
    """Log to stderr; stdout carries the stdio transport."""
    level_name = os.getenv(LOG_LEVEL_ENV, "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(
        stream=sys.stderr,
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


mcp = FastMCP("log-probe", json_response=True)

register_resources(mcp)


@mcp.tool()
def check_log(
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
    """Scan a log file from where the previous check stopped and return a verdict.

    Parameters
    ----------
    log_target:
        Log file, directory, or the fixed part of a rotated/timestamped name.
    match_pattern / match_pattern_file:
        Regular expression to look for, or a file of expressions (one per line).
    ignore_pattern / ignore_pattern_file:
        Expressions whose matches are excluded.
    log_file_pattern / file_select_strategy / reference_timestamp:
        Glob appended to log_target (with %Y %m %d ... macros), how to pick one
        of several matches (most_recent, first_match, last_match) and the time
        the macros refer to (e.g. "yesterday", "2 hours ago").
    seek_key:
        Seek file or directory. Use a distinct key per concurrent check.
    warn_threshold / crit_threshold:
        Counts ("3") or percentages ("40%"). crit_threshold "0" disables critical.
    no_growth_warn / no_growth_crit:
        Alert when the log did not grow since the previous check.
    classifier_code / classifier_file:
        "module:function" reference or Python file defining classify(line, state).
    context_spec:
        "N", "+N" or "-N" lines of context around each match.

    Returns
    -------
    dict:
        {"verdict", "exit_code", "line", "message", "metric", "counts", ...}
    """
    return check_log_impl(
        log_target=log_target,
        match_pattern=match_pattern,
        match_pattern_file=match_pattern_file,
        ignore_pattern=ignore_pattern,
        ignore_pattern_file=ignore_pattern_file,
        case_insensitive=case_insensitive,
        log_file_pattern=log_file_pattern,
        file_select_strategy=file_select_strategy,
        seek_key=seek_key,
        warn_threshold=warn_threshold,
        crit_threshold=crit_threshold,
        no_growth_warn=no_growth_warn,
        no_growth_crit=no_growth_crit,
        classifier_code=classifier_code,
        classifier_file=classifier_file,
        output_all=output_all,
        context_spec=context_spec,
        stop_first_match=stop_first_match,
        always_ok=always_ok,
        missing_ok=missing_ok,
        missing_message=missing_message,
        timeout_seconds=timeout_seconds,
        reference_timestamp=reference_timestamp,
    )


def main() -> None:
    """Start the MCP server over stdio."""
    _configure_logging()
    LOGGER.debug("Starting MCP server (transport=stdio)")
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
