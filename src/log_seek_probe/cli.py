"""Command-line probe.

Prints one verdict line on stdout and exits with the verdict's code
(0 OK, 1 WARNING, 2 CRITICAL, 3 UNKNOWN).
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from collections.abc import Sequence
from typing import Any, NoReturn

from log_seek_probe import __version__
from log_seek_probe.core.config import DEFAULT_MISSING_MESSAGE, LOG_LEVEL_ENV
from log_seek_probe.core.models import Verdict
from log_seek_probe.core.probe import check_log

PROG = "log-probe"

_EPILOG = """\
Thresholds may be counts or percentages (e.g. -w 40%%). With a classifier,
percentages are classified/matched lines, otherwise matched/total lines.

Context: -C N for N lines before and after, -C +N after only, --context=-N
before only. Lines read as after-context are not matched themselves.

Timestamp macros in -m: %%Y %%y %%m %%d %%H %%M %%S %%w %%j, relative to
--timestamp ('now', 'yesterday', '6 hours ago' or epoch seconds; with
several units, e.g. '1 day, 6 hours ago', only the finest one counts).
"""


class _ProbeArgumentParser(argparse.ArgumentParser):
    """argparse, but invocation errors exit UNKNOWN."""

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        print(f"{Verdict.UNKNOWN.value}: {message}", file=sys.stdout)
        raise SystemExit(Verdict.UNKNOWN.exit_code)


def _configure_logging(debug: bool) -> None:
    level_name = "DEBUG" if debug else os.getenv(LOG_LEVEL_ENV, "WARNING").upper()
    level = getattr(logging, level_name, logging.WARNING)
    logging.basicConfig(
        stream=sys.stderr,
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_parser() -> argparse.ArgumentParser:
    p = _ProbeArgumentParser(
        prog=PROG,
        description="Scan a log file incrementally for regular expression matches.",
        epilog=_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    files = p.add_argument_group("log file control")
    files.add_argument("-l", "--logfile", dest="log_target", required=True, help="Log file, directory, or fixed part of a dynamic name")
    files.add_argument("-m", "--log-pattern", dest="log_file_pattern", default=None, help="Glob appended to --logfile (rotated/timestamped logs)")
    files.add_argument(
        "-t",
        "--log-select",
        dest="file_select_strategy",
        default="last_match",
        help="most_recent | first_match | last_match (default)",
    )
    files.add_argument("-s", "--seekfile", dest="seek_key", default=None, help=f"Seek file or directory; {os.devnull} rescans every time")
    files.add_argument("--timestamp", dest="reference_timestamp", default=None, help="Reference time for -m macros (default: now)")
    files.add_argument("--missing-ok", action="store_true", help="Return OK when the log file does not exist")
    files.add_argument("--missing-msg", dest="missing_message", default=DEFAULT_MISSING_MESSAGE, help="Message for --missing-ok")

    patterns = p.add_argument_group("search pattern control")
    patterns.add_argument("-p", "--pattern", dest="match_pattern", default=None, help="Regular expression to look for")
    patterns.add_argument("-P", "--patternfile", dest="match_pattern_file", default=None, help="File of regular expressions, one per line")
    patterns.add_argument("-n", "--negpattern", dest="ignore_pattern", default=None, help="Ignore lines matching this expression")
    patterns.add_argument("-f", "--negpatternfile", dest="ignore_pattern_file", default=None, help="File of ignore expressions, one per line")
    patterns.add_argument("-i", "--case-insensitive", action="store_true", help="Case-insensitive matching (both pattern kinds)")
    patterns.add_argument("-e", "--parse", dest="classifier_code", default=None, help="Classifier reference 'module:function'")
    patterns.add_argument("-E", "--parsefile", dest="classifier_file", default=None, help="Python file defining classify(line, state)")

    alerts = p.add_argument_group("alerting control")
    alerts.add_argument("-w", "--warning", dest="warn_threshold", default="1", help="Warning threshold, count or percentage (default 1)")
    alerts.add_argument("-c", "--critical", dest="crit_threshold", default="0", help="Critical threshold, count or percentage (default 0: off)")
    alerts.add_argument("-d", "--nodiff-warn", dest="no_growth_warn", action="store_true", help="WARNING if the log has not grown")
    alerts.add_argument("-D", "--nodiff-crit", dest="no_growth_crit", action="store_true", help="CRITICAL if the log has not grown")
    alerts.add_argument("--ok", dest="always_ok", action="store_true", help="Always return OK (still reports matches)")

    out = p.add_argument_group("output control")
    out.add_argument("-a", "--output-all", action="store_true", help="Report all matching lines, not just the last")
    out.add_argument("-C", "--context", dest="context_spec", default=None, help="Context lines: N, +N or -N")
    out.add_argument("-1", "--stop-first-match", action="store_true", help="Stop at the first match")

    misc = p.add_argument_group("miscellaneous")
    misc.add_argument("--timeout", dest="timeout_seconds", type=float, default=None, help="Execution time limit in seconds")
    misc.add_argument("--no-timeout", action="store_true", help="Disable the execution time limit")
    misc.add_argument("--debug", action="store_true", help="Log what the probe is doing to stderr")
    misc.add_argument("-v", "--version", action="version", version=f"%(prog)s version {__version__}")
    return p


def _config_fields(args: argparse.Namespace) -> dict[str, Any]:
    fields = {
        k: v
        for k, v in vars(args).items()
        if k not in {"debug", "no_timeout", "timeout_seconds"}
    }
    if args.no_timeout:
        fields["timeout_seconds"] = None
    elif args.timeout_seconds is not None:
        fields["timeout_seconds"] = args.timeout_seconds
    return fields


def main(argv: Sequence[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    _configure_logging(args.debug)

    outcome = check_log(**_config_fields(args))
    print(outcome.render())
    raise SystemExit(outcome.verdict.exit_code)


if __name__ == "__main__":
    main()
