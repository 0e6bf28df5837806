"""One-shot probe runner.

Builds a ``ScanEngine`` from a ``ProbeConfig``, enforces the execution-time
budget and maps every fault onto its verdict. Nothing is retried; the
scheduler invoking the probe owns retry policy.
"""

from __future__ import annotations

import contextlib
import logging
import signal
import threading
import time
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from .classifier import ClassifierState, resolve_classifier
from .config import ProbeConfig
from .errors import ProbeError, ProbeIOError, ProbeTimeout, UsageError
from .matching import LineMatcher
from .models import CheckOutcome, Verdict
from .output import fault_outcome
from .scan_engine import ScanEngine
from .verdict import VerdictEngine

logger = logging.getLogger(__name__)


@contextlib.contextmanager
def execution_budget(seconds: float | None) -> Iterator[None]:
    """Raise ``ProbeTimeout`` in the main thread once ``seconds`` have elapsed.

    Uses an interval timer so that a runaway regular expression is
    interrupted too. Off the main thread, or without SIGALRM, this is a no-op
    and only the engine's per-line deadline applies.
    """
    usable = (
        seconds is not None
        and hasattr(signal, "SIGALRM")
        and threading.current_thread() is threading.main_thread()
    )
    if not usable:
        yield
        return

    def _on_alarm(signum, frame):
        raise ProbeTimeout(seconds)

    previous = signal.signal(signal.SIGALRM, _on_alarm)
    signal.setitimer(signal.ITIMER_REAL, seconds)
    try:
        yield
    finally:
        signal.setitimer(signal.ITIMER_REAL, 0)
        signal.signal(signal.SIGALRM, previous)


def build_engine(
    config: ProbeConfig,
    *,
    classifier: Callable[[str, ClassifierState], int] | None = None,
    scratch_dir: str | Path | None = None,
    deadline: float | None = None,
) -> ScanEngine:
    """Compile patterns, load the classifier and wire up a ScanEngine."""
    matcher = LineMatcher.from_sources(
        pattern=config.match_pattern,
        pattern_file=config.match_pattern_file,
        ignore=config.ignore_pattern,
        ignore_file=config.ignore_pattern_file,
        case_insensitive=config.case_insensitive,
    )
    resolved = resolve_classifier(code=config.classifier_code, file=config.classifier_file, injected=classifier)
    context = config.context_spec
    logger.debug("using line buffer: %d back, %d ahead", context.before, context.after)

    return ScanEngine(
        base=config.log_target,
        matcher=matcher,
        pattern=config.log_file_pattern,
        strategy=config.file_select_strategy,
        reference=config.reference_timestamp,
        seek_key=config.seek_key,
        scratch_dir=scratch_dir,
        verdicts=VerdictEngine(
            warning=config.warn_threshold,
            critical=config.crit_threshold,
            classifier_active=resolved is not None,
        ),
        classifier=resolved,
        context=context,
        output_all=config.output_all,
        stop_first_match=config.stop_first_match,
        no_growth=config.no_growth_verdict,
        always_ok=config.always_ok,
        missing_ok=config.missing_ok,
        missing_message=config.missing_message,
        deadline=deadline,
        timeout_seconds=config.timeout_seconds,
    )


def run_check(
    config: ProbeConfig,
    *,
    classifier: Callable[[str, ClassifierState], int] | None = None,
    scratch_dir: str | Path | None = None,
) -> CheckOutcome:
    """Run one check and return its outcome; never raises for probe faults."""
    timeout = config.timeout_seconds
    deadline = time.monotonic() + timeout if timeout else None
    try:
        with execution_budget(timeout):
            engine = build_engine(config, classifier=classifier, scratch_dir=scratch_dir, deadline=deadline)
            return engine.run()
    except ProbeTimeout as e:
        logger.error("%s", e)
        return fault_outcome(Verdict.UNKNOWN, str(e))
    except UsageError as e:
        return fault_outcome(Verdict.UNKNOWN, str(e))
    except ProbeIOError as e:
        logger.error("%s", e)
        return fault_outcome(Verdict.CRITICAL, str(e))
    except ProbeError as e:
        logger.exception("Unexpected probe fault")
        return fault_outcome(Verdict.UNKNOWN, str(e))
    except Exception as e:
        logger.exception("Internal error during check")
        return fault_outcome(Verdict.UNKNOWN, f"Plug-in error: {type(e).__name__}: {e}")


def check_log(
    *,
    classifier: Callable[[str, ClassifierState], int] | None = None,
    scratch_dir: str | Path | None = None,
    **fields: Any,
) -> CheckOutcome:
    """Validate ``fields`` into a ProbeConfig and run the check."""
    try:
        config = ProbeConfig(**fields)
    except ValidationError as e:
        return fault_outcome(Verdict.UNKNOWN, _validation_message(e))
    except ValueError as e:
        # raised by environment defaults, outside pydantic's error collection
        return fault_outcome(Verdict.UNKNOWN, str(e))
    return run_check(config, classifier=classifier, scratch_dir=scratch_dir)


def _validation_message(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "__root__")
        msg = err.get("msg", "invalid value")
        msg = msg.removeprefix("Value error, ")
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts) or str(exc)
