"""Incremental scan state machine.

INIT -> SELECTING -> OPENING -> SEEK_RESTORING -> STREAMING -> FINALIZING -> DONE,
with ERROR reachable from every state. All counters and buffers live on the
engine instance; one engine performs one scan.
"""

from __future__ import annotations

import logging
import os
import time
from enum import Enum
from pathlib import Path

from .classifier import Classifier, ClassifierState, run_classifier
from .context import ContextBuffer, LineReader
from .errors import NoGrowthDetected, ProbeError, ProbeIOError, ProbeTimeout, TargetMissingError, UsageError
from .file_selector import SelectStrategy, TargetSelection, select_target
from .matching import LineMatcher
from .models import CheckOutcome, ContextSpec, ScanResult, Verdict
from .output import accumulate, match_block, render_outcome
from .seek_store import SeekStore, apply_offset, resolve_seek_store
from .verdict import VerdictEngine

logger = logging.getLogger(__name__)


class ScanState(str, Enum):
    INIT = "init"
    SELECTING = "selecting"
    OPENING = "opening"
    SEEK_RESTORING = "seek_restoring"
    STREAMING = "streaming"
    FINALIZING = "finalizing"
    DONE = "done"
    ERROR = "error"


class ScanEngine:
    """Scans one log target from its stored offset and produces a verdict."""

    def __init__(
        self,
        *,
        base: str,
        matcher: LineMatcher,
        pattern: str | None = None,
        strategy: str | SelectStrategy | None = SelectStrategy.LAST_MATCH,
        reference: str | int | float | None = None,
        seek_key: str | None = None,
        scratch_dir: str | Path | None = None,
        verdicts: VerdictEngine | None = None,
        classifier: Classifier | None = None,
        context: ContextSpec | None = None,
        output_all: bool = False,
        stop_first_match: bool = False,
        no_growth: Verdict | None = None,
        always_ok: bool = False,
        missing_ok: bool = False,
        missing_message: str = "No log file found",
        deadline: float | None = None,
        timeout_seconds: float | None = None,
    ):
        self.base = base
        self.matcher = matcher
        self.pattern = pattern
        self.strategy = strategy
        self.reference = reference
        self.seek_key = seek_key
        self.scratch_dir = scratch_dir
        self.classifier = classifier
        self.verdicts = verdicts or VerdictEngine(classifier_active=classifier is not None)
        self.context = context or ContextSpec()
        self.output_all = output_all
        self.stop_first_match = stop_first_match
        self.no_growth = no_growth
        self.always_ok = always_ok
        self.missing_ok = missing_ok
        self.missing_message = missing_message
        self.deadline = deadline
        self.timeout_seconds = timeout_seconds

        self.state = ScanState.INIT
        self.selection: TargetSelection | None = None
        self.seek_store: SeekStore | None = None
        self.result: ScanResult | None = None
        self._buffer = ContextBuffer(self.context.before)

    def _enter(self, state: ScanState) -> None:
        logger.debug("scan state %s -> %s", self.state.value, state.value)
        self.state = state

    def run(self) -> CheckOutcome:
        """Run the full state machine; faults leave the engine in ERROR and propagate."""
        try:
            return self._run()
        except ProbeError:
            self._enter(ScanState.ERROR)
            raise
        except OSError as e:
            self._enter(ScanState.ERROR)
            raise ProbeIOError(f"I/O error reading {self.base}: {e.strerror or e}") from e

    def _run(self) -> CheckOutcome:
        if not self.matcher.has_pattern and self.no_growth is None:
            raise UsageError("Regular expression not specified.")

        self._enter(ScanState.SELECTING)
        selection = select_target(self.base, self.pattern, strategy=self.strategy, reference=self.reference)
        self.selection = selection
        logger.debug("using log file %s", selection.path)
        if selection.missing:
            if self.missing_ok:
                self._enter(ScanState.DONE)
                return CheckOutcome(verdict=Verdict.OK, message=self.missing_message)
            raise TargetMissingError(selection.path, alternative=self.base if self.pattern else None)

        self._enter(ScanState.OPENING)
        target = selection.path
        try:
            f = open(target, "rb")
        except OSError as e:
            raise ProbeIOError(f"Unable to open {target}: {e.strerror or e}") from e

        with f:
            self._enter(ScanState.SEEK_RESTORING)
            store = resolve_seek_store(
                self.seek_key,
                target=target,
                base=self.base,
                pattern=self.pattern,
                scratch_dir=self.scratch_dir,
            )
            self.seek_store = store
            logger.debug("using seek file %s", store.seek_file)

            record = store.load(target)
            size = os.fstat(f.fileno()).st_size
            stored = record.offset if record else 0
            logger.debug("seek from %d (eof = %d)", stored, size)
            try:
                offset = apply_offset(stored, size, no_growth=self.no_growth)
            except NoGrowthDetected as e:
                self._enter(ScanState.DONE)
                return CheckOutcome(verdict=e.verdict, message=f"{e.verdict.value}: {e}")
            f.seek(offset)

            self._enter(ScanState.STREAMING)
            result = ScanResult(target=target, start_offset=offset, end_offset=offset)
            self.result = result
            reader = LineReader(f, start_offset=offset, on_line=self._on_line)
            self._stream(reader)
            result.end_offset = reader.offset

        self._enter(ScanState.FINALIZING)
        store.save(target, result.end_offset)

        verdict = self.verdicts.evaluate(result)
        outcome = render_outcome(
            result,
            verdict,
            warning=self.verdicts.warning,
            critical=self.verdicts.critical,
            classifier_active=self.classifier is not None,
            context=self.context,
            always_ok=self.always_ok,
        )
        self._enter(ScanState.DONE)
        return outcome

    def _on_line(self, line: str) -> None:
        assert self.result is not None
        self.result.total_lines += 1
        self._buffer.push(line)

    def _check_deadline(self) -> None:
        if self.deadline is not None and time.monotonic() > self.deadline:
            raise ProbeTimeout(self.timeout_seconds or 0)

    def _stream(self, reader: LineReader) -> None:
        result = self.result
        assert result is not None
        for line in reader:
            self._check_deadline()
            if not self.matcher.matches(line.rstrip("\r\n")):
                continue

            result.match_count += 1
            before = self._buffer.snapshot() if self.context.before > 0 else None
            after = reader.peek_ahead(self.context.after) if self.context.after > 0 else []

            block = match_block(line, result.match_count, before=before, after=after, output_all=self.output_all)
            result.match_text = accumulate(result.match_text, block, output_all=self.output_all, context=self.context)

            if self.classifier is not None:
                self._classify(line, before, after)

            if self.stop_first_match:
                logger.debug("stopping at first match (line %d)", result.total_lines)
                break

    def _classify(self, line: str, before: list[str] | None, after: list[str]) -> None:
        result = self.result
        assert result is not None and self.classifier is not None

        state = ClassifierState(
            match_count=result.match_count,
            classified_count=result.classified_count,
            context=(list(before) if before is not None else [line]) + list(after),
            metric=result.metric_text,
        )
        res, error = run_classifier(self.classifier, line, state)
        if error is not None:
            result.classifier_errors.append(error)
            return

        result.metric_text = state.metric
        if res <= 0:
            return

        result.classified_count += 1
        if state.output:
            # A custom string replaces the line and its context.
            if self.output_all:
                result.classified_text += f"({result.classified_count}) {state.output}"
            else:
                result.classified_text = state.output
            return

        prefix = f"({result.classified_count}) " if before is None and self.output_all else ""
        block = prefix + "".join(state.context)
        result.classified_text = accumulate(
            result.classified_text, block, output_all=self.output_all, context=self.context
        )
