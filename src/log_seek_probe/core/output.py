"""Rendering of retained match text and the final verdict line."""

from __future__ import annotations

from collections.abc import Sequence

from .models import CheckOutcome, ContextSpec, ScanResult, Threshold, Verdict

# "|" separates the human-readable text from the metric text.
METRIC_SEPARATOR = "|"


def match_block(
    line: str,
    number: int,
    *,
    before: Sequence[str] | None,
    after: Sequence[str],
    output_all: bool,
) -> str:
    """Text retained for one match: look-back window or the numbered line, then look-ahead."""
    if before is not None:
        text = "".join(before)
    elif output_all:
        text = f"({number}) {line}"
    else:
        text = line
    return text + "".join(after)


def accumulate(current: str, block: str, *, output_all: bool, context: ContextSpec) -> str:
    if not output_all:
        return block
    return current + block + ("---\n" if context.enabled else "")


def sanitize(text: str) -> str:
    """Chomp one trailing newline and replace the metric separator."""
    if text.endswith("\n"):
        text = text[:-1]
        if text.endswith("\r"):
            text = text[:-1]
    return text.replace(METRIC_SEPARATOR, "!")


def metric_text(result: ScanResult, *, classifier_active: bool) -> str:
    if classifier_active:
        return result.metric_text or f"lines={result.match_count} parsed={result.classified_count}"
    return f"lines={result.match_count}"


def report_text(result: ScanResult, *, classifier_active: bool) -> str:
    if classifier_active:
        return f"Parsed output ({result.classified_count} matched): {result.classified_text}"
    return result.match_text


def render_outcome(
    result: ScanResult,
    verdict: Verdict,
    *,
    warning: Threshold,
    critical: Threshold,
    classifier_active: bool,
    context: ContextSpec,
    always_ok: bool = False,
) -> CheckOutcome:
    """Build the final outcome for a completed scan."""
    metric = metric_text(result, classifier_active=classifier_active)
    limits = f"limit={warning}/{critical}"

    if verdict is Verdict.OK:
        if result.match_count == 0:
            message = "OK - No matches found."
        else:
            message = f"OK - Found {result.match_count} lines ({limits})."
        return CheckOutcome(verdict=Verdict.OK, message=message, metric=metric, result=result)

    text = sanitize(report_text(result, classifier_active=classifier_active))
    prefix = "OK" if always_ok else verdict.value
    message = f"{prefix}: Found {result.match_count} lines ({limits}): "
    if context.enabled:
        message += "\n"
    message += text

    final = Verdict.OK if always_ok else verdict
    return CheckOutcome(verdict=final, message=message, metric=metric, result=result)


def fault_outcome(verdict: Verdict, message: str) -> CheckOutcome:
    return CheckOutcome(verdict=verdict, message=f"{verdict.value}: {message}")
