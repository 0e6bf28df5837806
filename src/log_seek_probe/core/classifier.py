"""Optional per-line classification of matched lines.

A classifier is any callable ``(line, state) -> int``. A positive result
counts the line toward the threshold; zero or less keeps it as an
informational match only.

The callable never touches the engine directly: it gets a fresh
``ClassifierState`` per call and the engine copies back ``output``,
``context`` and ``metric`` only when the call returns normally.
"""

from __future__ import annotations

import importlib
import importlib.util
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from .errors import ProbeIOError, ProbeTimeout, UsageError

logger = logging.getLogger(__name__)

CLASSIFY_FUNCTION = "classify"


@dataclass(slots=True)
class ClassifierState:
    """Working state a classifier may read and modify for one line."""

    match_count: int
    classified_count: int
    context: list[str] = field(default_factory=list)
    output: str | None = None  # replaces the retained text for this line
    metric: str | None = None  # replaces the metric text for the whole run


class Classifier(Protocol):
    def __call__(self, line: str, state: ClassifierState) -> int: ...


def load_classifier_file(path: str | Path) -> Classifier:
    """Load ``classify`` from a Python source file."""
    p = Path(path)
    if not p.is_file():
        raise ProbeIOError(f"Unable to open {p}: No such file")
    logger.debug("using classifier file %s", p)

    spec = importlib.util.spec_from_file_location(f"_log_probe_classifier_{p.stem}", p)
    if spec is None or spec.loader is None:
        raise UsageError(f"Cannot load classifier from {p}")
    module = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(module)
    except ProbeTimeout:
        raise
    except OSError as e:
        raise ProbeIOError(f"Unable to open {p}: {e.strerror or e}") from e
    except Exception as e:
        raise UsageError(f"Error loading classifier file {p}: {e}") from e

    fn = getattr(module, CLASSIFY_FUNCTION, None)
    if not callable(fn):
        raise UsageError(f"Classifier file {p} does not define {CLASSIFY_FUNCTION}(line, state)")
    return fn


def load_classifier_ref(ref: str) -> Classifier:
    """Resolve a ``package.module:function`` reference."""
    module_name, sep, attr = ref.partition(":")
    if not sep or not module_name or not attr:
        raise UsageError(f"Invalid classifier reference {ref!r} (expected 'module:function')")
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise UsageError(f"Cannot import classifier module {module_name!r}: {e}") from e
    except ProbeTimeout:
        raise
    except Exception as e:
        raise UsageError(f"Error loading classifier module {module_name!r}: {e}") from e

    fn = module
    for part in attr.split("."):
        fn = getattr(fn, part, None)
        if fn is None:
            break
    if not callable(fn):
        raise UsageError(f"Classifier {ref!r} is not callable")
    return fn


def resolve_classifier(
    *,
    code: str | None = None,
    file: str | Path | None = None,
    injected: Callable[[str, ClassifierState], int] | None = None,
) -> Classifier | None:
    """Injected callable wins over a file, which wins over a reference."""
    if injected is not None:
        return injected
    if file:
        return load_classifier_file(file)
    if code:
        return load_classifier_ref(code)
    return None


def run_classifier(classifier: Classifier, line: str, state: ClassifierState) -> tuple[int, str | None]:
    """Call ``classifier``; return (result, error message or None).

    A failing classifier yields result 0 so scanning can continue.
    """
    try:
        res = classifier(line, state)
    except ProbeTimeout:
        raise
    except Exception as e:
        msg = f"classifier failed on line {line.rstrip()!r}: {type(e).__name__}: {e}"
        logger.warning(msg)
        return 0, msg

    if res is None or isinstance(res, bool):
        return int(bool(res)), None
    try:
        return int(res), None
    except (TypeError, ValueError):
        msg = f"classifier returned non-integer {res!r}"
        logger.warning(msg)
        return 0, msg
