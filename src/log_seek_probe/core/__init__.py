"""Incremental log scanning core."""

from __future__ import annotations

from .classifier import Classifier, ClassifierState
from .config import ProbeConfig
from .errors import (
    NoGrowthDetected,
    ProbeError,
    ProbeIOError,
    ProbeTimeout,
    TargetMissingError,
    UsageError,
)
from .file_selector import SelectStrategy, TargetSelection, select_target
from .matching import LineMatcher
from .models import CheckOutcome, ContextSpec, ScanResult, SeekRecord, Threshold, Verdict
from .probe import check_log, run_check
from .scan_engine import ScanEngine, ScanState
from .seek_store import NullSeekStore, SeekStore
from .verdict import VerdictEngine

__all__ = [
    "CheckOutcome",
    "Classifier",
    "ClassifierState",
    "ContextSpec",
    "LineMatcher",
    "NoGrowthDetected",
    "NullSeekStore",
    "ProbeConfig",
    "ProbeError",
    "ProbeIOError",
    "ProbeTimeout",
    "ScanEngine",
    "ScanResult",
    "ScanState",
    "SeekRecord",
    "SeekStore",
    "SelectStrategy",
    "TargetMissingError",
    "TargetSelection",
    "Threshold",
    "UsageError",
    "Verdict",
    "VerdictEngine",
    "check_log",
    "run_check",
    "select_target",
]
