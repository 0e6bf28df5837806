"""Probe configuration.

``ProbeConfig`` is the single input object of a check, whichever surface
(CLI, MCP tool, Python API) builds it. Environment variables provide
defaults for the ambient settings.
"""

from __future__ import annotations

import os
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .file_selector import SelectStrategy
from .models import ContextSpec, Threshold, Verdict

TIMEOUT_ENV = "LOG_PROBE_TIMEOUT"
LOG_LEVEL_ENV = "LOG_PROBE_LOG_LEVEL"
DEFAULT_TIMEOUT = 15.0
DEFAULT_MISSING_MESSAGE = "No log file found"


def resolve_timeout(value: float | None = None) -> float | None:
    """Return the execution budget in seconds; None disables it.

    An explicit value wins over ``LOG_PROBE_TIMEOUT``; zero disables.
    """
    if value is None:
        env = os.getenv(TIMEOUT_ENV)
        if env is None or env == "":
            return DEFAULT_TIMEOUT
        try:
            value = float(env)
        except ValueError as exc:
            raise ValueError(f"{TIMEOUT_ENV} must be a number") from exc
    if value < 0:
        raise ValueError("timeout must be >= 0")
    return value or None


class ProbeConfig(BaseModel):
    """Everything one probe run needs."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    log_target: str = Field(min_length=1, description="Log file, directory, or fixed part of a dynamic name.")
    log_file_pattern: str | None = Field(
        default=None, description="Glob appended to log_target; supports %Y %m %d ... macros."
    )
    file_select_strategy: SelectStrategy = SelectStrategy.LAST_MATCH
    seek_key: str | None = Field(default=None, description="Seek file, seek directory, or the null device.")

    match_pattern: str | None = None
    match_pattern_file: str | None = None
    ignore_pattern: str | None = None
    ignore_pattern_file: str | None = None
    case_insensitive: bool = False

    warn_threshold: Threshold = Threshold(1)
    crit_threshold: Threshold = Threshold(0)
    no_growth_warn: bool = False
    no_growth_crit: bool = False

    classifier_code: str | None = Field(default=None, description="Classifier reference 'module:function'.")
    classifier_file: str | None = Field(default=None, description="Python file defining classify(line, state).")

    output_all: bool = False
    context_spec: ContextSpec = ContextSpec()
    stop_first_match: bool = False
    always_ok: bool = False
    missing_ok: bool = False
    missing_message: str = DEFAULT_MISSING_MESSAGE

    timeout_seconds: float | None = Field(default_factory=resolve_timeout)
    reference_timestamp: str | None = None

    @field_validator("file_select_strategy", mode="before")
    @classmethod
    def _coerce_strategy(cls, v: Any) -> SelectStrategy:
        return SelectStrategy.coerce(v)

    @field_validator("warn_threshold", "crit_threshold", mode="before")
    @classmethod
    def _parse_threshold(cls, v: Any) -> Threshold:
        return Threshold.parse(v)

    @field_validator("context_spec", mode="before")
    @classmethod
    def _parse_context(cls, v: Any) -> ContextSpec:
        return ContextSpec.parse(v)

    @field_validator("timeout_seconds", mode="before")
    @classmethod
    def _parse_timeout(cls, v: Any) -> float | None:
        if v is None:
            return None
        return resolve_timeout(float(v))

    @field_validator("reference_timestamp", mode="before")
    @classmethod
    def _stringify_timestamp(cls, v: Any) -> str | None:
        return None if v is None else str(v)

    @model_validator(mode="after")
    def _require_criterion(self) -> ProbeConfig:
        if not (self.match_pattern or self.match_pattern_file or self.no_growth_warn or self.no_growth_crit):
            raise ValueError("Regular expression not specified.")
        return self

    @property
    def no_growth_verdict(self) -> Verdict | None:
        if self.no_growth_crit:
            return Verdict.CRITICAL
        if self.no_growth_warn:
            return Verdict.WARNING
        return None

    @property
    def has_classifier(self) -> bool:
        return bool(self.classifier_code or self.classifier_file)
