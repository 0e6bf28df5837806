"""Incremental log pattern probe with persistent seek positions."""

from __future__ import annotations

__version__ = "0.1.0"
