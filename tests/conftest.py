from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def seek_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keep auto-derived seek files inside the test's tmp dir."""
    d = tmp_path / "seek"
    d.mkdir()
    monkeypatch.setenv("LOG_PROBE_SEEK_DIR", str(d))
    monkeypatch.delenv("LOG_PROBE_TIMEOUT", raising=False)
    return d


@pytest.fixture
def write_log() -> Callable[[Path, list[str]], Path]:
    def _write(path: Path, lines: list[str]) -> Path:
        path.write_text("".join(line + "\n" for line in lines), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def append_log() -> Callable[[Path, list[str]], Path]:
    def _append(path: Path, lines: list[str]) -> Path:
        with path.open("a", encoding="utf-8") as f:
            f.write("".join(line + "\n" for line in lines))
        return path

    return _append


@pytest.fixture
def app_log(tmp_path: Path, write_log) -> Path:
    return write_log(
        tmp_path / "app.log",
        [
            "2025-12-30T08:12:01Z [INFO] service started",
            "2025-12-30T08:12:03Z [WARNING] retrying request id=abc123",
            "2025-12-30T08:12:04Z [ERROR] upstream timeout route=/api/v1/items",
            "2025-12-30T08:12:05Z [INFO] request ok",
            "2025-12-30T08:12:06Z [ERROR] database unavailable",
        ],
    )
