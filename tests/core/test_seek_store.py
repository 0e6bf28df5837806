from __future__ import annotations

import os
from pathlib import Path

import pytest

from log_seek_probe.core.errors import NoGrowthDetected, ProbeIOError, ProbeTimeout
from log_seek_probe.core.models import SeekRecord, Verdict
from log_seek_probe.core.seek_store import (
    NullSeekStore,
    SeekStore,
    apply_offset,
    dynamic_key_name,
    resolve_seek_store,
)


def test_load_missing_file_is_absent(tmp_path: Path) -> None:
    assert SeekStore(tmp_path / "nope.seek").load() is None


def test_save_then_load(tmp_path: Path) -> None:
    store = SeekStore(tmp_path / "app.log.seek")
    store.save("/var/log/app.log", 1234)

    assert store.load("/var/log/app.log") == SeekRecord(offset=1234, path="/var/log/app.log")
    assert (tmp_path / "app.log.seek").read_text(encoding="utf-8").splitlines()[0] == "1234"


def test_save_overwrites(tmp_path: Path) -> None:
    store = SeekStore(tmp_path / "app.log.seek")
    store.save("/var/log/app.log", 123456)
    store.save("/var/log/app.log", 7)

    assert (tmp_path / "app.log.seek").read_text(encoding="utf-8") == "7\n/var/log/app.log\n"
    assert not list(tmp_path.glob(".*.tmp"))


def test_bare_offset_file_is_accepted(tmp_path: Path) -> None:
    seek = tmp_path / "legacy.seek"
    seek.write_text("512", encoding="utf-8")
    assert SeekStore(seek).load("/any/target") == SeekRecord(offset=512)


@pytest.mark.parametrize("content", ["", "garbage\n", "-5\n"])
def test_unusable_content_is_absent(tmp_path: Path, content: str) -> None:
    seek = tmp_path / "bad.seek"
    seek.write_text(content, encoding="utf-8")
    assert SeekStore(seek).load() is None


def test_record_for_other_target_is_absent(tmp_path: Path) -> None:
    store = SeekStore(tmp_path / "app.log.seek")
    store.save("/var/log/app.log.1", 99)
    assert store.load("/var/log/app.log.2") is None
    assert store.load("/var/log/app.log.1") == SeekRecord(offset=99, path="/var/log/app.log.1")


def test_save_failure_is_fatal(tmp_path: Path) -> None:
    store = SeekStore(tmp_path / "missing-dir" / "app.log.seek")
    with pytest.raises(ProbeIOError, match="for writing"):
        store.save("/var/log/app.log", 10)


def test_null_store_discards(tmp_path: Path) -> None:
    store = NullSeekStore()
    store.save("/var/log/app.log", 10)
    assert store.load("/var/log/app.log") is None


def test_apply_offset_rotation_and_growth() -> None:
    assert apply_offset(500, 100) == 0
    assert apply_offset(50, 100) == 50
    assert apply_offset(100, 100) == 100
    assert apply_offset(0, 0, no_growth=Verdict.CRITICAL) == 0


def test_apply_offset_no_growth() -> None:
    with pytest.raises(NoGrowthDetected) as exc:
        apply_offset(100, 100, no_growth=Verdict.WARNING)
    assert exc.value.verdict is Verdict.WARNING


def test_resolve_null_device() -> None:
    store = resolve_seek_store(os.devnull, target="/var/log/app.log", base="/var/log/app.log", pattern=".*")
    assert isinstance(store, NullSeekStore)


def test_resolve_directory_key(tmp_path: Path) -> None:
    store = resolve_seek_store(str(tmp_path), target="/var/log/app.log.3", base="/var/log/app.log", pattern=".*")
    assert store.seek_file == tmp_path / "app.log.3.seek"


def test_resolve_explicit_file_key(tmp_path: Path) -> None:
    key = str(tmp_path / "check1.seek")
    store = resolve_seek_store(key, target="/var/log/app.log.3", base="/var/log/app.log", pattern=".*")
    assert store.seek_file == Path(key)


def test_resolve_default_key(seek_dir: Path) -> None:
    static = resolve_seek_store(None, target="/var/log/messages", base="/var/log/messages")
    assert static.seek_file == seek_dir / "messages.seek"

    dynamic = resolve_seek_store(
        None, target="/var/log/access.20240101.log", base="/var/log/access", pattern=".%Y%m%d.log"
    )
    assert dynamic.seek_file == seek_dir / f"{dynamic_key_name('/var/log/access', '.%Y%m%d.log')}.seek"
    assert dynamic.seek_file.name.startswith("access.")


def test_resolve_default_key_in_explicit_scratch_dir(tmp_path: Path) -> None:
    store = resolve_seek_store(
        None, target="/var/log/messages", base="/var/log/messages", scratch_dir=tmp_path
    )
    assert store.seek_file == tmp_path / "messages.seek"


def test_interrupted_save_leaves_no_temp_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    store = SeekStore(tmp_path / "app.log.seek")

    def interrupted(self, target):
        raise ProbeTimeout(15)

    monkeypatch.setattr(type(tmp_path), "replace", interrupted)
    with pytest.raises(ProbeTimeout):
        store.save("/var/log/app.log", 10)

    assert not list(tmp_path.glob(".*.tmp"))
    assert not (tmp_path / "app.log.seek").exists()


def test_dynamic_key_depends_on_pattern_not_target() -> None:
    nginx = dynamic_key_name("/var/log/", "nginx-*.log")
    assert nginx.startswith("log.")
    assert nginx == dynamic_key_name("/var/log", "nginx-*.log")
    assert nginx != dynamic_key_name("/var/log/", "app-*.log")


def test_resolve_dynamic_keys_for_shared_base(seek_dir: Path) -> None:
    nginx = resolve_seek_store(None, target="/var/log/nginx-2.log", base="/var/log/", pattern="nginx-*.log")
    rotated = resolve_seek_store(None, target="/var/log/nginx-3.log", base="/var/log/", pattern="nginx-*.log")
    app = resolve_seek_store(None, target="/var/log/app-1.log", base="/var/log/", pattern="app-*.log")

    assert nginx.seek_file == rotated.seek_file
    assert nginx.seek_file != app.seek_file
    assert nginx.seek_file.parent == seek_dir
