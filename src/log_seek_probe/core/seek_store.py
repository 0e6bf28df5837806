"""Persistent read positions for incremental log scanning.

Each seek key is a small text file: the byte offset on the first line and
the resolved target path on the second. Files are rewritten in full on every
scan (temp file + atomic rename). There is no locking; two checks sharing a
seek key will race, so concurrent checks must use distinct keys.
"""

from __future__ import annotations

import contextlib
import hashlib
import logging
import os
import tempfile
from pathlib import Path

from .errors import NoGrowthDetected, ProbeIOError
from .models import SeekRecord, Verdict

logger = logging.getLogger(__name__)

SEEK_DIR_ENV = "LOG_PROBE_SEEK_DIR"
SEEK_SUFFIX = ".seek"


def default_seek_dir() -> Path:
    """Return the scratch directory for auto-derived seek files."""
    raw = os.getenv(SEEK_DIR_ENV)
    return Path(raw) if raw else Path(tempfile.gettempdir())


class SeekStore:
    """Reads and writes the offset record for one seek file."""

    def __init__(self, seek_file: str | Path):
        self.seek_file = Path(seek_file)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self.seek_file)!r})"

    def load(self, target: str | None = None) -> SeekRecord | None:
        """Return the stored record, or None when it is absent or unusable.

        A record written for a different target path (a rotated dynamic log
        sharing a fixed key) is treated as absent.
        """
        try:
            with self.seek_file.open("r", encoding="utf-8") as f:
                lines = f.read().splitlines()
        except OSError as e:
            logger.debug("cannot open seek file %s (%s), first time reading this file", self.seek_file, e)
            return None

        if not lines or not lines[0].strip():
            return None
        try:
            offset = int(lines[0].strip())
        except ValueError:
            logger.warning("Ignoring garbled seek file %s", self.seek_file)
            return None
        if offset < 0:
            logger.warning("Ignoring negative offset in seek file %s", self.seek_file)
            return None

        path = lines[1].strip() if len(lines) > 1 and lines[1].strip() else None
        if target is not None and path is not None and path != target:
            logger.info("Seek file %s belongs to %s, not %s; starting from 0", self.seek_file, path, target)
            return None
        return SeekRecord(offset=offset, path=path)

    def save(self, target: str, offset: int) -> None:
        """Overwrite the record with ``offset``; failure is fatal."""
        tmp = self.seek_file.with_name(f".{self.seek_file.name}.{os.getpid()}.tmp")
        replaced = False
        try:
            with tmp.open("w", encoding="utf-8") as f:
                f.write(f"{offset}\n{target}\n")
            tmp.replace(self.seek_file)
            replaced = True
        except OSError as e:
            raise ProbeIOError(f"Unable to open {self.seek_file} for writing: {e.strerror or e}") from e
        finally:
            # also reached when a timeout interrupts the write
            if not replaced:
                with contextlib.suppress(OSError):
                    tmp.unlink()
        logger.debug("saved offset %d for %s to %s", offset, target, self.seek_file)


class NullSeekStore(SeekStore):
    """Seek store backed by the null device: always scan from the start."""

    def __init__(self) -> None:
        super().__init__(os.devnull)

    def load(self, target: str | None = None) -> SeekRecord | None:
        return None

    def save(self, target: str, offset: int) -> None:
        logger.debug("discarding offset %d for %s", offset, target)


def apply_offset(
    offset: int,
    current_size: int,
    *,
    no_growth: Verdict | None = None,
) -> int:
    """Return the offset to seek to for a file of ``current_size`` bytes.

    An offset past the end means the log was rotated or truncated: start over.
    An unchanged size with a no-growth verdict configured raises
    ``NoGrowthDetected``; a zero offset never counts as "unchanged".
    """
    if offset <= 0:
        return 0
    if offset == current_size and no_growth is not None:
        raise NoGrowthDetected(no_growth)
    if offset > current_size:
        logger.info("Log was rotated or truncated (offset %d > size %d), reading from start", offset, current_size)
        return 0
    return offset


def resolve_seek_store(
    seek_key: str | None,
    *,
    target: str,
    base: str,
    pattern: str | None = None,
    scratch_dir: str | Path | None = None,
) -> SeekStore:
    """Pick the seek file for a check.

    - the null device: ``NullSeekStore``
    - an existing directory: ``<dir>/<target basename>.seek``
    - any other path: that file
    - nothing: a file in the scratch directory, named after the resolved
      target. Dynamic targets (a file name ``pattern`` is configured) are
      named after the configured base path plus a digest of the unexpanded
      pattern, so rotations keep reusing one key while checks with different
      patterns on the same base stay apart.
    """
    if seek_key == os.devnull:
        return NullSeekStore()

    if seek_key and os.path.isdir(seek_key):
        logger.debug("using seek dir %s", seek_key)
        return SeekStore(_derived_name(seek_key, target))

    if seek_key:
        return SeekStore(seek_key)

    directory = Path(scratch_dir) if scratch_dir is not None else default_seek_dir()
    if not os.access(directory, os.W_OK):
        logger.warning("%s not writable, seek position will not be saved", directory)
    if pattern:
        logger.debug("deriving fixed seek key from %s and %s for dynamic file names", base, pattern)
        return SeekStore(_derived_name(directory, dynamic_key_name(base, pattern)))
    return SeekStore(_derived_name(directory, target))


def dynamic_key_name(base: str, pattern: str) -> str:
    """Stable key name for ``base`` + ``pattern``, independent of the file it resolves to."""
    name = os.path.basename(base.rstrip("/\\")) or "log"
    digest = hashlib.sha1(pattern.encode("utf-8")).hexdigest()[:10]
    return f"{name}.{digest}"


def _derived_name(directory: str | Path, path: str) -> Path:
    return Path(directory) / f"{os.path.basename(path)}{SEEK_SUFFIX}"
