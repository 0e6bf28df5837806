"""Line reading with byte offsets, look-back window and peek-ahead."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterator
from typing import BinaryIO


class ContextBuffer:
    """Bounded FIFO holding the current line plus ``before`` preceding lines.

    The buffer is never cleared; each snapshot reflects the lines right up to
    the current read position.
    """

    def __init__(self, before: int):
        self.before = before
        self._lines: deque[str] = deque(maxlen=before + 1 if before > 0 else 0)

    def push(self, line: str) -> None:
        if self.before > 0:
            self._lines.append(line)

    def snapshot(self) -> list[str]:
        return list(self._lines)

    def __len__(self) -> int:
        return len(self._lines)


class LineReader:
    """Reads decoded lines from a binary stream while tracking the byte offset.

    ``peek_ahead`` is a side read on the same stream: the lines it returns are
    consumed. The scan loop never sees them again, so they are not tested
    against the match pattern, but they still count as read (total lines,
    look-back window, persisted offset). Do not "fix" this by rewinding.
    """

    def __init__(
        self,
        stream: BinaryIO,
        *,
        start_offset: int = 0,
        encoding: str = "utf-8",
        decode_errors: str = "replace",
        on_line=None,
    ):
        self._stream = stream
        self.offset = start_offset
        self.encoding = encoding
        self.decode_errors = decode_errors
        # Called for every line read, including lines consumed by peek_ahead.
        self._on_line = on_line

    def read_line(self) -> str | None:
        raw = self._stream.readline()
        if not raw:
            return None
        self.offset += len(raw)
        line = raw.decode(self.encoding, errors=self.decode_errors)
        if self._on_line is not None:
            self._on_line(line)
        return line

    def peek_ahead(self, n: int) -> list[str]:
        """Read up to ``n`` further lines for context (consumes them)."""
        lines: list[str] = []
        while len(lines) < n:
            line = self.read_line()
            if line is None:
                break
            lines.append(line)
        return lines

    def __iter__(self) -> Iterator[str]:
        while (line := self.read_line()) is not None:
            yield line
