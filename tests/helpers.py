"""Handle doubles shared by the test modules."""

from __future__ import annotations

import io
from typing import Any


class SpyHandle:
    """In-memory handle that records every method called on it."""

    def __init__(self, data: bytes = b'', *, fail_with: BaseException | None = None) -> None:
        self.stream = io.BytesIO(data)
        self.calls: list[str] = []
        self.closed = False
        self.fail_with = fail_with

    def _record(self, name: str) -> None:
        self.calls.append(name)
        if self.fail_with is not None:
            raise self.fail_with

    def read(self, size: int = -1, /) -> bytes:
        self._record('read')
        return self.stream.read(size)

    def readline(self, size: int = -1, /) -> bytes:
        self._record('readline')
        return self.stream.readline(size)

    def peek(self, size: int = 0, /) -> bytes:
        self._record('peek')
        pos = self.stream.tell()
        data = self.stream.read(4)
        self.stream.seek(pos)
        return data

    def write(self, data: Any, /) -> int:
        self._record('write')
        return self.stream.write(data)

    def write_err(self, data: Any, /) -> int:
        self._record('write_err')
        return len(data)

    def seek(self, offset: int, whence: int = 0, /) -> int:
        self._record('seek')
        return self.stream.seek(offset, whence)

    def flush(self) -> None:
        self._record('flush')

    def close(self) -> None:
        self.closed = True


class TrickleWriter:
    """Binary writer that accepts at most ``limit`` bytes per write call."""

    def __init__(self, limit: int = 2, *, stall_after: int | None = None) -> None:
        self.limit = limit
        self.stall_after = stall_after
        self.buffer = bytearray()
        self.writes = 0

    def write(self, data: Any, /) -> int:
        self.writes += 1
        if self.stall_after is not None and len(self.buffer) >= self.stall_after:
            return 0
        chunk = bytes(data[: self.limit])
        self.buffer += chunk
        return len(chunk)
