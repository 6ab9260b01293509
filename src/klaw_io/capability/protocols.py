"""Structural capabilities a handle may provide.

Delegated chain operations check these on the handle before touching it.
Python file objects, sockets made into files and ``klaw_io.Stdio`` satisfy
them out of the box; user-defined handles only need the matching methods.
"""

from __future__ import annotations

from typing import Any, Protocol, Self, runtime_checkable

__all__ = [
    'BufRead',
    'ErrWrite',
    'Flush',
    'FromAddr',
    'FromPath',
    'LineRead',
    'Read',
    'Seek',
    'Write',
]


@runtime_checkable
class Read(Protocol):
    def read(self, size: int = -1, /) -> bytes | str: ...


@runtime_checkable
class Write(Protocol):
    def write(self, data: Any, /) -> int | None: ...


@runtime_checkable
class Flush(Protocol):
    def flush(self) -> None: ...


@runtime_checkable
class Seek(Protocol):
    def seek(self, offset: int, whence: int = 0, /) -> int: ...


@runtime_checkable
class BufRead(Protocol):
    """A reader with an inspectable internal buffer (``io.BufferedReader``)."""

    def peek(self, size: int = 0, /) -> bytes: ...

    def read(self, size: int = -1, /) -> bytes: ...


@runtime_checkable
class LineRead(Protocol):
    def readline(self, size: int = -1, /) -> bytes | str: ...


@runtime_checkable
class ErrWrite(Protocol):
    """The error side of a standard-stream pair."""

    def write_err(self, data: Any, /) -> int | None: ...


class FromPath(Protocol):
    """A handle type constructible from a filesystem path."""

    @classmethod
    def from_path(cls, path: Any, /) -> Self: ...


class FromAddr(Protocol):
    """A handle type constructible from a network address."""

    @classmethod
    def from_addr(cls, addr: Any, /) -> Self: ...
