"""The standard-stream handle and its default chain."""

from __future__ import annotations

import io
import sys
from typing import Any

from klaw_io.chain import Good

__all__ = ['Stdio', 'stdio']


def _binary(stream: Any) -> Any:
    return getattr(stream, 'buffer', stream)


class Stdio:
    """Standard input, output and error as one binary handle.

    Reads come from stdin, ``write`` goes to stdout and ``write_err`` to
    stderr. Output is flushed per line on stdout and per write on stderr.
    Closing the handle only flushes: the process streams stay open.

    Args:
        stdin: Input stream. Defaults to ``sys.stdin`` (its binary buffer).
        stdout: Output stream. Defaults to ``sys.stdout``.
        stderr: Error stream. Defaults to ``sys.stderr``.
    """

    __slots__ = ('stderr', 'stdin', 'stdout')

    def __init__(self, stdin: Any = None, stdout: Any = None, stderr: Any = None) -> None:
        self.stdin = _binary(sys.stdin if stdin is None else stdin)
        self.stdout = _binary(sys.stdout if stdout is None else stdout)
        self.stderr = _binary(sys.stderr if stderr is None else stderr)

    def read(self, size: int = -1, /) -> bytes:
        return self.stdin.read(size)

    def readline(self, size: int = -1, /) -> bytes:
        return self.stdin.readline(size)

    def peek(self, size: int = 0, /) -> bytes:
        peek = getattr(self.stdin, 'peek', None)
        if peek is None:
            msg = f'{type(self.stdin).__name__} stdin is not buffered'
            raise io.UnsupportedOperation(msg)
        return peek(size)

    def write(self, data: bytes, /) -> int:
        written = self.stdout.write(data)
        if b'\n' in data[:written]:
            self.stdout.flush()
        return written

    def write_err(self, data: bytes, /) -> int:
        written = self.stderr.write(data)
        self.stderr.flush()
        return written

    def flush(self) -> None:
        self.stdout.flush()
        self.stderr.flush()

    def close(self) -> None:
        self.flush()

    def __repr__(self) -> str:
        return f'Stdio(stdin={self.stdin!r}, stdout={self.stdout!r}, stderr={self.stderr!r})'


def stdio() -> Good[Stdio, None]:
    """Start a chain on the process standard streams. Always Good.

    Example:
        ```python
        stdio().print_line('name?').read_line().to_data()
        # Ok('Ferris\\n')
        ```
    """
    return Good(Stdio(), None)
