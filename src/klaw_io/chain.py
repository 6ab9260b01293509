"""Monadic chains over a single I/O handle.

An ``IOChain`` owns one handle (a file, a socket file, a ``Stdio`` pair) and
either the payload of the last successful operation (``Good``) or the error
of the first failed one (``Bad``). Every operation consumes the chain it is
called on and returns a new one, so a sequence of reads and writes reads
top to bottom with no error check between steps:

Example:
    ```python
    import io
    from klaw_io import Bad, Good, from_path

    size = (
        from_path(io.BufferedRandom, 'data.bin')
        .seek(0, io.SEEK_END)
        .and_then(lambda end, f: Good(f, end) if end else Bad(f, ValueError('empty file')))
        .to_data()
    )
    # Ok(1024), or Err(FileNotFoundError(...)) from the open, or Err(ValueError('empty file'))
    ```

Once a chain is Bad, delegated operations never touch the handle again;
they pass the same handle and error along until ``or_``/``or_else``
recovers or a terminal projection (``ok``, ``to_data``, ``to_handle``)
hands the outcome back as a plain ``Ok``/``Err``.
"""

from __future__ import annotations

import errno
import io
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import Any

from klaw_io._config import get_config
from klaw_io._logging import get_logger
from klaw_io.capability.protocols import BufRead, ErrWrite, Flush, LineRead, Read, Seek, Write
from klaw_io.decorators import safe
from klaw_io.errors import ConsumedChainError, MissingCapabilityError
from klaw_io.result import Err, Ok

__all__ = ['Bad', 'Good', 'IOChain']

logger = get_logger(__name__)


# ---------------------------------------------------------------------
# Handle helpers
# ---------------------------------------------------------------------


def _is_text(handle: Any) -> bool:
    return isinstance(handle, io.TextIOBase) or getattr(handle, 'encoding', None) is not None


def _to_handle_data(handle: Any, data: Any) -> Any:
    """Match str/bytes data to what the handle writes."""
    config = get_config()
    if _is_text(handle):
        if isinstance(data, (bytes, bytearray, memoryview)):
            return bytes(data).decode(config.encoding, config.errors)
    elif isinstance(data, str):
        return data.encode(config.encoding, config.errors)
    return data


def _as_bytes(data: bytes | str) -> bytes:
    if isinstance(data, str):
        config = get_config()
        return data.encode(config.encoding, config.errors)
    return data


def _as_str(data: bytes | str) -> str:
    if isinstance(data, str):
        return data
    config = get_config()
    return bytes(data).decode(config.encoding, config.errors)


def _delimiter(byte: int | bytes) -> bytes:
    delim = bytes([byte]) if isinstance(byte, int) else bytes(byte)
    if len(delim) != 1:
        msg = f'delimiter must be a single byte, got {byte!r}'
        raise ValueError(msg)
    return delim


def _write_all(write: Callable[[Any], int | None], data: Any) -> None:
    while data:
        written = write(data)
        if written is None:
            # Text streams and some file-likes always take the whole buffer
            return
        if written == 0:
            raise OSError(errno.EIO, 'failed to write whole buffer')
        data = data[written:]


def _read_until(handle: Any, delim: bytes) -> bytes:
    out = bytearray()
    peek = getattr(handle, 'peek', None)
    while True:
        if peek is not None:
            try:
                available = peek()
            except io.UnsupportedOperation:
                peek = None
                continue
            if not available:
                break
            idx = available.find(delim)
            if idx >= 0:
                out += _as_bytes(handle.read(idx + 1))
                break
            out += _as_bytes(handle.read(len(available)))
        else:
            chunk = _as_bytes(handle.read(1))
            if not chunk:
                break
            out += chunk
            if chunk == delim:
                break
    return bytes(out)


def _consume(handle: Any, amt: int) -> None:
    # Only bytes already buffered can be consumed
    handle.read(min(amt, len(handle.peek())))


def _split(handle: Any, delim: bytes) -> Iterator[Ok[bytes] | Err[BaseException]]:
    read_until = safe(_read_until)
    while True:
        match read_until(handle, delim):
            case Ok(chunk):
                if not chunk:
                    return
                yield Ok(chunk[:-1] if chunk.endswith(delim) else chunk)
            case Err() as err:
                yield err
                return


def _lines(handle: Any) -> Iterator[Ok[str] | Err[BaseException]]:
    read_line = safe(lambda: _as_str(handle.readline()))
    while True:
        match read_line():
            case Ok(line):
                if not line:
                    return
                if line.endswith('\n'):
                    line = line[:-1]
                    if line.endswith('\r'):
                        line = line[:-1]
                yield Ok(line)
            case Err() as err:
                yield err
                return


def _release(handle: Any, keep: Any = None, *, force: bool = False) -> None:
    """Close a handle the chain no longer owns."""
    if handle is None or handle is keep:
        return
    if not (force or get_config().close_on_release):
        return
    close = getattr(handle, 'close', None)
    if callable(close):
        close()
        logger.debug('handle released', handle_type=type(handle).__name__)


# ---------------------------------------------------------------------
# Shared behaviour of both variants
# ---------------------------------------------------------------------


class _ChainOps[H]:
    """Ownership bookkeeping and the delegated I/O operations."""

    __slots__ = ()

    handle: H
    _consumed: bool

    def _take(self, operation: str) -> None:
        """Mark this chain consumed, rejecting a second use."""
        if self._consumed and get_config().strict:
            raise ConsumedChainError(operation, type(self).__name__)
        object.__setattr__(self, '_consumed', True)

    def _delegate(self, operation: str, cap: type, fn: Callable[[H], Any]) -> IOChain[H, Any]:
        raise NotImplementedError

    def _iterate(
        self, operation: str, cap: type, make: Callable[[H], Iterator[Any]]
    ) -> Ok[Iterator[Any]] | Err[BaseException]:
        raise NotImplementedError

    def __enter__(self) -> Any:
        return self

    def __exit__(self, *exc_info: object) -> None:
        _release(self.handle, force=True)

    # --- Read ---

    def read(self, size: int) -> IOChain[H, bytes]:
        """Read at most ``size`` bytes. The payload is the bytes read (empty at EOF)."""
        return self._delegate('read', Read, lambda h: _as_bytes(h.read(size)))

    def read_to_end(self) -> IOChain[H, bytes]:
        """Read everything left in the handle as bytes."""
        return self._delegate('read_to_end', Read, lambda h: _as_bytes(h.read()))

    def read_to_string(self) -> IOChain[H, str]:
        """Read everything left in the handle, decoded with the configured encoding."""
        return self._delegate('read_to_string', Read, lambda h: _as_str(h.read()))

    # --- Write ---

    def write(self, buf: bytes | str) -> IOChain[H, int]:
        """Write once. The payload is the count the handle reports as written."""
        return self._delegate('write', Write, lambda h: h.write(_to_handle_data(h, buf)))

    def write_all(self, buf: bytes | str) -> IOChain[H, None]:
        """Write the whole buffer, retrying short writes."""
        return self._delegate('write_all', Write, lambda h: _write_all(h.write, _to_handle_data(h, buf)))

    def write_fmt(self, fmt: str, /, *args: Any, **kwargs: Any) -> IOChain[H, None]:
        """Write ``fmt.format(*args, **kwargs)`` in full."""
        return self._write_formatted('write_fmt', Write, 'write', fmt, args, kwargs)

    def flush(self) -> IOChain[H, None]:
        return self._delegate('flush', Flush, lambda h: h.flush())

    def _write_formatted(
        self,
        operation: str,
        cap: type,
        method: str,
        fmt: str,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
    ) -> IOChain[H, None]:
        def run(h: H) -> None:
            _write_all(getattr(h, method), _to_handle_data(h, fmt.format(*args, **kwargs)))

        return self._delegate(operation, cap, run)

    # --- Seek ---

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> IOChain[H, int]:
        """Move the stream position. The payload is the new absolute position."""

        def run(h: Any) -> int:
            position = h.seek(offset, whence)
            return position if position is not None else h.tell()

        return self._delegate('seek', Seek, run)

    # --- Buffered read ---

    def fill_buf(self) -> IOChain[H, bytes]:
        """Fill the handle's buffer if empty. The payload is a copy of the buffered bytes."""
        return self._delegate('fill_buf', BufRead, lambda h: bytes(h.peek()))

    def consume(self, amt: int) -> IOChain[H, None]:
        """Discard up to ``amt`` bytes from the handle's buffer."""
        return self._delegate('consume', BufRead, lambda h: _consume(h, amt))

    def read_until(self, byte: int | bytes) -> IOChain[H, bytes]:
        """Read through the next ``byte`` (included in the payload) or to EOF.

        Raises:
            ValueError: If a Good chain is given a delimiter longer than one
                byte. A Bad chain passes through without checking it.
        """
        delim = _delimiter(byte) if self.is_good() else byte
        return self._delegate('read_until', Read, lambda h: _read_until(h, delim))

    def read_line(self) -> IOChain[H, str]:
        """Read one line, keeping its newline. The payload is empty at EOF."""
        return self._delegate('read_line', LineRead, lambda h: _as_str(h.readline()))

    def split(self, byte: int | bytes) -> Ok[Iterator[Ok[bytes] | Err[BaseException]]] | Err[BaseException]:
        """Consume the chain into a lazy sequence of ``byte``-separated chunks.

        Each item is ``Ok(chunk)`` without the delimiter; the sequence ends at
        EOF or after the first ``Err``. A Bad chain has no usable handle, so its
        error is returned instead of a sequence.
        """
        delim = _delimiter(byte) if self.is_good() else byte
        return self._iterate('split', Read, lambda h: _split(h, delim))

    def lines(self) -> Ok[Iterator[Ok[str] | Err[BaseException]]] | Err[BaseException]:
        """Consume the chain into a lazy sequence of lines without ``\\n``/``\\r\\n``.

        Returns ``Err(error)`` when the chain is Bad.
        """
        return self._iterate('lines', LineRead, _lines)

    # --- Standard streams ---

    def print_line(self, line: str) -> IOChain[H, None]:
        """Write ``line`` and a newline in full."""
        return self._delegate('print_line', Write, lambda h: _write_all(h.write, _to_handle_data(h, f'{line}\n')))

    def write_to_err(self, buf: bytes | str) -> IOChain[H, int]:
        """``write`` against the error stream of a standard-stream handle."""
        return self._delegate('write_to_err', ErrWrite, lambda h: h.write_err(_to_handle_data(h, buf)))

    def write_all_to_err(self, buf: bytes | str) -> IOChain[H, None]:
        return self._delegate(
            'write_all_to_err', ErrWrite, lambda h: _write_all(h.write_err, _to_handle_data(h, buf))
        )

    def write_fmt_to_err(self, fmt: str, /, *args: Any, **kwargs: Any) -> IOChain[H, None]:
        return self._write_formatted('write_fmt_to_err', ErrWrite, 'write_err', fmt, args, kwargs)


# ---------------------------------------------------------------------
# IOChain[H, T]: Good / Bad
# ---------------------------------------------------------------------


@dataclass(slots=True, frozen=True)
class Good[H, T](_ChainOps[H]):
    """A chain whose operations have all succeeded so far.

    Attributes:
        handle: The owned I/O handle.
        payload: The result of the most recent successful operation.
    """

    handle: H
    payload: T
    _consumed: bool = field(default=False, init=False, repr=False, compare=False)
    __match_args__ = ('handle', 'payload')

    def is_good(self) -> bool:
        return True

    def is_bad(self) -> bool:
        return False

    def _delegate(self, operation: str, cap: type, fn: Callable[[H], Any]) -> IOChain[H, Any]:
        """Run one handle operation, capturing a raised error as Bad."""
        if not isinstance(self.handle, cap):
            raise MissingCapabilityError(cap.__name__, type(self.handle))
        self._take(operation)
        result = safe(fn)(self.handle)
        if isinstance(result, Ok):
            return Good(self.handle, result.value)
        return Bad(self.handle, result.error)

    def _iterate(
        self, operation: str, cap: type, make: Callable[[H], Iterator[Any]]
    ) -> Ok[Iterator[Any]] | Err[BaseException]:
        if not isinstance(self.handle, cap):
            raise MissingCapabilityError(cap.__name__, type(self.handle))
        self._take(operation)
        return Ok(make(self.handle))

    def and_[U](self, other: IOChain[Any, U]) -> IOChain[Any, U]:
        """Pivot to ``other``, dropping this payload and handle.

        Args:
            other: The chain to continue with.

        Returns:
            ``other`` itself.
        """
        _check_live(other, 'and_')
        self._take('and_')
        _release(self.handle, keep=other.handle)
        return other

    def and_then[U](self, f: Callable[[T, H], IOChain[Any, U]]) -> IOChain[Any, U]:
        """Continue with ``f(payload, handle)``, which must return a chain.

        Args:
            f: Receives the current payload and the handle, and returns the
                next chain (usually from another operation on the handle).

        Returns:
            The chain ``f`` returned.

        Raises:
            TypeError: If ``f`` does not return a Good or Bad chain.
        """
        self._take('and_then')
        return _expect_chain(f(self.payload, self.handle), 'and_then')

    def or_(self, other: IOChain[H, T]) -> IOChain[H, T]:
        """Keep this chain; ``other`` is dropped and its handle released."""
        _check_live(other, 'or_')
        self._take('or_')
        _release(other.handle, keep=self.handle)
        return Good(self.handle, self.payload)

    def or_else(self, f: Callable[[BaseException, H], IOChain[H, T]]) -> IOChain[H, T]:
        """Keep this chain without calling ``f``."""
        self._take('or_else')
        return Good(self.handle, self.payload)

    def ignore(self) -> Good[H, None]:
        """Drop the payload, keeping the handle."""
        self._take('ignore')
        return Good(self.handle, None)

    def ok(self) -> Ok[tuple[H, T]]:
        """End the chain with ``Ok((handle, payload))``; the caller now owns the handle."""
        self._take('ok')
        return Ok((self.handle, self.payload))

    def to_data(self) -> Ok[T]:
        """End the chain with ``Ok(payload)``, releasing the handle."""
        self._take('to_data')
        _release(self.handle)
        return Ok(self.payload)

    def to_handle(self) -> Ok[H]:
        """End the chain with ``Ok(handle)``, dropping the payload."""
        self._take('to_handle')
        return Ok(self.handle)

    def __repr__(self) -> str:
        return f'Good({self.handle!r}, {self.payload!r})'


@dataclass(slots=True, frozen=True)
class Bad[H, E: BaseException](_ChainOps[H]):
    """A chain that has failed.

    Delegated operations leave the handle alone and return a Bad with the
    same handle and error.

    Attributes:
        handle: The handle the failing operation ran on, or None when the
            handle itself could not be constructed.
        error: The exception raised by the failing operation.
    """

    handle: H
    error: E
    _consumed: bool = field(default=False, init=False, repr=False, compare=False)
    __match_args__ = ('handle', 'error')

    def is_good(self) -> bool:
        return False

    def is_bad(self) -> bool:
        return True

    def _delegate(self, operation: str, cap: type, fn: Callable[[H], Any]) -> Bad[H, E]:
        self._take(operation)
        return Bad(self.handle, self.error)

    def _iterate(self, operation: str, cap: type, make: Callable[[H], Iterator[Any]]) -> Err[E]:
        self._take(operation)
        _release(self.handle)
        return Err(self.error)

    def and_(self, other: IOChain[Any, Any]) -> Bad[H, E]:
        """Stay Bad; ``other`` is dropped and its handle released."""
        _check_live(other, 'and_')
        self._take('and_')
        _release(other.handle, keep=self.handle)
        return Bad(self.handle, self.error)

    def and_then(self, f: Callable[[Any, H], IOChain[Any, Any]]) -> Bad[H, E]:
        """Stay Bad without calling ``f``."""
        self._take('and_then')
        return Bad(self.handle, self.error)

    def or_[T](self, other: IOChain[Any, T]) -> IOChain[Any, T]:
        """Replace this chain with ``other``, releasing this handle.

        Returns:
            ``other`` itself.
        """
        _check_live(other, 'or_')
        self._take('or_')
        _release(self.handle, keep=other.handle)
        return other

    def or_else[T](self, f: Callable[[E, H], IOChain[Any, T]]) -> IOChain[Any, T]:
        """Recover with ``f(error, handle)``, which must return a chain.

        Args:
            f: Receives the error and the handle, and returns the next chain
                (a retry, a fallback handle, or a Bad with a different error).

        Returns:
            The chain ``f`` returned.

        Raises:
            TypeError: If ``f`` does not return a Good or Bad chain.
        """
        self._take('or_else')
        return _expect_chain(f(self.error, self.handle), 'or_else')

    def ignore(self) -> Bad[H, E]:
        self._take('ignore')
        return Bad(self.handle, self.error)

    def ok(self) -> Err[E]:
        """End the chain with ``Err(error)``, releasing the handle."""
        self._take('ok')
        _release(self.handle)
        return Err(self.error)

    def to_data(self) -> Err[E]:
        self._take('to_data')
        _release(self.handle)
        return Err(self.error)

    def to_handle(self) -> Err[E]:
        self._take('to_handle')
        _release(self.handle)
        return Err(self.error)

    def __repr__(self) -> str:
        return f'Bad({self.handle!r}, {self.error!r})'


type IOChain[H, T] = Good[H, T] | Bad[H, BaseException]


def _check_live(chain: IOChain[Any, Any], operation: str) -> None:
    _expect_chain(chain, operation)
    if chain._consumed and get_config().strict:  # noqa: SLF001
        raise ConsumedChainError(operation, type(chain).__name__)


def _expect_chain(value: Any, operation: str) -> IOChain[Any, Any]:
    if not isinstance(value, (Good, Bad)):
        msg = f'{operation}() expects a Good or Bad chain, got {type(value).__name__}'
        raise TypeError(msg)
    return value
