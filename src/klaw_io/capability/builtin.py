"""Path and address constructors for standard library handle types."""

from __future__ import annotations

import io
import os
import socket
from typing import Any

from klaw_io._config import get_config
from klaw_io.capability.core import capability

__all__ = ['open_addr', 'open_path']

type Address = tuple[str, int]
type PathLike = str | bytes | os.PathLike[str] | os.PathLike[bytes]


@capability(hook='from_path')
def open_path(handle_type: type, path: PathLike, /, **kwargs: Any) -> Any:
    """Construct a ``handle_type`` from a filesystem path."""


@capability(hook='from_addr')
def open_addr(handle_type: type, addr: Address, /, **kwargs: Any) -> Any:
    """Construct a ``handle_type`` connected to a network address."""


def _open(path: PathLike, mode: str, kwargs: dict[str, Any]) -> Any:
    kwargs.setdefault('mode', mode)
    return open(path, **kwargs)  # noqa: SIM115


@open_path.instance(io.FileIO)
def _open_raw(handle_type: type, path: PathLike, /, **kwargs: Any) -> io.FileIO:
    return io.FileIO(path, kwargs.pop('mode', 'r'), **kwargs)


@open_path.instance(io.BufferedReader)
def _open_reader(handle_type: type, path: PathLike, /, **kwargs: Any) -> io.BufferedReader:
    return _open(path, 'rb', kwargs)


@open_path.instance(io.BufferedWriter)
def _open_writer(handle_type: type, path: PathLike, /, **kwargs: Any) -> io.BufferedWriter:
    return _open(path, 'wb', kwargs)


@open_path.instance(io.BufferedRandom)
def _open_random(handle_type: type, path: PathLike, /, **kwargs: Any) -> io.BufferedRandom:
    return _open(path, 'r+b', kwargs)


@open_path.instance(io.TextIOWrapper)
def _open_text(handle_type: type, path: PathLike, /, **kwargs: Any) -> io.TextIOWrapper:
    config = get_config()
    kwargs.setdefault('encoding', config.encoding)
    kwargs.setdefault('errors', config.errors)
    return _open(path, 'r', kwargs)


@open_addr.instance(socket.socket)
def _connect(handle_type: type, addr: Address, /, **kwargs: Any) -> socket.socket:
    return socket.create_connection(addr, **kwargs)


@open_addr.instance(io.BufferedRWPair)
def _connect_buffered(handle_type: type, addr: Address, /, **kwargs: Any) -> io.BufferedRWPair:
    # The file keeps the connection open after the socket object is closed
    with socket.create_connection(addr, **kwargs) as sock:
        return sock.makefile('rwb')


@open_addr.instance(socket.SocketIO)
def _connect_raw(handle_type: type, addr: Address, /, **kwargs: Any) -> socket.SocketIO:
    with socket.create_connection(addr, **kwargs) as sock:
        return sock.makefile('rwb', buffering=0)
