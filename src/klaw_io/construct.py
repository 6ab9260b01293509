"""Constructors that put a handle into a chain."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from klaw_io._logging import get_logger
from klaw_io.capability import Capability
from klaw_io.capability.builtin import Address, PathLike, open_addr, open_path
from klaw_io.chain import Bad, Good, IOChain
from klaw_io.decorators import safe
from klaw_io.errors import MissingCapabilityError
from klaw_io.result import Err, Ok

__all__ = ['from_addr', 'from_path', 'wrap', 'wrap_func']

logger = get_logger(__name__)


def wrap[H](result: Ok[H] | Err[BaseException]) -> IOChain[H, None]:
    """Start a chain from the result of constructing a handle.

    Args:
        result: ``Ok(handle)`` or ``Err(error)``.

    Returns:
        ``Good(handle, None)``, or ``Bad(None, error)`` since no handle exists.

    Raises:
        TypeError: If ``result`` is not an Ok or Err.

    Example:
        ```python
        wrap(Ok(io.BytesIO(b'abc'))).read(2).to_data()
        # Ok(b'ab')
        ```
    """
    match result:
        case Ok(handle):
            return Good(handle, None)
        case Err(error):
            return Bad(None, error)
    msg = f'wrap() expects an Ok or Err, got {type(result).__name__}'
    raise TypeError(msg)


def wrap_func[H](f: Callable[[], H | Ok[H] | Err[BaseException]]) -> IOChain[H, None]:
    """Start a chain from a zero-argument handle factory, called exactly once.

    The factory may return the handle, or an ``Ok``/``Err`` around it. An
    exception of a type in the configured ``catch`` tuple becomes a Bad chain.

    Example:
        ```python
        wrap_func(lambda: open('config.toml', 'rb')).read_to_end()
        ```
    """
    outcome = safe(f)()
    if isinstance(outcome, Ok) and isinstance(outcome.value, (Ok, Err)):
        outcome = outcome.value
    return wrap(outcome)


def _require(cap: Capability[Any], operation: str, handle_type: Any) -> None:
    if not isinstance(handle_type, type):
        msg = f'{operation}() expects a handle type, got {handle_type!r}'
        raise TypeError(msg)
    if not cap.supports(handle_type):
        raise MissingCapabilityError(operation, handle_type)


def from_path[H](handle_type: type[H], path: PathLike, /, **kwargs: Any) -> IOChain[H, None]:
    """Open a ``handle_type`` at ``path`` and start a chain with it.

    The handle type picks the constructor: ``io.BufferedReader`` opens for
    reading, ``io.BufferedWriter`` truncates for writing, and a user type with
    a ``from_path`` classmethod builds itself.

    Args:
        handle_type: The kind of handle to construct.
        path: Filesystem path.
        **kwargs: Passed to the constructor (``mode``, ``buffering``, ...).

    Raises:
        TypeError: If ``handle_type`` is not a type.
        MissingCapabilityError: If ``handle_type`` cannot be built from a path.

    Example:
        ```python
        from_path(io.BufferedReader, 'missing.bin').read(16).to_data()
        # Err(FileNotFoundError(2, 'No such file or directory'))
        ```
    """
    _require(open_path, 'from_path', handle_type)
    chain = wrap_func(lambda: open_path(handle_type, path, **kwargs))
    if chain.is_good():
        logger.debug('handle opened', handle_type=handle_type.__name__, path=str(path))
    return chain


def from_addr[H](handle_type: type[H], addr: Address, /, **kwargs: Any) -> IOChain[H, None]:
    """Connect a ``handle_type`` to ``addr`` and start a chain with it.

    Args:
        handle_type: The kind of handle to construct, e.g. ``io.BufferedRWPair``
            for a buffered TCP stream.
        addr: ``(host, port)``.
        **kwargs: Passed to the constructor (``timeout``, ``source_address``).

    Raises:
        TypeError: If ``handle_type`` is not a type.
        MissingCapabilityError: If ``handle_type`` cannot be built from an address.
    """
    _require(open_addr, 'from_addr', handle_type)
    chain = wrap_func(lambda: open_addr(handle_type, addr, **kwargs))
    if chain.is_good():
        logger.debug('handle connected', handle_type=handle_type.__name__, addr=addr)
    return chain
