"""@safe decorator turning raised handle errors into Err values."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, ParamSpec, TypeVar, overload

import wrapt

from klaw_io._config import get_config
from klaw_io.result import Err, Ok

__all__ = ['safe']

P = ParamSpec('P')
T = TypeVar('T')
E = TypeVar('E', bound=BaseException)


@overload
def safe[**P, T](
    func: Callable[P, T],
) -> Callable[P, Ok[T] | Err[Exception]]: ...


@overload
def safe[E: BaseException](
    func: None = None,
    *,
    exceptions: tuple[type[E], ...] | None = None,
) -> Callable[[Callable[P, T]], Callable[P, Ok[T] | Err[E]]]: ...


def safe[**P, T](
    func: Callable[P, T] | None = None,
    *,
    exceptions: tuple[type[Any], ...] | None = None,
) -> Any:
    """Decorator that catches exceptions and returns Err.

    Wraps a function so that it returns Ok(value) on success and
    Err(exception) if one of the caught exception types is raised.
    Anything else propagates unchanged.

    Can be used with or without arguments:
        @safe
        def read_header(f): ...

        @safe(exceptions=(OSError,))
        def read_header(f): ...

    Args:
        func: The function to wrap (when used without parentheses).
        exceptions: Tuple of exception types to catch. Defaults to the
            ``catch`` tuple of the active IOConfig, read at call time.

    Returns:
        A wrapped function that returns Result[T, E] instead of T.

    Example:
        ```python
        @safe
        def head(f) -> bytes:
            return f.read(4)

        head(io.BytesIO(b'abcdef'))
        # Ok(b'abcd')
        ```
    """

    @wrapt.decorator
    def wrapper(
        wrapped: Callable[P, T],
        instance: Any,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
    ) -> Ok[T] | Err[Any]:
        catch = exceptions if exceptions is not None else get_config().catch
        try:
            result = wrapped(*args, **kwargs)
            return Ok(result)
        except catch as e:
            return Err(e)

    if func is not None:
        return wrapper(func)
    return wrapper
