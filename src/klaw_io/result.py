"""Plain Ok/Err results returned when a chain is projected.

A chain ends in one of these. They carry no handle bookkeeping; once a value
is here the caller owns it directly.

Example:
    ```python
    from klaw_io import Ok, Err, collect

    Ok(3).map(lambda x: x + 1)
    # Ok(4)

    collect([Ok(b'a'), Err(OSError('boom')), Ok(b'b')])
    # Err(OSError('boom'))
    ```
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass

__all__ = ['Err', 'Ok', 'Result', 'collect']


@dataclass(slots=True, frozen=True)
class Ok[T]:
    """A successful result containing a value of type T.

    Attributes:
        value: The successful result value.
    """

    value: T
    __match_args__ = ('value',)

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def map[U](self, f: Callable[[T], U]) -> Ok[U]:
        """Transform the value using a function.

        Args:
            f: A callable that takes the value and returns a new value.

        Returns:
            Ok[U]: A new Ok containing the transformed value.
        """
        return Ok(f(self.value))

    def map_err(self, f: Callable[[BaseException], BaseException]) -> Ok[T]:
        return self

    def and_then[U, E: BaseException](self, f: Callable[[T], Ok[U] | Err[E]]) -> Ok[U] | Err[E]:
        """Chain a computation that may fail.

        Args:
            f: A callable that takes the value and returns a Result.

        Returns:
            Ok[U] | Err[E]: The result of applying f to the value.
        """
        return f(self.value)

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: T) -> T:
        return self.value

    def unwrap_err(self) -> BaseException:
        """Unwrap the error (panics for Ok).

        Raises:
            AssertionError: Always raised for Ok instances.
        """
        raise AssertionError(f'called unwrap_err() on Ok({self.value!r})')

    def expect(self, msg: str) -> T:
        return self.value

    def ok(self) -> T | None:
        return self.value

    def err(self) -> BaseException | None:
        return None

    def __repr__(self) -> str:
        return f'Ok({self.value!r})'


@dataclass(slots=True, frozen=True)
class Err[E: BaseException]:
    """A failed result containing the error that ended a chain.

    Attributes:
        error: The exception raised by the failing handle operation.
    """

    error: E
    __match_args__ = ('error',)

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def map(self, f: Callable[[object], object]) -> Err[E]:
        return self

    def map_err[F: BaseException](self, f: Callable[[E], F]) -> Err[F]:
        """Transform the error using a function.

        Args:
            f: A callable that takes the error and returns a new exception.

        Returns:
            Err[F]: A new Err containing the transformed error.
        """
        return Err(f(self.error))

    def and_then(self, f: Callable[[object], object]) -> Err[E]:
        return self

    def unwrap(self) -> object:
        """Unwrap the value (raises for Err).

        Raises:
            E: The contained error is re-raised.
        """
        raise self.error

    def unwrap_or[T](self, default: T) -> T:
        return default

    def unwrap_err(self) -> E:
        return self.error

    def expect(self, msg: str) -> object:
        """Unwrap the value with a custom message (raises for Err).

        Raises:
            AssertionError: Always, chained from the contained error.
        """
        raise AssertionError(f'{msg}: {self.error!r}') from self.error

    def ok(self) -> None:
        return None

    def err(self) -> E:
        return self.error

    def __repr__(self) -> str:
        return f'Err({self.error!r})'


type Result[T, E: BaseException] = Ok[T] | Err[E]


def collect[T, E: BaseException](rs: Iterable[Ok[T] | Err[E]]) -> Ok[list[T]] | Err[E]:
    """Collect an iterable of Results into a Result of a list.

    Stops at the first Err, so a lazy iterable is not drained past a failure.

    Args:
        rs: Iterable of Results.

    Returns:
        Ok(list) with every value, or the first Err encountered.
    """
    values: list[T] = []
    for r in rs:
        match r:
            case Ok(v):
                values.append(v)
            case Err():
                return r
    return Ok(values)
