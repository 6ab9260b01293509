"""Errors raised by klaw-io itself.

Handle failures are never represented here: they travel through a chain as
the exception the handle raised. The types below signal misuse of the API.
"""

from __future__ import annotations

__all__ = [
    'ConsumedChainError',
    'KlawIOError',
    'MissingCapabilityError',
]


class KlawIOError(Exception):
    """Base exception class for klaw-io programming errors.

    Attributes:
        message (str): A human-readable description of the error.
        code (str | None): An optional error code for programmatic error handling.
    """

    def __init__(self, message: str, code: str | None = None) -> None:
        self.message = message
        self.code = code
        super().__init__(message)

    def __str__(self) -> str:
        if self.code:
            return f'[{self.code}] {self.message}'
        return self.message


class ConsumedChainError(KlawIOError, RuntimeError):
    """An operation was applied to a chain that has already been consumed."""

    def __init__(self, operation: str, variant: str) -> None:
        self.operation = operation
        self.variant = variant
        super().__init__(
            f"cannot call {operation}() on a consumed {variant}; use the chain it returned",
            code='consumed',
        )


class MissingCapabilityError(KlawIOError, TypeError):
    """A handle (or handle type) lacks the capability an operation needs."""

    def __init__(self, capability: str, handle_type: type) -> None:
        self.capability = capability
        self.handle_type = handle_type
        super().__init__(
            f"'{handle_type.__name__}' does not provide the '{capability}' capability",
            code='capability',
        )
