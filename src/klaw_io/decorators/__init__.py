"""Decorators for Result-returning handle operations."""

from klaw_io.decorators.safe import safe

__all__ = ['safe']
