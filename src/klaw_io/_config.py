"""Library configuration: IOConfig, init() and get_config()."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

from klaw_io._logging import configure_logging

__all__ = [
    'IOConfig',
    'get_config',
    'init',
    'reset',
]


@dataclass(frozen=True)
class IOConfig:
    """Configuration shared by every chain.

    Attributes:
        encoding: Codec used when a str meets a binary handle and vice versa.
        errors: Codec error handler ("strict", "replace", ...).
        catch: Exception types a handle operation may raise that turn a chain
            Bad. Anything else propagates to the caller.
        strict: Reject reuse of a consumed chain with ConsumedChainError.
        close_on_release: Close handles that a chain lets go of.
        log_level: Logging level (e.g., "DEBUG", "INFO"). None = silent.
    """

    encoding: str = 'utf-8'
    errors: str = 'strict'
    catch: tuple[type[BaseException], ...] = (Exception,)
    strict: bool = True
    close_on_release: bool = True
    log_level: str | None = None


_DEFAULT = IOConfig()

# Global configuration (set by init())
_config: IOConfig = _DEFAULT


def init(**fields: Any) -> IOConfig:
    """Replace the active configuration.

    Fields not given keep their default values, not the previously
    initialized ones.

    Args:
        **fields: Any IOConfig field.

    Returns:
        The IOConfig that was set.

    Raises:
        TypeError: If a field name is unknown.
        ValueError: If ``catch`` is empty.

    Example:
        ```python
        from klaw_io import init

        init(encoding='latin-1', log_level='DEBUG')
        init(catch=(OSError,))  # let programming errors raise
        ```
    """
    global _config  # noqa: PLW0603

    config = replace(_DEFAULT, **fields)
    if not config.catch:
        msg = 'IOConfig.catch must name at least one exception type'
        raise ValueError(msg)

    _config = config

    if config.log_level is not None:
        configure_logging(config.log_level)

    return _config


def get_config() -> IOConfig:
    """Get the active configuration (defaults until init() is called)."""
    return _config


def reset() -> None:
    """Restore the default configuration."""
    global _config  # noqa: PLW0603
    _config = _DEFAULT
