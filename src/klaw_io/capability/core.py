"""@capability decorator and target-type dispatch.

A capability is a constructor whose implementation is chosen by the handle
type the caller asks for, not by the runtime type of an argument. The target
type is passed first, so ``open_path(io.BufferedReader, 'data.bin')`` and
``open_path(io.TextIOWrapper, 'data.txt')`` resolve to different instances.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Generic, TypeVar

import wrapt

from klaw_io.errors import MissingCapabilityError

__all__ = ['Capability', 'capability']

F = TypeVar('F', bound=Callable[..., Any])


class Capability(wrapt.ObjectProxy, Generic[F]):
    """A constructor capability with registered handle-type instances.

    Attributes:
        _self_name: The name of the capability function.
        _self_hook: Classmethod name a handle type may define instead of
            registering an instance.
        _self_instances: Dictionary mapping handle types to their implementations.

    Example:
        ```python
        @capability(hook='from_path')
        def open_path(handle_type, path): ...

        @open_path.instance(io.BufferedReader)
        def _open_reader(handle_type, path, **kwargs):
            return open(path, 'rb', **kwargs)

        open_path(io.BufferedReader, 'data.bin')
        # <_io.BufferedReader name='data.bin'>
        ```
    """

    def __init__(self, signature_fn: F, hook: str | None = None) -> None:
        super().__init__(signature_fn)
        self._self_name = signature_fn.__name__
        self._self_hook = hook
        self._self_instances: dict[type, Callable[..., Any]] = {}

    def instance(self, type_: type) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        """Register an implementation for a handle type.

        Args:
            type_: The handle type the implementation constructs.

        Returns:
            A decorator that registers the implementation.
        """

        def decorator(fn: Callable[..., Any]) -> Callable[..., Any]:
            self._self_instances[type_] = fn
            return fn

        return decorator

    def supports(self, target: type) -> bool:
        """Return True if ``target`` can be constructed through this capability."""
        return self._find_instance(target) is not None

    def _find_instance(self, target: type) -> Callable[..., Any] | None:
        """Find the implementation for a target type."""
        if not isinstance(target, type):
            return None

        if target in self._self_instances:
            return self._self_instances[target]

        # Subclasses of a registered type construct like their base
        for base in target.__mro__[1:]:
            if base in self._self_instances:
                return self._self_instances[base]

        # User-defined handle types opt in with a classmethod
        if self._self_hook is not None:
            hook = getattr(target, self._self_hook, None)
            if callable(hook):
                return lambda _target, *args, **kwargs: hook(*args, **kwargs)

        return None

    def __call__(self, target: type, *args: Any, **kwargs: Any) -> Any:
        """Dispatch to the implementation registered for ``target``."""
        if not isinstance(target, type):
            msg = f'{self._self_name}() expects a handle type, got {target!r}'
            raise TypeError(msg)

        instance_fn = self._find_instance(target)
        if instance_fn is None:
            raise MissingCapabilityError(self._self_name, target)
        return instance_fn(target, *args, **kwargs)

    def __repr__(self) -> str:
        return f'<capability {self._self_name} with {len(self._self_instances)} instances>'


def capability(*, hook: str | None = None) -> Callable[[F], Capability[F]]:
    """Decorator to create a capability from a function signature.

    The decorated function only defines the signature; its body is never run.

    Args:
        hook: Name of a classmethod a handle type may define to provide the
            capability without registering an instance.

    Returns:
        A decorator producing a Capability.
    """

    def decorator(fn: F) -> Capability[F]:
        return Capability(fn, hook=hook)

    return decorator
