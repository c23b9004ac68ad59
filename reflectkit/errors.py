"""
Exception types raised by reflectkit.

The read-only scans never raise for an empty result; only constructor
lookup, privileged invocation and target resolution can fail.
"""

from typing import Any, Sequence


class ReflectionError(Exception):
    """Base class for all reflectkit errors."""


class ConstructorNotFoundError(ReflectionError, LookupError):
    """No declared constructor matches the supplied argument shape."""

    def __init__(self, type_: type, args: Sequence[Any]):
        self.type = type_
        self.args_shape = tuple(type(arg).__name__ for arg in args)
        super().__init__(
            f"Matching constructor not found: {type_.__qualname__}"
            f"({', '.join(self.args_shape)})"
        )


class ConstructorAccessError(ReflectionError, PermissionError):
    """A non-public constructor was invoked without elevating access first."""


class TargetResolutionError(ReflectionError, ImportError):
    """A 'module:QualName' target could not be resolved."""


class ConstructorResultError(ReflectionError, TypeError):
    """A constructor returned something that is not an instance of its class."""
