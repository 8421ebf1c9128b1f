"""
Exception hierarchy for builderproxy.

Registration-time problems (a malformed contract) raise
:class:`ContractDefinitionError`.  Call-time problems raise a
:class:`BuilderUsageError` subclass.  Failures inside a terminal callback
are never wrapped and reach the caller as-is.
"""
from __future__ import annotations

from typing import Any


class BuilderProxyError(Exception):
    """Base class for every error raised by builderproxy itself."""


class ContractDefinitionError(BuilderProxyError, TypeError):
    """The contract class cannot be turned into a builder."""


class BuilderUsageError(BuilderProxyError):
    """A synthesized builder was used in a way its contract does not allow."""


class UnclassifiableOperationError(BuilderUsageError):
    """The operation is neither a reader, a writer, nor the terminal."""

    def __init__(self, operation: str, arg_count: int):
        self.operation = operation
        self.arg_count = arg_count
        super().__init__(
            f"method '{operation}' is not a reader or a writer "
            f"(called with {arg_count} argument(s))"
        )


class ConstructorDiscoveryError(BuilderUsageError):
    """No constructor-like operation on the target accepts the builder."""

    def __init__(self, target: Any, arg_types: tuple):
        self.target = target
        self.arg_types = arg_types
        names = ", ".join(getattr(t, "__name__", repr(t)) for t in arg_types)
        super().__init__(
            f"{getattr(target, '__qualname__', target)!s} has no constructor "
            f"accepting ({names})"
        )


class BuilderConsumedError(BuilderUsageError):
    """A write or build was attempted on an already-built builder."""

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(
            f"method '{operation}' called on a builder that has already built its value"
        )
