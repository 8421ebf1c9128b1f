"""
Proxy dispatcher — route every call on a synthesized builder.

For each contract a proxy class is generated once: it subclasses the
contract and replaces every contract operation with a routing stub that
forwards ``(operation name, args)`` to the instance's
:class:`BuilderInvocationHandler`.  The handler owns the slot store and the
terminal callback; the role table it is bound to is shared by all builders
of the same contract and convention.

Proxy instances compare and hash by identity and render their slot store
as their ``repr``.
"""
from __future__ import annotations

import functools
import logging
from enum import Enum
from types import MappingProxyType, new_class
from typing import Any, Callable, Dict, Mapping, Sequence

from builderproxy.core.contract import OperationRole, describe_contract
from builderproxy.core.defaults import default_for
from builderproxy.errors import BuilderConsumedError, UnclassifiableOperationError
from builderproxy.policy.naming import RoleTable

logger = logging.getLogger(__name__)

HANDLER_ATTR = "_builderproxy_handler"


class BuilderState(str, Enum):
    """Lifecycle of one synthesized builder."""

    FRESH = "FRESH"
    POPULATED = "POPULATED"
    CONSUMED = "CONSUMED"


class BuilderInvocationHandler:
    """Per-builder dispatch state: role table, callback, slot store."""

    def __init__(
        self,
        table: RoleTable,
        callback: Callable[[Any], Any],
        single_use: bool = True,
    ):
        self.table = table
        self.callback = callback
        self.single_use = single_use
        self.slots: Dict[str, Any] = {}
        self.state = BuilderState.FRESH

    def dispatch(self, proxy: Any, operation: str, args: Sequence[Any]) -> Any:
        """Handle one call of *operation* with *args* made on *proxy*."""
        c = self.table.classify(operation, args)

        if c.role is OperationRole.WRITER:
            self._ensure_open(operation)
            self.slots[c.slot] = args[0]
            self.state = BuilderState.POPULATED
            return proxy

        if c.role is OperationRole.READER:
            if c.slot in self.slots:
                return self.slots[c.slot]
            return default_for(c.reader_type)

        if c.role is OperationRole.TERMINAL:
            self._ensure_open(operation)
            logger.debug("building %s from %r", self.table.contract.__qualname__, self.slots)
            result = self.callback(proxy)
            if self.single_use:
                self.state = BuilderState.CONSUMED
            return result

        logger.debug(
            "rejecting %s.%s with %d argument(s)",
            self.table.contract.__qualname__, operation, len(args),
        )
        raise UnclassifiableOperationError(operation, len(args))

    def _ensure_open(self, operation: str) -> None:
        if self.state is BuilderState.CONSUMED:
            raise BuilderConsumedError(operation)


class BuilderProxy:
    """Mixin placed first in every synthesized proxy class."""

    def __init__(self, handler: BuilderInvocationHandler):
        object.__setattr__(self, HANDLER_ATTR, handler)

    def __eq__(self, other: object) -> bool:
        return self is other

    def __ne__(self, other: object) -> bool:
        return self is not other

    def __hash__(self) -> int:
        return object.__hash__(self)

    def __repr__(self) -> str:
        handler = getattr(self, HANDLER_ATTR)
        return f"{handler.table.contract.__name__}{handler.slots!r}"

    __str__ = __repr__


def _routing_stub(proxy_name: str, operation: str) -> Callable[..., Any]:
    def route(self, *args, **kwargs):
        if kwargs:
            args = args + tuple(kwargs.values())
        return getattr(self, HANDLER_ATTR).dispatch(self, operation, args)

    route.__name__ = operation
    route.__qualname__ = f"{proxy_name}.{operation}"
    return route


@functools.lru_cache(maxsize=None)
def proxy_class_for(contract: type) -> type:
    """Synthesize (once) the proxy class implementing *contract*."""
    description = describe_contract(contract)
    name = f"{contract.__name__}Proxy"
    namespace: Dict[str, Any] = {
        op: _routing_stub(name, op) for op in description.operation_names()
    }
    namespace["__module__"] = contract.__module__
    cls = new_class(name, (BuilderProxy, contract), exec_body=lambda ns: ns.update(namespace))
    logger.debug("synthesized %s with %d routed operation(s)", name, len(namespace) - 1)
    return cls


def new_proxy(table: RoleTable, callback: Callable[[Any], Any], single_use: bool = True) -> Any:
    """Create one builder instance bound to *table* and *callback*."""
    cls = proxy_class_for(table.contract)
    return cls(BuilderInvocationHandler(table, callback, single_use))


# ── Introspection helpers ────────────────────────────────────────────────────

def handler_of(proxy: Any) -> BuilderInvocationHandler:
    """Return the handler behind a synthesized builder."""
    try:
        return object.__getattribute__(proxy, HANDLER_ATTR)
    except AttributeError:
        raise TypeError(f"{proxy!r} is not a synthesized builder") from None


def slot_store(proxy: Any) -> Mapping[str, Any]:
    """Read-only view of a builder's slot store."""
    return MappingProxyType(handler_of(proxy).slots)


def builder_state(proxy: Any) -> BuilderState:
    return handler_of(proxy).state
