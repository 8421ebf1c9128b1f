"""
Contract description — introspect a builder contract class.

A contract is an ordinary (usually abstract) class whose public methods are
annotated stubs.  Each stub, or each ``typing.overload`` variant of a stub,
becomes one immutable :class:`OperationSpec`.  Exactly one operation must be
tagged with :func:`terminal`; :class:`Builder` provides ``build`` already
tagged, so most contracts simply subclass ``Builder[Product]``.

Roles can be pinned per method with :func:`writes` / :func:`reads`; those
tags take precedence over any naming convention.
"""
from __future__ import annotations

import functools
import inspect
import logging
import typing
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Generic, List, Optional, Tuple, TypeVar

from builderproxy.errors import ContractDefinitionError

logger = logging.getLogger(__name__)

V = TypeVar("V")

TERMINAL_ATTR = "__builderproxy_terminal__"
ROLE_ATTR = "__builderproxy_role__"

# Classes whose members never count as contract operations
_SKIPPED_BASES = (object, Generic, typing.Protocol)


# ── Roles ────────────────────────────────────────────────────────────────────

class OperationRole(str, Enum):
    """What a single call against a builder does."""

    WRITER = "WRITER"
    READER = "READER"
    TERMINAL = "TERMINAL"
    INVALID = "INVALID"


# ── Tags ─────────────────────────────────────────────────────────────────────

def terminal(func: Callable) -> Callable:
    """Mark *func* as the contract's single construction method."""
    setattr(func, TERMINAL_ATTR, True)
    return func


def writes(slot: str) -> Callable[[Callable], Callable]:
    """Pin the decorated method as the writer of *slot*."""
    def decorator(func: Callable) -> Callable:
        setattr(func, ROLE_ATTR, (OperationRole.WRITER, slot))
        return func
    return decorator


def reads(slot: str) -> Callable[[Callable], Callable]:
    """Pin the decorated method as the reader of *slot*."""
    def decorator(func: Callable) -> Callable:
        setattr(func, ROLE_ATTR, (OperationRole.READER, slot))
        return func
    return decorator


class Builder(Generic[V]):
    """Base contract: anything that builds a ``V``."""

    @terminal
    def build(self) -> V:
        ...


# ── Descriptions ─────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class OperationSpec:
    """One callable shape of a contract operation."""

    name: str
    param_names: Tuple[str, ...]
    param_types: Tuple[Any, ...]
    return_type: Any
    is_terminal: bool = False
    explicit_role: Optional[OperationRole] = None
    explicit_slot: Optional[str] = None

    @property
    def arity(self) -> int:
        """Number of parameters, ``self`` excluded."""
        return len(self.param_names)


@dataclass(frozen=True)
class ContractDescription:
    """All operations of one contract class, in MRO order."""

    contract: type
    operations: Tuple[OperationSpec, ...]
    terminal: str

    def operation_names(self) -> List[str]:
        seen: Dict[str, None] = {}
        for op in self.operations:
            seen.setdefault(op.name, None)
        return list(seen)

    def variants(self, name: str) -> List[OperationSpec]:
        return [op for op in self.operations if op.name == name]


def _resolve_hints(func: Callable, contract: type) -> Dict[str, Any]:
    """Type hints of *func*, falling back to the raw annotations.

    Contracts declared inside a function body cannot always have their
    forward references resolved; the unresolved strings are kept.
    """
    localns = {contract.__name__: contract}
    try:
        return typing.get_type_hints(func, localns=localns)
    except (NameError, TypeError) as e:
        logger.debug("unresolved annotations on %s: %s", func.__qualname__, e)
        return dict(getattr(func, "__annotations__", {}))


def inherits_from(cls: Any, base: Any) -> bool:
    """True if *base* is on *cls*'s MRO.

    Unlike ``issubclass`` this never consults ``__subclasscheck__``, so it
    works for non-runtime ``typing.Protocol`` classes.
    """
    return base in getattr(cls, "__mro__", ())


def _is_tagged_terminal(contract: type, name: str) -> bool:
    for klass in contract.__mro__:
        member = vars(klass).get(name)
        if member is not None and getattr(member, TERMINAL_ATTR, False):
            return True
    return False


def _spec_from_function(
    name: str,
    func: Callable,
    contract: type,
    is_terminal: bool,
) -> OperationSpec:
    sig = inspect.signature(func)
    params = list(sig.parameters.values())[1:]  # drop self
    for p in params:
        if p.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
            raise ContractDefinitionError(
                f"{contract.__qualname__}.{name}: variadic parameters are not supported"
            )

    hints = _resolve_hints(func, contract)
    explicit = getattr(func, ROLE_ATTR, None)
    return OperationSpec(
        name=name,
        param_names=tuple(p.name for p in params),
        param_types=tuple(hints.get(p.name, Any) for p in params),
        return_type=hints.get("return", Any),
        is_terminal=is_terminal,
        explicit_role=explicit[0] if explicit else None,
        explicit_slot=explicit[1] if explicit else None,
    )


def _contract_members(contract: type) -> Dict[str, Callable]:
    """Public plain functions visible on *contract*, first definition wins."""
    members: Dict[str, Callable] = {}
    for klass in contract.__mro__:
        if klass in _SKIPPED_BASES:
            continue
        for name, member in vars(klass).items():
            if name.startswith("_") or name in members:
                continue
            if inspect.isfunction(member):
                members[name] = member
    return members


@functools.lru_cache(maxsize=None)
def describe_contract(contract: type) -> ContractDescription:
    """Build (once per class) the :class:`ContractDescription` of *contract*.

    Raises
    ------
    ContractDefinitionError
        If *contract* is not a class, has variadic operations, or does not
        have exactly one zero-argument terminal operation.
    """
    if not inspect.isclass(contract):
        raise ContractDefinitionError(f"contract must be a class, got {contract!r}")

    operations: List[OperationSpec] = []
    terminals: List[str] = []
    for name, func in _contract_members(contract).items():
        is_term = _is_tagged_terminal(contract, name)
        if is_term:
            terminals.append(name)
        overloads = typing.get_overloads(func)
        for variant in overloads or [func]:
            operations.append(_spec_from_function(name, variant, contract, is_term))

    if not terminals:
        raise ContractDefinitionError(
            f"{contract.__qualname__} has no terminal operation; "
            f"subclass Builder or tag one method with @terminal"
        )
    if len(terminals) > 1:
        raise ContractDefinitionError(
            f"{contract.__qualname__} has {len(terminals)} terminal operations "
            f"({', '.join(sorted(terminals))}); exactly one is allowed"
        )
    term = terminals[0]
    if any(op.arity != 0 for op in operations if op.name == term):
        raise ContractDefinitionError(
            f"{contract.__qualname__}.{term}: terminal operation must take no arguments"
        )

    logger.debug(
        "described contract %s: %d operation(s), terminal=%s",
        contract.__qualname__, len(operations), term,
    )
    return ContractDescription(
        contract=contract,
        operations=tuple(operations),
        terminal=term,
    )
