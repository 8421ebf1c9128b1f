"""
Naming conventions and role tables.

A naming convention decides, from an operation's name and shape, whether it
writes a slot, reads a slot, or neither.  Conventions are only consulted
once per contract: :func:`build_role_table` turns a
:class:`ContractDescription` into an immutable :class:`RoleTable`, and every
call against a builder is classified by looking the operation up in that
table (:meth:`RoleTable.classify`).

Three conventions are supported:

- **SIMPLE**         — ``name()`` reads, ``name(value)`` writes (declare
                       both with ``typing.overload``)
- **SIMPLE_SETTER**  — ``set_name(value)`` writes, ``name()`` reads
- **GETTER_SETTER**  — ``set_name(value)`` writes, ``get_name()`` reads

Writers under the prefixed conventions must be annotated to return the
contract (or ``typing.Self``) so chained calls type-check.
"""
from __future__ import annotations

import functools
import inspect
import logging
import typing
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Sequence, Set

from builderproxy.core.contract import (
    ContractDescription,
    OperationRole,
    OperationSpec,
    describe_contract,
    inherits_from,
)
from builderproxy.errors import ContractDefinitionError

logger = logging.getLogger(__name__)

SETTER_PREFIX = "set_"
GETTER_PREFIX = "get_"


class NamingConvention(str, Enum):
    """Rule set used to derive writer/reader roles from method names."""

    SIMPLE = "SIMPLE"
    SIMPLE_SETTER = "SIMPLE_SETTER"
    GETTER_SETTER = "GETTER_SETTER"


# ── Shape helpers ────────────────────────────────────────────────────────────

def _is_void(annotation: Any) -> bool:
    return annotation is None or annotation is type(None) or annotation == "None"


def returns_contract(op: OperationSpec, contract: type) -> bool:
    """True if *op* is declared to return something the builder itself satisfies."""
    ret = op.return_type
    if ret is typing.Self:
        return True
    if isinstance(ret, str):
        return ret.strip("'\"") in (contract.__name__, contract.__qualname__, "Self")
    ret = typing.get_origin(ret) or ret
    if not inspect.isclass(ret) or ret is object:
        return False
    return inherits_from(ret, contract) or inherits_from(contract, ret)


# ── Specifications ───────────────────────────────────────────────────────────

class BuilderSpecification(ABC):
    """Classifies single operation shapes for one contract."""

    def __init__(self, description: ContractDescription):
        self.description = description

    @property
    def contract(self) -> type:
        return self.description.contract

    @abstractmethod
    def is_writer(self, op: OperationSpec) -> bool: ...

    @abstractmethod
    def is_reader(self, op: OperationSpec) -> bool: ...

    @abstractmethod
    def writer_identity(self, op: OperationSpec) -> str: ...

    @abstractmethod
    def reader_identity(self, op: OperationSpec) -> str: ...


class SimpleBuilderSpecification(BuilderSpecification):
    """Same name for both directions; arity tells them apart."""

    def is_writer(self, op: OperationSpec) -> bool:
        return op.arity == 1

    def is_reader(self, op: OperationSpec) -> bool:
        return op.arity == 0 and not _is_void(op.return_type)

    def writer_identity(self, op: OperationSpec) -> str:
        return op.name

    def reader_identity(self, op: OperationSpec) -> str:
        return op.name


class SimpleSetterBuilderSpecification(BuilderSpecification):
    """``set_x(value)`` writes slot ``x``; bare ``x()`` reads it."""

    def is_writer(self, op: OperationSpec) -> bool:
        return (
            op.arity == 1
            and op.name.startswith(SETTER_PREFIX)
            and len(op.name) > len(SETTER_PREFIX)
            and returns_contract(op, self.contract)
        )

    def is_reader(self, op: OperationSpec) -> bool:
        return (
            op.arity == 0
            and not op.name.startswith(SETTER_PREFIX)
            and not _is_void(op.return_type)
        )

    def writer_identity(self, op: OperationSpec) -> str:
        return op.name[len(SETTER_PREFIX):]

    def reader_identity(self, op: OperationSpec) -> str:
        return op.name


class GetterSetterBuilderSpecification(SimpleSetterBuilderSpecification):
    """``set_x(value)`` writes slot ``x``; ``get_x()`` reads it."""

    def is_reader(self, op: OperationSpec) -> bool:
        return (
            op.arity == 0
            and op.name.startswith(GETTER_PREFIX)
            and len(op.name) > len(GETTER_PREFIX)
            and not _is_void(op.return_type)
        )

    def reader_identity(self, op: OperationSpec) -> str:
        return op.name[len(GETTER_PREFIX):]


_SPECIFICATIONS = MappingProxyType({
    NamingConvention.SIMPLE:        SimpleBuilderSpecification,
    NamingConvention.SIMPLE_SETTER: SimpleSetterBuilderSpecification,
    NamingConvention.GETTER_SETTER: GetterSetterBuilderSpecification,
})


def get_specification(
    convention: NamingConvention,
    description: ContractDescription,
) -> BuilderSpecification:
    """Instantiate the specification class for *convention*."""
    try:
        cls = _SPECIFICATIONS[NamingConvention(convention)]
    except (KeyError, ValueError):
        raise ValueError(f"Unknown naming convention: {convention!r}") from None
    return cls(description)


# ── Role table ───────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class OperationBinding:
    """Roles one operation name can play, resolved at registration time."""

    name: str
    writer_slot: Optional[str] = None
    reader_slot: Optional[str] = None
    reader_type: Any = None
    terminal: bool = False


@dataclass(frozen=True)
class Classification:
    """Outcome of classifying one concrete call."""

    role: OperationRole
    operation: str
    slot: Optional[str] = None
    reader_type: Any = None


@dataclass(frozen=True)
class RoleTable:
    """Immutable operation-name → binding map for one contract and convention."""

    contract: type
    convention: NamingConvention
    terminal: str
    bindings: Mapping[str, OperationBinding]

    def classify(self, operation: str, args: Sequence[Any]) -> Classification:
        """Decide what a call of *operation* with *args* does.

        Writers need exactly one argument, readers and the terminal none.
        Any other combination is ``INVALID``.
        """
        binding = self.bindings.get(operation)
        if binding is not None:
            if binding.terminal and not args:
                return Classification(OperationRole.TERMINAL, operation)
            if binding.writer_slot is not None and len(args) == 1:
                return Classification(OperationRole.WRITER, operation, binding.writer_slot)
            if binding.reader_slot is not None and not args:
                return Classification(
                    OperationRole.READER,
                    operation,
                    binding.reader_slot,
                    binding.reader_type,
                )
        return Classification(OperationRole.INVALID, operation)

    def slots(self) -> Set[str]:
        """Every slot identity with a writer or a reader."""
        out: Set[str] = set()
        for b in self.bindings.values():
            out.update(s for s in (b.writer_slot, b.reader_slot) if s is not None)
        return out


def _bind_explicit(op: OperationSpec, contract: type) -> Dict[str, Any]:
    if op.explicit_role is OperationRole.WRITER:
        if op.arity != 1:
            raise ContractDefinitionError(
                f"{contract.__qualname__}.{op.name}: a writer takes exactly one argument"
            )
        return {"writer_slot": op.explicit_slot}
    if op.arity != 0 or _is_void(op.return_type):
        raise ContractDefinitionError(
            f"{contract.__qualname__}.{op.name}: a reader takes no arguments "
            f"and returns a value"
        )
    return {"reader_slot": op.explicit_slot, "reader_type": op.return_type}


def build_role_table(
    description: ContractDescription,
    convention: NamingConvention = NamingConvention.GETTER_SETTER,
) -> RoleTable:
    """Resolve every operation of *description* under *convention*.

    Explicit ``@writes`` / ``@reads`` tags win over the convention.
    Operations matching nothing are kept with an empty binding so that
    calling them fails with a precise error instead of an AttributeError.
    """
    spec = get_specification(convention, description)
    contract = description.contract

    bindings: Dict[str, OperationBinding] = {}
    for name in description.operation_names():
        fields: Dict[str, Any] = {"terminal": name == description.terminal}
        if not fields["terminal"]:
            for op in description.variants(name):
                if op.explicit_role is not None:
                    fields.update(_bind_explicit(op, contract))
                elif spec.is_writer(op):
                    fields["writer_slot"] = spec.writer_identity(op)
                elif spec.is_reader(op):
                    fields["reader_slot"] = spec.reader_identity(op)
                    fields["reader_type"] = op.return_type
            if "writer_slot" not in fields and "reader_slot" not in fields:
                logger.debug(
                    "%s.%s matches no %s reader/writer shape",
                    contract.__qualname__, name, NamingConvention(convention).value,
                )
        bindings[name] = OperationBinding(name=name, **fields)

    table = RoleTable(
        contract=contract,
        convention=NamingConvention(convention),
        terminal=description.terminal,
        bindings=MappingProxyType(bindings),
    )

    written = {b.writer_slot for b in bindings.values() if b.writer_slot is not None}
    read = {b.reader_slot for b in bindings.values() if b.reader_slot is not None}
    for slot in sorted(written ^ read):
        logger.debug("%s: slot %r has only one side of its reader/writer pair",
                     contract.__qualname__, slot)
    return table


@functools.lru_cache(maxsize=None)
def role_table_for(contract: type, convention: NamingConvention) -> RoleTable:
    """Cached :func:`build_role_table` keyed on the contract class."""
    return build_role_table(describe_contract(contract), NamingConvention(convention))
