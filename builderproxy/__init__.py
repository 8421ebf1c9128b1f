"""
builderproxy — synthesize builder objects from contract classes.

A contract is a class of annotated method stubs: writers that store one
value and return the builder, readers that return it, and one terminal
``build``.  The factory hands out objects implementing the contract; only
the terminal callback has to be written.

Quick start::

    from builderproxy import Builder, create

    class PointBuilder(Builder["Point"]):
        def set_x(self, x: int) -> "PointBuilder": ...
        def get_x(self) -> int: ...

    b = create(PointBuilder, lambda b: Point(b.get_x()))
    point = b.set_x(3).build()

Layers
------
core.contract    Contract class → immutable operation descriptions.
core.defaults    Zero values for primitive reader annotations.
policy.naming    Naming conventions → per-contract role tables.
core.dispatcher  Proxy class synthesis and per-call routing.
factory          BuilderFactory, create, create_reflective.
"""

__version__ = "0.1.0"
PACKAGE_NAME = "builderproxy"
SCHEMA_VERSION = "0.1"

from .core.contract import (
    Builder,
    ContractDescription,
    OperationRole,
    OperationSpec,
    describe_contract,
    reads,
    terminal,
    writes,
)

from .core.defaults import (
    PRIMITIVE_DEFAULTS,
    byte,
    char,
    default_for,
    long,
    short,
)

from .policy.naming import (
    Classification,
    NamingConvention,
    RoleTable,
    build_role_table,
    role_table_for,
)

from .core.dispatcher import (
    BuilderState,
    builder_state,
    slot_store,
)

from .factory import (
    BuilderFactory,
    create,
    create_reflective,
)

from .errors import (
    BuilderConsumedError,
    BuilderProxyError,
    BuilderUsageError,
    ConstructorDiscoveryError,
    ContractDefinitionError,
    UnclassifiableOperationError,
)

__all__ = [
    # contract
    "Builder",
    "ContractDescription",
    "OperationRole",
    "OperationSpec",
    "describe_contract",
    "terminal",
    "writes",
    "reads",
    # defaults
    "PRIMITIVE_DEFAULTS",
    "default_for",
    "char",
    "byte",
    "short",
    "long",
    # naming
    "NamingConvention",
    "RoleTable",
    "Classification",
    "build_role_table",
    "role_table_for",
    # dispatcher
    "BuilderState",
    "builder_state",
    "slot_store",
    # factory
    "BuilderFactory",
    "create",
    "create_reflective",
    # errors
    "BuilderProxyError",
    "BuilderUsageError",
    "ContractDefinitionError",
    "UnclassifiableOperationError",
    "ConstructorDiscoveryError",
    "BuilderConsumedError",
    # meta
    "PACKAGE_NAME",
    "SCHEMA_VERSION",
]
