"""
Example domain object with a synthesized builder and a hand-written one.

``Example`` has one mandatory field, fixed when the builder is created, and
two optional fields set through the builder.  ``ExampleBuilder`` follows the
SIMPLE convention: ``optional1()`` reads, ``optional1(value)`` writes.

    >>> str(Example.builder("X").optional1(35).optional2("A").build())
    'Example[optional1=35, optional2=A, mandatory=X]'

``ManualBuilder`` implements the same contract by hand and is the baseline
the benchmark runner compares against.
"""
from __future__ import annotations

from typing import overload

from builderproxy.core.contract import Builder
from builderproxy.core.defaults import char
from builderproxy.factory import BuilderFactory
from builderproxy.policy.naming import NamingConvention


class ExampleBuilder(Builder["Example"]):

    @overload
    def optional1(self) -> int: ...
    @overload
    def optional1(self, optional1: int) -> ExampleBuilder: ...
    def optional1(self, *args): ...

    @overload
    def optional2(self) -> char: ...
    @overload
    def optional2(self, optional2: char) -> ExampleBuilder: ...
    def optional2(self, *args): ...

    def build(self) -> Example: ...


_FACTORY = BuilderFactory(NamingConvention.SIMPLE)


class Example:

    def __init__(self, builder: ExampleBuilder, mandatory: str):
        self.mandatory = mandatory
        self.optional1 = builder.optional1()
        self.optional2 = builder.optional2()

    @classmethod
    def builder(cls, mandatory: str) -> ExampleBuilder:
        """Start building an ``Example`` with its mandatory field."""
        return _FACTORY.make_risky(ExampleBuilder, cls, mandatory)

    def __str__(self) -> str:
        return (
            f"{type(self).__name__}[optional1={self.optional1}, "
            f"optional2={self.optional2}, mandatory={self.mandatory}]"
        )


class ManualBuilder(ExampleBuilder):
    """Hand-written ``ExampleBuilder``."""

    def __init__(self, mandatory: str):
        self._mandatory = mandatory
        self._optional1 = 0
        self._optional2 = char("\u0000")

    def optional1(self, *args):
        if not args:
            return self._optional1
        (self._optional1,) = args
        return self

    def optional2(self, *args):
        if not args:
            return self._optional2
        (self._optional2,) = args
        return self

    def build(self) -> Example:
        return Example(self, self._mandatory)
