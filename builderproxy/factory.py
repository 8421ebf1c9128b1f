"""
Construction entry point — hand out synthesized builders.

``BuilderFactory.make`` is the primary contract: the caller supplies the
terminal callback.  ``BuilderFactory.make_risky`` derives the callback by
finding a constructor on a target class that accepts the builder followed
by a fixed argument list.  It trades static checking for runtime discovery;
discovery happens eagerly, when the builder is requested, so a bad target
fails before any value is written.
"""
from __future__ import annotations

import functools
import inspect
import logging
import typing
from types import UnionType
from typing import Any, Callable, List, Optional, Sequence, Tuple, TypeVar

from builderproxy.config import settings
from builderproxy.core.contract import inherits_from
from builderproxy.core.dispatcher import new_proxy
from builderproxy.errors import ConstructorDiscoveryError
from builderproxy.policy.naming import NamingConvention, role_table_for

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BuilderFactory:
    """Creates builder objects for contract classes.

    Parameters
    ----------
    convention : NamingConvention, optional
        How reader and writer operations are recognised.  Defaults to
        ``settings.DEFAULT_CONVENTION`` (GETTER_SETTER).
    single_use : bool, optional
        Whether a builder refuses writes and further builds once it has
        built a value.  Defaults to ``settings.SINGLE_USE``.
    """

    def __init__(
        self,
        convention: Optional[NamingConvention] = None,
        *,
        single_use: Optional[bool] = None,
    ):
        self.convention = NamingConvention(convention or settings.DEFAULT_CONVENTION)
        self.single_use = settings.SINGLE_USE if single_use is None else single_use

    def make(self, contract: type[T], callback: Callable[[T], Any]) -> T:
        """Return a new builder for *contract* whose terminal calls *callback*."""
        table = role_table_for(contract, self.convention)
        return new_proxy(table, callback, self.single_use)

    def make_risky(self, contract: type[T], target: type, *constructor_args: Any) -> T:
        """Return a builder whose terminal constructs ``target(builder, *constructor_args)``.

        Raises
        ------
        ConstructorDiscoveryError
            If no constructor-like operation of *target* accepts the builder
            followed by *constructor_args*.
        """
        constructor = discover_constructor(contract, target, constructor_args)
        fixed = tuple(constructor_args)

        def callback(builder: T) -> Any:
            return constructor(builder, *fixed)

        return self.make(contract, callback)


# ── Constructor discovery ────────────────────────────────────────────────────

def _accepts(annotation: Any, value_type: type) -> bool:
    """Best-effort check that a *value_type* instance fits *annotation*."""
    if annotation is inspect.Parameter.empty or annotation is Any:
        return True
    if isinstance(annotation, str):
        return annotation.strip("'\"") in (value_type.__name__, value_type.__qualname__)
    supertype = getattr(annotation, "__supertype__", None)  # NewType
    if supertype is not None:
        return _accepts(supertype, value_type)
    origin = typing.get_origin(annotation)
    if origin in (typing.Union, UnionType):
        return any(_accepts(a, value_type) for a in typing.get_args(annotation))
    if origin is not None:
        annotation = origin
    if inspect.isclass(annotation):
        if inherits_from(value_type, annotation):
            return True
        try:
            return issubclass(value_type, annotation)
        except TypeError:  # non-runtime Protocol
            return False
    return True


def _candidates(target: type) -> List[Tuple[str, Callable]]:
    """The class itself first, then its classmethods in name order."""
    out: List[Tuple[str, Callable]] = [("__init__", target)]
    for name in sorted(vars(target)):
        if isinstance(vars(target)[name], classmethod):
            out.append((name, getattr(target, name)))
    return out


def _hints(candidate: Callable, target: type) -> dict:
    func = target.__init__ if candidate is target else candidate.__func__
    try:
        return typing.get_type_hints(func)
    except (NameError, TypeError):
        return dict(getattr(func, "__annotations__", {}))


def discover_constructor(
    contract: type,
    target: type,
    constructor_args: Sequence[Any],
) -> Callable[..., Any]:
    """Find the operation of *target* that accepts ``(builder, *constructor_args)``."""
    arg_types = (contract,) + tuple(type(a) for a in constructor_args)
    return _find_constructor(target, arg_types)


@functools.lru_cache(maxsize=None)
def _find_constructor(target: type, arg_types: Tuple[type, ...]) -> Callable[..., Any]:
    for name, candidate in _candidates(target):
        try:
            sig = inspect.signature(candidate)
            bound = sig.bind(*((None,) * len(arg_types)))
        except (TypeError, ValueError):
            continue
        hints = _hints(candidate, target)
        params = list(bound.arguments)
        if all(_accepts(hints.get(p, inspect.Parameter.empty), t)
               for p, t in zip(params, arg_types)):
            logger.debug("constructor for %s: %s", target.__qualname__, name)
            return candidate

    raise ConstructorDiscoveryError(target, arg_types)


# ── Module-level surface ─────────────────────────────────────────────────────

def create(
    contract: type[T],
    callback: Callable[[T], Any],
    convention: Optional[NamingConvention] = None,
    *,
    single_use: Optional[bool] = None,
) -> T:
    """Shorthand for ``BuilderFactory(convention).make(contract, callback)``."""
    return BuilderFactory(convention, single_use=single_use).make(contract, callback)


def create_reflective(
    contract: type[T],
    target: type,
    *constructor_args: Any,
    convention: Optional[NamingConvention] = None,
    single_use: Optional[bool] = None,
) -> T:
    """Shorthand for ``BuilderFactory(convention).make_risky(...)``."""
    factory = BuilderFactory(convention, single_use=single_use)
    return factory.make_risky(contract, target, *constructor_args)
