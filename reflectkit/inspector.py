"""
Type inspector - field, method and constructor introspection for classes.

Three independent, stateless operations:

- find_annotated_field_names: own fields carrying a marker
- find_all_method_names: own methods plus methods of directly implemented contracts
- create_instance: privileged construction through a matching constructor

Usage:
    from reflectkit import create_instance, find_all_method_names

    villager = create_instance(Villager, "Tom", "Farmer")
    names = find_all_method_names(Villager)
"""

import abc
import inspect
import logging
import typing
from typing import Any, List, Sequence, Set

from reflectkit.constructors import Constructor, declared_constructors, is_constructor
from reflectkit.errors import ConstructorNotFoundError, ConstructorResultError
from reflectkit.markers import is_marker, iter_field_markers

logger = logging.getLogger(__name__)

# Constructors in the Python type model, never reported as methods
CONSTRUCTOR_NAMES = frozenset({"__init__", "__new__"})

_CONTRACT_ROOTS = (object, abc.ABC, typing.Protocol, typing.Generic)

# Modules whose private hooks get installed on Protocol classes and their subclasses
_RUNTIME_HOOK_MODULES = frozenset({"typing", "typing_extensions"})


# ============================================================================
# FIELDS
# ============================================================================

def find_annotated_field_names(cls: type, marker: type) -> Set[str]:
    """
    Find the fields declared directly on ``cls`` that carry ``marker``.

    Args:
        cls: Class to inspect
        marker: Marker class to look for

    Returns:
        Unique field names; empty when nothing is marked
    """
    return {
        name
        for name, markers in iter_field_markers(cls)
        if any(is_marker(item, marker) for item in markers)
    }


# ============================================================================
# METHODS
# ============================================================================

def is_contract(base: type) -> bool:
    """
    A Protocol class, or an ABC that is abstract or lists ``abc.ABC`` as a base.

    A concrete class that merely inherits ABCMeta from an ancestor is a
    superclass, not a contract. The typing/abc roots themselves never count.
    """
    if base in _CONTRACT_ROOTS:
        return False
    if getattr(base, "_is_protocol", False):
        return True
    return isinstance(base, abc.ABCMeta) and (abc.ABC in base.__bases__ or inspect.isabstract(base))


def _is_runtime_hook(member: Any) -> bool:
    # e.g. typing._proto_hook installed as __subclasshook__
    return (
        getattr(member, "__module__", None) in _RUNTIME_HOOK_MODULES
        and getattr(member, "__name__", "").startswith("_")
    )


def _is_declared_method(name: str, member: Any) -> bool:
    if name in CONSTRUCTOR_NAMES or is_constructor(member):
        return False
    if isinstance(member, (staticmethod, classmethod)):
        member = member.__func__
    return inspect.isroutine(member) and not _is_runtime_hook(member)


def declared_method_names(cls: type) -> Set[str]:
    """Names of the methods stored in the namespace of ``cls``."""
    return {name for name, member in vars(cls).items() if _is_declared_method(name, member)}


def find_all_method_names(cls: type) -> Set[str]:
    """
    Collect method names from ``cls`` and the contracts it directly implements.

    Only the direct bases of ``cls`` are examined; contracts reached through
    another contract are not walked. Overloads collapse to one name.

    Args:
        cls: Class to inspect

    Returns:
        Unique method names; empty when nothing is declared
    """
    names = declared_method_names(cls)
    for base in cls.__bases__:
        if is_contract(base):
            names |= declared_method_names(base)
    return names


# ============================================================================
# CONSTRUCTORS
# ============================================================================

def find_matching_constructor(cls: type, args: Sequence[Any]) -> Constructor:
    """
    Return the first declared constructor accepting ``args``.

    Constructors are tried in the order :func:`declared_constructors` yields
    them; the first match wins even when a later one would also match.

    Raises:
        ConstructorNotFoundError: If no constructor has the right arity and
            compatible parameter types
    """
    candidates: List[Constructor] = declared_constructors(cls)
    for candidate in candidates:
        if candidate.matches(args):
            logger.debug(f"Matched {cls.__qualname__}.{candidate.name} for {len(args)} argument(s)")
            return candidate
    raise ConstructorNotFoundError(cls, args)


def create_instance(cls: type, *args: Any) -> Any:
    """
    Build an instance of ``cls`` through a constructor matching ``args``.

    Access is elevated on the matched handle before invoking it, so
    non-public constructors succeed too.

    Args:
        cls: Class to instantiate
        *args: Positional constructor arguments

    Returns:
        New instance of ``cls``

    Raises:
        ConstructorNotFoundError: If no declared constructor matches
        ConstructorResultError: If the constructor returned something that
            is not an instance of ``cls``
    """
    ctor = find_matching_constructor(cls, args)
    if not ctor.public:
        logger.debug(f"Elevating access on non-public constructor {cls.__qualname__}.{ctor.name}")
    ctor.set_accessible(True)
    instance = ctor.invoke(*args)
    if not isinstance(instance, cls):
        raise ConstructorResultError(
            f"{cls.__qualname__}.{ctor.name} returned {type(instance).__qualname__}, "
            f"not an instance of {cls.__qualname__}"
        )
    return instance
