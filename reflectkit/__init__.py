"""
reflectkit - runtime class introspection.

Main operations:
- find_annotated_field_names: own fields tagged with a marker
- find_all_method_names: own methods plus methods of directly implemented contracts
- create_instance: privileged construction through a matching constructor

Usage:
    from typing import Annotated
    from reflectkit import constructor, create_instance, find_annotated_field_names

    class Important:
        pass

    class Villager:
        name: Annotated[str, Important()]

        def __init__(self):
            self.name = "Unknown"

        @constructor
        def _named(cls, name: str, description: str):
            villager = cls()
            villager.name = name
            return villager

    create_instance(Villager, "Tom", "Farmer")
    find_annotated_field_names(Villager, Important)  # {"name"}
"""

__version__ = "0.1.0"

from .errors import (
    ReflectionError,
    ConstructorNotFoundError,
    ConstructorAccessError,
    ConstructorResultError,
    TargetResolutionError,
)
from .markers import field_markers, has_marker
from .constructors import Constructor, accepts, constructor, declared_constructors
from .inspector import (
    create_instance,
    declared_method_names,
    find_all_method_names,
    find_annotated_field_names,
    find_matching_constructor,
    is_contract,
)
from .schemas import ConstructorInfo, FieldEntry, ParameterInfo, TypeReport
from .report import describe_type

__all__ = [
    # Core operations
    "find_annotated_field_names",
    "find_all_method_names",
    "create_instance",

    # Helpers
    "declared_method_names",
    "is_contract",
    "find_matching_constructor",
    "declared_constructors",
    "constructor",
    "accepts",
    "Constructor",
    "field_markers",
    "has_marker",
    "describe_type",

    # Schemas
    "TypeReport",
    "FieldEntry",
    "ConstructorInfo",
    "ParameterInfo",

    # Errors
    "ReflectionError",
    "ConstructorNotFoundError",
    "ConstructorAccessError",
    "ConstructorResultError",
    "TargetResolutionError",
]
