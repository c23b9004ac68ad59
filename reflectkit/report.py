"""Build TypeReport models from live classes."""

import inspect
import typing
from datetime import datetime
from typing import Any, Iterable

from reflectkit.constructors import Constructor, declared_constructors
from reflectkit.inspector import find_all_method_names, find_annotated_field_names, is_contract
from reflectkit.markers import iter_field_markers, marker_name, own_annotations
from reflectkit.schemas import ConstructorInfo, FieldEntry, ParameterInfo, TypeReport


def type_name(annotation: Any) -> str:
    """Readable name for an annotation."""
    if annotation is inspect.Parameter.empty:
        return "Any"
    if typing.get_origin(annotation) is typing.Annotated:
        annotation = typing.get_args(annotation)[0]
    if isinstance(annotation, type) and not typing.get_args(annotation):
        return annotation.__name__
    return str(annotation).replace("typing.", "")


def constructor_info(ctor: Constructor) -> ConstructorInfo:
    """Schema view of a Constructor handle."""
    return ConstructorInfo(
        name=ctor.name,
        parameters=[ParameterInfo(name=p.name, type_name=type_name(p.annotation)) for p in ctor.parameters],
        public=ctor.public,
    )


def describe_type(cls: type, markers: Iterable[type] = ()) -> TypeReport:
    """
    Inspect ``cls`` and return a TypeReport.

    Args:
        cls: Class to describe
        markers: Markers whose tagged fields are listed under ``marked_fields``

    Returns:
        TypeReport for ``cls``
    """
    annotations = own_annotations(cls)
    fields = [
        FieldEntry(
            name=name,
            type_name=type_name(annotations[name]),
            markers=[marker_name(item) for item in items],
        )
        for name, items in iter_field_markers(cls)
    ]

    constructors = [constructor_info(ctor) for ctor in declared_constructors(cls)]

    return TypeReport(
        type_name=cls.__qualname__,
        module=cls.__module__,
        fields=fields,
        method_names=sorted(find_all_method_names(cls)),
        contracts=[base.__qualname__ for base in cls.__bases__ if is_contract(base)],
        constructors=constructors,
        marked_fields={
            marker_name(marker): sorted(find_annotated_field_names(cls, marker))
            for marker in markers
        },
        timestamp=datetime.now().isoformat(),
    )
