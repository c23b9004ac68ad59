"""
Field marker lookup.

A marker is a plain class used as a tag. Fields carry markers through the
native metadata facilities Python offers for annotations:

    class Account:
        owner: Annotated[str, Important()]
        balance: int = field(metadata={"markers": (Important,)})

Both the marker class itself and instances of it count as the marker.
Matching is by exact type, so subclasses of a marker are distinct markers.
"""

import dataclasses
import inspect
import logging
import sys
import typing
from typing import Any, Dict, Iterator, Optional, Tuple

logger = logging.getLogger(__name__)

MARKERS_METADATA_KEY = "markers"


def module_globals(cls: type) -> Dict[str, Any]:
    """Copy of the globals of the module defining ``cls``."""
    module = sys.modules.get(cls.__module__)
    return dict(vars(module)) if module is not None else {}


def resolve_annotation(
    value: Any,
    globalns: Dict[str, Any],
    localns: Optional[Dict[str, Any]] = None,
) -> Any:
    """
    Evaluate a string annotation.

    Names that cannot be resolved (typically imports guarded by
    ``TYPE_CHECKING``) leave the string in place.
    """
    if not isinstance(value, str):
        return value
    try:
        return eval(value, globalns, localns)
    except (NameError, AttributeError) as e:
        logger.debug(f"Leaving annotation {value!r} unresolved: {e}")
        return value


def own_annotations(cls: type) -> Dict[str, Any]:
    """
    Return the annotations declared in the body of ``cls``.

    Inherited annotations are excluded. String annotations (postponed
    evaluation) are resolved one by one so ``Annotated`` metadata stays
    visible; an unresolvable one stays a string and carries no markers.

    Args:
        cls: Class to read

    Returns:
        Mapping of field name to annotation, in declaration order
    """
    annotations = dict(inspect.get_annotations(cls))
    if not any(isinstance(value, str) for value in annotations.values()):
        return annotations

    globalns = module_globals(cls)
    localns = dict(vars(cls))
    return {name: resolve_annotation(value, globalns, localns) for name, value in annotations.items()}


def _annotated_metadata(annotation: Any) -> Tuple[Any, ...]:
    if typing.get_origin(annotation) is typing.Annotated:
        return tuple(annotation.__metadata__)
    return ()


def _dataclass_metadata(cls: type, name: str) -> Tuple[Any, ...]:
    # Only fields declared on cls itself; __dataclass_fields__ also holds inherited ones
    if not dataclasses.is_dataclass(cls) or name not in inspect.get_annotations(cls):
        return ()
    field = cls.__dataclass_fields__.get(name)
    if field is None:
        return ()
    return tuple(field.metadata.get(MARKERS_METADATA_KEY, ()))


def iter_field_markers(cls: type) -> Iterator[Tuple[str, Tuple[Any, ...]]]:
    """Yield (name, markers) for every field declared directly on ``cls``."""
    for name, annotation in own_annotations(cls).items():
        yield name, _annotated_metadata(annotation) + _dataclass_metadata(cls, name)


def field_markers(cls: type, name: str) -> Tuple[Any, ...]:
    """Markers attached to the field ``name`` declared on ``cls``."""
    return dict(iter_field_markers(cls)).get(name, ())


def is_marker(item: Any, marker: type) -> bool:
    """True if ``item`` is ``marker`` itself or an instance of exactly that type."""
    return item is marker or type(item) is marker


def has_marker(cls: type, name: str, marker: type) -> bool:
    """Check whether the field ``name`` declared on ``cls`` carries ``marker``."""
    return any(is_marker(item, marker) for item in field_markers(cls, name))


def marker_name(item: Any) -> str:
    """Display name of a marker entry (class name for classes and instances alike)."""
    if isinstance(item, type):
        return item.__name__
    return type(item).__name__
