"""Resolve 'package.module:QualName' strings to live objects."""

import importlib
import logging
from typing import Any

from reflectkit.errors import TargetResolutionError

logger = logging.getLogger(__name__)


def resolve_target(target: str) -> Any:
    """
    Import the module part of ``target`` and walk the qualified name.

    Args:
        target: String like 'game.people:Villager' or 'game.people:Outer.Inner'

    Returns:
        The resolved object

    Raises:
        TargetResolutionError: If the string is malformed, the module cannot
            be imported or an attribute is missing
    """
    module_name, sep, qualname = target.partition(":")
    if not sep or not module_name or not qualname:
        raise TargetResolutionError(f"Expected 'module:QualName', got {target!r}")

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise TargetResolutionError(f"Failed to import {module_name}: {e}") from e

    obj = module
    for part in qualname.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as e:
            raise TargetResolutionError(f"{module_name} has no attribute {qualname!r}") from e

    logger.debug(f"Resolved {target} -> {obj!r}")
    return obj


def resolve_class(target: str) -> type:
    """Like :func:`resolve_target` but the result must be a class."""
    obj = resolve_target(target)
    if not isinstance(obj, type):
        raise TargetResolutionError(f"{target} is not a class")
    return obj
