"""
Constructor descriptors for Python classes.

A class's declared constructors are the class call itself (named
``__init__``) followed by every classmethod in its own body decorated with
:func:`constructor`, in declaration order:

    class Villager:
        def __init__(self):
            ...

        @constructor
        def _named(cls, name: str, description: str) -> "Villager":
            ...

Constructors whose name starts with an underscore are non-public. Their
handles start inaccessible and must be elevated with
:meth:`Constructor.set_accessible` before :meth:`Constructor.invoke`.
"""

import inspect
import logging
import types
import typing
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Sequence, Tuple

from reflectkit.errors import ConstructorAccessError
from reflectkit.markers import module_globals, resolve_annotation

logger = logging.getLogger(__name__)

CONSTRUCTOR_FLAG = "__reflectkit_constructor__"

# Parameter types that never accept None, mirroring unboxed primitives
PRIMITIVE_TYPES = (bool, int, float, complex)

_POSITIONAL_KINDS = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)


def constructor(func: Callable) -> classmethod:
    """
    Declare an alternative constructor.

    The decorated function receives the class as its first argument, like a
    classmethod, and must return the new instance.
    """
    setattr(func, CONSTRUCTOR_FLAG, True)
    return classmethod(func)


def is_constructor(member: Any) -> bool:
    """True for a classmethod produced by :func:`constructor`."""
    return isinstance(member, classmethod) and getattr(member.__func__, CONSTRUCTOR_FLAG, False)


def accepts(param_type: Any, value: Any) -> bool:
    """
    Decide whether ``value`` may be passed where ``param_type`` is declared.

    No coercion is applied: an ``int`` is not accepted for a ``float``
    parameter. ``None`` is accepted by every parameter type except the
    primitives in ``PRIMITIVE_TYPES``.

    Args:
        param_type: Resolved parameter annotation (``inspect.Parameter.empty`` if absent)
        value: Candidate argument

    Returns:
        True if the argument is assignable to the parameter
    """
    if param_type is inspect.Parameter.empty or param_type is typing.Any or param_type is object:
        return True

    origin = typing.get_origin(param_type)
    if origin is typing.Annotated:
        return accepts(typing.get_args(param_type)[0], value)
    if origin is typing.Union or origin is types.UnionType:
        return any(accepts(member, value) for member in typing.get_args(param_type))
    if origin is typing.Literal:
        return any(type(literal) is type(value) and literal == value for literal in typing.get_args(param_type))

    if isinstance(param_type, typing.TypeVar):
        bound = param_type.__bound__
        return bound is None or accepts(bound, value)
    if isinstance(param_type, typing.NewType):
        return accepts(param_type.__supertype__, value)

    if value is None:
        return param_type not in PRIMITIVE_TYPES

    if isinstance(param_type, str):
        # Unresolved forward reference: compare class names along the MRO
        name = param_type.rsplit(".", 1)[-1]
        return any(klass.__name__ == name for klass in type(value).__mro__)

    if origin is not None:
        param_type = origin
    if not isinstance(param_type, type):
        return False

    # isinstance() refuses protocols without @runtime_checkable; fall back to nominal subtyping
    if getattr(param_type, "_is_protocol", False) and not getattr(param_type, "_is_runtime_protocol", False):
        return param_type in type(value).__mro__
    return isinstance(value, param_type)


@dataclass
class Constructor:
    """
    Handle on one declared constructor of a class.

    Handles are created fresh by :func:`declared_constructors`, so elevating
    access on one never affects another caller.
    """
    owner: type
    name: str
    parameters: Tuple[inspect.Parameter, ...]
    factory: Callable[..., Any] = field(repr=False)
    public: bool = True
    required_keywords: Tuple[str, ...] = ()
    introspectable: bool = True
    accessible: bool = field(init=False)

    def __post_init__(self):
        self.accessible = self.public

    @property
    def parameter_types(self) -> Tuple[Any, ...]:
        return tuple(param.annotation for param in self.parameters)

    @property
    def arity(self) -> int:
        return len(self.parameters)

    def matches(self, args: Sequence[Any]) -> bool:
        """Exact arity plus per-position assignability."""
        if not self.introspectable or self.required_keywords or len(args) != self.arity:
            return False
        return all(accepts(param_type, arg) for param_type, arg in zip(self.parameter_types, args))

    def set_accessible(self, flag: bool) -> None:
        """Allow (or forbid) invoking this handle regardless of its visibility."""
        self.accessible = flag

    def invoke(self, *args: Any) -> Any:
        """
        Call the constructor with positional arguments.

        Raises:
            ConstructorAccessError: If the constructor is non-public and the
                handle was not made accessible
        """
        if not self.accessible:
            raise ConstructorAccessError(
                f"Constructor {self.owner.__qualname__}.{self.name} is not public; "
                f"call set_accessible(True) first"
            )
        return self.factory(*args)


def _resolved_signature(callable_: Callable, globalns: Dict[str, Any]) -> inspect.Signature:
    """Signature with string annotations evaluated; unresolvable ones stay strings."""
    try:
        return inspect.signature(callable_, eval_str=True)
    except (NameError, AttributeError):
        signature = inspect.signature(callable_)
        return signature.replace(parameters=[
            param.replace(annotation=resolve_annotation(param.annotation, globalns))
            for param in signature.parameters.values()
        ])


def _split_parameters(
    signature: inspect.Signature,
) -> Tuple[Tuple[inspect.Parameter, ...], Tuple[str, ...]]:
    """Separate positional parameters from required keyword-only ones."""
    params = signature.parameters.values()
    positional = tuple(p for p in params if p.kind in _POSITIONAL_KINDS)
    required_keywords = tuple(
        p.name for p in params
        if p.kind is inspect.Parameter.KEYWORD_ONLY and p.default is inspect.Parameter.empty
    )
    return positional, required_keywords


def _init_constructor(cls: type) -> Constructor:
    # signature(cls) follows the metaclass __call__ / __new__ / __init__ order and is already bound
    try:
        signature = _resolved_signature(cls, module_globals(cls))
    except ValueError:
        # Builtins such as str publish no signature; there is no shape to match against
        logger.debug(f"No signature available for {cls.__qualname__}")
        return Constructor(owner=cls, name="__init__", parameters=(), factory=cls, introspectable=False)

    positional, required_keywords = _split_parameters(signature)
    return Constructor(
        owner=cls,
        name="__init__",
        parameters=positional,
        factory=cls,
        public=True,
        required_keywords=required_keywords,
    )


def declared_constructors(cls: type) -> List[Constructor]:
    """
    Enumerate the constructors declared on ``cls``.

    The class call itself comes first, under the name ``__init__``: its shape
    is whatever ``cls(...)`` accepts, so ``__new__``-based classes such as
    NamedTuples are covered and a class without its own ``__init__``
    exposes the inherited one. Then come the :func:`constructor`
    classmethods of the class body in declaration order.

    Args:
        cls: Class to inspect

    Returns:
        Fresh Constructor handles
    """
    constructors = [_init_constructor(cls)]

    for name, member in vars(cls).items():
        if not is_constructor(member):
            continue
        factory = member.__get__(None, cls)
        positional, required_keywords = _split_parameters(
            _resolved_signature(factory, member.__func__.__globals__)
        )
        constructors.append(Constructor(
            owner=cls,
            name=name,
            parameters=positional,
            factory=factory,
            public=not name.startswith("_"),
            required_keywords=required_keywords,
        ))

    logger.debug(f"{cls.__qualname__} declares {len(constructors)} constructor(s)")
    return constructors
