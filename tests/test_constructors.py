"""Constructor matching and privileged instantiation."""

import inspect
from decimal import Decimal
from typing import Annotated, Any, Literal, Optional, TypeVar, Union

import pytest

from reflectkit import (
    ConstructorAccessError,
    ConstructorNotFoundError,
    ConstructorResultError,
    ReflectionError,
    accepts,
    create_instance,
    declared_constructors,
    find_matching_constructor,
)
from tests.sample_postponed import Lazy, Priced
from tests.sample_types import (
    Ambiguous,
    Flexible,
    Hidden,
    KeywordOnly,
    Label,
    Liar,
    Measurement,
    Member,
    Plain,
    Point,
    Untyped,
    UserId,
    Variadic,
    Villager,
    WithDefaults,
)


# ============================================================================
# VILLAGER
# ============================================================================

def test_villager_no_argument_constructor() -> None:
    villager = create_instance(Villager)
    assert type(villager) is Villager
    assert villager.name == "Unknown"


def test_villager_private_constructor() -> None:
    villager = create_instance(Villager, "Tom", "Farmer")
    assert type(villager) is Villager
    assert villager.name == "Tom"
    assert villager.description == "Farmer"


def test_villager_no_matching_constructor() -> None:
    with pytest.raises(ConstructorNotFoundError, match="Matching constructor not found"):
        create_instance(Villager, 42)


def test_not_found_error_kind() -> None:
    with pytest.raises(LookupError) as excinfo:
        create_instance(Villager, "Tom")
    assert isinstance(excinfo.value, ReflectionError)
    assert excinfo.value.type is Villager
    assert excinfo.value.args_shape == ("str",)


# ============================================================================
# DECLARED CONSTRUCTORS
# ============================================================================

def test_declared_constructor_order_and_visibility() -> None:
    ctors = declared_constructors(Villager)
    assert [c.name for c in ctors] == ["__init__", "_named"]
    assert [c.public for c in ctors] == [True, False]
    assert [c.arity for c in ctors] == [0, 2]
    assert ctors[1].parameter_types == (str, str)


def test_name_mangled_constructor_is_non_public() -> None:
    ctors = declared_constructors(Hidden)
    assert ctors[1].name == "_Hidden__from_token"
    assert not ctors[1].public


def test_non_public_handle_requires_elevation() -> None:
    ctor = find_matching_constructor(Villager, ("Tom", "Farmer"))
    assert not ctor.accessible
    with pytest.raises(ConstructorAccessError):
        ctor.invoke("Tom", "Farmer")

    ctor.set_accessible(True)
    assert ctor.invoke("Tom", "Farmer").name == "Tom"


def test_elevation_does_not_leak_between_handles() -> None:
    first = declared_constructors(Villager)[1]
    first.set_accessible(True)
    second = declared_constructors(Villager)[1]
    assert not second.accessible

    create_instance(Villager, "Tom", "Farmer")
    assert not declared_constructors(Villager)[1].accessible


def test_only_matching_constructor_is_non_public() -> None:
    hidden = create_instance(Hidden, b"abc")
    assert type(hidden) is Hidden
    assert hidden.origin == "token"


def test_class_without_init() -> None:
    assert type(create_instance(Plain)) is Plain
    with pytest.raises(ConstructorNotFoundError):
        create_instance(Plain, 1)


def test_first_match_wins() -> None:
    assert create_instance(Ambiguous, 5).source == "__init__"


def test_postponed_annotations_in_constructor() -> None:
    lazy = create_instance(Lazy, 1, "x")
    assert lazy.plain == "x"
    with pytest.raises(ConstructorNotFoundError):
        create_instance(Lazy, "1", "x")


def test_named_tuple_built_through_new() -> None:
    assert create_instance(Point, 1, 2) == Point(1, 2)
    with pytest.raises(ConstructorNotFoundError):
        create_instance(Point)
    with pytest.raises(ConstructorNotFoundError):
        create_instance(Point, 1, "2")


def test_str_subclass_with_new() -> None:
    label = create_instance(Label, "hi")
    assert type(label) is Label
    assert label == "HI"


def test_unresolvable_forward_reference_matches_by_name() -> None:
    priced = create_instance(Priced, Decimal("1.5"), "tea")
    assert priced.price == Decimal("1.5")
    with pytest.raises(ConstructorNotFoundError):
        create_instance(Priced, 1.5, "tea")


def test_new_type_parameter() -> None:
    assert create_instance(Member, 5).uid == 5
    with pytest.raises(ConstructorNotFoundError):
        create_instance(Member, "5")


def test_constructor_must_return_an_instance() -> None:
    with pytest.raises(ConstructorResultError, match="returned str"):
        create_instance(Liar, "x")


# ============================================================================
# SHAPE MATCHING
# ============================================================================

def test_no_numeric_coercion() -> None:
    with pytest.raises(ConstructorNotFoundError):
        create_instance(Measurement, 2, "kg")
    assert create_instance(Measurement, 2.0, "kg").amount == 2.0


def test_none_for_reference_and_optional_parameters() -> None:
    assert create_instance(Measurement, 1.5, None).unit is None
    assert create_instance(Untyped, None).anything is None


def test_none_rejected_for_primitive_parameter() -> None:
    with pytest.raises(ConstructorNotFoundError):
        create_instance(Measurement, None)
    assert create_instance(Measurement, 3).amount == 3.0


def test_union_literal_and_generic_parameters() -> None:
    flexible = create_instance(Flexible, 7, "w", [1, 2])
    assert flexible.key == 7
    with pytest.raises(ConstructorNotFoundError):
        create_instance(Flexible, 7, "x", [])
    with pytest.raises(ConstructorNotFoundError):
        create_instance(Flexible, 7.0, "r", [])


def test_exact_arity_ignores_defaults() -> None:
    assert create_instance(WithDefaults, 1, 5).b == 5
    with pytest.raises(ConstructorNotFoundError):
        create_instance(WithDefaults, 1)


def test_required_keyword_only_never_matches() -> None:
    with pytest.raises(ConstructorNotFoundError):
        create_instance(KeywordOnly, 1)


def test_varargs_are_not_part_of_the_shape() -> None:
    assert create_instance(Variadic, "a").first == "a"
    with pytest.raises(ConstructorNotFoundError):
        create_instance(Variadic, "a", "b")


# ============================================================================
# ACCEPTS
# ============================================================================

T = TypeVar("T")
N = TypeVar("N", bound=int)


@pytest.mark.parametrize(
    "param_type, value, expected",
    [
        (inspect.Parameter.empty, object(), True),
        (Any, None, True),
        (object, 3, True),
        (int, True, True),
        (int, 1.0, False),
        (float, 1, False),
        (str, None, True),
        (int, None, False),
        (bool, None, False),
        (Optional[int], None, True),
        (int | None, None, True),
        (Union[int, str], "a", True),
        (Union[int, str], b"a", False),
        (Annotated[str, "meta"], "a", True),
        (Literal[1, 2], 2, True),
        (Literal[1, 2], True, False),
        (list[int], ["x"], True),
        (dict[str, int], [], False),
        (T, "anything", True),
        (N, 3, True),
        (N, "3", False),
        (N, None, False),
        (T, None, True),
        (UserId, 5, True),
        (UserId, "5", False),
        (UserId, None, False),
        ("Decimal", Decimal("1"), True),
        ("Decimal", 1.0, False),
        ("Decimal", None, True),
    ],
)
def test_accepts(param_type, value, expected) -> None:
    assert accepts(param_type, value) is expected
