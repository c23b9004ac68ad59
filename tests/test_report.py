"""Type reports."""

from reflectkit import TypeReport, describe_type
from tests.sample_types import Foo, Important, Record, Villager


def test_describe_fields_and_markers() -> None:
    report = describe_type(Record, [Important])
    assert isinstance(report, TypeReport)
    assert report.type_name == "Record"
    assert report.module == "tests.sample_types"
    assert [f.name for f in report.fields] == ["a", "b", "c"]
    assert report.fields[0].type_name == "int"
    assert report.fields[0].markers == ["Important"]
    assert report.fields[1].markers == []
    assert report.marked_fields == {"Important": ["a"]}


def test_describe_methods_and_contracts() -> None:
    report = describe_type(Foo)
    assert report.method_names == ["x", "y"]
    assert report.contracts == ["Bar"]
    assert report.marked_fields == {}


def test_describe_constructors() -> None:
    report = describe_type(Villager)
    assert [c.name for c in report.constructors] == ["__init__", "_named"]
    named = report.constructors[1]
    assert not named.public
    assert [(p.name, p.type_name) for p in named.parameters] == [("name", "str"), ("description", "str")]


def test_report_serialises_to_json() -> None:
    payload = describe_type(Villager).model_dump(mode="json")
    assert payload["constructors"][0]["public"] is True
    assert "timestamp" in payload
