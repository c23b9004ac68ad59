"""
Pydantic schemas for type reports.

A TypeReport is the serialisable view of one class: its own fields and their
markers, its method names, the contracts it implements directly and its
declared constructors.
"""

from pydantic import BaseModel, Field
from typing import List, Dict


class ParameterInfo(BaseModel):
    """One positional constructor parameter."""
    name: str = Field(description="Parameter name")
    type_name: str = Field(description="Declared type, 'Any' when unannotated")


class ConstructorInfo(BaseModel):
    """A declared constructor."""
    name: str = Field(description="'__init__' or the name of a @constructor classmethod")
    parameters: List[ParameterInfo] = Field(default_factory=list, description="Positional parameters in order")
    public: bool = Field(description="False when the name starts with an underscore")


class FieldEntry(BaseModel):
    """A field declared directly on the class."""
    name: str = Field(description="Field name")
    type_name: str = Field(description="Declared type with Annotated metadata stripped")
    markers: List[str] = Field(default_factory=list, description="Names of the markers attached to the field")


class TypeReport(BaseModel):
    """Introspection report for a single class."""
    type_name: str = Field(description="Qualified class name")
    module: str = Field(description="Defining module")
    fields: List[FieldEntry] = Field(default_factory=list, description="Own fields in declaration order")
    method_names: List[str] = Field(default_factory=list, description="Sorted own and direct-contract method names")
    contracts: List[str] = Field(default_factory=list, description="Directly implemented contracts")
    constructors: List[ConstructorInfo] = Field(default_factory=list, description="Declared constructors in match order")
    marked_fields: Dict[str, List[str]] = Field(
        default_factory=dict,
        description="Requested marker name -> sorted names of own fields carrying it"
    )
    timestamp: str = Field(description="ISO timestamp of the inspection")

    class Config:
        json_schema_extra = {
            "example": {
                "type_name": "Villager",
                "module": "game.people",
                "fields": [{"name": "name", "type_name": "str", "markers": ["Important"]}],
                "method_names": ["greet"],
                "contracts": ["Greeter"],
                "constructors": [
                    {"name": "__init__", "parameters": [], "public": True},
                    {
                        "name": "_named",
                        "parameters": [
                            {"name": "name", "type_name": "str"},
                            {"name": "description", "type_name": "str"},
                        ],
                        "public": False,
                    },
                ],
                "marked_fields": {"Important": ["name"]},
                "timestamp": "2025-01-15T10:30:00Z",
            }
        }
