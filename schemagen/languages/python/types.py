"""
Data model records rendered by the python template set.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass
class Field:
    """A column of a table."""

    name: str
    type: str
    nullable: bool = False
    is_primary: bool = False
    comment: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Field":
        return cls(
            name=data["name"],
            type=data.get("type", ""),
            nullable=bool(data.get("nullable", False)),
            is_primary=bool(data.get("is_primary", False)),
            comment=data.get("comment", ""),
        )


@dataclass
class Table:
    """A table or view."""

    name: str
    fields: List[Field] = field(default_factory=list)
    type: str = "table"  # table, view
    comment: str = ""

    @property
    def primary_keys(self) -> List[Field]:
        return [f for f in self.fields if f.is_primary]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Table":
        return cls(
            name=data["name"],
            fields=[Field.from_dict(f) for f in data.get("fields", [])],
            type=data.get("type", "table"),
            comment=data.get("comment", ""),
        )


@dataclass
class Schema:
    """A database schema: the model handed to the template set."""

    name: str = "public"
    tables: List[Table] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Schema":
        return cls(
            name=data.get("name", "public"),
            tables=[Table.from_dict(t) for t in data.get("tables", [])],
        )
