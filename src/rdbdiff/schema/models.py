"""Pydantic models for schema documents and comparison results.

This module contains the schema-domain value types:
- Document models: ColumnEntry, TableEntry, IndexColumnEntry, ParamEntry,
  RoutineEntry, SchemaDocument, SchemaSnapshot
- Comparison models: Comparison, ComparisonOptions, ComparisonReport

All models serialize with camelCase aliases (``charMaxLength``,
``objectType``, ``sideARemark``...) and accept snake_case names on input.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Remark = Literal["exist", "missing", "mismatch"]

ObjectType = Literal[
    "table",
    "table.column",
    "index",
    "procedure",
    "procedure.parameter",
    "function",
    "function.parameter",
]


class _Entry(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


# ============================================================================
# Document Models
# ============================================================================


class ColumnEntry(_Entry):
    """Schema for a table column.

    Example:
        >>> col = ColumnEntry(type="int", ordinal_position=1)
        >>> col.nullable
        'YES'
    """

    type: str
    default: str | None = None
    nullable: str = "YES"
    key: str = ""
    char_max_length: int | None = None
    ordinal_position: int | None = None


class TableEntry(_Entry):
    """Schema for a table."""

    engine: str | None = None
    columns: dict[str, ColumnEntry] = Field(default_factory=dict)


class IndexColumnEntry(_Entry):
    """One column of an index.

    ``sequence_number`` is the column's position within a composite index.
    """

    is_unique: bool = False
    column: str
    sequence_number: int


class ParamEntry(_Entry):
    """Schema for a procedure or function parameter."""

    ordinal_position: int | None = None
    type: str | None = None
    char_max_length: int | None = None
    mode: str | None = None


class RoutineEntry(_Entry):
    """Schema for a stored procedure or function."""

    definition: str = ""
    parameters: dict[str, ParamEntry] = Field(default_factory=dict)


class SchemaDocument(_Entry):
    """Complete schema of one database.

    ``indexes`` maps table name -> index name -> column name. Its keys need
    not match ``tables``.
    """

    tables: dict[str, TableEntry] = Field(default_factory=dict)
    indexes: dict[str, dict[str, dict[str, IndexColumnEntry]]] = Field(
        default_factory=dict
    )
    procedures: dict[str, RoutineEntry] = Field(default_factory=dict)
    functions: dict[str, RoutineEntry] = Field(default_factory=dict)


class SchemaSnapshot(_Entry):
    """A labelled ``SchemaDocument`` as written by ``rdbdiff dump``."""

    label: str
    document: SchemaDocument = Field(alias="schema")


# ============================================================================
# Comparison Models
# ============================================================================


class Comparison(_Entry):
    """A single difference between side A and side B.

    Example:
        >>> c = Comparison(object_type="table", name="users", side_b_remark="missing")
        >>> c.model_dump(by_alias=True, exclude_none=True)
        {'objectType': 'table', 'name': 'users', 'sideBRemark': 'missing'}
    """

    object_type: ObjectType
    name: str
    owner: str | None = None
    side_a_remark: Remark | None = None
    side_b_remark: Remark | None = None


class ComparisonOptions(_Entry):
    """Policy knobs for ``SchemaComparisonEngine``."""

    eager: bool = False
    check_whitespace: bool = False


class ComparisonReport(_Entry):
    """Result of comparing two schema sources.

    Example:
        >>> report = ComparisonReport(source_a="a", source_b="b")
        >>> report.has_differences
        False
        >>> report.format_report()
        'Schemas match'
    """

    source_a: str
    source_b: str
    options: ComparisonOptions = Field(default_factory=ComparisonOptions)
    result: list[Comparison] = Field(default_factory=list)

    @property
    def has_differences(self) -> bool:
        """True when at least one difference was found."""
        return len(self.result) > 0

    def format_report(self) -> str:
        """Format the comparison as a human-readable report."""
        if not self.has_differences:
            return "Schemas match"

        lines = [
            f"Schema differences between {self.source_a} (A) "
            f"and {self.source_b} (B): {len(self.result)}"
        ]
        for diff in self.result:
            target = f"{diff.owner}.{diff.name}" if diff.owner else diff.name
            lines.append(
                f"  - {diff.object_type} {target}: "
                f"A={diff.side_a_remark or '-'} B={diff.side_b_remark or '-'}"
            )
        return "\n".join(lines)
