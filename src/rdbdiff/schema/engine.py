"""Four-pass schema comparison engine.

Walks two loaded ``SchemaDocument`` values and produces a flat, ordered list
of ``Comparison`` records:

1. tables -> columns
2. tables -> indexes -> index columns
3. procedures -> parameters
4. functions -> parameters

Every level uses ``compare_objects`` as its single comparison primitive.
The short-circuit policy is decided once per pass: table and routine
members stop early unless ``eager`` is set, index columns always stop at the
first difference of an index.

Usage:
    from rdbdiff.schema.engine import SchemaComparisonEngine
    from rdbdiff.schema.models import ComparisonOptions

    engine = SchemaComparisonEngine(
        document_a,
        document_b,
        ComparisonOptions(eager=True),
    )
    for diff in engine.compare():
        print(diff.object_type, diff.owner, diff.name)
"""

import logging
from collections.abc import Mapping
from typing import Literal

from pydantic import BaseModel

from rdbdiff.schema.comparator import compare_objects
from rdbdiff.schema.models import (
    Comparison,
    ComparisonOptions,
    ObjectType,
    RoutineEntry,
    SchemaDocument,
)

logger = logging.getLogger(__name__)


def _scalars(entry: BaseModel) -> dict:
    return entry.model_dump()


class SchemaComparisonEngine:
    """Compares two schema documents.

    Both documents must be fully loaded before ``compare()`` is called.
    Neither document is mutated, and no state survives between calls.

    Args:
        document_a: Schema of side A.
        document_b: Schema of side B.
        options: Eagerness and whitespace policy (defaults to both off).
        log: Logger for per-pass summaries (defaults to the module logger).
    """

    def __init__(
        self,
        document_a: SchemaDocument,
        document_b: SchemaDocument,
        options: ComparisonOptions | None = None,
        log: logging.Logger | logging.LoggerAdapter | None = None,
    ) -> None:
        self.a = document_a
        self.b = document_b
        self.options = options or ComparisonOptions()
        self._log = log or logger

    def compare(self) -> list[Comparison]:
        """Run all four passes and concatenate their results in order."""
        result: list[Comparison] = []
        for pass_name, run in (
            ("tables", self.compare_tables),
            ("indexes", self.compare_indexes),
            ("procedures", self.compare_procedures),
            ("functions", self.compare_functions),
        ):
            found = run()
            self._log.info("%s: %d difference(s)", pass_name, len(found))
            result.extend(found)
        return result

    # ------------------------------------------------------------------
    # Passes
    # ------------------------------------------------------------------

    def compare_tables(self) -> list[Comparison]:
        """Missing tables, then missing or mismatched columns per table."""
        diff, common = compare_objects("table", self.a.tables, self.b.tables)
        for table_name in sorted(common):
            diff.extend(
                self._compare_members(
                    "table.column",
                    table_name,
                    self.a.tables[table_name].columns,
                    self.b.tables[table_name].columns,
                )
            )
        return diff

    def compare_indexes(self) -> list[Comparison]:
        """Missing or mismatched indexes of tables present on both sides.

        Index reporting ignores ``eager``: a missing index hides the column
        checks of its table, and the first column difference ends the checks
        of its index.
        """
        diff: list[Comparison] = []
        common_tables = set(self.a.tables) & set(self.b.tables)

        for table_name in sorted(common_tables):
            indexes_a = self.a.indexes.get(table_name, {})
            indexes_b = self.b.indexes.get(table_name, {})
            missing, common = compare_objects(
                "index", indexes_a, indexes_b, owner=table_name
            )
            if missing:
                diff.extend(missing)
                continue

            for index_name in sorted(common):
                diff.extend(
                    self._compare_index_columns(
                        table_name,
                        index_name,
                        indexes_a[index_name],
                        indexes_b[index_name],
                    )
                )
        return diff

    def compare_procedures(self) -> list[Comparison]:
        return self._compare_routines(
            "procedure", self.a.procedures, self.b.procedures
        )

    def compare_functions(self) -> list[Comparison]:
        return self._compare_routines(
            "function", self.a.functions, self.b.functions
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _compare_members(
        self,
        object_type: ObjectType,
        owner: str,
        members_a: Mapping[str, BaseModel],
        members_b: Mapping[str, BaseModel],
    ) -> list[Comparison]:
        """Compare the members (columns or parameters) of one object.

        Without ``eager``, stops at the first missing member, and only
        checks values when nothing is missing, stopping at the first
        mismatch.
        """
        stop_early = not self.options.eager
        diff, common = compare_objects(
            object_type,
            members_a,
            members_b,
            owner=owner,
            stop_after_first=stop_early,
        )
        if diff and stop_early:
            return diff

        for member_name in sorted(common):
            mismatch, _ = compare_objects(
                object_type,
                _scalars(members_a[member_name]),
                _scalars(members_b[member_name]),
                owner=owner,
                name=member_name,
            )
            diff.extend(mismatch)
            if mismatch and stop_early:
                break
        return diff

    def _compare_index_columns(
        self,
        table_name: str,
        index_name: str,
        columns_a: Mapping[str, BaseModel],
        columns_b: Mapping[str, BaseModel],
    ) -> list[Comparison]:
        """At most one difference per index."""
        missing, common = compare_objects(
            "index", columns_a, columns_b, owner=table_name, name=index_name
        )
        if missing:
            return missing

        for column_name in sorted(common):
            mismatch, _ = compare_objects(
                "index",
                _scalars(columns_a[column_name]),
                _scalars(columns_b[column_name]),
                owner=table_name,
                name=index_name,
            )
            if mismatch:
                return mismatch
        return []

    def _compare_routines(
        self,
        kind: Literal["procedure", "function"],
        routines_a: Mapping[str, RoutineEntry],
        routines_b: Mapping[str, RoutineEntry],
    ) -> list[Comparison]:
        diff, common = compare_objects(kind, routines_a, routines_b)
        parameter_type: ObjectType = (
            "procedure.parameter" if kind == "procedure" else "function.parameter"
        )

        for routine_name in sorted(common):
            routine_a = routines_a[routine_name]
            routine_b = routines_b[routine_name]

            definition, _ = compare_objects(
                kind,
                {"definition": routine_a.definition},
                {"definition": routine_b.definition},
                owner="definition",
                name=routine_name,
                normalize_whitespace=not self.options.check_whitespace,
            )
            diff.extend(definition)

            diff.extend(
                self._compare_members(
                    parameter_type,
                    routine_name,
                    routine_a.parameters,
                    routine_b.parameters,
                )
            )
        return diff
