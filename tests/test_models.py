"""Tests for schema and comparison models.

Verifies camelCase serialization, immutability, snapshot aliasing and the
report helpers.
"""

import json

import pytest
from pydantic import ValidationError

from rdbdiff.schema.models import (
    ColumnEntry,
    Comparison,
    ComparisonOptions,
    ComparisonReport,
    IndexColumnEntry,
    RoutineEntry,
    SchemaDocument,
    SchemaSnapshot,
    TableEntry,
)


class TestSerialization:
    """Models dump with camelCase aliases and accept both spellings."""

    def test_column_aliases(self) -> None:
        column = ColumnEntry(type="varchar(20)", char_max_length=20, ordinal_position=2)

        dumped = column.model_dump(by_alias=True)

        assert dumped["charMaxLength"] == 20
        assert dumped["ordinalPosition"] == 2

    def test_accepts_camel_case_input(self) -> None:
        entry = IndexColumnEntry.model_validate(
            {"isUnique": True, "column": "c1", "sequenceNumber": 2}
        )

        assert entry.is_unique is True
        assert entry.sequence_number == 2

    def test_comparison_json_keys(self) -> None:
        comparison = Comparison(
            object_type="table.column",
            name="c",
            owner="t",
            side_a_remark="mismatch",
            side_b_remark="mismatch",
        )

        data = json.loads(comparison.model_dump_json(by_alias=True))

        assert data == {
            "objectType": "table.column",
            "name": "c",
            "owner": "t",
            "sideARemark": "mismatch",
            "sideBRemark": "mismatch",
        }

    def test_unknown_object_type_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Comparison(object_type="view", name="v")

    def test_unknown_remark_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Comparison(object_type="table", name="t", side_a_remark="gone")


class TestImmutability:
    """Entries and comparisons are frozen."""

    def test_comparison_frozen(self) -> None:
        comparison = Comparison(object_type="table", name="t")
        with pytest.raises(ValidationError):
            comparison.name = "u"

    def test_column_frozen(self) -> None:
        column = ColumnEntry(type="int")
        with pytest.raises(ValidationError):
            column.type = "bigint"


class TestSchemaDocument:
    """Document defaults and snapshot round trip through the alias."""

    def test_defaults_empty(self) -> None:
        document = SchemaDocument()

        assert document.tables == {}
        assert document.indexes == {}
        assert document.procedures == {}
        assert document.functions == {}

    def test_table_columns_default_empty(self) -> None:
        assert TableEntry().columns == {}

    def test_snapshot_uses_schema_key(self) -> None:
        document = SchemaDocument(
            tables={"t": TableEntry(engine="InnoDB", columns={"id": ColumnEntry(type="int")})},
            functions={"f": RoutineEntry(definition="RETURN 1")},
        )
        snapshot = SchemaSnapshot(label="localhost_3306_A", document=document)

        data = json.loads(snapshot.model_dump_json(by_alias=True))

        assert data["label"] == "localhost_3306_A"
        assert "schema" in data
        assert data["schema"]["tables"]["t"]["engine"] == "InnoDB"
        assert SchemaSnapshot.model_validate(data).document == document


class TestComparisonReport:
    """Report helpers."""

    def test_empty_report(self) -> None:
        report = ComparisonReport(source_a="a", source_b="b")

        assert report.has_differences is False
        assert report.format_report() == "Schemas match"
        assert report.options == ComparisonOptions()

    def test_format_report_lists_differences(self) -> None:
        report = ComparisonReport(
            source_a="a",
            source_b="b",
            result=[
                Comparison(object_type="table", name="t", side_b_remark="missing"),
                Comparison(
                    object_type="table.column",
                    name="c",
                    owner="u",
                    side_a_remark="mismatch",
                    side_b_remark="mismatch",
                ),
            ],
        )

        text = report.format_report()

        assert report.has_differences is True
        assert "a (A) and b (B): 2" in text
        assert "table t: A=- B=missing" in text
        assert "table.column u.c: A=mismatch B=mismatch" in text

    def test_result_serialized_under_result_key(self) -> None:
        report = ComparisonReport(
            source_a="a",
            source_b="b",
            options=ComparisonOptions(eager=True),
            result=[Comparison(object_type="index", name="ix", owner="t")],
        )

        data = json.loads(report.model_dump_json(by_alias=True))

        assert data["sourceA"] == "a"
        assert data["options"] == {"eager": True, "checkWhitespace": False}
        assert data["result"][0]["objectType"] == "index"
