"""Schema documents, the comparison primitive, and the comparison engine.

Provides the object comparator (``compare_objects``), the four-pass
``SchemaComparisonEngine``, and the pydantic value types they exchange.

Usage:
    from rdbdiff.schema import SchemaComparisonEngine, ComparisonOptions
    from rdbdiff.schema import compare_objects, SchemaDocument
"""

from rdbdiff.schema.comparator import compare_objects
from rdbdiff.schema.engine import SchemaComparisonEngine
from rdbdiff.schema.models import (
    ColumnEntry,
    Comparison,
    ComparisonOptions,
    ComparisonReport,
    IndexColumnEntry,
    ParamEntry,
    RoutineEntry,
    SchemaDocument,
    SchemaSnapshot,
    TableEntry,
)

__all__ = [
    "compare_objects",
    "SchemaComparisonEngine",
    "ColumnEntry",
    "Comparison",
    "ComparisonOptions",
    "ComparisonReport",
    "IndexColumnEntry",
    "ParamEntry",
    "RoutineEntry",
    "SchemaDocument",
    "SchemaSnapshot",
    "TableEntry",
]
