"""Schema object comparison using set operations.

Compares two mappings of named properties one level deep and classifies
every key as missing on side A, missing on side B, mismatched, or equal.
Pure logic -- no I/O, no database connections.

Usage:
    from rdbdiff.schema.comparator import compare_objects

    diffs, common = compare_objects(
        "table",
        document_a.tables,
        document_b.tables,
    )
    for table_name in sorted(common):
        ...  # descend into columns
"""

import re
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

from rdbdiff.schema.models import Comparison, ObjectType, Remark

_WHITESPACE_RUN = re.compile(r"\s{2,}")


def _is_nested(value: Any) -> bool:
    return isinstance(value, (Mapping, BaseModel))


def _normalize(value: Any, normalize_whitespace: bool) -> Any:
    if normalize_whitespace and isinstance(value, str):
        return _WHITESPACE_RUN.sub(" ", value)
    return value


def compare_objects(
    object_type: ObjectType,
    a: Mapping[str, Any] | None,
    b: Mapping[str, Any] | None,
    *,
    owner: str | None = None,
    name: str | None = None,
    static_remark_a: Remark | None = None,
    static_remark_b: Remark | None = None,
    normalize_whitespace: bool = False,
    stop_after_first: bool = False,
) -> tuple[list[Comparison], set[str]]:
    """Compare two property mappings one level deep.

    Keys are visited in sorted order. For each key:

    1. Missing from *a*: emit A=``missing`` / B=``exist``.
    2. Missing from *b*: emit A=``exist`` / B=``missing``.
    3. Both scalar and unequal: emit ``mismatch`` on both sides.
    4. Otherwise (equal, or both nested): record the key as equal.

    Nested values (mappings or pydantic models) are never inspected here;
    descending into them is the caller's job.

    Args:
        object_type: Tag written to every emitted ``Comparison``.
        a: Properties of side A. ``None`` is treated as empty.
        b: Properties of side B. ``None`` is treated as empty.
        owner: Enclosing object name, copied to each ``Comparison.owner``.
        name: When given, the mappings describe this one object: emitted
            records carry this name instead of the key, and processing stops
            after the first difference.
        static_remark_a: Replaces the presence-derived remark for side A.
        static_remark_b: Replaces the presence-derived remark for side B.
        normalize_whitespace: Collapse runs of two or more whitespace
            characters to one space before comparing strings.
        stop_after_first: Stop after the first difference without renaming
            emitted records.

    Returns:
        Tuple of (differences in emission order, keys found equal).

    Examples:
        >>> diffs, equal = compare_objects("table", {"t": {}}, {})
        >>> diffs[0].side_b_remark
        'missing'
        >>> equal
        set()

        >>> diffs, equal = compare_objects(
        ...     "procedure",
        ...     {"definition": "BEGIN\\n    SELECT 1;"},
        ...     {"definition": "BEGIN SELECT 1;"},
        ...     name="p1",
        ...     normalize_whitespace=True,
        ... )
        >>> diffs
        []
    """
    a = a or {}
    b = b or {}
    short_circuit = stop_after_first or name is not None

    differences: list[Comparison] = []
    equal_keys: set[str] = set()

    for key in sorted(set(a) | set(b)):
        if key not in a:
            differences.append(
                Comparison(
                    object_type=object_type,
                    name=name or key,
                    owner=owner,
                    side_a_remark=static_remark_a or "missing",
                    side_b_remark=static_remark_b or "exist",
                )
            )
        elif key not in b:
            differences.append(
                Comparison(
                    object_type=object_type,
                    name=name or key,
                    owner=owner,
                    side_a_remark=static_remark_a or "exist",
                    side_b_remark=static_remark_b or "missing",
                )
            )
        elif (
            not _is_nested(a[key])
            and not _is_nested(b[key])
            and _normalize(a[key], normalize_whitespace)
            != _normalize(b[key], normalize_whitespace)
        ):
            differences.append(
                Comparison(
                    object_type=object_type,
                    name=name or key,
                    owner=owner,
                    side_a_remark="mismatch",
                    side_b_remark="mismatch",
                )
            )
        else:
            equal_keys.add(key)

        if short_circuit and differences:
            break

    return differences, equal_keys
