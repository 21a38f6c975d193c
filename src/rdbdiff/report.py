"""Output for comparison reports: JSON files, rich tables and DDL export.

Usage:
    from rdbdiff.report import render_table, write_json

    report = ComparisonReport(source_a="A", source_b="B", result=diffs)
    render_table(report, console)
    write_json(report, Path("tmp/output.json"), pretty=True)
"""

import logging
from pathlib import Path

from rich.console import Console
from rich.table import Table

from rdbdiff.loaders.base import SchemaLoader
from rdbdiff.schema.models import ComparisonReport, SchemaSnapshot

logger = logging.getLogger(__name__)

_REMARK_STYLES = {
    "exist": "green",
    "missing": "red",
    "mismatch": "yellow",
}


def _dump_json(model: ComparisonReport | SchemaSnapshot, pretty: bool) -> str:
    return model.model_dump_json(by_alias=True, indent=2 if pretty else None)


def write_json(
    model: ComparisonReport | SchemaSnapshot,
    path: Path,
    pretty: bool = False,
) -> Path:
    """Write a report or snapshot as camelCase JSON.

    Parent directories are created as needed.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(_dump_json(model, pretty))
    logger.info("wrote %s", path)
    return path


def render_table(report: ComparisonReport, console: Console) -> None:
    """Print the differences as a table."""
    table = Table(
        title=f"Schema Differences ({report.source_a} vs {report.source_b})",
        show_header=True,
        header_style="bold",
    )
    table.add_column("Type", style="dim")
    table.add_column("Owner")
    table.add_column("Name", style="cyan")
    table.add_column("A")
    table.add_column("B")

    for diff in report.result:
        remarks = []
        for remark in (diff.side_a_remark, diff.side_b_remark):
            style = _REMARK_STYLES.get(remark or "")
            remarks.append(f"[{style}]{remark}[/{style}]" if style else "-")
        table.add_row(diff.object_type, diff.owner or "", diff.name, *remarks)

    console.print(table)


def _file_name(root: str, name: str) -> str:
    # Object names may contain path separators
    safe_name = name.replace("/", "_").replace("\\", "_")
    return f"{root}.{safe_name}.sql"


def export_create_statements(
    report: ComparisonReport,
    loader_a: SchemaLoader,
    loader_b: SchemaLoader,
    directory: Path,
) -> list[Path]:
    """Write the creation statement of every differing object, per side.

    Index differences are skipped. Nested differences (``table.column``,
    ``procedure.parameter``...) export their owner; each object is written
    once per side as
    ``<directory>/<A|B>_<label>/<type>.<name>.sql``. Path separators in
    names are replaced with ``_``.

    Returns:
        Paths of the files written.
    """
    targets: list[tuple[str, str]] = []
    for diff in report.result:
        if diff.object_type == "index":
            continue
        root, _, member = diff.object_type.partition(".")
        name = diff.owner if member and diff.owner else diff.name
        if (root, name) not in targets:
            targets.append((root, name))

    written: list[Path] = []
    for side, loader in (("A", loader_a), ("B", loader_b)):
        side_dir = directory / f"{side}_{loader.label}"
        for root, name in targets:
            statement = loader.show_create(root, name)
            if statement is None:
                continue
            side_dir.mkdir(parents=True, exist_ok=True)
            path = side_dir / _file_name(root, name)
            path.write_text(statement.rstrip() + ";\n")
            written.append(path)

    logger.info("exported %d create statement(s) to %s", len(written), directory)
    return written
