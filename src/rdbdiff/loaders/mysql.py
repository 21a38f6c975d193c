"""MySQL schema loader via information_schema.

This module queries the live database to extract:
- Tables and storage engines
- Columns (type, default, nullability, key, length, position)
- Indexes (one row per indexed column, with its sequence in the index)
- Stored procedures and functions with their parameters

Uses PyMySQL for connections.
"""

import logging

import pymysql
from pymysql.cursors import DictCursor

from rdbdiff.config.models import ConnectionTarget
from rdbdiff.errors import SchemaLoadError
from rdbdiff.loaders.base import LabelledLogger
from rdbdiff.schema.models import (
    ColumnEntry,
    IndexColumnEntry,
    ParamEntry,
    RoutineEntry,
    SchemaDocument,
    TableEntry,
)

logger = logging.getLogger(__name__)

# Function return values are listed with a NULL name at position 0
RETURN_PARAMETER = "RETURN"

_SHOW_CREATE = {
    "table": ("TABLE", "Create Table"),
    "procedure": ("PROCEDURE", "Create Procedure"),
    "function": ("FUNCTION", "Create Function"),
}


def _quote_identifier(name: str) -> str:
    return "`" + name.replace("`", "``") + "`"


class MySQLSchemaLoader:
    """Loads a MySQL database schema.

    Usage:
        with MySQLSchemaLoader(target) as loader:
            document = loader.load()
            ddl = loader.show_create("table", "users")
    """

    def __init__(
        self,
        target: ConnectionTarget,
        log: logging.Logger | logging.LoggerAdapter | None = None,
    ):
        self._target = target
        self._conn: pymysql.connections.Connection | None = None
        self._log = LabelledLogger(log or logger, target.label)

    @property
    def label(self) -> str:
        return self._target.label

    def __enter__(self) -> "MySQLSchemaLoader":
        """Context manager entry - opens connection."""
        self._log.info("connecting..")
        try:
            self._conn = pymysql.connect(
                host=self._target.host or "localhost",
                port=self._target.port or 3306,
                user=self._target.user,
                password=self._target.password or "",
                database=self._target.database,
                charset="utf8mb4",
                cursorclass=DictCursor,
                connect_timeout=10,
            )
        except pymysql.MySQLError as e:
            raise SchemaLoadError(f"{self.label}: failed to connect: {e}") from e
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit - closes connection."""
        if self._conn:
            self._log.info("closing connection..")
            self._conn.close()
            self._conn = None

    def load(self) -> SchemaDocument:
        """Load the full schema of the target database."""
        if not self._conn:
            raise RuntimeError("Loader not connected. Use with statement.")

        self._log.info("checking schema..")
        try:
            tables: dict[str, TableEntry] = {}
            indexes: dict[str, dict[str, dict[str, IndexColumnEntry]]] = {}

            table_rows = self._get_tables()
            self._log.info("tables in %s: %d", self._target.database, len(table_rows))
            for table_name, engine in table_rows:
                columns = self._get_columns(table_name)
                table_indexes = self._get_indexes(table_name)
                tables[table_name] = TableEntry(engine=engine, columns=columns)
                indexes[table_name] = table_indexes
                self._log.info(
                    "'%s' columns: %d index: %d",
                    table_name,
                    len(columns),
                    len(table_indexes),
                )

            procedures, functions = self._get_routines()
            self._log.info(
                "procedures: %d functions: %d", len(procedures), len(functions)
            )
        except pymysql.MySQLError as e:
            raise SchemaLoadError(f"{self.label}: schema query failed: {e}") from e

        return SchemaDocument(
            tables=tables,
            indexes=indexes,
            procedures=procedures,
            functions=functions,
        )

    def show_create(self, object_type: str, name: str) -> str | None:
        """Return ``SHOW CREATE <TABLE|PROCEDURE|FUNCTION>`` output."""
        if not self._conn:
            raise RuntimeError("Loader not connected. Use with statement.")
        if object_type not in _SHOW_CREATE:
            return None

        keyword, column = _SHOW_CREATE[object_type]
        try:
            with self._conn.cursor() as cur:
                cur.execute(f"SHOW CREATE {keyword} {_quote_identifier(name)}")
                row = cur.fetchone()
        except pymysql.MySQLError as e:
            self._log.info("no %s '%s': %s", object_type, name, e)
            return None
        if not row:
            return None
        return row.get(column)

    def _get_tables(self) -> list[tuple[str, str | None]]:
        query = """
            SELECT TABLE_NAME, ENGINE
            FROM information_schema.tables
            WHERE TABLE_SCHEMA = %s
            ORDER BY TABLE_NAME
        """
        with self._conn.cursor() as cur:
            cur.execute(query, (self._target.database,))
            return [(row["TABLE_NAME"], row["ENGINE"]) for row in cur.fetchall()]

    def _get_columns(self, table_name: str) -> dict[str, ColumnEntry]:
        query = """
            SELECT
                COLUMN_NAME,
                COLUMN_TYPE,
                COLUMN_DEFAULT,
                IS_NULLABLE,
                COLUMN_KEY,
                CHARACTER_MAXIMUM_LENGTH,
                ORDINAL_POSITION
            FROM information_schema.columns
            WHERE TABLE_SCHEMA = %s
              AND TABLE_NAME = %s
            ORDER BY ORDINAL_POSITION
        """
        with self._conn.cursor() as cur:
            cur.execute(query, (self._target.database, table_name))
            return {
                row["COLUMN_NAME"]: ColumnEntry(
                    type=row["COLUMN_TYPE"],
                    default=row["COLUMN_DEFAULT"],
                    nullable=row["IS_NULLABLE"],
                    key=row["COLUMN_KEY"] or "",
                    char_max_length=row["CHARACTER_MAXIMUM_LENGTH"],
                    ordinal_position=row["ORDINAL_POSITION"],
                )
                for row in cur.fetchall()
            }

    def _get_indexes(self, table_name: str) -> dict[str, dict[str, IndexColumnEntry]]:
        query = """
            SELECT INDEX_NAME, NON_UNIQUE, COLUMN_NAME, SEQ_IN_INDEX
            FROM information_schema.statistics
            WHERE TABLE_SCHEMA = %s
              AND TABLE_NAME = %s
            ORDER BY INDEX_NAME, SEQ_IN_INDEX
        """
        with self._conn.cursor() as cur:
            cur.execute(query, (self._target.database, table_name))
            indexes: dict[str, dict[str, IndexColumnEntry]] = {}
            for row in cur.fetchall():
                # Functional key parts have no column name
                column = row["COLUMN_NAME"] or f"expr{row['SEQ_IN_INDEX']}"
                indexes.setdefault(row["INDEX_NAME"], {})[column] = IndexColumnEntry(
                    is_unique=not int(row["NON_UNIQUE"]),
                    column=column,
                    sequence_number=row["SEQ_IN_INDEX"],
                )
            return indexes

    def _get_routines(
        self,
    ) -> tuple[dict[str, RoutineEntry], dict[str, RoutineEntry]]:
        """Get procedures and functions, each with its parameters."""
        routine_query = """
            SELECT ROUTINE_NAME, ROUTINE_TYPE, ROUTINE_DEFINITION
            FROM information_schema.routines
            WHERE ROUTINE_SCHEMA = %s
            ORDER BY ROUTINE_NAME
        """
        parameter_query = """
            SELECT
                SPECIFIC_NAME,
                ROUTINE_TYPE,
                PARAMETER_NAME,
                ORDINAL_POSITION,
                DTD_IDENTIFIER,
                CHARACTER_MAXIMUM_LENGTH,
                PARAMETER_MODE
            FROM information_schema.parameters
            WHERE SPECIFIC_SCHEMA = %s
            ORDER BY SPECIFIC_NAME, ORDINAL_POSITION
        """
        parameters: dict[tuple[str, str], dict[str, ParamEntry]] = {}
        with self._conn.cursor() as cur:
            cur.execute(parameter_query, (self._target.database,))
            for row in cur.fetchall():
                key = (row["ROUTINE_TYPE"], row["SPECIFIC_NAME"])
                param_name = row["PARAMETER_NAME"] or RETURN_PARAMETER
                parameters.setdefault(key, {})[param_name] = ParamEntry(
                    ordinal_position=row["ORDINAL_POSITION"],
                    type=row["DTD_IDENTIFIER"],
                    char_max_length=row["CHARACTER_MAXIMUM_LENGTH"],
                    mode=row["PARAMETER_MODE"],
                )

            cur.execute(routine_query, (self._target.database,))
            procedures: dict[str, RoutineEntry] = {}
            functions: dict[str, RoutineEntry] = {}
            for row in cur.fetchall():
                name = row["ROUTINE_NAME"]
                routine_type = row["ROUTINE_TYPE"]
                entry = RoutineEntry(
                    definition=row["ROUTINE_DEFINITION"] or "",
                    parameters=parameters.get((routine_type, name), {}),
                )
                if routine_type == "PROCEDURE":
                    procedures[name] = entry
                else:
                    functions[name] = entry

        return procedures, functions
