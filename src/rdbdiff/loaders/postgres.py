"""PostgreSQL schema loader via information_schema and pg_catalog.

This module queries the live database to extract:
- Tables and their access method (reported as ``engine``)
- Columns, typed by ``format_type`` (modifiers kept), with ``PRI``/``UNI``
  keys derived from constraints
- Indexes (one row per key part; expression parts are named ``expr<n>``)
- Procedures and functions (``pg_proc.prokind`` ``p`` / ``f``)

Uses psycopg (v3) for PostgreSQL connections.
"""

import logging

import psycopg
from psycopg import Connection

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


class PostgresSchemaLoader:
    """Loads one PostgreSQL schema (``public`` unless ``?schema=`` is given).

    Overloaded routines share a name; the last one read wins.

    Usage:
        with PostgresSchemaLoader(target) as loader:
            document = loader.load()
    """

    def __init__(
        self,
        target: ConnectionTarget,
        log: logging.Logger | logging.LoggerAdapter | None = None,
    ):
        self._target = target
        self._schema_name = target.options.get("schema", "public")
        self._conn: Connection | None = None
        self._log = LabelledLogger(log or logger, target.label)

    @property
    def label(self) -> str:
        return self._target.label

    def __enter__(self) -> "PostgresSchemaLoader":
        """Context manager entry - opens connection."""
        self._log.info("connecting..")
        try:
            self._conn = psycopg.connect(
                host=self._target.host or "localhost",
                port=self._target.port or 5432,
                user=self._target.user,
                password=self._target.password,
                dbname=self._target.database,
                connect_timeout=10,
            )
        except psycopg.Error as e:
            raise SchemaLoadError(f"{self.label}: failed to connect: {e}") from e
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit - closes connection."""
        if self._conn:
            self._log.info("closing connection..")
            self._conn.close()
            self._conn = None

    def load(self) -> SchemaDocument:
        """Load the full schema."""
        if not self._conn:
            raise RuntimeError("Loader not connected. Use with statement.")

        self._log.info("checking schema '%s'..", self._schema_name)
        try:
            tables: dict[str, TableEntry] = {}
            indexes: dict[str, dict[str, dict[str, IndexColumnEntry]]] = {}

            table_rows = self._get_tables()
            self._log.info("tables in %s: %d", self._schema_name, len(table_rows))
            for table_name, access_method in table_rows:
                columns = self._get_columns(table_name)
                table_indexes = self._get_indexes(table_name)
                tables[table_name] = TableEntry(engine=access_method, columns=columns)
                indexes[table_name] = table_indexes
                self._log.info(
                    "'%s' columns: %d index: %d",
                    table_name,
                    len(columns),
                    len(table_indexes),
                )

            parameters = self._get_parameters()
            procedures, functions = self._get_routines(parameters)
            self._log.info(
                "procedures: %d functions: %d", len(procedures), len(functions)
            )
        except psycopg.Error as e:
            raise SchemaLoadError(f"{self.label}: schema query failed: {e}") from e

        return SchemaDocument(
            tables=tables,
            indexes=indexes,
            procedures=procedures,
            functions=functions,
        )

    def show_create(self, object_type: str, name: str) -> str | None:
        """Return ``pg_get_functiondef`` output for routines.

        PostgreSQL has no server-side CREATE TABLE generator, so tables
        return ``None``.
        """
        if not self._conn:
            raise RuntimeError("Loader not connected. Use with statement.")
        if object_type not in ("procedure", "function"):
            return None

        query = """
            SELECT pg_get_functiondef(p.oid)
            FROM pg_proc p
            JOIN pg_namespace n ON n.oid = p.pronamespace
            WHERE n.nspname = %s
              AND p.proname = %s
              AND p.prokind = %s
            ORDER BY p.oid
        """
        prokind = "p" if object_type == "procedure" else "f"
        try:
            with self._conn.cursor() as cur:
                cur.execute(query, (self._schema_name, name, prokind))
                rows = cur.fetchall()
        except psycopg.Error as e:
            self._conn.rollback()
            self._log.info("no %s '%s': %s", object_type, name, e)
            return None
        if not rows:
            return None
        return "\n".join(row[0] for row in rows)

    def _get_tables(self) -> list[tuple[str, str | None]]:
        query = """
            SELECT c.relname, am.amname
            FROM pg_class c
            JOIN pg_namespace n ON n.oid = c.relnamespace
            LEFT JOIN pg_am am ON am.oid = c.relam
            WHERE n.nspname = %s
              AND c.relkind IN ('r', 'p')
            ORDER BY c.relname
        """
        with self._conn.cursor() as cur:
            cur.execute(query, (self._schema_name,))
            return [(row[0], row[1]) for row in cur.fetchall()]

    def _get_columns(self, table_name: str) -> dict[str, ColumnEntry]:
        query = """
            SELECT
                c.column_name,
                format_type(a.atttypid, a.atttypmod) AS column_type,
                c.column_default,
                c.is_nullable,
                COALESCE(k.column_key, '') AS column_key,
                c.character_maximum_length,
                c.ordinal_position
            FROM information_schema.columns c
            JOIN pg_namespace n ON n.nspname = c.table_schema
            JOIN pg_class t ON t.relnamespace = n.oid AND t.relname = c.table_name
            JOIN pg_attribute a ON a.attrelid = t.oid AND a.attname = c.column_name
            LEFT JOIN (
                SELECT
                    kcu.column_name,
                    MIN(CASE tc.constraint_type
                        WHEN 'PRIMARY KEY' THEN 'PRI'
                        ELSE 'UNI'
                    END) AS column_key
                FROM information_schema.table_constraints tc
                JOIN information_schema.key_column_usage kcu
                    ON tc.constraint_name = kcu.constraint_name
                    AND tc.table_schema = kcu.table_schema
                    AND tc.table_name = kcu.table_name
                WHERE tc.table_schema = %s
                  AND tc.table_name = %s
                  AND tc.constraint_type IN ('PRIMARY KEY', 'UNIQUE')
                GROUP BY kcu.column_name
            ) k ON k.column_name = c.column_name
            WHERE c.table_schema = %s
              AND c.table_name = %s
            ORDER BY c.ordinal_position
        """
        params = (self._schema_name, table_name, self._schema_name, table_name)
        with self._conn.cursor() as cur:
            cur.execute(query, params)
            columns = {}
            for row in cur.fetchall():
                name, column_type, default, nullable, key, max_length, position = row
                columns[name] = ColumnEntry(
                    type=column_type,
                    default=default,
                    nullable=nullable,
                    key=key,
                    char_max_length=max_length,
                    ordinal_position=position,
                )
            return columns

    def _get_indexes(self, table_name: str) -> dict[str, dict[str, IndexColumnEntry]]:
        """Get indexes for a table (including the primary key)."""
        query = """
            SELECT
                i.relname AS index_name,
                COALESCE(a.attname, 'expr' || x.ordinality) AS column_name,
                ix.indisunique AS is_unique,
                x.ordinality AS sequence_number
            FROM pg_index ix
            JOIN pg_class t ON t.oid = ix.indrelid
            JOIN pg_class i ON i.oid = ix.indexrelid
            JOIN pg_namespace n ON n.oid = t.relnamespace
            -- expression key parts have attnum 0 and no pg_attribute row
            JOIN LATERAL unnest(ix.indkey) WITH ORDINALITY AS x(attnum, ordinality) ON TRUE
            LEFT JOIN pg_attribute a ON a.attrelid = t.oid AND a.attnum = x.attnum
            WHERE n.nspname = %s
              AND t.relname = %s
            ORDER BY i.relname, x.ordinality
        """
        with self._conn.cursor() as cur:
            cur.execute(query, (self._schema_name, table_name))
            indexes: dict[str, dict[str, IndexColumnEntry]] = {}
            for row in cur.fetchall():
                index_name, column, is_unique, sequence_number = row
                indexes.setdefault(index_name, {})[column] = IndexColumnEntry(
                    is_unique=is_unique,
                    column=column,
                    sequence_number=sequence_number,
                )
            return indexes

    def _get_parameters(self) -> dict[str, dict[str, ParamEntry]]:
        """Get routine parameters keyed by specific (overload-unique) name."""
        query = """
            SELECT
                p.specific_name,
                p.parameter_name,
                p.ordinal_position,
                COALESCE(format_type(ty.oid, NULL), p.data_type) AS parameter_type,
                p.character_maximum_length,
                p.parameter_mode
            FROM information_schema.parameters p
            LEFT JOIN pg_namespace tn ON tn.nspname = p.udt_schema
            LEFT JOIN pg_type ty ON ty.typnamespace = tn.oid AND ty.typname = p.udt_name
            WHERE p.specific_schema = %s
            ORDER BY p.specific_name, p.ordinal_position
        """
        with self._conn.cursor() as cur:
            cur.execute(query, (self._schema_name,))
            parameters: dict[str, dict[str, ParamEntry]] = {}
            for row in cur.fetchall():
                specific_name, name, position, data_type, max_length, mode = row
                parameters.setdefault(specific_name, {})[name or f"${position}"] = (
                    ParamEntry(
                        ordinal_position=position,
                        type=data_type,
                        char_max_length=max_length,
                        mode=mode,
                    )
                )
            return parameters

    def _get_routines(
        self, parameters: dict[str, dict[str, ParamEntry]]
    ) -> tuple[dict[str, RoutineEntry], dict[str, RoutineEntry]]:
        """Get user-defined procedures and functions.

        Excludes aggregates, window functions and routines owned by
        extensions.
        """
        query = """
            SELECT
                p.proname,
                p.proname || '_' || p.oid AS specific_name,
                p.prokind,
                pg_get_functiondef(p.oid) AS definition
            FROM pg_proc p
            JOIN pg_namespace n ON n.oid = p.pronamespace
            WHERE n.nspname = %s
              AND p.prokind IN ('f', 'p')
              AND NOT EXISTS (
                  SELECT 1 FROM pg_depend d
                  WHERE d.objid = p.oid AND d.deptype = 'e'
              )
            ORDER BY p.proname, p.oid
        """
        with self._conn.cursor() as cur:
            cur.execute(query, (self._schema_name,))
            procedures: dict[str, RoutineEntry] = {}
            functions: dict[str, RoutineEntry] = {}
            for row in cur.fetchall():
                name, specific_name, prokind, definition = row
                entry = RoutineEntry(
                    definition=definition or "",
                    parameters=parameters.get(specific_name, {}),
                )
                if prokind == "p":
                    procedures[name] = entry
                else:
                    functions[name] = entry
            return procedures, functions
