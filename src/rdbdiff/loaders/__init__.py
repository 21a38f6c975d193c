"""Schema loaders: one per supported database, plus JSON snapshots.

Usage:
    >>> from rdbdiff.loaders import SchemaLoader, MySQLSchemaLoader
"""

from rdbdiff.loaders.base import LabelledLogger, SchemaLoader
from rdbdiff.loaders.mysql import MySQLSchemaLoader
from rdbdiff.loaders.postgres import PostgresSchemaLoader
from rdbdiff.loaders.snapshot import SnapshotSchemaLoader

__all__ = [
    "SchemaLoader",
    "LabelledLogger",
    "MySQLSchemaLoader",
    "PostgresSchemaLoader",
    "SnapshotSchemaLoader",
]
