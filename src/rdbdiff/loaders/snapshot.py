"""Loads a schema from a JSON snapshot written by ``rdbdiff dump``.

Lets a pipeline compare a live database against a committed baseline
without a second connection.
"""

import logging
from pathlib import Path

from pydantic import ValidationError

from rdbdiff.errors import SchemaLoadError
from rdbdiff.loaders.base import LabelledLogger
from rdbdiff.schema.models import SchemaDocument, SchemaSnapshot

logger = logging.getLogger(__name__)


class SnapshotSchemaLoader:
    """Reads a ``SchemaSnapshot`` JSON file.

    Usage:
        with SnapshotSchemaLoader(Path("baseline.json")) as loader:
            document = loader.load()
    """

    def __init__(
        self,
        path: Path,
        log: logging.Logger | logging.LoggerAdapter | None = None,
    ):
        self._path = Path(path)
        self._snapshot: SchemaSnapshot | None = None
        self._log = LabelledLogger(log or logger, self._path.stem)

    @property
    def label(self) -> str:
        """The label stored in the snapshot, or the file stem before loading."""
        if self._snapshot is not None:
            return self._snapshot.label
        return self._path.stem

    def __enter__(self) -> "SnapshotSchemaLoader":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        pass

    def load(self) -> SchemaDocument:
        """Parse the snapshot file.

        Raises:
            SchemaLoadError: If the file is missing or not a valid snapshot.
        """
        self._log.info("reading snapshot %s", self._path)
        try:
            self._snapshot = SchemaSnapshot.model_validate_json(
                self._path.read_text()
            )
        except FileNotFoundError as e:
            raise SchemaLoadError(f"Snapshot not found: {self._path}") from e
        except ValidationError as e:
            raise SchemaLoadError(f"Invalid snapshot {self._path}: {e}") from e

        document = self._snapshot.document
        self._log.info("tables: %d", len(document.tables))
        return document

    def show_create(self, object_type: str, name: str) -> str | None:
        """Snapshots carry no DDL."""
        return None
