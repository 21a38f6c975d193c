"""Schema loader protocol definition.

Defines the ``SchemaLoader`` Protocol that every database backend
implements. The comparison engine only sees the ``SchemaDocument`` a loader
returns, never the loader itself.

Usage:
    from rdbdiff.loaders.base import SchemaLoader

    def snapshot(loader: SchemaLoader) -> SchemaDocument:
        with loader:
            return loader.load()
"""

import logging
from collections.abc import MutableMapping
from typing import Any, Protocol

from rdbdiff.schema.models import SchemaDocument


class SchemaLoader(Protocol):
    """Catalog reader for one database.

    Loaders are context managers: ``__enter__`` opens the connection and
    ``__exit__`` closes it. ``load()`` and ``show_create()`` may only be
    called inside the ``with`` block.
    """

    @property
    def label(self) -> str:
        """Short name of the source, used in log lines and export paths."""
        ...

    def __enter__(self) -> "SchemaLoader": ...

    def __exit__(self, exc_type, exc_val, exc_tb) -> None: ...

    def load(self) -> SchemaDocument:
        """Read tables, columns, indexes and routines into a document.

        Raises:
            SchemaLoadError: If a catalog query fails.
        """
        ...

    def show_create(self, object_type: str, name: str) -> str | None:
        """Return the creation statement of one object.

        Args:
            object_type: ``table``, ``procedure`` or ``function``.
            name: Object name.

        Returns:
            The statement, or ``None`` if the object does not exist or the
            backend cannot produce one.
        """
        ...


class LabelledLogger(logging.LoggerAdapter):
    """Prefixes every message with the loader's label.

    Example:
        >>> log = LabelledLogger(logging.getLogger("rdbdiff"), "db1_3306_app")
        >>> log.process("tables: 3", {})
        ('db1_3306_app tables: 3', {})
    """

    def __init__(self, logger: logging.Logger | logging.LoggerAdapter, label: str):
        super().__init__(logger, {"label": label})

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> tuple[Any, MutableMapping[str, Any]]:
        return f"{self.extra['label']} {msg}", kwargs
