"""rdbdiff: compare the schemas of two relational databases.

Reports missing tables, columns, indexes, procedures and functions, and
mismatched definitions. Meant for deployment pipelines that must fail when
two environments have drifted apart.

Usage:
    from rdbdiff import SchemaComparisonEngine, ComparisonOptions
    from rdbdiff import create_loader, load_documents
    from rdbdiff import SchemaDocument, Comparison
"""

__version__ = "0.1.0"

# Errors
from rdbdiff.errors import (
    InvalidURLError,
    ProfileNotFoundError,
    ProtocolMismatchError,
    RdbdiffError,
    SchemaLoadError,
    UnsupportedProtocolError,
)

# Config
from rdbdiff.config.loader import load_config
from rdbdiff.config.models import DatabaseProfile, RdbdiffConfig

# Factory
from rdbdiff.factory import (
    check_protocols,
    create_loader,
    load_documents,
    parse_target,
    resolve_target,
)

# Loaders
from rdbdiff.loaders.base import SchemaLoader

# Schema
from rdbdiff.schema.comparator import compare_objects
from rdbdiff.schema.engine import SchemaComparisonEngine
from rdbdiff.schema.models import (
    Comparison,
    ComparisonOptions,
    ComparisonReport,
    SchemaDocument,
    SchemaSnapshot,
)

__all__ = [
    # Errors
    "RdbdiffError",
    "InvalidURLError",
    "UnsupportedProtocolError",
    "ProtocolMismatchError",
    "ProfileNotFoundError",
    "SchemaLoadError",
    # Config
    "load_config",
    "DatabaseProfile",
    "RdbdiffConfig",
    # Factory
    "create_loader",
    "load_documents",
    "parse_target",
    "resolve_target",
    "check_protocols",
    # Loaders
    "SchemaLoader",
    # Schema
    "compare_objects",
    "SchemaComparisonEngine",
    "Comparison",
    "ComparisonOptions",
    "ComparisonReport",
    "SchemaDocument",
    "SchemaSnapshot",
]
