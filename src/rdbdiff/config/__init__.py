"""Configuration management: profiles, TOML loading, and config models.

Usage:
    >>> from rdbdiff.config import load_config, DatabaseProfile, RdbdiffConfig
"""

from rdbdiff.config.loader import load_config
from rdbdiff.config.models import (
    CompareSettings,
    ConnectionTarget,
    DatabaseProfile,
    RdbdiffConfig,
)

__all__ = [
    "load_config",
    "CompareSettings",
    "ConnectionTarget",
    "DatabaseProfile",
    "RdbdiffConfig",
]
