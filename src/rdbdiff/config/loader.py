"""Configuration loading from rdbdiff.toml."""

import tomllib
from pathlib import Path

from rdbdiff.config.models import CompareSettings, DatabaseProfile, RdbdiffConfig

DEFAULT_CONFIG_NAME = "rdbdiff.toml"


def load_config(config_path: Path | None = None) -> RdbdiffConfig:
    """Load profiles and compare defaults from a TOML file.

    Args:
        config_path: Path to the TOML file. When ``None``, ``rdbdiff.toml`` in
            the current directory is used if it exists; otherwise an empty
            configuration is returned.

    Returns:
        RdbdiffConfig with all profiles and compare defaults

    Raises:
        FileNotFoundError: If an explicit config path doesn't exist
        pydantic.ValidationError: If a profile or setting is malformed
    """
    if config_path is None:
        config_path = Path.cwd() / DEFAULT_CONFIG_NAME
        if not config_path.exists():
            return RdbdiffConfig()

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "rb") as f:
        data = tomllib.load(f)

    profiles = {}
    for name, profile_data in data.get("profiles", {}).items():
        profiles[name] = DatabaseProfile(**profile_data)

    return RdbdiffConfig(
        profiles=profiles,
        compare=CompareSettings(**data.get("compare", {})),
    )
