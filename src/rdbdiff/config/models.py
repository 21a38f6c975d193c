"""Pydantic models for configuration and connection targets."""

from pydantic import BaseModel, Field


# ============================================================================
# Configuration Models
# ============================================================================


class DatabaseProfile(BaseModel):
    """Database connection profile from rdbdiff.toml."""

    url: str
    description: str = ""
    db_password: str | None = None  # For [YOUR-PASSWORD] placeholder substitution


class CompareSettings(BaseModel):
    """Defaults for the compare command from the [compare] table."""

    eager: bool = False
    check_whitespace: bool = False


class RdbdiffConfig(BaseModel):
    """Complete configuration from rdbdiff.toml."""

    profiles: dict[str, DatabaseProfile] = Field(default_factory=dict)
    compare: CompareSettings = Field(default_factory=CompareSettings)


# ============================================================================
# Connection Target
# ============================================================================


class ConnectionTarget(BaseModel):
    """A parsed database URL.

    Example:
        >>> target = ConnectionTarget(protocol="mysql", host="localhost", port=3306, database="app")
        >>> target.label
        'localhost_3306_app'
    """

    protocol: str
    host: str | None = None
    port: int | None = None
    user: str | None = None
    password: str | None = None
    database: str
    options: dict[str, str] = Field(default_factory=dict)

    @property
    def label(self) -> str:
        """``<host>[_<port>]_<database>``, used to tell the two sides apart."""
        host = self.host or "localhost"
        port = f"_{self.port}" if self.port else ""
        return f"{host}{port}_{self.database}"

