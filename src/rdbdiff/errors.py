"""Errors raised by the I/O shell around the comparison core.

All of them fail the run before the comparison engine is invoked.
"""


class RdbdiffError(Exception):
    """Base class for rdbdiff errors."""


class InvalidURLError(RdbdiffError, ValueError):
    """Raised when a database URL cannot be parsed."""


class UnsupportedProtocolError(RdbdiffError):
    """Raised when no loader is registered for a URL scheme."""


class ProtocolMismatchError(RdbdiffError):
    """Raised when the two compared databases use different protocols."""


class ProfileNotFoundError(RdbdiffError):
    """Raised when a named profile is not in the configuration."""


class SchemaLoadError(RdbdiffError):
    """Raised when a catalog query fails while loading a schema."""
