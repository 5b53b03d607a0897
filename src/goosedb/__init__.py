"""
goosedb public package initialization.

Dialects describing how each database engine stores the goose version table.
"""

from .config import DriverConfig  # noqa: F401
from .dialects import (
    VERSION_TABLE,
    ClickHouseDialect,
    Dialect,
    MySQLDialect,
    PostgresDialect,
    VersionRecord,
    dialect_by_name,
)  # noqa: F401
from .errors import (
    ConfigurationError,
    GooseError,
    TableDoesNotExistError,
    VersionTrackingError,
)  # noqa: F401
from .versioning import VersionTracker  # noqa: F401

__all__ = [
    "VERSION_TABLE",
    "Dialect",
    "VersionRecord",
    "PostgresDialect",
    "MySQLDialect",
    "ClickHouseDialect",
    "dialect_by_name",
    "DriverConfig",
    "VersionTracker",
    "GooseError",
    "TableDoesNotExistError",
    "ConfigurationError",
    "VersionTrackingError",
]
