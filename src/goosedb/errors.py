"""
Error hierarchy for goosedb.
"""

from __future__ import annotations


class GooseError(RuntimeError):
    """Base error for goosedb failures."""


class TableDoesNotExistError(GooseError):
    """
    Raised when the version history query fails.

    Every driver failure during the history read is reported as this error on
    the assumption that ``goose_db_version`` has not been created yet. The
    original driver exception is kept as ``__cause__``.
    """

    def __init__(self, dialect: str, message: str | None = None) -> None:
        self.dialect = dialect
        super().__init__(message or f"{dialect}: version table does not exist")


class ConfigurationError(GooseError):
    """Raised when driver or dialect configuration is invalid."""


class VersionTrackingError(GooseError):
    """Raised when version records are inconsistent or cannot be written."""
