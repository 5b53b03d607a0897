"""
Dialect strategy registry.
"""

from .base import VERSION_TABLE, Dialect, VersionRecord, adapt_placeholders, count_placeholders
from .clickhouse import ClickHouseDialect
from .mysql import MySQLDialect
from .postgres import PostgresDialect
from .registry import available_dialects, dialect_by_name

__all__ = [
    "VERSION_TABLE",
    "Dialect",
    "VersionRecord",
    "adapt_placeholders",
    "count_placeholders",
    "PostgresDialect",
    "MySQLDialect",
    "ClickHouseDialect",
    "available_dialects",
    "dialect_by_name",
]
