"""
ClickHouse dialect implementation.
"""

from __future__ import annotations

from typing import Any, Final

from ..utils import get_logger
from ..utils.performance import resolve_slow_query_ms
from .base import Dialect, VersionRecord, fetch_version_history

_CREATE_VERSION_TABLE_SQL = """CREATE TABLE goose_db_version (
    version_id Int64,
    is_applied UInt8,
    date       Date     default today(),
    tstamp     DateTime default now()
) Engine = MergeTree(date, (date), 8192)"""

_INSERT_VERSION_SQL = "INSERT INTO goose_db_version (version_id, is_applied) VALUES (?, ?)"

# MergeTree has no surrogate key and returns parts in no particular order.
_VERSION_HISTORY_SQL = (
    "SELECT version_id, is_applied FROM goose_db_version ORDER BY version_id DESC, tstamp DESC"
)

logger = get_logger("dialects.clickhouse")


class ClickHouseDialect:
    """
    ClickHouse dialect storing the version table in a MergeTree partitioned by date.

    ``is_applied`` is a ``UInt8`` column; history rows are normalized to ``bool``.
    """

    name: Final[str] = "clickhouse"
    param_style: Final[str] = "qmark"

    def __init__(self, slow_query_ms: int | None = None) -> None:
        self.slow_query_ms = resolve_slow_query_ms(default=100, override=slow_query_ms)

    def create_version_table_sql(self) -> str:
        return _CREATE_VERSION_TABLE_SQL

    def insert_version_sql(self) -> str:
        return _INSERT_VERSION_SQL

    def db_version_query(self, connection: Any) -> list[VersionRecord]:
        return fetch_version_history(
            connection,
            _VERSION_HISTORY_SQL,
            dialect=self.name,
            logger=logger,
            threshold_ms=self.slow_query_ms,
        )


def get_clickhouse_dialect() -> Dialect:
    return ClickHouseDialect()
