"""
MySQL dialect implementation.
"""

from __future__ import annotations

from typing import Any, Final

from ..utils import get_logger
from ..utils.performance import resolve_slow_query_ms
from .base import Dialect, VersionRecord, fetch_version_history

# Shares the PostgreSQL column definitions; MySQL reads serial, boolean and
# now() as aliases, which keeps tables created by older releases compatible.
_CREATE_VERSION_TABLE_SQL = """CREATE TABLE goose_db_version (
    id serial NOT NULL,
    version_id bigint NOT NULL,
    is_applied boolean NOT NULL,
    tstamp timestamp NULL default now(),
    PRIMARY KEY(id)
);"""

_INSERT_VERSION_SQL = "INSERT INTO goose_db_version (version_id, is_applied) VALUES (?, ?);"

_VERSION_HISTORY_SQL = "SELECT version_id, is_applied from goose_db_version ORDER BY id DESC"

logger = get_logger("dialects.mysql")


class MySQLDialect:
    """
    MySQL dialect using qmark placeholders.
    """

    name: Final[str] = "mysql"
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


def get_mysql_dialect() -> Dialect:
    return MySQLDialect()
