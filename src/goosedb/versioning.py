"""
Version bookkeeping on top of a dialect's version table statements.
"""

from __future__ import annotations

import sys
from contextlib import contextmanager
from typing import Any, Iterable, Iterator, List, Optional, Sequence, Set

from .dialects import VERSION_TABLE, Dialect, VersionRecord, adapt_placeholders, count_placeholders
from .errors import TableDoesNotExistError, VersionTrackingError
from .utils import get_logger


def driver_paramstyle(connection: Any) -> Optional[str]:
    """
    Return the DB-API ``paramstyle`` of the module that created ``connection``.
    """
    module_name = type(connection).__module__ or ""
    driver = sys.modules.get(module_name.split(".", 1)[0])
    return getattr(driver, "paramstyle", None)


class VersionTracker:
    """
    Reads and appends ``goose_db_version`` rows on a DB-API connection.

    Rows are only ever inserted; a rollback is recorded as a new row with
    ``is_applied`` false. Statement markers are rewritten into the driver's
    ``paramstyle``: pass it explicitly, or it is read from the connection's
    driver module, falling back to the dialect's own style.
    """

    def __init__(self, connection: Any, dialect: Dialect, *, paramstyle: str | None = None) -> None:
        self.connection = connection
        self.dialect = dialect
        self.paramstyle = paramstyle or driver_paramstyle(connection) or dialect.param_style
        self.logger = get_logger("versioning")

    def history(self) -> List[VersionRecord]:
        return self.dialect.db_version_query(self.connection)

    def ensure_version_table(self) -> int:
        """
        Return the current version, creating the version table on first use.
        """
        try:
            records = self.history()
        except TableDoesNotExistError as exc:
            self.logger.info(
                "Creating %s for %s dialect (%s)", VERSION_TABLE, self.dialect.name, exc.__cause__
            )
            # the failed read may have left the transaction aborted
            self.connection.rollback()
            self._create_version_table()
            return 0
        return self.current_version(records)

    def record_version(self, version_id: int, applied: bool = True) -> None:
        with self._transaction():
            self._execute(self.dialect.insert_version_sql(), (version_id, applied))
        self.logger.info(
            "Recorded version %s as %s", version_id, "applied" if applied else "rolled back"
        )

    @staticmethod
    def current_version(records: Iterable[VersionRecord]) -> int:
        """
        Pick the newest applied version from history ordered most-recent first.

        A version whose latest row is a rollback is ignored from then on.
        """
        rolled_back: Set[int] = set()
        for version_id, is_applied in records:
            if version_id in rolled_back:
                continue
            if is_applied:
                return version_id
            rolled_back.add(version_id)
        raise VersionTrackingError(f"No applied version found in {VERSION_TABLE}")

    def _create_version_table(self) -> None:
        with self._transaction():
            self._execute(self.dialect.create_version_table_sql())
            self._execute(self.dialect.insert_version_sql(), (0, True))

    @contextmanager
    def _transaction(self) -> Iterator[None]:
        try:
            yield
        except Exception:
            self.connection.rollback()
            raise
        else:
            self.connection.commit()

    def _execute(self, sql: str, params: Sequence[Any] = ()) -> None:
        self._validate_params(sql, params)
        cursor = self.connection.cursor()
        try:
            if params:
                sql, bound = self._adapt(sql, params)
                cursor.execute(sql, bound)
            else:
                cursor.execute(sql)
        finally:
            close = getattr(cursor, "close", None)
            if close is not None:
                close()

    def _adapt(self, sql: str, params: Sequence[Any]) -> tuple[str, tuple[Any, ...]]:
        try:
            return adapt_placeholders(sql, params, self.dialect.param_style, self.paramstyle)
        except ValueError as exc:
            raise VersionTrackingError(str(exc)) from exc

    def _validate_params(self, sql: str, params: Sequence[Any]) -> None:
        expected = count_placeholders(sql, self.dialect.param_style)
        if expected != len(params):
            raise VersionTrackingError(
                f"Parameter count mismatch: expected {expected}, received {len(params)}."
            )
