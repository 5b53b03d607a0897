import logging
import sqlite3

import pytest

from goosedb.dialects import ClickHouseDialect, MySQLDialect, PostgresDialect, VersionRecord
from goosedb.errors import TableDoesNotExistError, VersionTrackingError
from goosedb.versioning import VersionTracker


class FakeCursor:
    def __init__(self, connection):
        self.connection = connection

    def execute(self, sql, params=None):
        self.connection.statements.append((sql, params))
        if sql.startswith("SELECT"):
            if self.connection.history is None:
                raise sqlite3.OperationalError("no such table: goose_db_version")
        elif self.connection.fail_on is not None and self.connection.fail_on in sql:
            raise sqlite3.OperationalError("boom")

    def fetchall(self):
        return list(self.connection.history)

    def close(self):
        pass


class FakeConnection:
    def __init__(self, history=None, fail_on=None):
        self.history = history
        self.fail_on = fail_on
        self.statements = []
        self.commits = 0
        self.rollbacks = 0

    def cursor(self):
        return FakeCursor(self)

    def commit(self):
        self.commits += 1

    def rollback(self):
        self.rollbacks += 1


def test_ensure_version_table_creates_table_and_baseline():
    connection = FakeConnection(history=None)
    dialect = PostgresDialect()
    tracker = VersionTracker(connection, dialect)

    assert tracker.ensure_version_table() == 0

    executed = [sql for sql, _ in connection.statements]
    assert executed[1] == dialect.create_version_table_sql()
    assert connection.statements[2] == (dialect.insert_version_sql(), (0, True))
    assert connection.commits == 1
    assert connection.rollbacks == 1


def test_ensure_version_table_returns_current_version_when_present():
    connection = FakeConnection(history=[(3, False), (2, True), (1, True), (0, True)])
    tracker = VersionTracker(connection, MySQLDialect())
    assert tracker.ensure_version_table() == 2
    assert connection.commits == 0
    assert len(connection.statements) == 1


def test_ensure_version_table_rolls_back_failed_creation():
    connection = FakeConnection(history=None, fail_on="CREATE TABLE")
    tracker = VersionTracker(connection, ClickHouseDialect())
    with pytest.raises(sqlite3.OperationalError):
        tracker.ensure_version_table()
    assert connection.rollbacks == 2
    assert connection.commits == 0


def test_ensure_version_table_logs_creation(caplog):
    caplog.set_level(logging.INFO, logger="goosedb.versioning")
    tracker = VersionTracker(FakeConnection(history=None), PostgresDialect())
    tracker.ensure_version_table()
    assert any("Creating goose_db_version" in record.getMessage() for record in caplog.records)


def test_record_version_appends_row():
    connection = FakeConnection(history=[])
    tracker = VersionTracker(connection, MySQLDialect())
    tracker.record_version(20240101, applied=False)
    assert connection.statements == [
        ("INSERT INTO goose_db_version (version_id, is_applied) VALUES (?, ?);", (20240101, False))
    ]
    assert connection.commits == 1


def test_history_passes_through_dialect():
    connection = FakeConnection(history=[(2, 1), (1, 1)])
    tracker = VersionTracker(connection, ClickHouseDialect())
    assert tracker.history() == [VersionRecord(2, True), VersionRecord(1, True)]


def test_history_propagates_missing_table():
    tracker = VersionTracker(FakeConnection(history=None), PostgresDialect())
    with pytest.raises(TableDoesNotExistError):
        tracker.history()


@pytest.mark.parametrize(
    "records, expected",
    [
        ([(0, True)], 0),
        ([(3, True), (2, True), (1, True)], 3),
        ([(3, False), (3, True), (2, True)], 2),
        ([(3, False), (2, False), (3, True), (2, True), (1, True)], 1),
        ([(4, True), (4, False), (4, True)], 4),
    ],
)
def test_current_version_skips_rolled_back_versions(records, expected):
    assert VersionTracker.current_version(records) == expected


@pytest.mark.parametrize("records", [[], [(1, False), (1, True)]])
def test_current_version_requires_an_applied_version(records):
    with pytest.raises(VersionTrackingError):
        VersionTracker.current_version(records)


def test_parameter_count_mismatch_is_rejected():
    connection = FakeConnection(history=[])
    tracker = VersionTracker(connection, PostgresDialect())
    with pytest.raises(VersionTrackingError):
        tracker._execute(PostgresDialect().insert_version_sql(), (1,))
    assert connection.statements == []


class AbortingConnection(FakeConnection):
    """Rejects every statement after a failure until rolled back."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.aborted = False

    def cursor(self):
        connection = self
        base = super().cursor()

        class Cursor:
            def execute(self, sql, params=None):
                if connection.aborted:
                    raise sqlite3.OperationalError("current transaction is aborted")
                try:
                    base.execute(sql, params)
                except Exception:
                    connection.aborted = True
                    raise

            def fetchall(self):
                return base.fetchall()

            def close(self):
                pass

        return Cursor()

    def rollback(self):
        super().rollback()
        self.aborted = False


def test_ensure_version_table_recovers_from_aborted_transaction():
    connection = AbortingConnection(history=None)
    dialect = PostgresDialect()
    tracker = VersionTracker(connection, dialect)

    assert tracker.ensure_version_table() == 0

    executed = [sql for sql, _ in connection.statements]
    assert dialect.create_version_table_sql() in executed
    assert connection.commits == 1


@pytest.mark.parametrize(
    "dialect, paramstyle, expected_sql",
    [
        (
            PostgresDialect(),
            "pyformat",
            "INSERT INTO goose_db_version (version_id, is_applied) VALUES (%s, %s);",
        ),
        (
            MySQLDialect(),
            "format",
            "INSERT INTO goose_db_version (version_id, is_applied) VALUES (%s, %s);",
        ),
        (
            ClickHouseDialect(),
            "numeric",
            "INSERT INTO goose_db_version (version_id, is_applied) VALUES (:1, :2)",
        ),
        (
            MySQLDialect(),
            "numeric_dollar",
            "INSERT INTO goose_db_version (version_id, is_applied) VALUES ($1, $2);",
        ),
    ],
)
def test_record_version_rewrites_markers_for_driver(dialect, paramstyle, expected_sql):
    connection = FakeConnection(history=[])
    tracker = VersionTracker(connection, dialect, paramstyle=paramstyle)
    tracker.record_version(7)
    assert connection.statements == [(expected_sql, (7, True))]


def test_unsupported_paramstyle_is_rejected():
    connection = FakeConnection(history=[])
    tracker = VersionTracker(connection, PostgresDialect(), paramstyle="named")
    with pytest.raises(VersionTrackingError):
        tracker.record_version(1)
    assert connection.rollbacks == 1


def test_paramstyle_defaults_to_dialect_for_unknown_drivers():
    tracker = VersionTracker(FakeConnection(history=[]), PostgresDialect())
    assert tracker.paramstyle == "numeric_dollar"


def test_record_version_binds_through_sqlite3_qmark():
    connection = sqlite3.connect(":memory:")
    connection.execute(
        "CREATE TABLE goose_db_version ("
        "id INTEGER PRIMARY KEY AUTOINCREMENT, "
        "version_id INTEGER NOT NULL, "
        "is_applied BOOLEAN NOT NULL)"
    )
    connection.commit()
    tracker = VersionTracker(connection, PostgresDialect())
    assert tracker.paramstyle == "qmark"

    tracker.record_version(1)
    tracker.record_version(2)
    tracker.record_version(2, applied=False)

    assert tracker.history() == [(2, False), (2, True), (1, True)]
    assert tracker.ensure_version_table() == 1
    connection.close()
