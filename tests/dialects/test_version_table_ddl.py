import pytest

from goosedb.dialects import dialect_by_name

sqlglot = pytest.importorskip("sqlglot")
exp = pytest.importorskip("sqlglot.expressions")


@pytest.mark.parametrize(
    "name, read, expected_columns",
    [
        ("postgres", "postgres", ["id", "version_id", "is_applied", "tstamp"]),
        # MySQL reuses the PostgreSQL text; serial and boolean are aliases there
        ("mysql", "postgres", ["id", "version_id", "is_applied", "tstamp"]),
        ("clickhouse", "clickhouse", ["version_id", "is_applied", "date", "tstamp"]),
    ],
)
def test_version_table_ddl_parses(name, read, expected_columns):
    sql = dialect_by_name(name).create_version_table_sql()
    statement = sqlglot.parse_one(sql.strip().rstrip(";"), read=read)

    assert isinstance(statement, exp.Create)
    assert statement.find(exp.Table).name == "goose_db_version"
    columns = [column.name for column in statement.find_all(exp.ColumnDef)]
    assert columns == expected_columns


@pytest.mark.parametrize(
    "name, read",
    [("postgres", "postgres"), ("mysql", "mysql"), ("clickhouse", "clickhouse")],
)
def test_insert_statement_parses(name, read):
    sql = dialect_by_name(name).insert_version_sql()
    statement = sqlglot.parse_one(sql.rstrip(";"), read=read)
    assert isinstance(statement, exp.Insert)
    assert statement.find(exp.Table).name == "goose_db_version"
