"""
Dialect strategy interface for the goose version table.
"""

from __future__ import annotations

import itertools
import logging
import re
from typing import Any, Callable, Dict, Mapping, NamedTuple, Protocol, Sequence

from ..errors import TableDoesNotExistError
from ..utils import time_call

VERSION_TABLE = "goose_db_version"

_QMARK_RE = re.compile(r"\?")
_NUMERIC_DOLLAR_RE = re.compile(r"\$(\d+)")

# DB-API paramstyles a statement can be rewritten into, by 1-based position.
# pyformat drivers (psycopg, PyMySQL) accept plain %s for positional params.
_TARGET_MARKERS: Dict[str, Callable[[int], str]] = {
    "qmark": lambda position: "?",
    "numeric": lambda position: f":{position}",
    "numeric_dollar": lambda position: f"${position}",
    "format": lambda position: "%s",
    "pyformat": lambda position: "%s",
}


class VersionRecord(NamedTuple):
    version_id: int
    is_applied: bool


class Dialect(Protocol):
    """
    Strategy interface implemented once per supported database engine.
    """

    @property
    def name(self) -> str: ...

    @property
    def param_style(self) -> str: ...

    def create_version_table_sql(self) -> str: ...

    def insert_version_sql(self) -> str: ...

    def db_version_query(self, connection: Any) -> list[VersionRecord]: ...


def count_placeholders(sql: str, param_style: str) -> int:
    """
    Count the positional parameters a statement expects.

    ``numeric_dollar`` statements count distinct ``$N`` markers, ``qmark``
    statements count each ``?``.
    """
    if param_style == "qmark":
        return len(_QMARK_RE.findall(sql))
    if param_style == "numeric_dollar":
        return len(set(_NUMERIC_DOLLAR_RE.findall(sql)))
    raise ValueError(f"Unsupported param style: {param_style!r}")


def adapt_placeholders(
    sql: str, params: Sequence[Any], source_style: str, target_style: str
) -> tuple[str, tuple[Any, ...]]:
    """
    Rewrite positional markers from ``source_style`` into ``target_style``.

    Only marker syntax changes; values are still bound by the driver.
    ``$N`` markers are re-ordered into appearance order for styles that
    bind by position.
    """
    params = tuple(params)
    if source_style == target_style:
        return sql, params
    if target_style not in _TARGET_MARKERS:
        raise ValueError(f"Unsupported param style: {target_style!r}")
    marker = _TARGET_MARKERS[target_style]
    if target_style in ("format", "pyformat"):
        sql = sql.replace("%", "%%")

    if source_style == "qmark":
        counter = itertools.count(1)
        return _QMARK_RE.sub(lambda _: marker(next(counter)), sql), params
    if source_style == "numeric_dollar":
        order: list[int] = []

        def replace(match: re.Match[str]) -> str:
            order.append(int(match.group(1)))
            return marker(len(order))

        rewritten = _NUMERIC_DOLLAR_RE.sub(replace, sql)
        try:
            reordered = tuple(params[index - 1] for index in order)
        except IndexError as exc:
            raise ValueError(f"Statement references more than {len(params)} parameters") from exc
        return rewritten, reordered
    raise ValueError(f"Unsupported param style: {source_style!r}")


def _coerce_row(row: Any) -> VersionRecord:
    if isinstance(row, Mapping):
        version_id, is_applied = row["version_id"], row["is_applied"]
    else:
        version_id, is_applied = row[0], row[1]
    return VersionRecord(int(version_id), bool(is_applied))


def _close_cursor(cursor: Any, logger: logging.Logger) -> None:
    close = getattr(cursor, "close", None)
    if close is None:
        return
    try:
        close()
    except Exception as exc:
        logger.warning("Ignoring error while closing version history cursor: %s", exc)


def fetch_version_history(
    connection: Any,
    sql: str,
    *,
    dialect: str,
    logger: logging.Logger,
    threshold_ms: int = 100,
) -> list[VersionRecord]:
    """
    Run a version history query on a DB-API connection.

    Any failure while querying is reported as ``TableDoesNotExistError``.
    Errors from closing the cursor are logged once rows have been read.
    """
    cursor = None
    try:
        cursor = connection.cursor()
        with time_call(f"{dialect}.db_version_query", logger, sql=sql, threshold_ms=threshold_ms):
            cursor.execute(sql)
            rows = cursor.fetchall()
    except Exception as exc:
        # TODO: inspect driver error codes (42P01, 1146, 60) to tell a missing
        # table apart from connectivity and permission failures.
        logger.debug("Version history query failed, treating %s as missing: %s", VERSION_TABLE, exc)
        raise TableDoesNotExistError(dialect) from exc
    finally:
        if cursor is not None:
            _close_cursor(cursor, logger)
    return [_coerce_row(row) for row in rows]
