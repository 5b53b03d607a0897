"""
Lookup of dialects by engine name.
"""

from __future__ import annotations

from typing import Callable, Dict, List, Optional

from .base import Dialect
from .clickhouse import get_clickhouse_dialect
from .mysql import get_mysql_dialect
from .postgres import get_postgres_dialect

_DIALECTS: Dict[str, Callable[[], Dialect]] = {
    "postgres": get_postgres_dialect,
    "mysql": get_mysql_dialect,
    "clickhouse": get_clickhouse_dialect,
}


def dialect_by_name(name: str) -> Optional[Dialect]:
    """
    Return a new dialect for ``name``, or ``None`` when the name is unknown.

    Construction reads ``GOOSE_SLOW_QUERY_MS`` and raises
    ``ConfigurationError`` for an invalid value.

    Matching is case-sensitive. Callers decide whether an unknown name is fatal.
    """
    factory = _DIALECTS.get(name)
    if factory is None:
        return None
    return factory()


def available_dialects() -> List[str]:
    return sorted(_DIALECTS)
