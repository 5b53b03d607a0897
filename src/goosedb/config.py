"""
Driver configuration and dialect resolution.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Dict

from .dialects import Dialect, dialect_by_name
from .errors import ConfigurationError
from .security.dsns import DSNConfig, is_url_dsn, parse_dsn

DEFAULT_DSN_ENV = "GOOSE_DBSTRING"

# Driver and DSN scheme names mapped to the dialect that speaks their SQL.
DRIVER_DIALECTS: Dict[str, str] = {
    "postgres": "postgres",
    "postgresql": "postgres",
    "psycopg": "postgres",
    "psycopg2": "postgres",
    "mysql": "mysql",
    "mymysql": "mysql",
    "pymysql": "mysql",
    "mysqldb": "mysql",
    "clickhouse": "clickhouse",
    "clickhouse_driver": "clickhouse",
}


@dataclass
class DriverConfig:
    """
    Normalized driver settings used to pick a dialect.
    """

    driver: str
    open: str
    dialect_name: str | None = None
    dsn: DSNConfig | None = None
    source: str | None = None

    @classmethod
    def from_dsn(cls, dsn: str, **kwargs: Any) -> "DriverConfig":
        """
        Build a config from a DSN string.

        URL DSNs supply the driver from their scheme and may carry a
        ``dialect`` query parameter. Opaque driver strings need ``driver=``.
        """

        parsed: DSNConfig | None = None
        dialect_name = kwargs.pop("dialect_name", None)
        driver = kwargs.pop("driver", None)
        if is_url_dsn(dsn):
            parsed = parse_dsn(dsn)
            if dialect_name is None:
                dialect_name = parsed.query.pop("dialect", None)
            else:
                parsed.query.pop("dialect", None)
            if driver is None:
                driver = parsed.scheme
        if not driver:
            raise ConfigurationError("A driver name is required for DSNs without a URL scheme.")
        return cls(
            driver=driver,
            open=dsn,
            dialect_name=dialect_name,
            dsn=parsed,
            **kwargs,
        )

    @classmethod
    def from_env(cls, env_var: str = DEFAULT_DSN_ENV, **kwargs: Any) -> "DriverConfig":
        """
        Build a config from an environment variable containing a DSN.
        """

        value = os.getenv(env_var)
        if not value:
            raise ConfigurationError(f"Environment variable {env_var} is not set")
        kwargs.setdefault("source", env_var)
        return cls.from_dsn(value, **kwargs)

    def resolve_dialect(self) -> Dialect:
        """
        Return the dialect for this driver.

        An explicit ``dialect_name`` wins, letting drivers that are not in
        ``DRIVER_DIALECTS`` ask for a dialect by name.
        """

        name = self.dialect_name or DRIVER_DIALECTS.get(self.driver.lower())
        if name is None:
            raise ConfigurationError(
                f"No dialect known for driver {self.driver!r}; set a dialect name explicitly."
            )
        dialect = dialect_by_name(name)
        if dialect is None:
            raise ConfigurationError(f"Unknown dialect {name!r} for driver {self.driver!r}")
        return dialect

    def redacted_dsn(self) -> str:
        """
        Return a DSN safe for logging.
        """

        if self.dsn:
            return self.dsn.redacted()
        return f"{self.driver}:***"

    def descriptive_label(self) -> str:
        redacted = self.redacted_dsn()
        if self.source:
            return f"{self.source} ({redacted})"
        return redacted
