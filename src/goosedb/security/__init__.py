"""Security helpers for goosedb."""

from .dsns import DSNConfig, is_url_dsn, parse_dsn

__all__ = ["DSNConfig", "is_url_dsn", "parse_dsn"]
