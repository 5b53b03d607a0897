"""
Slow-query threshold configuration.
"""

from __future__ import annotations

import os

from ..errors import ConfigurationError

SLOW_QUERY_ENV = "GOOSE_SLOW_QUERY_MS"


def resolve_slow_query_ms(*, default: int = 100, override: int | None = None) -> int:
    """
    Return the slow-query warning threshold in milliseconds.

    An explicit ``override`` wins over ``GOOSE_SLOW_QUERY_MS``, which wins over ``default``.
    """
    if override is not None:
        value = override
    else:
        raw = os.getenv(SLOW_QUERY_ENV)
        if raw is None or not raw.strip():
            return default
        try:
            value = int(raw)
        except ValueError as exc:
            raise ConfigurationError(
                f"Invalid integer value for '{SLOW_QUERY_ENV}': {raw!r}"
            ) from exc
    if value < 0:
        raise ConfigurationError(f"Slow query threshold must be non-negative, got {value}")
    return value
