"""Logging helpers for goosedb."""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import Iterator

_LOGGER_NAMESPACE = "goosedb"


def configure_logging(level: int = logging.INFO) -> None:
    """
    Attach a single stream handler to the ``goosedb`` logger.
    """
    logger = logging.getLogger(_LOGGER_NAMESPACE)
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(level)


def get_logger(name: str) -> logging.Logger:
    configure_logging()
    return logging.getLogger(f"{_LOGGER_NAMESPACE}.{name}")


@contextmanager
def time_call(
    name: str, logger: logging.Logger, *, sql: str | None = None, threshold_ms: int = 100
) -> Iterator[None]:
    """
    Log how long the wrapped block took; at or above ``threshold_ms`` as a warning.
    """
    start = time.monotonic()
    failed = False
    try:
        yield
    except Exception:
        failed = True
        raise
    finally:
        elapsed_ms = (time.monotonic() - start) * 1000
        level = logging.WARNING if elapsed_ms >= threshold_ms else logging.DEBUG
        logger.log(
            level,
            "%s took %.2fms",
            name,
            elapsed_ms,
            extra={"sql": sql, "elapsed_ms": elapsed_ms, "failed": failed},
        )
