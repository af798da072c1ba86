"""Per-query correlation IDs for availability logs.

A single booking-screen lookup logs from the facade, the engine and the
booking repository. Tagging each record with the lookup's query ID keeps
those lines together when two staff members check the same day at once.

Usage:
    from detailing_scheduler.logging_context import get_query_logger, query_scope

    logger = get_query_logger(__name__)
    with query_scope() as query_id:
        logger.info("Scanning %s", day)  # → [Q-3f9a1c] Scanning 2030-06-04
"""

import logging
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional

NO_QUERY = "NO_QUERY_ID"

_query_id: ContextVar[str] = ContextVar("query_id", default=NO_QUERY)


def get_query_id() -> str:
    return _query_id.get()


def new_query_id() -> str:
    return f"Q-{uuid.uuid4().hex[:6]}"


@contextmanager
def query_scope(query_id: Optional[str] = None) -> Iterator[str]:
    """Tag log records inside the block, restoring the caller's ID afterwards."""
    token = _query_id.set(query_id or new_query_id())
    try:
        yield _query_id.get()
    finally:
        _query_id.reset(token)


class QueryIdFilter(logging.Filter):
    """Stamps ``record.query_id`` for the ``%(query_id)s`` log format."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.query_id = _query_id.get()  # type: ignore[attr-defined]
        return True


def get_query_logger(name: str) -> logging.Logger:
    """Module logger whose records carry the active query ID."""
    logger = logging.getLogger(name)
    if not any(isinstance(f, QueryIdFilter) for f in logger.filters):
        logger.addFilter(QueryIdFilter())
    return logger
