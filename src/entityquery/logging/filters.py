"""Logging filters for context injection.

This module provides a filter that injects the query currently being
executed into log records, so that every line emitted while a statement
runs can be correlated with its table and operation.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional

from entityquery.__version__ import __version__

query_table_var: ContextVar[Optional[str]] = ContextVar("query_table", default=None)
query_operation_var: ContextVar[Optional[str]] = ContextVar("query_operation", default=None)


class ContextFilter(logging.Filter):
    """Logging filter that adds query context variables to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        """Add context variables to the log record.

        Args:
            record: Log record to enhance

        Returns:
            Always True (doesn't filter out any records)
        """
        setattr(record, "query_table", query_table_var.get())
        setattr(record, "query_operation", query_operation_var.get())
        setattr(record, "sdk_name", "entityquery")
        setattr(record, "sdk_version", __version__)

        return True


@contextmanager
def query_context(table: str, operation: str) -> Iterator[None]:
    """Scope the query context to a block, restoring the previous values on exit."""
    table_token = query_table_var.set(table)
    operation_token = query_operation_var.set(operation)
    try:
        yield
    finally:
        query_table_var.reset(table_token)
        query_operation_var.reset(operation_token)
