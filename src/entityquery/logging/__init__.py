"""Logging infrastructure for entityquery.

This module provides structured logging with JSON output and query
context tracking.
"""

from entityquery.logging.filters import ContextFilter, query_context
from entityquery.logging.logger import CustomJsonFormatter, get_logger, setup_logging

__all__ = [
    "get_logger",
    "setup_logging",
    "CustomJsonFormatter",
    "ContextFilter",
    "query_context",
]
