"""JSON logging for the ``entityquery`` logger hierarchy.

Records are rendered as one JSON object per line. Anything passed through
``extra=`` becomes a top-level key, the ``ContextFilter`` adds the table and
operation of the statement being executed, and records emitted inside an
active span carry its trace and span ids.
"""

from __future__ import annotations

import json
import logging
import logging.config
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from opentelemetry import trace

from entityquery.settings import get_settings

LOGGER_NAME = "entityquery"

# Attributes every LogRecord has; whatever else a record carries came from extra=
_STANDARD_ATTRIBUTES = frozenset(
    logging.LogRecord(LOGGER_NAME, logging.INFO, __file__, 0, "", (), None).__dict__
) | {"asctime", "message"}


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def _trace_ids() -> Dict[str, str]:
    context = trace.get_current_span().get_span_context()
    if not context.is_valid:
        return {}
    return {
        "trace_id": format(context.trace_id, "032x"),
        "span_id": format(context.span_id, "016x"),
    }


class CustomJsonFormatter(logging.Formatter):
    """Formats a record as JSON with its extras and the current trace ids."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(
            (key, value)
            for key, value in record.__dict__.items()
            if key not in _STANDARD_ATTRIBUTES and key not in entry
        )
        entry.update(_trace_ids())

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


def setup_logging(level: Optional[str] = None) -> None:
    """Send ``entityquery`` records to stdout as JSON.

    Only the ``entityquery`` logger hierarchy is configured; the root logger
    belongs to the application.

    Args:
        level: Log level name. Defaults to ``EntityQuerySettings.log_level``
            (``ENTITYQUERY_LOG_LEVEL``).
    """
    level = (level or get_settings().log_level).upper()
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "eq_json": {"()": CustomJsonFormatter},
            },
            "filters": {
                "eq_context": {"()": "entityquery.logging.filters.ContextFilter"},
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "level": level,
                    "formatter": "eq_json",
                    "filters": ["eq_context"],
                    "stream": "ext://sys.stdout",
                }
            },
            "loggers": {
                LOGGER_NAME: {
                    "level": level,
                    "handlers": ["console"],
                    "propagate": False,
                }
            },
        }
    )
