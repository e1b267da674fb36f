"""Metrics collection for executed statements.

This module exports statement counters and durations to OpenTelemetry.
Without a configured SDK the meter is a no-op and recording costs nothing.
"""

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

from entityquery.telemetry import INSTRUMENTATION_NAME, get_meter


@dataclass
class StatementMetrics:
    """Container for the outcome of one executed statement.

    Attributes:
        operation: Statement kind (SELECT, COUNT, INSERT, UPDATE, DELETE)
        table_name: Root table of the query
        rows: Rows returned (reads) or affected (writes)
        duration_seconds: Wall time spent in the connection call
        success: Whether the statement completed without raising
        dialect: SQLAlchemy dialect name of the connection
    """

    operation: str
    table_name: str
    rows: int
    duration_seconds: float
    success: bool
    dialect: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert metrics to dictionary."""
        return asdict(self)

    def attributes(self) -> Dict[str, str]:
        return {
            "operation": self.operation,
            "table": self.table_name,
            "success": str(self.success).lower(),
            "dialect": self.dialect or "unknown",
        }


class MetricsCollector:
    """Collector exporting statement metrics to OpenTelemetry instruments."""

    def __init__(self, meter_name: str = INSTRUMENTATION_NAME):
        self.meter = get_meter(meter_name)
        self._setup_instruments()

    def _setup_instruments(self) -> None:
        self.statement_counter = self.meter.create_counter(
            "entityquery_statements_total",
            description="Total number of executed statements",
            unit="statements",
        )
        self.rows_counter = self.meter.create_counter(
            "entityquery_rows_total",
            description="Rows returned or affected by statements",
            unit="rows",
        )
        self.error_counter = self.meter.create_counter(
            "entityquery_errors_total",
            description="Statements that raised",
            unit="errors",
        )
        self.duration_histogram = self.meter.create_histogram(
            "entityquery_statement_duration_seconds",
            description="Duration of statement execution",
            unit="seconds",
        )

    def record_statement(self, metrics: StatementMetrics) -> None:
        """Record one executed statement."""
        attributes = metrics.attributes()
        self.statement_counter.add(1, attributes)
        self.duration_histogram.record(metrics.duration_seconds, attributes)
        if metrics.success:
            self.rows_counter.add(metrics.rows, attributes)
        else:
            self.error_counter.add(1, attributes)


_collector: Optional[MetricsCollector] = None


def get_metrics_collector() -> MetricsCollector:
    """Return the shared collector, creating its instruments on first use."""
    global _collector
    if _collector is None:
        _collector = MetricsCollector()
    return _collector
