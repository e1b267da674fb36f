"""Monitoring infrastructure for statement metrics."""

from entityquery.monitoring.metrics import MetricsCollector, StatementMetrics, get_metrics_collector

__all__ = [
    "StatementMetrics",
    "MetricsCollector",
    "get_metrics_collector",
]
