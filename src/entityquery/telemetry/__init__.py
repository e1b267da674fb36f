"""OpenTelemetry handles for entityquery instrumentation.

Spans and instruments are reported under the ``entityquery`` instrumentation
scope with the installed package version. Without a configured SDK both
handles are no-ops.
"""

from typing import Optional

from opentelemetry import metrics, trace
from opentelemetry.metrics import Meter
from opentelemetry.trace import Tracer

from entityquery.__version__ import __version__

INSTRUMENTATION_NAME = "entityquery"

__all__ = ["INSTRUMENTATION_NAME", "get_tracer", "get_meter"]


def get_tracer(name: Optional[str] = None) -> Tracer:
    """Tracer for the ``entityquery`` scope, or a sub-scope such as a module name."""
    return trace.get_tracer(name or INSTRUMENTATION_NAME, __version__)


def get_meter(name: Optional[str] = None) -> Meter:
    """Meter for the ``entityquery`` scope; statement instruments live here."""
    return metrics.get_meter(name or INSTRUMENTATION_NAME, __version__)
