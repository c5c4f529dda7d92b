"""
Span Metrics

Derives request-rate, latency and status-code metrics from finished
tracing spans before forwarding them to their original sink.
"""

from importlib import import_module

__version__ = "0.1.0"

__all__ = [
    "Span",
    "SpanSink",
    "InMemorySpanSink",
    "SpanMetricsCollector",
    "MetricsSpanProcessor",
    "PrometheusRegistry",
    "MeterRegistry",
    "SpanMetricsConfig",
    "setup_span_metrics",
    "metric_name",
    "error_value",
]

_EXPORTS = {
    "Span": ".span",
    "SpanSink": ".sink",
    "InMemorySpanSink": ".sink",
    "SpanMetricsCollector": ".collector",
    "MetricsSpanProcessor": ".processor",
    "PrometheusRegistry": ".registry",
    "MeterRegistry": ".registry",
    "SpanMetricsConfig": ".config",
    "setup_span_metrics": ".telemetry",
    "metric_name": ".naming",
    "error_value": ".classify",
}


def __getattr__(name: str):
    """Lazily import symbols to avoid loading exporters at import time."""
    if name in _EXPORTS:
        return getattr(import_module(_EXPORTS[name], __package__), name)
    raise AttributeError(name)
