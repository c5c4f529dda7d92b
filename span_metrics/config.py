"""
Configuration settings for span metrics collection
"""
import os
from dataclasses import dataclass
from typing import Any, Dict

from span_metrics.sink import DEFAULT_MAX_SPANS


class MetricsBackend:
    """Supported metric registry backends"""
    PROMETHEUS = "prometheus"
    OTEL = "otel"

    ALL = (PROMETHEUS, OTEL)


def _env_flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).lower() in ["1", "true", "yes"]


@dataclass
class SpanMetricsConfig:
    """Configuration for the span metrics collector"""
    namespace: str = ""
    backend: str = MetricsBackend.PROMETHEUS
    service_name: str = "span-metrics"
    otlp_endpoint: str = "localhost:4317"
    export_spans: bool = False
    export_interval_ms: int = 5000  # OTLP metric export interval, otel backend only
    max_buffered_spans: int = DEFAULT_MAX_SPANS

    def __post_init__(self):
        if self.backend not in MetricsBackend.ALL:
            raise ValueError(f"Unsupported metrics backend: {self.backend}")
        if self.export_interval_ms <= 0:
            raise ValueError(f"export_interval_ms must be positive, got {self.export_interval_ms}")
        if self.max_buffered_spans <= 0:
            raise ValueError(f"max_buffered_spans must be positive, got {self.max_buffered_spans}")

    @classmethod
    def from_env(cls) -> "SpanMetricsConfig":
        """Create config from environment variables"""
        return cls(
            namespace=os.getenv("SPAN_METRICS_NAMESPACE", ""),
            backend=os.getenv("SPAN_METRICS_BACKEND", MetricsBackend.PROMETHEUS).lower(),
            service_name=os.getenv("OTEL_SERVICE_NAME", "span-metrics"),
            otlp_endpoint=os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT", "localhost:4317"),
            export_spans=_env_flag("SPAN_METRICS_EXPORT_SPANS"),
            export_interval_ms=int(os.getenv("SPAN_METRICS_EXPORT_INTERVAL_MS", "5000")),
            max_buffered_spans=int(os.getenv("SPAN_METRICS_MAX_BUFFERED_SPANS", str(DEFAULT_MAX_SPANS))),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return {
            "namespace": self.namespace,
            "backend": self.backend,
            "service_name": self.service_name,
            "otlp_endpoint": self.otlp_endpoint,
            "export_spans": self.export_spans,
            "export_interval_ms": self.export_interval_ms,
            "max_buffered_spans": self.max_buffered_spans,
        }
