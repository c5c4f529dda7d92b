"""
Span Metrics Collector

Sink decorator that derives metrics from every finished span before
forwarding it to the wrapped sink.
"""

import logging
from typing import Any

from span_metrics.classify import is_http_server
from span_metrics.naming import default_normalize
from span_metrics.recorders import HTTPMetricsRecorder, NormalizeFn, OperationMetricsRecorder
from span_metrics.registry import MetricRegistry
from span_metrics.sink import SpanSink
from span_metrics.span import Span

logger = logging.getLogger(__name__)


class SpanMetricsCollector(SpanSink):
    """Collects HTTP and operation metrics from finished spans

    HTTP server spans (span.kind=server with an http.url or http.method tag)
    feed the request, latency and status-code metrics and are renamed to
    their endpoint; all other spans feed operation_duration_seconds.
    Sink errors propagate to the caller unchanged.
    """

    def __init__(
        self,
        sink: SpanSink,
        registry: MetricRegistry,
        namespace: str = "",
        normalize: NormalizeFn = default_normalize,
    ):
        """Initialize the collector

        Args:
            sink: Sink every span is forwarded to
            registry: Registry the metrics are created in
            namespace: Prefix for the HTTP metric names
            normalize: Maps the raw endpoint string to a label-safe value
        """
        self.sink = sink
        self.namespace = namespace
        self.http_metrics = HTTPMetricsRecorder(registry, namespace=namespace, normalize=normalize)
        self.operation_metrics = OperationMetricsRecorder(registry)

        logger.debug(f"Span metrics collector created, namespace: {namespace!r}")

    def send_span(self, span: Span, end_time: float) -> None:
        duration = float(end_time - span.start_time)
        self.track(span, duration)
        self.sink.send_span(span, end_time)

    def retrieve(self) -> Any:
        return self.sink.retrieve()

    def track(self, span: Span, duration: float) -> None:
        """Route a span to the HTTP or the operation recorder"""
        if is_http_server(span):
            self.http_metrics.record(span, duration)
        else:
            self.operation_metrics.observe(span, duration)
