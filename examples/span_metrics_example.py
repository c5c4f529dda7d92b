#!/usr/bin/env python
"""
Span Metrics Example

Ends a few spans through an OpenTelemetry TracerProvider and prints the
Prometheus metrics derived from them.
"""

import logging
import time

import prometheus_client
from opentelemetry.trace import SpanKind, Status, StatusCode

from span_metrics.config import SpanMetricsConfig
from span_metrics.registry import PrometheusRegistry
from span_metrics.telemetry import setup_span_metrics


def setup_logging():
    """Setup logging configuration"""
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def main():
    setup_logging()

    collector_registry = prometheus_client.CollectorRegistry()
    provider, collector = setup_span_metrics(
        SpanMetricsConfig(namespace="example", service_name="span-metrics-example"),
        registry=PrometheusRegistry(collector_registry),
    )
    tracer = provider.get_tracer(__name__)

    for url, status in [("/orders", 200), ("/orders", 201), ("/orders/42", 404), ("/health", 503)]:
        with tracer.start_as_current_span(
            "GET",
            kind=SpanKind.SERVER,
            attributes={"http.url": url, "http.status_code": status},
        ) as span:
            time.sleep(0.01)
            if status >= 500:
                span.set_status(Status(StatusCode.ERROR))

    with tracer.start_as_current_span("db.query"):
        time.sleep(0.005)

    for span, end_time in collector.retrieve():
        print(f"Forwarded span: {span.operation_name} ({end_time - span.start_time:.3f}s)")

    print(prometheus_client.generate_latest(collector_registry).decode())
    provider.shutdown()


if __name__ == "__main__":
    main()
