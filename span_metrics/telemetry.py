"""
OpenTelemetry Setup

Wires a SpanMetricsCollector into an OpenTelemetry TracerProvider:
- setup_metrics: MeterProvider with periodic OTLP export, for the otel backend
- create_registry: the configured MetricRegistry backend
- setup_span_metrics: collector, sink and TracerProvider in one call
"""

import logging
from typing import Optional, Tuple

import prometheus_client
from opentelemetry import metrics, trace
from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import OTLPMetricExporter
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import ConsoleMetricExporter, PeriodicExportingMetricReader
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.sdk.trace.sampling import ALWAYS_ON

from span_metrics.collector import SpanMetricsCollector
from span_metrics.config import MetricsBackend, SpanMetricsConfig
from span_metrics.processor import MetricsSpanProcessor
from span_metrics.registry import MeterRegistry, MetricRegistry, PrometheusRegistry
from span_metrics.sink import InMemorySpanSink, SpanSink

logger = logging.getLogger(__name__)


def setup_metrics(
    service_name: str,
    otlp_endpoint: str = "localhost:4317",
    export_interval_ms: int = 5000,
    console: bool = False,
) -> metrics.Meter:
    """Configure an OpenTelemetry MeterProvider exporting over OTLP

    The provider is not installed globally; the returned meter is the only
    handle to it.

    Args:
        service_name: Service name
        otlp_endpoint: OTLP receiver address
        export_interval_ms: Metrics export interval in milliseconds
        console: Also print metrics to stdout (development debugging)

    Returns:
        Meter: Meter bound to the new provider
    """
    readers = [
        PeriodicExportingMetricReader(
            OTLPMetricExporter(endpoint=otlp_endpoint),
            export_interval_millis=export_interval_ms,
        )
    ]
    if console:
        readers.append(
            PeriodicExportingMetricReader(
                ConsoleMetricExporter(),
                export_interval_millis=export_interval_ms,
            )
        )

    provider = MeterProvider(
        resource=Resource.create({"service.name": service_name}),
        metric_readers=readers,
    )

    logger.info(f"OpenTelemetry metrics configured, service name: {service_name}, OTLP endpoint: {otlp_endpoint}")

    return provider.get_meter(service_name)


def create_registry(
    config: SpanMetricsConfig,
    prometheus_registry: Optional[prometheus_client.CollectorRegistry] = None,
    meter: Optional[metrics.Meter] = None,
) -> MetricRegistry:
    """Create the MetricRegistry selected by config.backend

    Args:
        config: Collector configuration
        prometheus_registry: CollectorRegistry for the prometheus backend,
            a private one when omitted
        meter: Meter for the otel backend, set up with setup_metrics when omitted

    Returns:
        MetricRegistry: Registry backend
    """
    if config.backend == MetricsBackend.OTEL:
        if meter is None:
            meter = setup_metrics(
                config.service_name,
                otlp_endpoint=config.otlp_endpoint,
                export_interval_ms=config.export_interval_ms,
            )
        return MeterRegistry(meter)

    return PrometheusRegistry(prometheus_registry)


def setup_span_metrics(
    config: Optional[SpanMetricsConfig] = None,
    sink: Optional[SpanSink] = None,
    registry: Optional[MetricRegistry] = None,
    set_global: bool = False,
) -> Tuple[TracerProvider, SpanMetricsCollector]:
    """Build a TracerProvider whose ended spans feed a SpanMetricsCollector

    With export_spans set, an OTLP BatchSpanProcessor is added next to the
    metrics processor. It exports each span as the SDK ended it, so the
    HTTP endpoint rename is only visible to the collector's sink.

    Args:
        config: Collector configuration, read from the environment when omitted
        sink: Sink the collector forwards to, a bounded InMemorySpanSink when omitted
        registry: Metric registry, created with create_registry when omitted
        set_global: Install the provider as the global TracerProvider

    Returns:
        Tuple[TracerProvider, SpanMetricsCollector]: Provider and collector
    """
    if config is None:
        config = SpanMetricsConfig.from_env()
    if sink is None:
        sink = InMemorySpanSink(max_spans=config.max_buffered_spans)
    if registry is None:
        registry = create_registry(config)

    collector = SpanMetricsCollector(sink, registry, namespace=config.namespace)

    provider = TracerProvider(
        sampler=ALWAYS_ON,
        resource=Resource.create({"service.name": config.service_name}),
    )
    provider.add_span_processor(MetricsSpanProcessor(collector))

    if config.export_spans:
        provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=config.otlp_endpoint)))

    if set_global:
        trace.set_tracer_provider(provider)

    logger.info(
        f"Span metrics configured, service name: {config.service_name}, "
        f"backend: {config.backend}, namespace: {config.namespace!r}, export spans: {config.export_spans}"
    )

    return provider, collector
