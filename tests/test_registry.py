"""
Tests for the prometheus_client and OpenTelemetry registry backends
"""
import prometheus_client
import pytest
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import InMemoryMetricReader

from span_metrics.collector import SpanMetricsCollector
from span_metrics.registry import MeterRegistry, PrometheusRegistry, instrument_name
from span_metrics.sink import InMemorySpanSink
from span_metrics.span import Span


def _http_span():
    return Span(
        operation_name="GET",
        tags={"span.kind": "server", "http.url": "/a/b", "http.status_code": "200"},
        start_time=100.0,
    )


class TestPrometheusRegistry:
    """Test the prometheus_client backend"""

    @pytest.fixture
    def collector_registry(self):
        return prometheus_client.CollectorRegistry()

    def test_private_registry_by_default(self):
        assert PrometheusRegistry().registry is not prometheus_client.REGISTRY

    def test_counter_absent_label_exported_empty(self, collector_registry):
        registry = PrometheusRegistry(collector_registry)
        counter = registry.counter("ns:requests", "Requests", ("endpoint", "error"))

        counter.increment({"endpoint": "e", "error": None})
        counter.increment({"endpoint": "e", "error": None})
        counter.increment({"endpoint": "e", "error": "true"})

        assert collector_registry.get_sample_value("ns:requests_total", {"endpoint": "e", "error": ""}) == 2.0
        assert collector_registry.get_sample_value("ns:requests_total", {"endpoint": "e", "error": "true"}) == 1.0

    def test_histogram_observe(self, collector_registry):
        registry = PrometheusRegistry(collector_registry)
        histogram = registry.histogram("latency", "Latency", ("endpoint", "error"))

        histogram.observe({"endpoint": "e", "error": "false"}, 0.25)

        labels = {"endpoint": "e", "error": "false"}
        assert collector_registry.get_sample_value("latency_count", labels) == 1.0
        assert collector_registry.get_sample_value("latency_sum", labels) == pytest.approx(0.25)

    def test_same_name_returns_same_instrument(self):
        registry = PrometheusRegistry()
        assert registry.counter("c", "C", ("a",)) is registry.counter("c", "C", ("a",))
        assert registry.histogram("h", "H", ("a",)) is registry.histogram("h", "H", ("a",))

    def test_collector_end_to_end(self, collector_registry):
        sink = InMemorySpanSink()
        collector = SpanMetricsCollector(sink, PrometheusRegistry(collector_registry), namespace="shop")

        collector.send_span(_http_span(), 100.05)
        collector.send_span(Span(operation_name="db.query", start_time=1.0), 1.5)

        http_labels = {"endpoint": "HTTP-GET-/a/b", "error": ""}
        assert collector_registry.get_sample_value("shop:requests_total", http_labels) == 1.0
        assert collector_registry.get_sample_value("shop:request_latency_count", http_labels) == 1.0
        assert collector_registry.get_sample_value(
            "shop:http_requests_total", {"endpoint": "HTTP-GET-/a/b", "status_code": "2xx"}
        ) == 1.0
        assert collector_registry.get_sample_value(
            "operation_duration_seconds_sum", {"name": "db.query", "error": ""}
        ) == pytest.approx(0.5)
        assert len(sink.retrieve()) == 2


def _collect(reader):
    points = {}
    data = reader.get_metrics_data()
    if data is None:
        return points
    for resource_metrics in data.resource_metrics:
        for scope_metrics in resource_metrics.scope_metrics:
            for metric in scope_metrics.metrics:
                points[metric.name] = list(metric.data.data_points)
    return points


class TestMeterRegistry:
    """Test the OpenTelemetry Meter backend"""

    @pytest.fixture
    def reader(self):
        return InMemoryMetricReader()

    @pytest.fixture
    def meter_registry(self, reader):
        provider = MeterProvider(metric_readers=[reader])
        yield MeterRegistry(provider.get_meter("test"))
        provider.shutdown()

    def test_instrument_name(self):
        assert instrument_name("ns:requests") == "ns.requests"
        assert instrument_name("operation_duration_seconds") == "operation_duration_seconds"

    def test_counter_drops_absent_labels(self, reader, meter_registry):
        meter_registry.counter("ns:requests", "Requests", ("endpoint", "error")).increment(
            {"endpoint": "e", "error": None}
        )

        [point] = _collect(reader)["ns.requests"]
        assert point.value == 1
        assert dict(point.attributes) == {"endpoint": "e"}

    def test_histogram_observe(self, reader, meter_registry):
        meter_registry.histogram("latency", "Latency", ("endpoint", "error")).observe(
            {"endpoint": "e", "error": "true"}, 0.5
        )

        [point] = _collect(reader)["latency"]
        assert point.count == 1
        assert point.sum == pytest.approx(0.5)
        assert dict(point.attributes) == {"endpoint": "e", "error": "true"}

    def test_same_name_returns_same_instrument(self, meter_registry):
        assert meter_registry.counter("c", "C", ("a",)) is meter_registry.counter("c", "C", ("a",))

    def test_collector_end_to_end(self, reader, meter_registry):
        collector = SpanMetricsCollector(InMemorySpanSink(), meter_registry, namespace="shop")

        collector.send_span(_http_span(), 100.05)

        points = _collect(reader)
        assert points["shop.requests"][0].value == 1
        assert dict(points["shop.http_requests"][0].attributes) == {
            "endpoint": "HTTP-GET-/a/b",
            "status_code": "2xx",
        }
        assert points["shop.request_latency"][0].count == 1
