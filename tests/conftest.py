"""
Shared fixtures for span metrics tests
"""
import pytest

from span_metrics.collector import SpanMetricsCollector
from span_metrics.registry import Counter, Histogram, MetricRegistry
from span_metrics.sink import InMemorySpanSink
from span_metrics.span import Span


class RecordingCounter(Counter):
    """Counter that keeps every increment"""

    def __init__(self, name, labelnames):
        self.name = name
        self.labelnames = tuple(labelnames)
        self.calls = []

    def increment(self, labels):
        self.calls.append(dict(labels))


class RecordingHistogram(Histogram):
    """Histogram that keeps every observation"""

    def __init__(self, name, labelnames):
        self.name = name
        self.labelnames = tuple(labelnames)
        self.observations = []

    def observe(self, labels, value):
        self.observations.append((dict(labels), value))


class RecordingRegistry(MetricRegistry):
    """In-process registry exposing what was recorded"""

    def __init__(self):
        self.counters = {}
        self.histograms = {}

    def counter(self, name, documentation, labelnames):
        return self.counters.setdefault(name, RecordingCounter(name, labelnames))

    def histogram(self, name, documentation, labelnames):
        return self.histograms.setdefault(name, RecordingHistogram(name, labelnames))


@pytest.fixture
def registry():
    return RecordingRegistry()


@pytest.fixture
def sink():
    return InMemorySpanSink()


@pytest.fixture
def collector(sink, registry):
    return SpanMetricsCollector(sink, registry)


@pytest.fixture
def http_span():
    """Factory for server-side HTTP spans"""
    def _make(operation_name="GET", url="/a/b", status_code="200", start_time=100.0, **tags):
        span_tags = {"span.kind": "server", "http.url": url}
        if status_code is not None:
            span_tags["http.status_code"] = status_code
        span_tags.update(tags)
        return Span(operation_name=operation_name, tags=span_tags, start_time=start_time)
    return _make
