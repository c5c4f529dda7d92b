"""
Metric Registry

Defines the counter/histogram registry the collector writes to, with a
prometheus_client backend and an OpenTelemetry Meter backend.
"""

import abc
import logging
import threading
from typing import Dict, Mapping, Optional, Sequence, Tuple

import prometheus_client
from opentelemetry import metrics

logger = logging.getLogger(__name__)

Labels = Mapping[str, Optional[str]]


class Counter(abc.ABC):
    """Monotonic counter with a fixed label set"""

    @abc.abstractmethod
    def increment(self, labels: Labels) -> None:
        """Add one to the series identified by labels

        Args:
            labels: Label values keyed by the declared label names;
                None marks an absent label
        """
        pass


class Histogram(abc.ABC):
    """Distribution of observed values with a fixed label set"""

    @abc.abstractmethod
    def observe(self, labels: Labels, value: float) -> None:
        """Record one observation

        Args:
            labels: Label values keyed by the declared label names;
                None marks an absent label
            value: Observed value
        """
        pass


class MetricRegistry(abc.ABC):
    """Creates counters and histograms by name

    Implementations must be safe to use from concurrent callers, the
    collector adds no locking of its own.
    """

    @abc.abstractmethod
    def counter(self, name: str, documentation: str, labelnames: Sequence[str]) -> Counter:
        """Get or create a counter

        Args:
            name: Fully qualified metric name
            documentation: Help text
            labelnames: Closed set of label keys

        Returns:
            Counter: The counter registered under name
        """
        pass

    @abc.abstractmethod
    def histogram(self, name: str, documentation: str, labelnames: Sequence[str]) -> Histogram:
        """Get or create a histogram

        Args:
            name: Fully qualified metric name
            documentation: Help text
            labelnames: Closed set of label keys

        Returns:
            Histogram: The histogram registered under name
        """
        pass


class _InstrumentCache:
    """Returns the instrument already created for a (kind, name) pair"""

    def __init__(self):
        self._instruments: Dict[Tuple[str, str], object] = {}
        self._lock = threading.Lock()

    def get_or_create(self, kind: str, name: str, factory):
        with self._lock:
            key = (kind, name)
            if key not in self._instruments:
                self._instruments[key] = factory()
                logger.debug(f"Registered {kind} {name}")
            return self._instruments[key]


class PrometheusCounter(Counter):
    def __init__(self, metric: prometheus_client.Counter, labelnames: Sequence[str]):
        self.metric = metric
        self.labelnames = tuple(labelnames)

    def increment(self, labels: Labels) -> None:
        self.metric.labels(*_label_values(self.labelnames, labels)).inc()


class PrometheusHistogram(Histogram):
    def __init__(self, metric: prometheus_client.Histogram, labelnames: Sequence[str]):
        self.metric = metric
        self.labelnames = tuple(labelnames)

    def observe(self, labels: Labels, value: float) -> None:
        self.metric.labels(*_label_values(self.labelnames, labels)).observe(value)


class PrometheusRegistry(MetricRegistry):
    """MetricRegistry backed by a prometheus_client CollectorRegistry

    Metrics are registered on the given registry, or on a private one; the
    process-wide default REGISTRY is only used when passed in explicitly.
    Absent label values are exported as "", which Prometheus treats as an
    unset label.
    """

    def __init__(self, registry: Optional[prometheus_client.CollectorRegistry] = None):
        self.registry = registry if registry is not None else prometheus_client.CollectorRegistry()
        self._cache = _InstrumentCache()

    def counter(self, name: str, documentation: str, labelnames: Sequence[str]) -> Counter:
        return self._cache.get_or_create("counter", name, lambda: PrometheusCounter(
            prometheus_client.Counter(name, documentation, labelnames, registry=self.registry),
            labelnames,
        ))

    def histogram(self, name: str, documentation: str, labelnames: Sequence[str]) -> Histogram:
        return self._cache.get_or_create("histogram", name, lambda: PrometheusHistogram(
            prometheus_client.Histogram(name, documentation, labelnames, registry=self.registry),
            labelnames,
        ))


class MeterCounter(Counter):
    def __init__(self, instrument: metrics.Counter):
        self.instrument = instrument

    def increment(self, labels: Labels) -> None:
        self.instrument.add(1, _attributes(labels))


class MeterHistogram(Histogram):
    def __init__(self, instrument: metrics.Histogram):
        self.instrument = instrument

    def observe(self, labels: Labels, value: float) -> None:
        self.instrument.record(value, _attributes(labels))


class MeterRegistry(MetricRegistry):
    """MetricRegistry backed by an OpenTelemetry Meter

    OpenTelemetry instrument names cannot contain ":", so the namespace
    separator is exported as "." by this backend. Absent labels are left
    out of the attribute set.
    """

    def __init__(self, meter: metrics.Meter):
        self.meter = meter
        self._cache = _InstrumentCache()

    def counter(self, name: str, documentation: str, labelnames: Sequence[str]) -> Counter:
        return self._cache.get_or_create("counter", name, lambda: MeterCounter(
            self.meter.create_counter(
                name=instrument_name(name),
                description=documentation,
                unit="1",
            )
        ))

    def histogram(self, name: str, documentation: str, labelnames: Sequence[str]) -> Histogram:
        return self._cache.get_or_create("histogram", name, lambda: MeterHistogram(
            self.meter.create_histogram(
                name=instrument_name(name),
                description=documentation,
                unit="s",
            )
        ))


def instrument_name(name: str) -> str:
    """Map a metric key to a valid OpenTelemetry instrument name"""
    return name.replace(":", ".")


def _label_values(labelnames: Sequence[str], labels: Labels):
    return ["" if labels.get(key) is None else labels[key] for key in labelnames]


def _attributes(labels: Labels) -> Dict[str, str]:
    return {key: value for key, value in labels.items() if value is not None}
