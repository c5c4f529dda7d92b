"""
Span Recorders

Turns classified spans into registry observations:
- HTTPMetricsRecorder: request count, latency and status-code buckets per endpoint
- OperationMetricsRecorder: latency per operation name for everything else
"""

import logging
from typing import Callable

from span_metrics.classify import URL_TAG, error_value, status_bucket
from span_metrics.naming import blank, default_normalize, metric_name
from span_metrics.registry import MetricRegistry
from span_metrics.span import Span

logger = logging.getLogger(__name__)

NormalizeFn = Callable[[str], str]

METRICS_NAME_HTTP_REQUESTS = "requests"
METRICS_NAME_HTTP_REQUEST_LATENCY = "request_latency"
METRICS_NAME_HTTP_STATUS_CODES = "http_requests"
METRICS_NAME_OPERATION_DURATION = "operation_duration_seconds"

# Fallbacks for a blank endpoint, applied to the span name and the metric label
FALLBACK_OPERATION_NAME = "rails"
FALLBACK_ENDPOINT_LABEL = "other"


def renamed_operation(endpoint: str) -> str:
    """Operation name an HTTP server span carries after recording"""
    return FALLBACK_OPERATION_NAME if blank(endpoint) else endpoint


def endpoint_label(endpoint: str) -> str:
    """Endpoint label value used for HTTP metrics"""
    return FALLBACK_ENDPOINT_LABEL if blank(endpoint) else endpoint


class HTTPMetricsRecorder:
    """Records server-side HTTP spans

    Instruments (names prefixed with the namespace):
    - requests: counter by endpoint and error
    - request_latency: histogram by endpoint and error
    - http_requests: counter by endpoint and status code bucket (2xx-5xx)
    """

    def __init__(
        self,
        registry: MetricRegistry,
        namespace: str = "",
        normalize: NormalizeFn = default_normalize,
    ):
        self.namespace = namespace
        self.normalize = normalize

        self.requests = registry.counter(
            self._metric_name(METRICS_NAME_HTTP_REQUESTS),
            "Counts the number of requests made distinguished by their endpoint and error status",
            ("endpoint", "error"),
        )
        self.latency = registry.histogram(
            self._metric_name(METRICS_NAME_HTTP_REQUEST_LATENCY),
            "Duration of HTTP requests in second distinguished by their endpoint and error status",
            ("endpoint", "error"),
        )
        self.status_codes = registry.counter(
            self._metric_name(METRICS_NAME_HTTP_STATUS_CODES),
            "Counts the responses distinguished by endpoint and status code bucket",
            ("endpoint", "status_code"),
        )

    def _metric_name(self, name: str) -> str:
        return metric_name(name, self.namespace)

    def endpoint(self, span: Span) -> str:
        """Normalized "HTTP <operation> <url>" string of a span"""
        return self.normalize(f"HTTP {span.operation_name} {span.tags.get(URL_TAG, '')}")

    def record(self, span: Span, duration: float) -> None:
        """Record one finished HTTP server span

        Renames the span to its endpoint as a side effect, so the sink and
        any later reader see the normalized name.

        Args:
            span: Finished span classified as HTTP server
            duration: Span duration in seconds
        """
        bucket = status_bucket(span)

        endpoint = self.endpoint(span)
        span.operation_name = renamed_operation(endpoint)
        endpoint = endpoint_label(endpoint)
        err = error_value(span)

        labels = {"endpoint": endpoint, "error": err}
        self.requests.increment(labels)
        self.latency.observe(labels, duration)

        if 2 <= bucket <= 5:
            self.status_codes.increment({"endpoint": endpoint, "status_code": f"{bucket}xx"})
        else:
            logger.debug(f"Skipping status code bucket {bucket} for endpoint {endpoint}")


class OperationMetricsRecorder:
    """Records latency for spans that are not HTTP server requests"""

    def __init__(self, registry: MetricRegistry):
        self.operations = registry.histogram(
            METRICS_NAME_OPERATION_DURATION,
            "Duration of operations in second",
            ("name", "error"),
        )

    def observe(self, span: Span, duration: float) -> None:
        self.operations.observe(operation_labels(span), duration)


def operation_labels(span: Span) -> dict:
    return {"name": span.operation_name, "error": error_value(span)}

