"""
OpenTelemetry Span Processor

Feeds spans ended by an OpenTelemetry SDK TracerProvider into a
SpanMetricsCollector.
"""

import logging
from typing import Optional

from opentelemetry.context import Context
from opentelemetry.sdk.trace import ReadableSpan, SpanProcessor
from opentelemetry.sdk.trace import Span as SDKSpan

from span_metrics.collector import SpanMetricsCollector
from span_metrics.span import NANOS_PER_SECOND, Span

logger = logging.getLogger(__name__)


class MetricsSpanProcessor(SpanProcessor):
    """SpanProcessor that records metrics for every ended span

    Usage:
        provider = TracerProvider()
        provider.add_span_processor(MetricsSpanProcessor(collector))
    """

    def __init__(self, collector: SpanMetricsCollector):
        self.collector = collector

    def on_start(self, span: SDKSpan, parent_context: Optional[Context] = None) -> None:
        pass

    def on_end(self, span: ReadableSpan) -> None:
        record = Span.from_readable_span(span)
        if span.end_time is None:
            end_time = record.start_time
        else:
            end_time = span.end_time / NANOS_PER_SECOND
        self.collector.send_span(record, end_time)

    def shutdown(self) -> None:
        logger.debug("Metrics span processor shut down")

    def force_flush(self, timeout_millis: int = 30000) -> bool:
        return True
