"""
Span Sinks

Defines the interface finished spans are forwarded to, and an in-memory
implementation that buffers them until retrieved.
"""

import abc
import logging
import threading
from collections import deque
from typing import Any, List, Tuple

from span_metrics.span import Span

logger = logging.getLogger(__name__)

DEFAULT_MAX_SPANS = 10000


class SpanSink(abc.ABC):
    """Destination for finished spans"""

    @abc.abstractmethod
    def send_span(self, span: Span, end_time: float) -> None:
        """Accept one finished span

        Args:
            span: Finished span
            end_time: End timestamp in seconds
        """
        pass

    @abc.abstractmethod
    def retrieve(self) -> Any:
        """Return the spans collected so far, in an implementation-defined form"""
        pass


class InMemorySpanSink(SpanSink):
    """Bounded buffer of (span, end_time) pairs

    Once max_spans pairs are buffered the oldest pair is dropped for each
    new one. retrieve() drains the buffer.
    """

    def __init__(self, max_spans: int = DEFAULT_MAX_SPANS):
        if max_spans <= 0:
            raise ValueError(f"max_spans must be positive, got {max_spans}")
        self.max_spans = max_spans
        self._spans = deque(maxlen=max_spans)
        self._lock = threading.Lock()
        self.dropped_count = 0

    def send_span(self, span: Span, end_time: float) -> None:
        with self._lock:
            if len(self._spans) == self.max_spans:
                self.dropped_count += 1
                logger.debug(f"Span buffer full ({self.max_spans}), dropping oldest span")
            self._spans.append((span, end_time))

    def retrieve(self) -> List[Tuple[Span, float]]:
        with self._lock:
            spans = list(self._spans)
            self._spans.clear()
        return spans

    def __len__(self) -> int:
        with self._lock:
            return len(self._spans)
