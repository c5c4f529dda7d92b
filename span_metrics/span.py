"""
Span Record

The finished-span record metrics are derived from, and its conversion from
OpenTelemetry SDK spans.
"""

from dataclasses import dataclass, field
from typing import Any, Dict

from opentelemetry.sdk.trace import ReadableSpan
from opentelemetry.trace import StatusCode

NANOS_PER_SECOND = 1e9

# Current HTTP semantic-convention keys and the legacy keys classification reads
SEMCONV_ALIASES = {
    "http.response.status_code": "http.status_code",
    "url.full": "http.url",
    "http.request.method": "http.method",
}


@dataclass
class Span:
    """A finished span as seen by the metrics collector

    Attributes:
        operation_name: Span name, rewritten for HTTP server spans
        tags: String-valued span tags
        start_time: Start timestamp in seconds
    """
    operation_name: str
    tags: Dict[str, str] = field(default_factory=dict)
    start_time: float = 0.0

    @classmethod
    def from_readable_span(cls, span: ReadableSpan) -> "Span":
        """Convert an OpenTelemetry SDK span

        Args:
            span: Ended SDK span

        Returns:
            Span: Record with stringified attributes, legacy HTTP keys filled
            in from current semantic conventions, and "span.kind"/"error"
            tags derived from the span kind and status
        """
        tags = {key: tag_value(value) for key, value in (span.attributes or {}).items()}

        for current, legacy in SEMCONV_ALIASES.items():
            if current in tags and legacy not in tags:
                tags[legacy] = tags[current]

        if span.kind is not None:
            tags.setdefault("span.kind", span.kind.name.lower())

        if span.status is not None and span.status.status_code is StatusCode.ERROR:
            tags.setdefault("error", "true")

        return cls(
            operation_name=span.name,
            tags=tags,
            start_time=(span.start_time or 0) / NANOS_PER_SECOND,
        )


def tag_value(value: Any) -> str:
    """Render an attribute value as a tag string"""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ",".join(tag_value(item) for item in value)
    return str(value)
