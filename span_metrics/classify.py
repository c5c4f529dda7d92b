"""
Span Classification

Derives the error label and the HTTP-server classification from span tags.
"""

import re
from typing import Optional

from span_metrics.naming import blank
from span_metrics.span import Span

ERROR_TAG = "error"
KIND_TAG = "span.kind"
URL_TAG = "http.url"
METHOD_TAG = "http.method"
STATUS_CODE_TAG = "http.status_code"

# Leading integer of a status code value, e.g. "404" or "503 Service Unavailable"
LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


def error_value(span: Span) -> Optional[str]:
    """Derive the tri-state error label of a span

    A span opts into error reporting by carrying the "error" tag at all;
    the value only separates an explicit negation from a truthy signal.

    Args:
        span: Finished span

    Returns:
        Optional[str]: None without an "error" tag, "false" for a blank or
        "false" value (any case), "true" otherwise
    """
    if ERROR_TAG not in span.tags:
        return None

    error = span.tags[ERROR_TAG]
    if blank(error) or str(error).lower() == "false":
        return "false"
    return "true"


def is_http_server(span: Span) -> bool:
    """Check whether a span describes a server-side HTTP request"""
    return span.tags.get(KIND_TAG) == "server" and (
        not blank(span.tags.get(URL_TAG)) or not blank(span.tags.get(METHOD_TAG))
    )


def status_code(span: Span) -> int:
    """Parse the HTTP status code tag, 0 when missing or not numeric"""
    match = LEADING_INT_RE.match(str(span.tags.get(STATUS_CODE_TAG, "")))
    return int(match.group(1)) if match else 0


def status_bucket(span: Span) -> int:
    return status_code(span) // 100
