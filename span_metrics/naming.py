"""
Metric Naming

Builds namespaced metric keys and the default endpoint normalizer.
"""

import re

# Characters allowed in an endpoint label; everything else becomes "-"
NORMALIZE_RE = re.compile(r"[^A-Za-z0-9\-_/.]")
# "./" and "-/" collide with the namespace separator in exported names
SEPARATOR_RE = re.compile(r"[.\-]/")


def default_normalize(name: str) -> str:
    """Replace characters that are not label-safe with "-"."""
    return NORMALIZE_RE.sub("-", name)


def blank(value) -> bool:
    """True for None, False, and empty or whitespace-only strings"""
    if isinstance(value, str):
        return not value.strip()
    return value is None or value is False


def normalize_separators(name: str) -> str:
    return SEPARATOR_RE.sub("_", name)


def metric_name(name: str, namespace: str = "") -> str:
    """Build the fully qualified metric key

    Args:
        name: Base metric name
        namespace: Optional prefix shared by all metrics of one collector

    Returns:
        str: "namespace:name", or whichever half is non-empty
    """
    if blank(namespace):
        return normalize_separators(name)
    if blank(name):
        return normalize_separators(namespace)
    return normalize_separators(namespace) + ":" + normalize_separators(name)
