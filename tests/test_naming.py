"""
Tests for metric naming
"""
import pytest

from span_metrics.naming import blank, default_normalize, metric_name, normalize_separators


class TestMetricName:
    """Test namespaced metric keys"""

    def test_name_without_namespace(self):
        assert metric_name("foo", "") == "foo"
        assert metric_name("foo") == "foo"

    def test_namespace_without_name(self):
        assert metric_name("", "ns") == "ns"

    def test_namespace_and_name(self):
        assert metric_name("foo", "ns") == "ns:foo"

    def test_both_empty(self):
        assert metric_name("", "") == ""

    @pytest.mark.parametrize("namespace", [" ", "\t", "  \n"])
    def test_whitespace_namespace_ignored(self, namespace):
        assert metric_name("foo", namespace) == "foo"

    @pytest.mark.parametrize("name", [" ", "\t"])
    def test_whitespace_name_ignored(self, name):
        assert metric_name(name, "ns") == "ns"

    def test_separators_normalized_independently(self):
        """Test "./" and "-/" become "_" in both halves before joining"""
        assert metric_name("a./b", "ns-/x") == "ns_x:a_b"

    @pytest.mark.parametrize("name,expected", [
        ("a./b", "a_b"),
        ("a-/b", "a_b"),
        ("a.b", "a.b"),
        ("a-b", "a-b"),
        ("a/b", "a/b"),
        ("a/.b", "a/.b"),
        ("x-/y./z", "x_y_z"),
    ])
    def test_normalize_separators(self, name, expected):
        assert normalize_separators(name) == expected


class TestDefaultNormalize:
    """Test the default endpoint normalizer"""

    def test_spaces_replaced(self):
        assert default_normalize("HTTP GET /a/b") == "HTTP-GET-/a/b"

    def test_allowed_characters_kept(self):
        assert default_normalize("Az09-_/.") == "Az09-_/."

    def test_query_characters_replaced(self):
        assert default_normalize("GET /users?id=1&x") == "GET-/users-id-1-x"

    def test_empty(self):
        assert default_normalize("") == ""


class TestBlank:
    """Test blank value detection"""

    @pytest.mark.parametrize("value", [None, False, "", " ", "\t\n"])
    def test_blank(self, value):
        assert blank(value) is True

    @pytest.mark.parametrize("value", ["a", " a ", "false", 0, True])
    def test_present(self, value):
        assert blank(value) is False
