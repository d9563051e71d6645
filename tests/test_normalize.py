"""Tests for page path normalization and GA4 date formatting."""

import pytest

from dashboard.analytics.dates import format_ga_date
from dashboard.analytics.paths import normalize_path, sanitize_raw_path


class TestSanitizeRawPath:
    @pytest.mark.parametrize("value", ["", None, "   ", "(not set)", "/"])
    def test_empty_and_sentinel_become_root(self, value):
        assert sanitize_raw_path(value) == "/"

    def test_strips_query_and_fragment(self):
        assert sanitize_raw_path("/en/about-us?utm_source=x#team") == "/en/about-us"
        assert sanitize_raw_path("/careers#open") == "/careers"

    def test_adds_leading_slash(self):
        assert sanitize_raw_path("portfolio") == "/portfolio"

    def test_strips_single_trailing_slash(self):
        assert sanitize_raw_path("/ru/") == "/ru"
        assert sanitize_raw_path("/blog/post/") == "/blog/post"

    def test_query_only_path_becomes_root(self):
        assert sanitize_raw_path("?ref=home") == "/"


class TestNormalizePath:
    def test_locale_variants_share_one_key(self):
        assert normalize_path("/en/about-us") == "/about-us"
        assert normalize_path("/ru/about-us") == "/about-us"
        assert normalize_path("/about-us") == "/about-us"

    @pytest.mark.parametrize("value", ["/", "", "(not set)", "/en", "/uz/", "/ru?x=1"])
    def test_root_variants(self, value):
        assert normalize_path(value) == "/"

    def test_nested_localized_path(self):
        assert normalize_path("/uz/blog/my-post/") == "/blog/my-post"

    def test_unknown_prefix_kept(self):
        assert normalize_path("/de/about-us") == "/de/about-us"

    def test_locale_match_is_exact_segment(self):
        assert normalize_path("/english/page") == "/english/page"

    @pytest.mark.parametrize("value", [
        "/en/about-us", "/careers/", "portfolio?x=1", "", "(not set)", "/blog/a/b",
        "/x//", "/en//about-us/", "//",
    ])
    def test_idempotent(self, value):
        once = normalize_path(value)
        assert normalize_path(once) == once

    def test_empty_segments_collapsed(self):
        assert normalize_path("/a//b") == "/a/b"
        assert normalize_path("/en/a//b") == normalize_path("/a//b")
        assert normalize_path("/x//") == "/x"


class TestFormatGaDate:
    def test_compact_date_reformatted(self):
        assert format_ga_date("20240115") == "2024-01-15"

    def test_non_date_passthrough(self):
        assert format_ga_date("bad") == "bad"
        assert format_ga_date("(other)") == "(other)"
        assert format_ga_date("2024011") == "2024011"
        assert format_ga_date("2024-01-15") == "2024-01-15"

    def test_empty_becomes_sentinel(self):
        assert format_ga_date("") == "(not set)"
        assert format_ga_date(None) == "(not set)"
