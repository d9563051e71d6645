"""Tests for request filter resolution and GA4 query construction."""

import pytest

from dashboard.analytics.filters import (
    ResolvedFilters,
    build_interaction_filter,
    build_page_path_filter,
    interaction_query,
    overview_query,
    page_breakdown_query,
    resolve_filters,
)
from dashboard.analytics.schema import INTERACTION_DIMENSIONS
from dashboard.integrations.base import AndGroup, StringFilter


class TestResolveFilters:
    def test_defaults_to_30_days_all_locales(self):
        filters = resolve_filters({})
        assert filters == ResolvedFilters("30d", "30daysAgo", "today", "all")

    def test_seven_day_preset(self):
        filters = resolve_filters({"range": "7d"})
        assert (filters.preset, filters.start_date, filters.end_date) == ("7d", "7daysAgo", "today")

    def test_custom_range_with_valid_dates(self):
        filters = resolve_filters({
            "range": "custom", "startDate": "2024-01-01", "endDate": "2024-01-02",
        })
        assert filters.range_dict() == {
            "preset": "custom", "startDate": "2024-01-01", "endDate": "2024-01-02",
        }

    @pytest.mark.parametrize("params", [
        {"range": "custom", "startDate": "bad"},
        {"range": "custom", "startDate": "2024-01-01"},
        {"range": "custom", "startDate": "2024-01-01", "endDate": "2024/01/02"},
        {"range": "custom", "startDate": "2024-02-30", "endDate": "2024-03-01"},
        {"range": "custom", "startDate": "2024-03-01", "endDate": "2024-02-01"},
        {"range": "90d"},
        {"range": ""},
    ])
    def test_invalid_range_falls_back_to_default(self, params):
        filters = resolve_filters(params)
        assert filters.range_dict() == {
            "preset": "30d", "startDate": "30daysAgo", "endDate": "today",
        }

    def test_locale_case_insensitive(self):
        assert resolve_filters({"locale": "RU"}).locale == "ru"

    @pytest.mark.parametrize("value", ["de", "", None, "ALL", "en-US"])
    def test_unknown_locale_becomes_all(self, value):
        assert resolve_filters({"locale": value}).locale == "all"

    def test_filters_dict(self):
        assert resolve_filters({"locale": "uz"}).filters_dict() == {"locale": "uz"}


class TestDimensionFilters:
    def test_page_path_filter_absent_for_all(self):
        assert build_page_path_filter("all") is None

    def test_page_path_filter_begins_with_locale(self):
        assert build_page_path_filter("en") == StringFilter("pagePath", "/en", "BEGINS_WITH")

    def test_interaction_filter_without_locale(self):
        assert build_interaction_filter("button_click", "all") == StringFilter(
            "eventName", "button_click", "EXACT"
        )

    def test_interaction_filter_with_locale(self):
        spec = build_interaction_filter("form_submit", "uz")
        assert isinstance(spec, AndGroup)
        assert spec.expressions == (
            StringFilter("eventName", "form_submit", "EXACT"),
            StringFilter("customEvent:locale", "uz", "EXACT"),
        )


class TestReportQueries:
    def test_overview_query(self):
        query = overview_query(ResolvedFilters("7d", "7daysAgo", "today", "ru"))
        assert query.metrics == ["activeUsers", "screenPageViews"]
        assert query.dimensions == []
        assert (query.start_date, query.end_date) == ("7daysAgo", "today")
        assert query.dimension_filter == StringFilter("pagePath", "/ru", "BEGINS_WITH")

    def test_page_breakdown_query_ordered_by_views(self):
        query = page_breakdown_query(ResolvedFilters("30d", "30daysAgo", "today"))
        assert query.dimensions == ["pagePath"]
        assert query.order_by_metric == "screenPageViews"
        assert query.order_desc is True
        assert query.limit == 5000
        assert query.dimension_filter is None

    def test_interaction_query(self):
        query = interaction_query(ResolvedFilters("30d", "30daysAgo", "today"), "button_click")
        assert query.dimensions == INTERACTION_DIMENSIONS
        assert query.metrics == ["eventCount"]
        assert query.dimension_filter == StringFilter("eventName", "button_click", "EXACT")
