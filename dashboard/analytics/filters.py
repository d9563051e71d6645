"""Request filter resolution and GA4 report query construction.

Bad or partial user input never fails a request: an unusable custom range
falls back to the 30-day preset and an unknown locale becomes "all".
"""

from __future__ import annotations

import datetime
import re
from dataclasses import dataclass
from typing import Mapping

from dashboard.analytics.schema import (
    DIM_EVENT_NAME,
    DIM_LOCALE,
    DIM_PAGE_PATH,
    INTERACTION_DIMENSIONS,
    INTERACTION_ROW_LIMIT,
    LOCALE_ALL,
    LOCALES,
    METRIC_ACTIVE_USERS,
    METRIC_EVENT_COUNT,
    METRIC_PAGE_VIEWS,
    PAGE_ROW_LIMIT,
)
from dashboard.integrations.base import AndGroup, FilterSpec, ReportQuery, StringFilter

_ISO_DATE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")

PRESETS = {
    "7d": ("7daysAgo", "today"),
    "30d": ("30daysAgo", "today"),
}
DEFAULT_PRESET = "30d"


@dataclass(frozen=True)
class ResolvedFilters:
    preset: str
    start_date: str
    end_date: str
    locale: str = LOCALE_ALL

    def range_dict(self) -> dict:
        return {"preset": self.preset, "startDate": self.start_date, "endDate": self.end_date}

    def filters_dict(self) -> dict:
        return {"locale": self.locale}


def _parse_iso_date(value: str | None) -> datetime.date | None:
    if not value or not _ISO_DATE.fullmatch(value):
        return None
    try:
        return datetime.date.fromisoformat(value)
    except ValueError:
        return None


def resolve_locale(value: str | None) -> str:
    candidate = (value or LOCALE_ALL).strip().lower()
    return candidate if candidate in LOCALES else LOCALE_ALL


def resolve_filters(params: Mapping[str, str | None]) -> ResolvedFilters:
    """Resolve ``range``/``startDate``/``endDate``/``locale`` query parameters."""
    preset = params.get("range") or DEFAULT_PRESET
    locale = resolve_locale(params.get("locale"))

    if preset == "custom":
        start_param, end_param = params.get("startDate"), params.get("endDate")
        start, end = _parse_iso_date(start_param), _parse_iso_date(end_param)
        if start and end and start <= end:
            return ResolvedFilters("custom", start_param, end_param, locale)
    elif preset in PRESETS:
        start_marker, end_marker = PRESETS[preset]
        return ResolvedFilters(preset, start_marker, end_marker, locale)

    start_marker, end_marker = PRESETS[DEFAULT_PRESET]
    return ResolvedFilters(DEFAULT_PRESET, start_marker, end_marker, locale)


# --- Dimension filters ---

def build_page_path_filter(locale: str) -> FilterSpec | None:
    if not locale or locale == LOCALE_ALL:
        return None
    return StringFilter(DIM_PAGE_PATH, f"/{locale}", match_type="BEGINS_WITH")


def build_interaction_filter(event_name: str, locale: str) -> FilterSpec:
    event_match = StringFilter(DIM_EVENT_NAME, event_name, match_type="EXACT")
    if not locale or locale == LOCALE_ALL:
        return event_match
    return AndGroup((
        event_match,
        StringFilter(DIM_LOCALE, locale, match_type="EXACT"),
    ))


# --- Report queries ---

def overview_query(filters: ResolvedFilters) -> ReportQuery:
    return ReportQuery(
        metrics=[METRIC_ACTIVE_USERS, METRIC_PAGE_VIEWS],
        start_date=filters.start_date,
        end_date=filters.end_date,
        dimension_filter=build_page_path_filter(filters.locale),
    )


def page_breakdown_query(filters: ResolvedFilters) -> ReportQuery:
    return ReportQuery(
        metrics=[METRIC_ACTIVE_USERS, METRIC_PAGE_VIEWS],
        start_date=filters.start_date,
        end_date=filters.end_date,
        dimensions=[DIM_PAGE_PATH],
        dimension_filter=build_page_path_filter(filters.locale),
        order_by_metric=METRIC_PAGE_VIEWS,
        order_desc=True,
        limit=PAGE_ROW_LIMIT,
    )


def interaction_query(filters: ResolvedFilters, event_name: str) -> ReportQuery:
    return ReportQuery(
        metrics=[METRIC_EVENT_COUNT],
        start_date=filters.start_date,
        end_date=filters.end_date,
        dimensions=list(INTERACTION_DIMENSIONS),
        dimension_filter=build_interaction_filter(event_name, filters.locale),
        limit=INTERACTION_ROW_LIMIT,
    )
