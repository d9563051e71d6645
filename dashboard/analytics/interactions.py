"""Interaction (button click / form submit) row mapping and aggregation.

Each GA4 row becomes an InteractionEvent; the events are loaded into a
DataFrame and summed five ways (event key, locale, date, normalized path,
raw path). Every grouping sums to the same total.

Ordering of the "by X" lists: event count descending, ties broken by the
grouping key ascending. ``by_date`` is ordered by date ascending instead.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import pandas as pd

from dashboard.analytics.dates import format_ga_date
from dashboard.analytics.paths import normalize_path, sanitize_raw_path
from dashboard.analytics.schema import (
    DIM_CUSTOM_PAGE_PATH,
    DIM_DATE,
    DIM_LOCALE,
    DIM_PAGE_PATH,
    DIMENSION_FALLBACK,
    INTERACTION_COLUMNS,
    INTERACTION_KINDS,
    LOCALES,
    METRIC_EVENT_COUNT,
    interaction_schema,
)
from dashboard.integrations.base import ReportRow


@dataclass(frozen=True)
class InteractionEvent:
    kind: str  # "button" | "form"
    event_key: str
    locale: str
    raw_page_path: str
    normalized_page_path: str
    date: str
    event_count: int

    @classmethod
    def from_report_row(cls, row: ReportRow, kind: str) -> "InteractionEvent":
        key_dimension = _kind_spec(kind)[0]
        locale = row.dimension(DIM_LOCALE).lower()
        raw_page_path = resolve_interaction_page_path(
            row.dimension(DIM_PAGE_PATH),
            row.dimension(DIM_CUSTOM_PAGE_PATH),
        )
        return cls(
            kind=kind,
            event_key=row.dimension(key_dimension),
            locale=locale if locale in LOCALES else DIMENSION_FALLBACK,
            raw_page_path=raw_page_path,
            normalized_page_path=normalize_path(raw_page_path),
            date=format_ga_date(row.dimension(DIM_DATE)),
            event_count=row.metric(METRIC_EVENT_COUNT),
        )

    def to_dict(self) -> dict:
        return {
            _kind_spec(self.kind)[1]: self.event_key,
            "locale": self.locale,
            "rawPagePath": self.raw_page_path,
            "normalizedPagePath": self.normalized_page_path,
            "date": self.date,
            "eventCount": self.event_count,
        }


@dataclass
class InteractionSummary:
    kind: str
    total: int = 0
    events: list[InteractionEvent] = field(default_factory=list)
    by_key: list[dict] = field(default_factory=list)
    by_locale: list[dict] = field(default_factory=list)
    by_date: list[dict] = field(default_factory=list)
    by_page_normalized: list[dict] = field(default_factory=list)
    by_page_raw: list[dict] = field(default_factory=list)
    frame: pd.DataFrame = field(default_factory=lambda: events_frame([]), repr=False, compare=False)

    def to_dict(self, dedicated: dict | None = None) -> dict:
        payload = {
            "total": self.total,
            "rows": [e.to_dict() for e in self.events],
            _kind_spec(self.kind)[2]: self.by_key,
            "byLocale": self.by_locale,
            "byDate": self.by_date,
            "byPageNormalized": self.by_page_normalized,
            "byPageRaw": self.by_page_raw,
        }
        if dedicated is not None:
            payload["dedicated"] = dedicated
        return payload


def _kind_spec(kind: str) -> tuple[str, str, str]:
    spec = INTERACTION_KINDS.get(kind)
    if spec is None:
        raise ValueError(
            f"Unknown interaction kind '{kind}'. "
            f"Available: {sorted(INTERACTION_KINDS)}"
        )
    return spec


def resolve_interaction_page_path(page_path: str, custom_page_path: str) -> str:
    """Pick the raw page path for an interaction row.

    GA4's built-in ``pagePath`` wins when it looks like a path; events sent
    with only the custom ``page_path`` parameter fall back to that.
    """
    built_in = str(page_path or "")
    if built_in and built_in != DIMENSION_FALLBACK and built_in.startswith("/"):
        return sanitize_raw_path(built_in)
    return sanitize_raw_path(custom_page_path)


def events_frame(events: list[InteractionEvent]) -> pd.DataFrame:
    """Load events into a validated DataFrame (one row per event)."""
    records = [{col: getattr(e, col) for col in INTERACTION_COLUMNS} for e in events]
    df = pd.DataFrame(records, columns=INTERACTION_COLUMNS)
    return interaction_schema.validate(df)


def sum_by(df: pd.DataFrame, column: str, label: str, by_date: bool = False) -> list[dict]:
    """Sum event counts per value of ``column`` into [{label: value, eventCount: n}]."""
    if df.empty:
        return []

    grouped = df.groupby(column, sort=False)["event_count"].sum().reset_index()
    if by_date:
        grouped = grouped.sort_values(column, ascending=True, kind="mergesort")
    else:
        grouped = grouped.sort_values(
            ["event_count", column], ascending=[False, True], kind="mergesort"
        )

    return [
        {label: str(value), "eventCount": int(count)}
        for value, count in zip(grouped[column], grouped["event_count"])
    ]


def map_interaction_rows(rows: list[ReportRow], kind: str) -> InteractionSummary:
    """Map raw GA4 interaction rows into grouped summaries."""
    _kind_spec(kind)
    events = [InteractionEvent.from_report_row(row, kind) for row in rows]
    df = events_frame(events)

    return InteractionSummary(
        kind=kind,
        total=int(df["event_count"].sum()) if not df.empty else 0,
        events=events,
        frame=df,
        by_key=sum_by(df, "event_key", "id"),
        by_locale=sum_by(df, "locale", "locale"),
        by_date=sum_by(df, "date", "date", by_date=True),
        by_page_normalized=sum_by(df, "normalized_page_path", "normalizedPagePath"),
        by_page_raw=sum_by(df, "raw_page_path", "rawPagePath"),
    )
