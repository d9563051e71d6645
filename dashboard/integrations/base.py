"""Reporting client ABC and the shared request/response types.

Report rows are keyed by dimension/metric name taken from the response
headers, so nothing downstream depends on column position.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Union

from dashboard.analytics.schema import DIMENSION_FALLBACK


class UpstreamQueryError(ConnectionError):
    """The analytics service could not answer a report query."""


# --- Dimension filter predicates ---

@dataclass(frozen=True)
class StringFilter:
    field_name: str
    value: str
    match_type: str = "EXACT"  # EXACT | BEGINS_WITH | ENDS_WITH | CONTAINS


@dataclass(frozen=True)
class InListFilter:
    field_name: str
    values: tuple[str, ...]


@dataclass(frozen=True)
class AndGroup:
    expressions: tuple["FilterSpec", ...]


@dataclass(frozen=True)
class OrGroup:
    expressions: tuple["FilterSpec", ...]


FilterSpec = Union[StringFilter, InListFilter, AndGroup, OrGroup]


@dataclass(frozen=True)
class ReportQuery:
    """One GA4 report request, independent of the SDK types."""
    metrics: list[str]
    start_date: str
    end_date: str
    dimensions: list[str] = field(default_factory=list)
    dimension_filter: FilterSpec | None = None
    order_by_metric: str | None = None
    order_desc: bool = True
    limit: int | None = None


@dataclass(frozen=True)
class ReportRow:
    """A single report row as {header name: raw string value}."""
    dimensions: dict[str, str] = field(default_factory=dict)
    metrics: dict[str, str] = field(default_factory=dict)

    def dimension(self, name: str) -> str:
        value = self.dimensions.get(name)
        return value if value else DIMENSION_FALLBACK

    def metric(self, name: str) -> int:
        """Metric value as a non-negative int; 0 when missing or unparseable."""
        return to_metric_value(self.metrics.get(name))


@dataclass
class ReportResult:
    rows: list[ReportRow] = field(default_factory=list)
    row_count: int = 0

    def __post_init__(self):
        if not self.row_count:
            self.row_count = len(self.rows)

    def first_row(self) -> ReportRow:
        return self.rows[0] if self.rows else ReportRow()


def to_metric_value(raw) -> int:
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return 0
    if math.isnan(value) or math.isinf(value) or value < 0:
        return 0
    return int(value)


class BaseReportingClient(ABC):
    """Abstract base class for analytics reporting backends."""

    def __init__(self, settings):
        self.settings = settings
        self._client = None

    @abstractmethod
    def authenticate(self) -> None:
        """Initialise the SDK client with the configured credentials.

        Raises UpstreamQueryError if the credentials are rejected.
        """

    @abstractmethod
    def run_report(self, query: ReportQuery) -> ReportResult:
        """Run a historical report. Raises UpstreamQueryError on failure."""

    @abstractmethod
    def run_realtime_report(self, metrics: list[str]) -> ReportResult:
        """Run an unfiltered realtime report over the last 30 minutes."""

    def test_connection(self) -> bool:
        """Return True when the client can be authenticated."""
        try:
            self.authenticate()
            return True
        except UpstreamQueryError:
            return False
