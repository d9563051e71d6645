"""GA4 (Google Analytics 4) reporting client.

Translates ReportQuery values into Data API requests and flattens the
responses into name-keyed ReportRow values. Authentication uses the
service-account email and private key from GA4Settings.
"""

from __future__ import annotations

import logging
import threading

from google.analytics.data_v1beta import BetaAnalyticsDataClient
from google.analytics.data_v1beta.types import (
    DateRange,
    Dimension,
    Filter,
    FilterExpression,
    FilterExpressionList,
    Metric,
    OrderBy,
    RunRealtimeReportRequest,
    RunReportRequest,
)
from google.api_core.exceptions import GoogleAPIError
from google.auth.exceptions import GoogleAuthError

from dashboard.config import GA4Settings
from dashboard.integrations.base import (
    AndGroup,
    BaseReportingClient,
    FilterSpec,
    InListFilter,
    OrGroup,
    ReportQuery,
    ReportResult,
    ReportRow,
    StringFilter,
    UpstreamQueryError,
)

logger = logging.getLogger(__name__)


def to_filter_expression(spec: FilterSpec) -> FilterExpression:
    """Convert a filter predicate into the SDK's FilterExpression."""
    if isinstance(spec, StringFilter):
        return FilterExpression(
            filter=Filter(
                field_name=spec.field_name,
                string_filter=Filter.StringFilter(
                    value=spec.value,
                    match_type=Filter.StringFilter.MatchType[spec.match_type],
                ),
            )
        )
    if isinstance(spec, InListFilter):
        return FilterExpression(
            filter=Filter(
                field_name=spec.field_name,
                in_list_filter=Filter.InListFilter(values=list(spec.values)),
            )
        )
    if isinstance(spec, AndGroup):
        return FilterExpression(
            and_group=FilterExpressionList(
                expressions=[to_filter_expression(e) for e in spec.expressions]
            )
        )
    if isinstance(spec, OrGroup):
        return FilterExpression(
            or_group=FilterExpressionList(
                expressions=[to_filter_expression(e) for e in spec.expressions]
            )
        )
    raise TypeError(f"Unsupported filter predicate: {type(spec).__name__}")


def build_report_request(property_name: str, query: ReportQuery) -> RunReportRequest:
    request = RunReportRequest(
        property=property_name,
        date_ranges=[DateRange(start_date=query.start_date, end_date=query.end_date)],
        dimensions=[Dimension(name=d) for d in query.dimensions],
        metrics=[Metric(name=m) for m in query.metrics],
    )
    if query.dimension_filter is not None:
        request.dimension_filter = to_filter_expression(query.dimension_filter)
    if query.order_by_metric:
        request.order_bys = [
            OrderBy(
                metric=OrderBy.MetricOrderBy(metric_name=query.order_by_metric),
                desc=query.order_desc,
            )
        ]
    if query.limit:
        request.limit = query.limit
    return request


def parse_report_response(response) -> ReportResult:
    """Flatten a RunReport/RunRealtimeReport response into ReportRows."""
    dimension_names = [h.name for h in response.dimension_headers]
    metric_names = [h.name for h in response.metric_headers]

    rows = []
    for row in response.rows:
        rows.append(ReportRow(
            dimensions={
                name: v.value for name, v in zip(dimension_names, row.dimension_values)
            },
            metrics={
                name: v.value for name, v in zip(metric_names, row.metric_values)
            },
        ))

    return ReportResult(rows=rows)


class GA4ReportingClient(BaseReportingClient):
    settings: GA4Settings

    def __init__(self, settings: GA4Settings):
        super().__init__(settings)
        self._lock = threading.Lock()

    def authenticate(self) -> None:
        with self._lock:
            if self._client is not None:
                return
            try:
                self._client = BetaAnalyticsDataClient.from_service_account_info(
                    self.settings.service_account_info()
                )
            except (GoogleAuthError, ValueError) as exc:
                raise UpstreamQueryError(f"GA4 authentication failed: {exc}") from exc

    def run_report(self, query: ReportQuery) -> ReportResult:
        self.authenticate()
        request = build_report_request(self.settings.property, query)
        try:
            response = self._client.run_report(request)
        except (GoogleAPIError, GoogleAuthError) as exc:
            logger.error("GA4 report failed (%s): %s", ",".join(query.metrics), exc)
            raise UpstreamQueryError(f"GA4 report failed: {exc}") from exc
        return parse_report_response(response)

    def run_realtime_report(self, metrics: list[str]) -> ReportResult:
        self.authenticate()
        request = RunRealtimeReportRequest(
            property=self.settings.property,
            metrics=[Metric(name=m) for m in metrics],
        )
        try:
            response = self._client.run_realtime_report(request)
        except (GoogleAPIError, GoogleAuthError) as exc:
            logger.error("GA4 realtime report failed: %s", exc)
            raise UpstreamQueryError(f"GA4 realtime report failed: {exc}") from exc
        return parse_report_response(response)
