"""Analytics report orchestration: query GA4, aggregate, assemble the payload.

The four report queries run concurrently in worker threads and are all
awaited before any aggregation starts. A failing query fails the whole
report; nothing is retried.
"""

from __future__ import annotations

import asyncio
import logging

from dashboard.analytics.dedicated import build_dedicated_metrics
from dashboard.analytics.filters import (
    ResolvedFilters,
    interaction_query,
    overview_query,
    page_breakdown_query,
)
from dashboard.analytics.interactions import map_interaction_rows
from dashboard.analytics.pages import map_page_rows
from dashboard.analytics.schema import (
    DEDICATED_BUTTONS,
    DEDICATED_FORMS,
    EVENT_BUTTON_CLICK,
    EVENT_FORM_SUBMIT,
    METRIC_ACTIVE_USERS,
    METRIC_PAGE_VIEWS,
)
from dashboard.integrations.base import BaseReportingClient

logger = logging.getLogger(__name__)


async def build_analytics_report(
    client: BaseReportingClient,
    filters: ResolvedFilters,
) -> dict:
    """Run the overview, page, button-click and form-submit reports.

    Returns the AnalyticsResponse dict:
    {range, filters, overview, pages, interactions{buttonClicks, formSubmissions}}.
    Upstream errors propagate to the caller unchanged.
    """
    overview, page_breakdown, button_report, form_report = await asyncio.gather(
        asyncio.to_thread(client.run_report, overview_query(filters)),
        asyncio.to_thread(client.run_report, page_breakdown_query(filters)),
        asyncio.to_thread(client.run_report, interaction_query(filters, EVENT_BUTTON_CLICK)),
        asyncio.to_thread(client.run_report, interaction_query(filters, EVENT_FORM_SUBMIT)),
    )

    overview_row = overview.first_row()
    button_clicks = map_interaction_rows(button_report.rows, "button")
    form_submissions = map_interaction_rows(form_report.rows, "form")

    logger.info(
        "Analytics report built: preset=%s locale=%s pages=%d button_rows=%d form_rows=%d",
        filters.preset,
        filters.locale,
        len(page_breakdown.rows),
        len(button_report.rows),
        len(form_report.rows),
    )

    return {
        "range": filters.range_dict(),
        "filters": filters.filters_dict(),
        "overview": {
            "activeUsers": overview_row.metric(METRIC_ACTIVE_USERS),
            "screenPageViews": overview_row.metric(METRIC_PAGE_VIEWS),
        },
        "pages": map_page_rows(page_breakdown.rows),
        "interactions": {
            "buttonClicks": button_clicks.to_dict(
                dedicated=build_dedicated_metrics(button_clicks.frame, DEDICATED_BUTTONS)
            ),
            "formSubmissions": form_submissions.to_dict(
                dedicated=build_dedicated_metrics(form_submissions.frame, DEDICATED_FORMS)
            ),
        },
    }


async def fetch_realtime_users(client: BaseReportingClient) -> dict:
    """Active users over the last 30 minutes (unfiltered)."""
    report = await asyncio.to_thread(client.run_realtime_report, [METRIC_ACTIVE_USERS])
    return {"activeUsersLast30Minutes": report.first_row().metric(METRIC_ACTIVE_USERS)}
