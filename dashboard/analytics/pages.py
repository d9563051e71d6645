"""Page breakdown: one raw view per GA4 page path and one view re-aggregated
by normalized (locale-independent) path.

Both views are ordered by page views desc, active users desc, then path.
"""

from __future__ import annotations

import pandas as pd

from dashboard.analytics.paths import normalize_path, sanitize_raw_path
from dashboard.analytics.schema import DIM_PAGE_PATH, METRIC_ACTIVE_USERS, METRIC_PAGE_VIEWS
from dashboard.integrations.base import ReportRow

PAGE_COLUMNS = ["rawPagePath", "normalizedPagePath", "activeUsers", "screenPageViews"]


def _sorted_records(df: pd.DataFrame, path_column: str) -> list[dict]:
    df = df.sort_values(
        ["screenPageViews", "activeUsers", path_column],
        ascending=[False, False, True],
    )
    records = []
    for record in df.to_dict(orient="records"):
        record["activeUsers"] = int(record["activeUsers"])
        record["screenPageViews"] = int(record["screenPageViews"])
        records.append(record)
    return records


def map_page_rows(rows: list[ReportRow]) -> dict:
    raw = []
    for row in rows:
        raw_page_path = sanitize_raw_path(row.dimension(DIM_PAGE_PATH))
        raw.append({
            "rawPagePath": raw_page_path,
            "normalizedPagePath": normalize_path(raw_page_path),
            "activeUsers": row.metric(METRIC_ACTIVE_USERS),
            "screenPageViews": row.metric(METRIC_PAGE_VIEWS),
        })

    if not raw:
        return {"raw": [], "normalized": []}

    raw_df = pd.DataFrame(raw, columns=PAGE_COLUMNS)
    normalized_df = (
        raw_df.groupby("normalizedPagePath", sort=False)[["activeUsers", "screenPageViews"]]
        .sum()
        .reset_index()
    )

    return {
        "raw": _sorted_records(raw_df, "rawPagePath"),
        "normalized": _sorted_records(normalized_df, "normalizedPagePath"),
    }
