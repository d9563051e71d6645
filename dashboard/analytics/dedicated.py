"""Named per-element metrics sliced out of the interaction events.

A definition matches on the event key AND the normalized page path, so an
element id reused on several pages only counts where it is configured.
The locale breakdown always lists every locale (zero-filled); the date
series only lists dates that had matching events.

Callers pass the already validated events frame from InteractionSummary.
"""

from __future__ import annotations

import pandas as pd

from dashboard.analytics.interactions import sum_by
from dashboard.analytics.schema import LOCALES, DedicatedMetricDefinition


def build_dedicated_metric(
    frame: pd.DataFrame,
    definition: DedicatedMetricDefinition,
) -> dict:
    scoped = frame[
        (frame["event_key"] == definition.match_id)
        & (frame["normalized_page_path"] == definition.match_normalized_path)
    ]

    by_locale = scoped.groupby("locale")["event_count"].sum() if not scoped.empty else {}

    return {
        "key": definition.key,
        "id": definition.match_id,
        "label": definition.label,
        "normalizedPagePath": definition.match_normalized_path,
        "total": int(scoped["event_count"].sum()) if not scoped.empty else 0,
        "byLocale": [
            {"locale": locale, "eventCount": int(by_locale.get(locale, 0))}
            for locale in LOCALES
        ],
        "byDate": sum_by(scoped, "date", "date", by_date=True),
    }


def build_dedicated_metrics(
    frame: pd.DataFrame,
    definitions: tuple[DedicatedMetricDefinition, ...],
) -> dict[str, dict]:
    return {d.key: build_dedicated_metric(frame, d) for d in definitions}
