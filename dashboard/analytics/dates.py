from __future__ import annotations

import re

from dashboard.analytics.schema import DIMENSION_FALLBACK

_GA_DATE = re.compile(r"[0-9]{8}")


def format_ga_date(value: str | None) -> str:
    """Turn GA4's ``YYYYMMDD`` date dimension into ``YYYY-MM-DD``.

    Placeholder values (``(not set)``, ``(other)``) pass through unchanged.
    """
    raw = str(value or "")
    if not _GA_DATE.fullmatch(raw):
        return raw or DIMENSION_FALLBACK
    return f"{raw[:4]}-{raw[4:6]}-{raw[6:8]}"
