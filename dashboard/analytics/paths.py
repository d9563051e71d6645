"""Page path canonicalisation.

Every locale variant of a page (``/en/about-us``, ``/ru/about-us``,
``/about-us``) maps to one analytics key. Empty segments (``//``) are
collapsed so a normalized path normalizes to itself. Malformed input
degrades to ``/`` or a best-effort path; nothing here raises.
"""

from __future__ import annotations

from dashboard.analytics.schema import DIMENSION_FALLBACK, LOCALES


def sanitize_raw_path(value: str | None) -> str:
    """Strip query string, fragment and trailing slash; ensure a leading slash."""
    text = str(value or "").strip()
    if not text or text == DIMENSION_FALLBACK:
        return "/"

    text = text.split("?", 1)[0].split("#", 1)[0]
    if not text.startswith("/"):
        text = f"/{text}"
    if text != "/" and text.endswith("/"):
        text = text[:-1]
    return text or "/"


def normalize_path(value: str | None) -> str:
    """Return the locale-independent path for a raw GA4 page path."""
    parts = [p for p in sanitize_raw_path(value).split("/") if p]
    if parts and parts[0] in LOCALES:
        parts = parts[1:]
    return "/" + "/".join(parts)
