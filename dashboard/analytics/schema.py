from __future__ import annotations

from dataclasses import dataclass

import pandera.pandas as pa
from pandera.pandas import Column, Check

LOCALES = ("en", "ru", "uz")
LOCALE_ALL = "all"

# GA4 reports this for dimensions it could not populate
DIMENSION_FALLBACK = "(not set)"

# GA4 dimension and metric names used by the report shapes
DIM_PAGE_PATH = "pagePath"
DIM_EVENT_NAME = "eventName"
DIM_ELEMENT_ID = "customEvent:element_id"
DIM_FORM_ID = "customEvent:form_id"
DIM_LOCALE = "customEvent:locale"
DIM_CUSTOM_PAGE_PATH = "customEvent:page_path"
DIM_DATE = "date"

METRIC_ACTIVE_USERS = "activeUsers"
METRIC_PAGE_VIEWS = "screenPageViews"
METRIC_EVENT_COUNT = "eventCount"

INTERACTION_DIMENSIONS = [
    DIM_EVENT_NAME,
    DIM_ELEMENT_ID,
    DIM_FORM_ID,
    DIM_LOCALE,
    DIM_PAGE_PATH,
    DIM_CUSTOM_PAGE_PATH,
    DIM_DATE,
]

EVENT_BUTTON_CLICK = "button_click"
EVENT_FORM_SUBMIT = "form_submit"

PAGE_ROW_LIMIT = 5000
INTERACTION_ROW_LIMIT = 5000

# Interaction kind → (dimension holding the event key, JSON field name, grouping name)
INTERACTION_KINDS = {
    "button": (DIM_ELEMENT_ID, "elementId", "byElementId"),
    "form": (DIM_FORM_ID, "formId", "byFormId"),
}


@dataclass(frozen=True)
class DedicatedMetricDefinition:
    """One named UI element reported on individually, across all locales."""
    key: str
    match_id: str
    match_normalized_path: str
    label: str


DEDICATED_BUTTONS = (
    DedicatedMetricDefinition(
        key="homeContactNow",
        match_id="btn_home_contact_now",
        match_normalized_path="/",
        label="Home Contact Now Clicks",
    ),
)

DEDICATED_FORMS = (
    DedicatedMetricDefinition(
        key="homeMain",
        match_id="form_home_main",
        match_normalized_path="/",
        label="Home Main Form Submissions",
    ),
    DedicatedMetricDefinition(
        key="aboutUs",
        match_id="form_about_us",
        match_normalized_path="/about-us",
        label="About Us Form Submissions",
    ),
    DedicatedMetricDefinition(
        key="careers",
        match_id="careers-form-section",
        match_normalized_path="/careers",
        label="Careers Form Submissions",
    ),
    DedicatedMetricDefinition(
        key="portfolio",
        match_id="form_portfolio",
        match_normalized_path="/portfolio",
        label="Portfolio Form Submissions",
    ),
)

INTERACTION_COLUMNS = [
    "event_key",
    "locale",
    "raw_page_path",
    "normalized_page_path",
    "date",
    "event_count",
]

interaction_schema = pa.DataFrameSchema(
    columns={
        "event_key": Column(str, nullable=False),
        "locale": Column(str, Check.isin([*LOCALES, DIMENSION_FALLBACK]), nullable=False),
        "raw_page_path": Column(str, Check.str_startswith("/"), nullable=False),
        "normalized_page_path": Column(str, Check.str_startswith("/"), nullable=False),
        "date": Column(str, nullable=False),
        "event_count": Column(int, Check.ge(0), coerce=True, nullable=False),
    },
    strict=True,
)
