import logging
from functools import lru_cache

from fastapi import Depends, FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from dashboard.analytics.filters import resolve_filters
from dashboard.analytics.service import build_analytics_report, fetch_realtime_users
from dashboard.config import ConfigurationError, load_app_settings, load_ga4_settings
from dashboard.integrations.base import BaseReportingClient
from dashboard.integrations.ga4 import GA4ReportingClient

logger = logging.getLogger(__name__)

settings = load_app_settings()

app = FastAPI(title="Nimda Dashboard API", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
)


class FailureResponse(BaseModel):
    ok: bool = False
    error: str
    message: str
    details: str | None = None


def _failure(status_code: int, message: str, exc: Exception) -> JSONResponse:
    body = FailureResponse(
        error=message,
        message=message,
        details=None if settings.is_production else str(exc),
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


@lru_cache(maxsize=1)
def get_reporting_client() -> BaseReportingClient:
    """Shared GA4 client; configuration is checked on first use."""
    return GA4ReportingClient(load_ga4_settings())


@app.on_event("startup")
def on_startup():
    load_ga4_settings()


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError):
    logger.error("Configuration error on %s: %s", request.url.path, exc)
    return _failure(500, "Analytics service is not configured", exc)


@app.get("/api/health")
def health():
    return {"ok": True}


@app.get("/api/analytics")
async def get_analytics(
    range_preset: str | None = Query(None, alias="range"),
    start_date: str | None = Query(None, alias="startDate"),
    end_date: str | None = Query(None, alias="endDate"),
    locale: str | None = Query(None),
    client: BaseReportingClient = Depends(get_reporting_client),
):
    """GA4 dashboard report for a date range and optional locale.

    Invalid or partial filters fall back to the 30-day, all-locale defaults.
    """
    filters = resolve_filters({
        "range": range_preset,
        "startDate": start_date,
        "endDate": end_date,
        "locale": locale,
    })

    try:
        data = await build_analytics_report(client, filters)
    except Exception as exc:
        logger.error("Failed to fetch GA4 report: %s", exc)
        return _failure(502, "Failed to fetch analytics data", exc)

    return {"ok": True, "data": data}


@app.get("/api/analytics/realtime")
async def get_realtime_analytics(
    client: BaseReportingClient = Depends(get_reporting_client),
):
    """Active users in the last 30 minutes."""
    try:
        data = await fetch_realtime_users(client)
    except Exception as exc:
        logger.error("Failed to fetch realtime GA4 report: %s", exc)
        return _failure(502, "Failed to fetch realtime analytics data", exc)

    return {"ok": True, "data": data}
