"""FastAPI service projecting annual revenue from mite time entries."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

import uvicorn
from fastapi import Depends, FastAPI, HTTPException
from fastapi.responses import PlainTextResponse
from prometheus_client import Counter, Histogram, generate_latest

from mite_sdk import ConfigurationError, MiteClient

from .config import settings
from .models import HealthResponse, ProjectionResponse
from .projection import pretty_number
from .service import ProjectionUnavailable, fetch_projection

logger = logging.getLogger("revenue")
logging.basicConfig(level=logging.INFO)

app = FastAPI(title="mite Revenue Projection", version="0.1.0")

PROJECTION_COUNTER = Counter("revenue_projection_requests_total", "Revenue projection requests", ["outcome"])
PROJECTION_LATENCY = Histogram("revenue_projection_latency_seconds", "Revenue projection latency")

_client: Optional[MiteClient] = None


def get_client() -> MiteClient:
    global _client
    if _client is None:
        try:
            _client = MiteClient(settings.client_config())
        except ConfigurationError as exc:
            logger.error("mite client is not configured: %s", exc)
            raise HTTPException(status_code=503, detail="mite account is not configured") from exc
    return _client


def get_clock() -> datetime:
    return datetime.now(timezone.utc)


@app.get("/healthz", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse()


@app.get("/metrics")
def metrics() -> PlainTextResponse:
    data = generate_latest()
    return PlainTextResponse(data, media_type="text/plain; version=0.0.4")


@app.get("/v1/revenue/projection", response_model=ProjectionResponse)
async def revenue_projection(
    year: Optional[int] = None,
    client: MiteClient = Depends(get_client),
    now: datetime = Depends(get_clock),
) -> ProjectionResponse:
    with PROJECTION_LATENCY.time():
        try:
            projection = await fetch_projection(client, year=year, now=now)
        except ProjectionUnavailable as exc:
            PROJECTION_COUNTER.labels(outcome="upstream_error").inc()
            raise HTTPException(status_code=502, detail=str(exc)) from exc
        except ValueError as exc:
            PROJECTION_COUNTER.labels(outcome="invalid").inc()
            raise HTTPException(status_code=400, detail=str(exc)) from exc

    PROJECTION_COUNTER.labels(outcome="ok").inc()
    delimiter = settings.number_delimiter
    return ProjectionResponse(
        projection=projection,
        formatted={
            "per_year": pretty_number(projection.per_year, delimiter),
            "per_last_4_weeks": pretty_number(projection.per_last_4_weeks, delimiter),
            "per_last_7_days": pretty_number(projection.per_last_7_days, delimiter),
        },
    )


@app.on_event("shutdown")
async def on_shutdown() -> None:
    if _client is not None:
        await _client.aclose()


if __name__ == "__main__":
    uvicorn.run("apps.revenue.app.main:app", host="0.0.0.0", port=8000)
