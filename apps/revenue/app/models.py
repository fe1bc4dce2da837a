"""Pydantic models for the revenue projection service."""

from __future__ import annotations

from datetime import date, datetime
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class TimeEntry(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: Optional[int] = None
    date_at: date
    created_at: datetime
    minutes: int = 0
    # minor currency units (cents)
    hourly_rate: int = 0


class TimeEntryWrapper(BaseModel):
    model_config = ConfigDict(extra="ignore")

    time_entry: TimeEntry


class RevenueProjection(BaseModel):
    year: int
    per_year: int
    per_last_4_weeks: int
    per_last_7_days: int
    entries: int = Field(0, ge=0)


class ProjectionResponse(BaseModel):
    projection: RevenueProjection
    formatted: Dict[str, str]


class HealthResponse(BaseModel):
    status: str = "ok"
    service: str = "revenue"
