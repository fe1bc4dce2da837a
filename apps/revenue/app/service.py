"""Fetch time entries through the mite SDK and project revenue from them."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Callable, List, Optional

from pydantic import TypeAdapter, ValidationError

from mite_sdk import MiteClient

from .models import RevenueProjection, TimeEntry, TimeEntryWrapper
from .projection import project_revenue, resolve_year

logger = logging.getLogger("revenue.service")

_WRAPPERS = TypeAdapter(List[TimeEntryWrapper])

ResultCallback = Callable[[int, int, int], None]


class ProjectionUnavailable(Exception):
    """The time entry listing could not be fetched or understood."""


def parse_entries(payload: Any) -> List[TimeEntry]:
    return [wrapper.time_entry for wrapper in _WRAPPERS.validate_python(payload)]


async def fetch_projection(
    client: MiteClient,
    *,
    year: Optional[int] = None,
    now: Optional[datetime] = None,
) -> RevenueProjection:
    now = now or datetime.now(timezone.utc)
    year = resolve_year(year, now)

    try:
        response = await client.time_entries.all({"year": year})
    except json.JSONDecodeError as exc:
        raise ProjectionUnavailable("mite returned a malformed time entry listing") from exc
    if not response.ok:
        raise ProjectionUnavailable(response.message or "error")

    try:
        entries = parse_entries(response.payload)
    except ValidationError as exc:
        raise ProjectionUnavailable(f"unexpected time entry payload: {exc.error_count()} errors") from exc

    projection = project_revenue(entries, year=year, now=now)
    logger.info("Projected revenue year=%s entries=%s per_year=%s", year, projection.entries, projection.per_year)
    return projection


def get_financial_metrics(
    client: MiteClient,
    result_callback: ResultCallback,
    *,
    year: Optional[int] = None,
    now: Optional[datetime] = None,
) -> Any:
    """Callback flavour: ``result_callback(per_year, per_last_4_weeks, per_last_7_days)``.

    With a non-blocking client this returns the pending listing future and the
    callback fires once it resolves; a blocking client invokes it before
    returning.
    """
    now = now or datetime.now(timezone.utc)
    year = resolve_year(year, now)

    def on_success(payload: Any) -> None:
        projection = project_revenue(parse_entries(payload), year=year, now=now)
        result_callback(projection.per_year, projection.per_last_4_weeks, projection.per_last_7_days)

    result = client.time_entries.all({"year": year}, on_success)
    if not client.config.async_mode:
        on_success(result)
    return result


__all__ = ["ProjectionUnavailable", "fetch_projection", "get_financial_metrics", "parse_entries"]
