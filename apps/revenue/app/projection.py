"""Annual revenue projection from mite time entries.

Revenue of an entry is ``hourly_rate * minutes / 60`` in minor currency
units. Three projections are produced, all in major units:

- ``per_year``: revenue so far scaled to the full year;
- ``per_last_4_weeks``: revenue so far plus the daily rate of the last 28
  days over the remaining days of the year;
- ``per_last_7_days``: same, using the daily rate of the last 7 days.
"""

from __future__ import annotations

import calendar
import math
from datetime import date, datetime, timedelta, timezone
from typing import Iterable, List, Optional

from .models import RevenueProjection, TimeEntry


def days_in_year(year: int) -> int:
    return 366 if calendar.isleap(year) else 365


def day_of_year(moment: date) -> int:
    return moment.timetuple().tm_yday


def resolve_year(year: Optional[int], now: datetime) -> int:
    if year is None:
        return now.year
    if year > now.year:
        raise ValueError(f"cannot project revenue for future year {year}")
    return year


def entry_revenue(entry: TimeEntry) -> float:
    return entry.hourly_rate * (entry.minutes / 60.0)


def total_revenue(entries: Iterable[TimeEntry]) -> float:
    return sum(entry_revenue(entry) for entry in entries)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _created_at(entry: TimeEntry, now: datetime) -> datetime:
    created = entry.created_at
    if created.tzinfo is None:
        created = created.replace(tzinfo=now.tzinfo)
    return created


def project_revenue(
    entries: Iterable[TimeEntry],
    *,
    year: Optional[int] = None,
    now: Optional[datetime] = None,
) -> RevenueProjection:
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    year = resolve_year(year, now)

    total_days = days_in_year(year)
    # a past year is fully elapsed
    elapsed = day_of_year(now) if year == now.year else total_days
    remaining = total_days - elapsed

    four_weeks_ago = now - timedelta(days=28)
    one_week_ago = now - timedelta(days=7)

    this_year: List[TimeEntry] = [entry for entry in entries if entry.date_at.year == year]
    last_4_weeks = [entry for entry in this_year if _created_at(entry, now) > four_weeks_ago]
    last_week = [entry for entry in last_4_weeks if _created_at(entry, now) > one_week_ago]

    revenue_this_year = total_revenue(this_year)
    per_day_last_4_weeks = total_revenue(last_4_weeks) / 28
    per_day_last_week = total_revenue(last_week) / 7

    return RevenueProjection(
        year=year,
        per_year=round_half_up(revenue_this_year * (total_days / elapsed / 100.0)),
        per_last_4_weeks=round_half_up((revenue_this_year + per_day_last_4_weeks * remaining) / 100.0),
        per_last_7_days=round_half_up((revenue_this_year + per_day_last_week * remaining) / 100.0),
        entries=len(this_year),
    )


def pretty_number(value: int, delimiter: str = ".") -> str:
    """Group digits in threes: ``1234567`` -> ``1.234.567``."""
    sign = "-" if value < 0 else ""
    return sign + f"{abs(int(value)):,}".replace(",", delimiter)


__all__ = [
    "day_of_year",
    "days_in_year",
    "entry_revenue",
    "pretty_number",
    "project_revenue",
    "resolve_year",
    "round_half_up",
    "total_revenue",
]
