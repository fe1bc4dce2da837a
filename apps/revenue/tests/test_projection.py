from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from apps.revenue.app.models import TimeEntry
from apps.revenue.app.projection import (
    day_of_year,
    days_in_year,
    pretty_number,
    project_revenue,
    round_half_up,
)

NOW = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


def make_entry(date_at: str, created_at: str, hourly_rate: int, minutes: int) -> TimeEntry:
    return TimeEntry(date_at=date_at, created_at=created_at, hourly_rate=hourly_rate, minutes=minutes)


@pytest.fixture()
def entries() -> list[TimeEntry]:
    return [
        make_entry("2024-01-10", "2024-01-10T10:00:00Z", 10000, 60),
        make_entry("2024-02-20", "2024-02-20T10:00:00Z", 6000, 30),
        make_entry("2024-02-27", "2024-02-27T09:00:00Z", 12000, 90),
        make_entry("2023-12-30", "2024-01-02T08:00:00Z", 8000, 60),
    ]


def test_calendar_helpers() -> None:
    assert days_in_year(2024) == 366
    assert days_in_year(2023) == 365
    assert days_in_year(1900) == 365
    assert days_in_year(2000) == 366
    assert day_of_year(date(2024, 1, 1)) == 1
    assert day_of_year(NOW) == 61


def test_project_current_year(entries: list[TimeEntry]) -> None:
    projection = project_revenue(entries, now=NOW)

    assert projection.year == 2024
    assert projection.entries == 3
    assert projection.per_year == 1860
    assert projection.per_last_4_weeks == 2598
    assert projection.per_last_7_days == 8153


def test_past_year_counts_as_fully_elapsed(entries: list[TimeEntry]) -> None:
    projection = project_revenue(entries, year=2023, now=NOW)

    assert projection.entries == 1
    assert projection.per_year == 80
    assert projection.per_last_4_weeks == 80
    assert projection.per_last_7_days == 80


def test_future_year_is_rejected(entries: list[TimeEntry]) -> None:
    with pytest.raises(ValueError):
        project_revenue(entries, year=2025, now=NOW)


def test_naive_timestamps_use_clock_timezone() -> None:
    entry = make_entry("2024-02-29", "2024-02-29T08:00:00", 6000, 60)

    projection = project_revenue([entry], now=NOW)

    assert projection.per_last_7_days > projection.per_year


def test_round_half_up_and_pretty_number() -> None:
    assert round_half_up(2597.5) == 2598
    assert round_half_up(2.4) == 2
    assert pretty_number(1234567) == "1.234.567"
    assert pretty_number(999) == "999"
    assert pretty_number(0) == "0"
    assert pretty_number(-1234, ",") == "-1,234"
