from __future__ import annotations

import datetime

import pytest

from calgen.engine.dates import DateGrid, days_in_month, format_date_key, ordinal, weekday_of


def test_days_in_month_handles_leap_years() -> None:
    assert days_in_month(2024, 1) == 29
    assert days_in_month(2023, 1) == 28
    assert days_in_month(2000, 1) == 29
    assert days_in_month(1900, 1) == 28
    assert days_in_month(2025, 0) == 31
    assert days_in_month(2025, 3) == 30


def test_weekday_is_sunday_based() -> None:
    assert weekday_of(2024, 11, 1) == 0  # 2024-12-01, Sunday
    assert weekday_of(2024, 5, 1) == 6  # 2024-06-01, Saturday
    assert weekday_of(2025, 10, 5) == 3  # 2025-11-05, Wednesday


@pytest.mark.parametrize("num, expected", [
    (0, "0th"),
    (1, "1st"),
    (2, "2nd"),
    (3, "3rd"),
    (4, "4th"),
    (11, "11th"),
    (12, "12th"),
    (13, "13th"),
    (21, "21st"),
    (22, "22nd"),
    (23, "23rd"),
    (101, "101st"),
    (111, "111th"),
    (112, "112th"),
])
def test_ordinal(num: int, expected: str) -> None:
    assert ordinal(num) == expected


def test_format_date_key_is_one_based_and_padded() -> None:
    assert format_date_key(0, 5) == "01-05"
    assert format_date_key(11, 25) == "12-25"


def test_weeks_in_month_invariants_for_every_month() -> None:
    grid = DateGrid()
    for year in (2023, 2024, 2025, 2026):
        for month in range(12):
            weeks = grid.weeks_in_month(year, month)
            assert 4 <= len(weeks) <= 6
            assert all(len(week) == 7 for week in weeks)
            days = [day for week in weeks for day in week if day is not None]
            assert days == list(range(1, days_in_month(year, month) + 1))
            for week in weeks[1:-1]:
                assert None not in week


def test_saturday_start_has_six_leading_blanks() -> None:
    weeks = DateGrid().weeks_in_month(2024, 5)  # June 2024 starts on a Saturday
    assert weeks[0] == [None, None, None, None, None, None, 1]


def test_four_row_february() -> None:
    weeks = DateGrid().weeks_in_month(2015, 1)  # starts on Sunday, 28 days
    assert len(weeks) == 4
    assert weeks[0][0] == 1
    assert weeks[-1][-1] == 28


def test_is_today_uses_injected_clock() -> None:
    grid = DateGrid(clock=lambda: datetime.date(2025, 11, 15))
    assert grid.is_today(2025, 10, 15)
    assert not grid.is_today(2025, 10, 14)
    assert not grid.is_today(2024, 10, 15)


def test_weekend_classification() -> None:
    grid = DateGrid()
    assert grid.is_weekend(0)
    assert grid.is_weekend(6)
    assert not any(grid.is_weekend(day) for day in range(1, 6))
    assert grid.date(2025, 10, 15).is_weekend
