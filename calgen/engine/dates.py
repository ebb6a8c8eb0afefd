from __future__ import annotations

import calendar
import datetime
from dataclasses import dataclass
from typing import Callable, List, Optional

# Months are 0-based (0 = January) and weekdays start on Sunday (0 = Sunday)
# throughout the engine.

WeekRow = List[Optional[int]]

WEEKEND_DAYS = (0, 6)


def ordinal(num: int) -> str:
    j = num % 10
    k = num % 100
    if j == 1 and k != 11:
        return f"{num}st"
    if j == 2 and k != 12:
        return f"{num}nd"
    if j == 3 and k != 13:
        return f"{num}rd"
    return f"{num}th"


def format_date_key(month: int, day: int) -> str:
    return f"{month + 1:02d}-{day:02d}"


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month + 1)[1]


def weekday_of(year: int, month: int, day: int) -> int:
    # date.weekday() is Monday-based
    return (datetime.date(year, month + 1, day).weekday() + 1) % 7


def is_weekend(weekday: int) -> bool:
    return weekday in WEEKEND_DAYS


@dataclass(frozen=True)
class CalendarDate:
    year: int
    month: int
    day: int

    @property
    def weekday(self) -> int:
        return weekday_of(self.year, self.month, self.day)

    @property
    def is_weekend(self) -> bool:
        return is_weekend(self.weekday)

    @property
    def key(self) -> str:
        return format_date_key(self.month, self.day)

    @classmethod
    def from_date(cls, value: datetime.date) -> "CalendarDate":
        return cls(value.year, value.month - 1, value.day)


class DateGrid:
    """
    Month arithmetic for the layouts.

    `clock` returns the current local date; tests pass a fixed one so that
    "today" highlighting is deterministic.
    """

    def __init__(self, clock: Callable[[], datetime.date] = datetime.date.today) -> None:
        self.clock = clock

    def days_in_month(self, year: int, month: int) -> int:
        return days_in_month(year, month)

    def weekday_of(self, year: int, month: int, day: int) -> int:
        return weekday_of(year, month, day)

    def is_weekend(self, weekday: int) -> bool:
        return is_weekend(weekday)

    def is_today(self, year: int, month: int, day: int) -> bool:
        return CalendarDate.from_date(self.clock()) == CalendarDate(year, month, day)

    def date(self, year: int, month: int, day: int) -> CalendarDate:
        return CalendarDate(year, month, day)

    def weeks_in_month(self, year: int, month: int) -> List[WeekRow]:
        slots: List[Optional[int]] = [None] * self.weekday_of(year, month, 1)
        slots.extend(range(1, self.days_in_month(year, month) + 1))
        while len(slots) % 7:
            slots.append(None)
        return [slots[i : i + 7] for i in range(0, len(slots), 7)]
