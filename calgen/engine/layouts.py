from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Optional, Union

from ..config import DAY_NAMES, DEFAULT_PAGE_SIZE, MINI_DAY_NAMES, MONTH_NAMES
from .dates import CalendarDate, DateGrid, WeekRow
from .errors import UnknownLayoutError
from .events import EventStore, RenderedAnnotation
from .options import RenderOptions
from .pages import get_page_size


@dataclass(frozen=True)
class DayCell:
    """One day slot of a layout. `date` is None for padding outside the month."""

    date: Optional[CalendarDate] = None
    weekday_name: str = ""
    is_weekend: bool = False
    is_today: bool = False
    has_event: bool = False
    annotation: Optional[RenderedAnnotation] = None

    @property
    def is_blank(self) -> bool:
        return self.date is None

    @property
    def day(self) -> Optional[int]:
        return self.date.day if self.date else None

    def classes(self, base: str) -> List[str]:
        # additive: weekend, today and has-event never replace each other
        if self.is_blank:
            return [base, "empty"]
        out = [base]
        if self.is_weekend:
            out.append("weekend")
        if self.is_today:
            out.append("today")
        if self.has_event:
            out.append("has-event")
        return out


@dataclass
class FortnightContent:
    columns: List[List[DayCell]]
    kind: str = "fortnight"


@dataclass
class WeeklyContent:
    headers: List[str]
    rows: List[List[DayCell]]
    kind: str = "weekly"


@dataclass
class MiniMonth:
    month: int
    name: str
    headers: List[str]
    rows: List[List[DayCell]]


@dataclass
class YearContent:
    months: List[MiniMonth]
    columns: int
    rows: int
    kind: str = "year"


LayoutContent = Union[FortnightContent, WeeklyContent, YearContent]


class LayoutVariant(ABC):
    key: str
    name: str
    supported_sizes: FrozenSet[str]
    size_config: Dict[str, Dict[str, float]]
    with_annotations: bool = True

    def supports(self, page_size: str) -> bool:
        return page_size in self.supported_sizes

    def style_config(self, page_size: str | None) -> Dict[str, float]:
        config = self.size_config.get(get_page_size(page_size).key, self.size_config[DEFAULT_PAGE_SIZE])
        return dict(config)

    @abstractmethod
    def generate_content(
        self,
        month: int,
        year: int,
        options: RenderOptions,
        events: EventStore,
        grid: DateGrid,
    ) -> LayoutContent:
        """Build the content tree for one month (0-based)."""

    def day_cell(self, year: int, month: int, day: Optional[int], events: EventStore, grid: DateGrid) -> DayCell:
        if day is None:
            return DayCell()
        date = grid.date(year, month, day)
        weekday = date.weekday
        annotation = events.render(date.key, year) if self.with_annotations else None
        return DayCell(
            date=date,
            weekday_name=DAY_NAMES[weekday],
            is_weekend=grid.is_weekend(weekday),
            is_today=grid.is_today(year, month, day),
            has_event=events.has_event(date.key),
            annotation=annotation,
        )

    def week_rows(self, year: int, month: int, events: EventStore, grid: DateGrid) -> List[List[DayCell]]:
        weeks: List[WeekRow] = grid.weeks_in_month(year, month)
        return [[self.day_cell(year, month, day, events, grid) for day in week] for week in weeks]


class FortnightLayout(LayoutVariant):
    """Days 1-15 in the left column, 16 to month end in the right one."""

    key = "fortnight"
    name = "Fortnight"
    supported_sizes = frozenset({"A4-portrait", "A5-portrait"})
    size_config = {
        "A4-portrait": {
            "column_gap": 12,
            "card_gap": 2,
            "card_min_height": 48,
            "card_padding_y": 8,
            "card_padding_x": 12,
            "info_min_width": 50,
            "day_name_size": 11,
            "day_number_size": 22,
            "event_size": 11,
            "events_min_width": 190,
        },
        "A5-portrait": {
            "column_gap": 8,
            "card_gap": 1,
            "card_min_height": 30,
            "card_padding_y": 3,
            "card_padding_x": 6,
            "info_min_width": 34,
            "day_name_size": 8,
            "day_number_size": 15,
            "event_size": 7,
            "events_min_width": 110,
        },
    }

    def generate_content(self, month, year, options, events, grid) -> FortnightContent:
        last = grid.days_in_month(year, month)
        first_half = [self.day_cell(year, month, day, events, grid) for day in range(1, 16)]
        second_half = [self.day_cell(year, month, day, events, grid) for day in range(16, last + 1)]
        return FortnightContent(columns=[first_half, second_half])


class WeeklyLayout(LayoutVariant):
    key = "weekly"
    name = "Weekly"
    supported_sizes = frozenset({"A4-portrait", "A4-landscape", "A5-portrait", "A5-landscape"})
    size_config = {
        "A4-portrait": {"cell_height": 80, "font_size": 10, "day_num_size": 18, "event_padding": 4, "header_size": 12},
        "A4-landscape": {"cell_height": 100, "font_size": 11, "day_num_size": 20, "event_padding": 6, "header_size": 13},
        "A5-portrait": {"cell_height": 50, "font_size": 8, "day_num_size": 14, "event_padding": 2, "header_size": 10},
        "A5-landscape": {"cell_height": 42, "font_size": 7, "day_num_size": 12, "event_padding": 2, "header_size": 9},
    }

    def generate_content(self, month, year, options, events, grid) -> WeeklyContent:
        return WeeklyContent(headers=list(DAY_NAMES), rows=self.week_rows(year, month, events, grid))


class YearLayout(LayoutVariant):
    """
    Twelve mini months on one page.

    Mini days only carry the day number and an event marker; annotation text
    never fits at this scale.
    """

    key = "year"
    name = "Year"
    supported_sizes = frozenset({"A4-portrait", "A4-landscape", "A5-portrait", "A5-landscape"})
    with_annotations = False
    size_config = {
        "A4-portrait": {
            "month_padding": 8,
            "header_size": 14,
            "day_header_size": 9,
            "day_size": 11,
            "cell_size": 22,
            "header_margin": 6,
        },
        "A4-landscape": {
            "month_padding": 6,
            "header_size": 13,
            "day_header_size": 8,
            "day_size": 10,
            "cell_size": 20,
            "header_margin": 5,
        },
        "A5-portrait": {
            "month_padding": 4,
            "header_size": 11,
            "day_header_size": 7,
            "day_size": 9,
            "cell_size": 16,
            "header_margin": 4,
        },
        "A5-landscape": {
            "month_padding": 3,
            "header_size": 10,
            "day_header_size": 6,
            "day_size": 8,
            "cell_size": 14,
            "header_margin": 3,
        },
    }

    def style_config(self, page_size: str | None) -> Dict[str, float]:
        config = super().style_config(page_size)
        landscape = get_page_size(page_size).landscape
        config["columns"] = 4 if landscape else 3
        config["rows"] = 3 if landscape else 4
        return config

    def generate_content(self, month, year, options, events, grid) -> YearContent:
        config = self.style_config(options.page_size)
        months = [
            MiniMonth(
                month=m,
                name=MONTH_NAMES[m],
                headers=list(MINI_DAY_NAMES),
                rows=self.week_rows(year, m, events, grid),
            )
            for m in range(12)
        ]
        return YearContent(months=months, columns=int(config["columns"]), rows=int(config["rows"]))


LAYOUTS: Dict[str, LayoutVariant] = {
    "fortnight": FortnightLayout(),
    "weekly": WeeklyLayout(),
    "year": YearLayout(),
}


def layout_names() -> List[str]:
    return list(LAYOUTS)


def get_layout(name: str) -> LayoutVariant:
    layout = LAYOUTS.get(str(name or "").strip().lower())
    if layout is None:
        raise UnknownLayoutError(str(name), layout_names())
    return layout
