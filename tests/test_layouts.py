from __future__ import annotations

import datetime

import pytest

from calgen.engine.dates import DateGrid
from calgen.engine.errors import UnknownLayoutError
from calgen.engine.events import EventRecord, EventStore, sample_events
from calgen.engine.layouts import LAYOUTS, LayoutVariant, get_layout, layout_names
from calgen.engine.options import RenderOptions

FIXED_GRID = DateGrid(clock=lambda: datetime.date(2025, 11, 15))


def _content(layout: str, month: int, year: int, page_size: str = "A4-portrait", events: EventStore | None = None):
    options = RenderOptions(layout=layout, page_size=page_size)
    store = events if events is not None else EventStore(sample_events())
    return get_layout(layout).generate_content(month, year, options, store, FIXED_GRID)


def test_layout_registry() -> None:
    assert layout_names() == ["fortnight", "weekly", "year"]
    assert get_layout("Weekly") is LAYOUTS["weekly"]
    with pytest.raises(UnknownLayoutError) as excinfo:
        get_layout("agenda")
    assert "agenda" in str(excinfo.value)
    assert "fortnight, weekly, year" in str(excinfo.value)


def test_fortnight_supported_sizes() -> None:
    fortnight = get_layout("fortnight")
    assert fortnight.supports("A4-portrait")
    assert fortnight.supports("A5-portrait")
    assert not fortnight.supports("A4-landscape")
    assert get_layout("weekly").supports("A5-landscape")


@pytest.mark.parametrize("year, month, second", [(2025, 1, 13), (2024, 1, 14), (2025, 10, 15), (2025, 11, 16)])
def test_fortnight_splits_after_the_fifteenth(year: int, month: int, second: int) -> None:
    content = _content("fortnight", month, year)
    first_half, second_half = content.columns
    assert [cell.day for cell in first_half] == list(range(1, 16))
    assert len(second_half) == second
    assert second_half[0].day == 16


def test_fortnight_cells_carry_weekday_and_annotation() -> None:
    content = _content("fortnight", 10, 2025)
    first_half, _ = content.columns
    nov5 = first_half[4]
    assert nov5.weekday_name == "Wed"
    assert nov5.has_event
    assert nov5.annotation.lines[0] == "Sarah's 21st Birthday"
    assert first_half[0].weekday_name == "Sat"
    assert first_half[0].is_weekend


def test_weekend_today_and_event_combine() -> None:
    events = EventStore({"11-15": EventRecord("custom", ["Open day"])})
    content = _content("fortnight", 10, 2025, events=events)
    cell = content.columns[0][14]
    assert cell.day == 15
    assert cell.classes("day-card") == ["day-card", "weekend", "today", "has-event"]
    assert content.columns[0][13].classes("day-card") == ["day-card"]


def test_weekly_rows() -> None:
    content = _content("weekly", 5, 2024)  # June 2024 starts on Saturday
    assert content.headers == ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
    assert len(content.rows) == 6
    assert all(cell.is_blank for cell in content.rows[0][:6])
    assert content.rows[0][6].day == 1
    assert content.rows[0][0].classes("week-day") == ["week-day", "empty"]
    assert content.rows[-1][0].day == 30


def test_weekly_four_row_month() -> None:
    content = _content("weekly", 1, 2015)
    assert len(content.rows) == 4
    assert not any(cell.is_blank for row in content.rows for cell in row)


def test_year_shows_markers_but_no_text() -> None:
    content = _content("year", 0, 2025, page_size="A4-landscape")
    assert len(content.months) == 12
    assert (content.columns, content.rows) == (4, 3)
    assert content.months[11].name == "December"
    assert content.months[0].headers == ["S", "M", "T", "W", "T", "F", "S"]
    december = [cell for row in content.months[11].rows for cell in row if not cell.is_blank]
    christmas = december[24]
    assert christmas.day == 25
    assert christmas.has_event
    assert christmas.annotation is None


def test_year_grid_follows_orientation() -> None:
    content = _content("year", 0, 2025, page_size="A5-portrait")
    assert (content.columns, content.rows) == (3, 4)


def test_style_config_falls_back_to_a4_portrait() -> None:
    fortnight = get_layout("fortnight")
    assert fortnight.style_config("A4-landscape") == fortnight.style_config("A4-portrait")
    assert fortnight.style_config("A5-portrait")["day_number_size"] == 15
    assert get_layout("weekly").style_config("A5-landscape")["cell_height"] == 42
    year = get_layout("year").style_config("A4-portrait")
    assert year["cell_size"] == 22
    assert (year["columns"], year["rows"]) == (3, 4)


def test_layout_base_is_abstract() -> None:
    with pytest.raises(TypeError):
        LayoutVariant()
    assert "size_config" not in vars(LayoutVariant)
