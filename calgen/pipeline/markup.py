from __future__ import annotations

from html import escape
from typing import Callable, Dict, List

from ..config import load_style_preset
from ..engine.compose import Document
from ..engine.layouts import DayCell, FortnightContent, WeeklyContent, YearContent
from ..engine.themes import THEMES, ThemeRegistry


def _cls(names: List[str]) -> str:
    return " ".join(name for name in names if name)


def _annotation_html(cell: DayCell) -> str:
    if cell.annotation is None:
        return ""
    category = escape(cell.annotation.category)
    lines = "".join(
        f'<div class="event-line {category}">{escape(line)}</div>' for line in cell.annotation.visible_lines
    )
    return f'<div class="events-card">{lines}</div>'


# --- content --------------------------------------------------------------

def _fortnight_html(content: FortnightContent) -> str:
    out = ['<div class="fortnights">']
    for column in content.columns:
        out.append('<div class="fortnight"><div class="days-grid">')
        for cell in column:
            out.append(
                f'<div class="{_cls(cell.classes("day-card"))}">'
                '<div class="day-info">'
                f'<div class="day-name">{escape(cell.weekday_name)}</div>'
                f'<div class="day-number">{cell.day}</div>'
                "</div>"
                f'<div class="day-content">{_annotation_html(cell)}</div>'
                "</div>"
            )
        out.append("</div></div>")
    out.append("</div>")
    return "".join(out)


def _weekly_html(content: WeeklyContent) -> str:
    out = ['<div class="weekly-grid"><div class="week-headers">']
    out.extend(f'<div class="week-header">{escape(name)}</div>' for name in content.headers)
    out.append("</div>")
    for row in content.rows:
        out.append('<div class="week-row">')
        for cell in row:
            if cell.is_blank:
                out.append('<div class="week-day empty"></div>')
                continue
            out.append(
                f'<div class="{_cls(cell.classes("week-day"))}">'
                f'<div class="week-day-number">{cell.day}</div>'
                f'<div class="week-day-events">{_annotation_html(cell)}</div>'
                "</div>"
            )
        out.append("</div>")
    out.append("</div>")
    return "".join(out)


def _year_html(content: YearContent) -> str:
    out = ['<div class="year-grid">']
    for mini in content.months:
        out.append(
            '<div class="mini-month">'
            f'<div class="mini-month-header">{escape(mini.name)}</div>'
            '<div class="mini-grid"><div class="mini-day-headers">'
        )
        out.extend(f'<div class="mini-day-header">{escape(name)}</div>' for name in mini.headers)
        out.append('</div><div class="mini-weeks">')
        for row in mini.rows:
            out.append('<div class="mini-week">')
            for cell in row:
                text = "" if cell.is_blank else str(cell.day)
                out.append(f'<div class="{_cls(cell.classes("mini-day"))}">{text}</div>')
            out.append("</div>")
        out.append("</div></div></div>")
    out.append("</div>")
    return "".join(out)


CONTENT_RENDERERS: Dict[str, Callable] = {
    "fortnight": _fortnight_html,
    "weekly": _weekly_html,
    "year": _year_html,
}


# --- layout css -----------------------------------------------------------

def _fortnight_css(c: Dict[str, float], event_colors: Dict[str, str]) -> str:
    colors = "\n".join(
        f".event-line.{category} {{ color: {color}; }}" for category, color in event_colors.items()
    )
    return f"""
.fortnights {{ display: grid; grid-template-columns: 1fr 1fr; gap: {c['column_gap']}px; height: 100%; min-height: 0; }}
.fortnight {{ border: 2px solid var(--border-color); border-radius: 8px; overflow: hidden; display: flex; flex-direction: column; }}
.days-grid {{ display: flex; flex-direction: column; flex: 1; gap: {c['card_gap']}px; padding: 8px; overflow: hidden; }}
.day-card {{ display: flex; align-items: center; border: 1px solid var(--border-color); border-radius: 4px;
  padding: {c['card_padding_y']}px {c['card_padding_x']}px; background: white; min-height: {c['card_min_height']}px; }}
.day-card.weekend {{ background-color: var(--weekend-bg); }}
.day-card.today {{ background-color: var(--today-bg); border: 2px solid var(--accent-color); box-shadow: 0 2px 8px rgba(0,0,0,0.15); }}
.day-card.weekend.today {{ background-image: linear-gradient(var(--weekend-bg), var(--weekend-bg)); background-size: 6px 100%; background-repeat: no-repeat; }}
.day-info {{ display: flex; flex-direction: column; align-items: center; justify-content: center; gap: 2px; flex-shrink: 0; min-width: {c['info_min_width']}px; }}
.day-name {{ font-weight: 700; font-size: {c['day_name_size']}px; color: var(--secondary-color); text-transform: uppercase; letter-spacing: 0.5px; }}
.day-number {{ font-weight: 700; font-size: {c['day_number_size']}px; color: var(--primary-color); line-height: 1; }}
.day-card.weekend .day-name, .day-card.weekend .day-number {{ color: var(--accent-color); }}
.day-content {{ flex: 1; margin-left: 12px; display: flex; justify-content: flex-end; }}
.events-card {{ background: rgba(0,0,0,0.02); border: 1px solid var(--border-color); border-radius: 4px;
  padding: 5px 10px; max-width: 70%; min-width: {c['events_min_width']}px; }}
.event-line {{ font-size: {c['event_size']}px; font-style: italic; color: var(--text-color); opacity: 0.8; line-height: 1.4; margin-bottom: 2px; }}
.event-line:last-child {{ margin-bottom: 0; }}
{colors}
.day-card.weekend .events-card {{ background: rgba(255,255,255,0.5); }}
"""


def _weekly_css(c: Dict[str, float], event_colors: Dict[str, str]) -> str:
    colors = "\n".join(
        f".week-day-events .event-line.{category} {{ color: {color}; }}" for category, color in event_colors.items()
    )
    return f"""
.weekly-grid {{ display: flex; flex-direction: column; height: 100%; min-height: 0; border: 2px solid var(--border-color); border-radius: 8px; overflow: hidden; }}
.week-headers {{ display: grid; grid-template-columns: repeat(7, 1fr); background: var(--primary-color); border-bottom: 2px solid var(--border-color); }}
.week-header {{ padding: 6px; text-align: center; font-weight: 700; font-size: {c['header_size']}px; color: white;
  text-transform: uppercase; letter-spacing: 0.3px; border-right: 1px solid rgba(255,255,255,0.2); }}
.week-header:last-child {{ border-right: none; }}
.week-row {{ display: grid; grid-template-columns: repeat(7, 1fr); flex: 1; }}
.week-day {{ border: 1px solid var(--border-color); padding: {c['event_padding']}px; background: white; display: flex;
  flex-direction: column; min-height: {c['cell_height']}px; position: relative; }}
.week-day.empty {{ background: #f5f5f5; }}
.week-day.weekend {{ background-color: var(--weekend-bg); }}
.week-day.today {{ background-color: var(--today-bg); border: 2px solid var(--accent-color); box-shadow: inset 0 0 8px rgba(0,0,0,0.1); }}
.week-day.weekend.today {{ box-shadow: inset 0 0 0 4px var(--weekend-bg); }}
.week-day-number {{ font-weight: 700; font-size: {c['day_num_size']}px; color: var(--primary-color); margin-bottom: 2px; }}
.week-day.weekend .week-day-number {{ color: var(--accent-color); }}
.week-day-events {{ flex: 1; overflow: hidden; }}
.week-day-events .events-card {{ background: transparent; border: none; padding: 0; min-width: auto; max-width: 100%; }}
.week-day-events .event-line {{ font-size: {c['font_size']}px; line-height: 1.2; margin-bottom: 1px; white-space: nowrap; overflow: hidden; text-overflow: ellipsis; }}
{colors}
"""


def _year_css(c: Dict[str, float], event_colors: Dict[str, str]) -> str:
    return f"""
.year-grid {{ display: grid; grid-template-columns: repeat({c['columns']}, 1fr); grid-template-rows: repeat({c['rows']}, 1fr);
  gap: 10px; height: 100%; min-height: 0; padding: 5px; }}
.mini-month {{ border: 2px solid var(--border-color); border-radius: 6px; overflow: hidden; display: flex; flex-direction: column; background: white; }}
.mini-month-header {{ background: var(--primary-color); color: white; text-align: center; padding: {c['month_padding']}px;
  font-weight: 700; font-size: {c['header_size']}px; text-transform: uppercase; letter-spacing: 0.5px; }}
.mini-grid {{ flex: 1; display: flex; flex-direction: column; padding: 4px; }}
.mini-day-headers {{ display: grid; grid-template-columns: repeat(7, 1fr); margin-bottom: {c['header_margin']}px; }}
.mini-day-header {{ text-align: center; font-weight: 700; font-size: {c['day_header_size']}px; color: var(--secondary-color); padding: 2px 0; }}
.mini-weeks {{ flex: 1; display: flex; flex-direction: column; }}
.mini-week {{ display: grid; grid-template-columns: repeat(7, 1fr); flex: 1; gap: 1px; }}
.mini-day {{ display: flex; align-items: center; justify-content: center; font-size: {c['day_size']}px; font-weight: 500;
  color: var(--text-color); min-height: {c['cell_size']}px; border-radius: 2px; position: relative; }}
.mini-day.empty {{ background: transparent; }}
.mini-day.weekend {{ color: var(--accent-color); }}
.mini-day.today {{ background: var(--today-bg); border: 1px solid var(--accent-color); font-weight: 700; }}
.mini-day.has-event::after {{ content: ''; position: absolute; bottom: 2px; left: 50%; transform: translateX(-50%);
  width: 4px; height: 4px; border-radius: 50%; background: var(--secondary-color); }}
.mini-day.has-event.today::after {{ background: var(--accent-color); }}
"""


LAYOUT_CSS: Dict[str, Callable] = {
    "fortnight": _fortnight_css,
    "weekly": _weekly_css,
    "year": _year_css,
}


# --- document -------------------------------------------------------------

def _base_css(doc: Document, style: dict) -> str:
    size = doc.page_size
    pad = style.get("page_padding_mm", 15)
    return f"""
@page {{ size: {size.css_width} {size.css_height}; margin: 0; }}
* {{ margin: 0; padding: 0; box-sizing: border-box; }}
body {{ font-family: {style.get('font_family_css', 'sans-serif')}; color: var(--text-color); }}
.image-page {{ width: {size.css_width}; height: {size.css_height}; padding: {pad}mm; background: {style.get('image_page_fill', '#f0f0f0')};
  display: flex; align-items: center; justify-content: center; margin: 0 auto; page-break-after: always; }}
.image-page img {{ width: 100%; height: 100%; object-fit: contain; border-radius: 4px; }}
.calendar-container {{ width: {size.css_width}; height: {size.css_height}; background: var(--background-color); padding: {pad}mm;
  margin: 0 auto; display: flex; flex-direction: column; }}
.calendar-header {{ display: flex; justify-content: space-between; align-items: center; margin-bottom: 15px; padding: 15px 20px;
  background: var(--header-bg); color: var(--header-text); border-radius: {style.get('header_radius', 8)}px; position: relative; }}
.header-logo {{ max-height: {style.get('header_logo_max_h', 45)}px; max-width: {style.get('header_logo_max_w', 100)}px; object-fit: contain;
  position: absolute; top: 50%; transform: translateY(-50%); }}
.header-logo.logo-align-right {{ right: 20px; }}
.header-logo.logo-align-left {{ left: 20px; }}
.header-logo.logo-align-center {{ left: 50%; transform: translate(-50%, -50%); }}
.calendar-header.with-logo-right {{ padding-right: 130px; }}
.calendar-header.with-logo-left {{ padding-left: 130px; }}
.calendar-header.with-logo-left .calendar-header-content {{ margin-left: auto; }}
.calendar-header-content {{ display: flex; justify-content: space-between; align-items: baseline; flex: 1; gap: 20px; }}
.calendar-header h1 {{ font-size: {style.get('header_title_size', 24)}px; font-weight: 600; }}
.calendar-header .year {{ font-size: {style.get('header_year_size', 36)}px; font-weight: 700; }}
.calendar-content {{ flex: 1; display: flex; flex-direction: column; min-height: 0; }}
.calendar-footer {{ margin-top: 8px; padding: 10px 20px; display: flex; align-items: center; flex-shrink: 0;
  min-height: {style.get('footer_height', 50)}px; background: var(--header-bg); color: var(--header-text); border-radius: 8px; }}
.calendar-footer.logo-align-left {{ justify-content: flex-start; }}
.calendar-footer.logo-align-center {{ justify-content: center; }}
.calendar-footer.logo-align-right {{ justify-content: flex-end; }}
.footer-logo {{ max-height: {style.get('footer_logo_max_h', 30)}px; max-width: {style.get('footer_logo_max_w', 120)}px; object-fit: contain; }}
"""


def stylesheet(doc: Document, themes: ThemeRegistry = THEMES) -> str:
    """Base page rules, every registered theme, then the layout's size-tuned rules."""
    style = load_style_preset()
    layout_css = LAYOUT_CSS[doc.layout.key](doc.style_config, style.get("event_colors", {}))
    return "\n".join([_base_css(doc, style), themes.combined_stylesheet(), layout_css])


def _header_html(doc: Document) -> str:
    logo = doc.header_logo
    align = doc.logo_align
    logo_html = ""
    if logo is not None:
        logo_html = f'<img src="{logo.data_uri}" alt="Logo" class="header-logo logo-align-{align}">'
    classes = _cls(["calendar-header", f"with-logo-{align}" if logo is not None else ""])
    before = logo_html if align == "left" else ""
    after = logo_html if align in ("right", "center") else ""
    return (
        f'<div class="{classes}">{before}'
        '<div class="calendar-header-content">'
        f"<h1>{escape(doc.month_name)}</h1>"
        f'<div class="year">{doc.year}</div>'
        f"</div>{after}</div>"
    )


def _footer_html(doc: Document) -> str:
    logo = doc.footer_logo
    if logo is None:
        return ""
    return (
        f'<div class="calendar-footer logo-align-{doc.logo_align}">'
        f'<img src="{logo.data_uri}" alt="Logo" class="footer-logo"></div>'
    )


def content_html(doc: Document) -> str:
    return CONTENT_RENDERERS[doc.content.kind](doc.content)


def render_html(doc: Document, themes: ThemeRegistry = THEMES) -> str:
    image_page = ""
    if doc.image is not None:
        image_page = f'<div class="image-page"><img src="{doc.image.data_uri}" alt="Calendar image"></div>'
    container = _cls(["calendar-container", doc.theme_class])
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>{escape(doc.title)}</title>
<style>
{stylesheet(doc, themes)}
</style>
</head>
<body>
{image_page}
<div class="{container}">
{_header_html(doc)}
<div class="calendar-content">{content_html(doc)}</div>
{_footer_html(doc)}
</div>
</body>
</html>
"""
