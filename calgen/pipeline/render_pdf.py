from __future__ import annotations

import logging
from io import BytesIO
from pathlib import Path
from typing import Callable, Dict, List, Tuple

from reportlab.lib import colors
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from ..config import load_style_preset
from ..engine.compose import Document
from ..engine.layouts import DayCell, FortnightContent, WeeklyContent, YearContent
from ..engine.options import ImageAsset
from ..engine.themes import ThemeDefinition

logger = logging.getLogger(__name__)

# CSS pixel -> PDF point
PX = 0.75

Box = Tuple[float, float, float, float]  # x, y (bottom), w, h


def _hex(value: str, default=colors.black) -> colors.Color:
    if not value:
        return default
    try:
        return colors.HexColor("#" + str(value).lstrip("#"))
    except Exception:
        return default


def _s(style: dict, key: str, default):
    return style.get(key, default)


def _role(theme: ThemeDefinition, role: str) -> colors.Color:
    return _hex(theme.role(role))


def _fit_text(canv: canvas.Canvas, text: str, font_name: str, font_size: float, max_width: float) -> str:
    """Cut the text with an ellipsis so it stays inside max_width."""
    if canv.stringWidth(text, font_name, font_size) <= max_width:
        return text
    while text and canv.stringWidth(text + "...", font_name, font_size) > max_width:
        text = text[:-1]
    return (text + "...") if text else ""


def _draw_image(
    canv: canvas.Canvas,
    doc: Document,
    asset: ImageAsset,
    box: Box,
    anchor: str = "c",
) -> bool:
    x, y, w, h = box
    try:
        reader = ImageReader(BytesIO(asset.data))
        canv.drawImage(reader, x, y, width=w, height=h, preserveAspectRatio=True, anchor=anchor, mask="auto")
    except Exception as exc:
        message = f"Could not draw {asset.source or asset.mime_type} into the PDF: {exc}"
        logger.warning("%s", message)
        doc.warnings.append(message)
        return False
    return True


def _cell_fill(cell: DayCell, theme: ThemeDefinition, style: dict) -> colors.Color:
    if cell.is_blank:
        return _hex(_s(style, "empty_cell_fill", "#F5F5F5"))
    if cell.is_today:
        return _role(theme, "today-background")
    if cell.is_weekend:
        return _role(theme, "weekend-background")
    return _hex(_s(style, "cell_fill", "#FFFFFF"))


def _weekend_band(canv: canvas.Canvas, cell: DayCell, theme: ThemeDefinition, box: Box, width: float) -> None:
    # today keeps the weekend tint as a band so neither state hides the other
    if not (cell.is_today and cell.is_weekend):
        return
    x, y, w, h = box
    canv.setFillColor(_role(theme, "weekend-background"))
    canv.rect(x, y, min(width, w), h, stroke=0, fill=1)


def _day_text_color(theme: ThemeDefinition, part: str, weekend: bool, fallback_role: str) -> colors.Color:
    if weekend:
        return _hex(theme.override(f".day-card.weekend .{part}", "color") or theme.role("accent"))
    return _hex(theme.override(f".{part}", "color") or theme.role(fallback_role))


def _event_lines(cell: DayCell) -> List[str]:
    return cell.annotation.visible_lines if cell.annotation is not None else []


# --- content --------------------------------------------------------------

def _draw_fortnight(canv: canvas.Canvas, doc: Document, style: dict, box: Box) -> None:
    content: FortnightContent = doc.content
    c = doc.style_config
    theme = doc.theme
    font = str(_s(style, "font_name", "Helvetica"))
    bold = str(_s(style, "font_bold", "Helvetica-Bold"))
    italic = str(_s(style, "font_italic", "Helvetica-Oblique"))
    event_colors = _s(style, "event_colors", {})

    x, y, w, h = box
    gap = c["column_gap"] * PX
    col_w = (w - gap) / 2
    inner = 8 * PX
    slots = max(len(column) for column in content.columns)
    card_gap = c["card_gap"] * PX
    card_h = (h - 2 * inner - (slots - 1) * card_gap) / slots

    for index, column in enumerate(content.columns):
        cx = x + index * (col_w + gap)
        canv.setStrokeColor(_role(theme, "border"))
        canv.setLineWidth(2 * PX)
        canv.roundRect(cx, y, col_w, h, radius=8 * PX, stroke=1, fill=0)

        card_x = cx + inner
        card_w = col_w - 2 * inner
        top = y + h - inner
        for cell in column:
            card_y = top - card_h
            canv.setFillColor(_cell_fill(cell, theme, style))
            if cell.is_today:
                canv.setStrokeColor(_role(theme, "accent"))
                canv.setLineWidth(2 * PX)
            else:
                canv.setStrokeColor(_role(theme, "border"))
                canv.setLineWidth(1 * PX)
            canv.roundRect(card_x, card_y, card_w, card_h, radius=4 * PX, stroke=1, fill=1)
            _weekend_band(canv, cell, theme, (card_x + 1, card_y + 1, card_w, card_h - 2), 6 * PX)

            info_w = c["info_min_width"] * PX
            info_x = card_x + c["card_padding_x"] * PX
            info_bg = theme.override(".day-info", "background")
            if info_bg:
                canv.setFillColor(_hex(info_bg))
                canv.roundRect(info_x, card_y + 2, info_w, card_h - 4, radius=4 * PX, stroke=0, fill=1)

            name_size = c["day_name_size"] * PX
            number_size = min(c["day_number_size"] * PX, card_h * 0.55)
            mid = card_y + card_h / 2
            canv.setFillColor(_day_text_color(theme, "day-name", cell.is_weekend, "secondary"))
            canv.setFont(bold, name_size)
            canv.drawCentredString(info_x + info_w / 2, mid + number_size * 0.35, cell.weekday_name.upper())
            canv.setFillColor(_day_text_color(theme, "day-number", cell.is_weekend, "primary"))
            canv.setFont(bold, number_size)
            canv.drawCentredString(info_x + info_w / 2, mid - number_size * 0.75, str(cell.day))

            lines = _event_lines(cell)
            if not lines:
                top = card_y - card_gap
                continue
            size = c["event_size"] * PX
            right = card_x + card_w - c["card_padding_x"] * PX
            avail = right - (info_x + info_w + 12 * PX)
            text_w = max(canv.stringWidth(line, italic, size) for line in lines) + 20 * PX
            events_w = min(max(c["events_min_width"] * PX, text_w), avail)
            line_h = size * 1.4
            shown = lines[: max(1, int((card_h - 6) // line_h))]
            events_h = min(card_h - 4, len(shown) * line_h + 10 * PX)
            ey = mid - events_h / 2
            canv.setStrokeColor(_role(theme, "border"))
            canv.setLineWidth(1 * PX)
            canv.setFillColor(colors.Color(1, 1, 1, alpha=0.5) if cell.is_weekend else colors.Color(0, 0, 0, alpha=0.02))
            canv.roundRect(right - events_w, ey, events_w, events_h, radius=4 * PX, stroke=1, fill=1)
            canv.setFont(italic, size)
            ty = ey + events_h - 5 * PX - size
            for line in shown:
                canv.setFillColor(_hex(event_colors.get(cell.annotation.category, ""), _role(theme, "text")))
                canv.drawString(right - events_w + 10 * PX, ty, _fit_text(canv, line, italic, size, events_w - 20 * PX))
                ty -= line_h
            top = card_y - card_gap
    canv.setFont(font, 10)


def _draw_weekly(canv: canvas.Canvas, doc: Document, style: dict, box: Box) -> None:
    content: WeeklyContent = doc.content
    c = doc.style_config
    theme = doc.theme
    bold = str(_s(style, "font_bold", "Helvetica-Bold"))
    font = str(_s(style, "font_name", "Helvetica"))
    event_colors = _s(style, "event_colors", {})

    x, y, w, h = box
    col_w = w / 7
    header_h = c["header_size"] * PX + 12 * PX
    rows = len(content.rows)
    row_h = (h - header_h) / rows

    canv.setFillColor(_role(theme, "primary"))
    canv.rect(x, y + h - header_h, w, header_h, stroke=0, fill=1)
    canv.setFillColor(colors.white)
    canv.setFont(bold, c["header_size"] * PX)
    for i, name in enumerate(content.headers):
        canv.drawCentredString(x + i * col_w + col_w / 2, y + h - header_h + 6 * PX, name.upper())

    pad = c["event_padding"] * PX
    for r, row in enumerate(content.rows):
        cell_y = y + h - header_h - (r + 1) * row_h
        for i, cell in enumerate(row):
            cell_x = x + i * col_w
            canv.setFillColor(_cell_fill(cell, theme, style))
            canv.setStrokeColor(_role(theme, "border"))
            canv.setLineWidth(1 * PX)
            canv.rect(cell_x, cell_y, col_w, row_h, stroke=1, fill=1)
            if cell.is_blank:
                continue
            if cell.is_today:
                if cell.is_weekend:
                    canv.setStrokeColor(_role(theme, "weekend-background"))
                    canv.setLineWidth(4 * PX)
                    canv.rect(cell_x + 3 * PX, cell_y + 3 * PX, col_w - 6 * PX, row_h - 6 * PX, stroke=1, fill=0)
                canv.setStrokeColor(_role(theme, "accent"))
                canv.setLineWidth(2 * PX)
                canv.rect(cell_x, cell_y, col_w, row_h, stroke=1, fill=0)

            num_size = c["day_num_size"] * PX
            canv.setFillColor(_role(theme, "accent" if cell.is_weekend else "primary"))
            canv.setFont(bold, num_size)
            ty = cell_y + row_h - pad - num_size
            canv.drawString(cell_x + pad, ty, str(cell.day))

            size = c["font_size"] * PX
            canv.setFont(font, size)
            ty -= 2 * PX + size
            for line in _event_lines(cell):
                if ty < cell_y + pad:
                    break
                canv.setFillColor(_hex(event_colors.get(cell.annotation.category, ""), _role(theme, "text")))
                canv.drawString(cell_x + pad, ty, _fit_text(canv, line, font, size, col_w - 2 * pad))
                ty -= size * 1.2

    canv.setStrokeColor(_role(theme, "border"))
    canv.setLineWidth(2 * PX)
    canv.roundRect(x, y, w, h, radius=8 * PX, stroke=1, fill=0)


def _draw_year(canv: canvas.Canvas, doc: Document, style: dict, box: Box) -> None:
    content: YearContent = doc.content
    c = doc.style_config
    theme = doc.theme
    bold = str(_s(style, "font_bold", "Helvetica-Bold"))
    font = str(_s(style, "font_name", "Helvetica"))

    x, y, w, h = box
    gap = 10 * PX
    month_w = (w - (content.columns - 1) * gap) / content.columns
    month_h = (h - (content.rows - 1) * gap) / content.rows
    header_h = c["header_size"] * PX + 2 * c["month_padding"] * PX

    for index, mini in enumerate(content.months):
        col = index % content.columns
        row = index // content.columns
        mx = x + col * (month_w + gap)
        my = y + h - (row + 1) * month_h - row * gap

        canv.setFillColor(colors.white)
        canv.setStrokeColor(_role(theme, "border"))
        canv.setLineWidth(2 * PX)
        canv.roundRect(mx, my, month_w, month_h, radius=6 * PX, stroke=1, fill=1)
        canv.setFillColor(_role(theme, "primary"))
        canv.rect(mx, my + month_h - header_h, month_w, header_h, stroke=0, fill=1)
        canv.setFillColor(colors.white)
        canv.setFont(bold, c["header_size"] * PX)
        canv.drawCentredString(mx + month_w / 2, my + month_h - header_h + c["month_padding"] * PX, mini.name.upper())

        inner = 4 * PX
        cell_w = (month_w - 2 * inner) / 7
        head_size = c["day_header_size"] * PX
        head_y = my + month_h - header_h - inner - head_size - 2 * PX
        canv.setFillColor(_role(theme, "secondary"))
        canv.setFont(bold, head_size)
        for i, name in enumerate(mini.headers):
            canv.drawCentredString(mx + inner + i * cell_w + cell_w / 2, head_y, name)

        grid_top = head_y - c["header_margin"] * PX
        cell_h = (grid_top - my - inner) / len(mini.rows)
        day_size = min(c["day_size"] * PX, cell_h * 0.7)
        for r, week in enumerate(mini.rows):
            cy = grid_top - (r + 1) * cell_h
            for i, cell in enumerate(week):
                if cell.is_blank:
                    continue
                cx = mx + inner + i * cell_w
                if cell.is_today:
                    canv.setFillColor(_role(theme, "today-background"))
                    canv.setStrokeColor(_role(theme, "accent"))
                    canv.setLineWidth(1 * PX)
                    canv.roundRect(cx + 0.5, cy + 0.5, cell_w - 1, cell_h - 1, radius=2 * PX, stroke=1, fill=1)
                canv.setFillColor(_role(theme, "accent" if cell.is_weekend else "text"))
                canv.setFont(bold if cell.is_today else font, day_size)
                canv.drawCentredString(cx + cell_w / 2, cy + (cell_h - day_size) / 2 + 1, str(cell.day))
                if cell.has_event:
                    canv.setFillColor(_role(theme, "accent" if cell.is_today else "secondary"))
                    canv.circle(cx + cell_w / 2, cy + 2 * PX + 1, 2 * PX, stroke=0, fill=1)


CONTENT_RENDERERS: Dict[str, Callable[[canvas.Canvas, Document, dict, Box], None]] = {
    "fortnight": _draw_fortnight,
    "weekly": _draw_weekly,
    "year": _draw_year,
}


# --- page chrome ----------------------------------------------------------

def _page_image(canv: canvas.Canvas, doc: Document, style: dict, pw: float, ph: float, pad: float) -> None:
    canv.setFillColor(_hex(_s(style, "image_page_fill", "#F0F0F0")))
    canv.rect(0, 0, pw, ph, stroke=0, fill=1)
    _draw_image(canv, doc, doc.image, (pad, pad, pw - 2 * pad, ph - 2 * pad))


def _logo_box(align: str, x: float, y: float, w: float, h: float, max_w: float, max_h: float) -> Tuple[Box, str]:
    lw, lh = min(max_w, w), min(max_h, h)
    ly = y + (h - lh) / 2
    if align == "left":
        return (x, ly, lw, lh), "w"
    if align == "center":
        return (x + (w - lw) / 2, ly, lw, lh), "c"
    return (x + w - lw, ly, lw, lh), "e"


def _draw_header(canv: canvas.Canvas, doc: Document, style: dict, box: Box, scale: float) -> None:
    x, y, w, h = box
    theme = doc.theme
    bold = str(_s(style, "font_bold", "Helvetica-Bold"))
    canv.setFillColor(_role(theme, "header-background"))
    canv.roundRect(x, y, w, h, radius=float(_s(style, "header_radius", 8)) * PX, stroke=0, fill=1)

    inset = 20 * PX * scale
    text_left = x + inset
    text_right = x + w - inset
    logo = doc.header_logo
    if logo is not None:
        logo_w = float(_s(style, "header_logo_max_w", 100)) * PX * scale
        logo_h = float(_s(style, "header_logo_max_h", 45)) * PX * scale
        logo_area, anchor = _logo_box(doc.logo_align, x + inset, y, w - 2 * inset, h, logo_w, logo_h)
        _draw_image(canv, doc, logo, logo_area, anchor)
        if doc.logo_align == "left":
            text_left = x + 130 * PX * scale
        elif doc.logo_align == "right":
            text_right = x + w - 130 * PX * scale

    title_size = float(_s(style, "header_title_size", 24)) * PX * scale
    year_size = float(_s(style, "header_year_size", 36)) * PX * scale
    baseline = y + (h - year_size) / 2 + year_size * 0.15
    canv.setFillColor(_role(theme, "header-text"))
    canv.setFont(bold, title_size)
    canv.drawString(text_left, baseline, doc.month_name)
    canv.setFont(bold, year_size)
    canv.drawRightString(text_right, baseline, str(doc.year))


def _draw_footer(canv: canvas.Canvas, doc: Document, style: dict, box: Box, scale: float) -> None:
    x, y, w, h = box
    canv.setFillColor(_role(doc.theme, "header-background"))
    canv.roundRect(x, y, w, h, radius=8 * PX, stroke=0, fill=1)
    inset = 20 * PX * scale
    logo_w = float(_s(style, "footer_logo_max_w", 120)) * PX * scale
    logo_h = float(_s(style, "footer_logo_max_h", 30)) * PX * scale
    logo_area, anchor = _logo_box(doc.logo_align, x + inset, y, w - 2 * inset, h, logo_w, logo_h)
    _draw_image(canv, doc, doc.footer_logo, logo_area, anchor)


def _page_calendar(canv: canvas.Canvas, doc: Document, style: dict, pw: float, ph: float, pad: float) -> None:
    # header/footer chrome shrinks with the page; layout tables are already size tuned
    scale = min(pw, ph) / (210 * 72 / 25.4)
    canv.setFillColor(_role(doc.theme, "background"))
    canv.rect(0, 0, pw, ph, stroke=0, fill=1)

    inner_w = pw - 2 * pad
    header_h = float(_s(style, "header_height", 60)) * PX * scale
    header_y = ph - pad - header_h
    _draw_header(canv, doc, style, (pad, header_y, inner_w, header_h), scale)

    bottom = pad
    if doc.footer_logo is not None:
        footer_h = float(_s(style, "footer_height", 50)) * PX * scale
        _draw_footer(canv, doc, style, (pad, pad, inner_w, footer_h), scale)
        bottom = pad + footer_h + 8 * PX

    top = header_y - 15 * PX * scale
    CONTENT_RENDERERS[doc.content.kind](canv, doc, style, (pad, bottom, inner_w, top - bottom))


def render_pdf(doc: Document, output_path: Path) -> Path:
    """Draw the document (optional image page + calendar page) with zero page margins."""
    style = load_style_preset()
    pw, ph = doc.page_size.points
    pad = float(_s(style, "page_padding_mm", 15)) * 72 / 25.4

    output_path.parent.mkdir(parents=True, exist_ok=True)
    canv = canvas.Canvas(str(output_path), pagesize=(pw, ph))
    canv.setTitle(doc.title)

    if doc.image is not None:
        _page_image(canv, doc, style, pw, ph, pad)
        canv.showPage()

    _page_calendar(canv, doc, style, pw, ph, pad)
    canv.showPage()
    canv.save()
    return output_path


def calendar_page_index(doc: Document) -> int:
    return 1 if doc.image is not None else 0
