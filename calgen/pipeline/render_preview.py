from __future__ import annotations

from pathlib import Path

import fitz  # PyMuPDF


def _render_page_to_png(doc: fitz.Document, page_index: int, out_path: Path, min_px: int = 1200) -> None:
    page = doc.load_page(page_index)

    # scale so that the short side of the PNG is at least min_px pixels
    rect = page.rect
    short_side = min(rect.width, rect.height)
    zoom = max(1.0, min_px / float(short_side))
    mat = fitz.Matrix(zoom, zoom)

    pix = page.get_pixmap(matrix=mat, alpha=False)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    pix.save(str(out_path))


def render_preview(pdf_path: Path, out_path: Path, page_index: int = 0) -> Path:
    """Rasterize one page of the calendar PDF (the calendar page, not the image page)."""
    with fitz.open(pdf_path) as doc:
        index = min(max(page_index, 0), doc.page_count - 1)
        _render_page_to_png(doc, index, out_path)
    return out_path
