from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Tuple

from reportlab.lib.units import mm

from ..config import DEFAULT_PAGE_SIZE


@dataclass(frozen=True)
class PageSizeSpec:
    key: str
    paper: str
    width_mm: float
    height_mm: float

    @property
    def landscape(self) -> bool:
        return self.width_mm > self.height_mm

    @property
    def orientation(self) -> str:
        return "landscape" if self.landscape else "portrait"

    @property
    def points(self) -> Tuple[float, float]:
        return self.width_mm * mm, self.height_mm * mm

    @property
    def css_width(self) -> str:
        return f"{self.width_mm:g}mm"

    @property
    def css_height(self) -> str:
        return f"{self.height_mm:g}mm"

    def print_format(self) -> dict:
        """Paper name + orientation pair handed to the PDF printer."""
        return {"format": self.paper, "landscape": self.landscape}


PAGE_SIZES: Dict[str, PageSizeSpec] = {
    "A4-portrait": PageSizeSpec("A4-portrait", "A4", 210, 297),
    "A4-landscape": PageSizeSpec("A4-landscape", "A4", 297, 210),
    "A5-portrait": PageSizeSpec("A5-portrait", "A5", 148, 210),
    "A5-landscape": PageSizeSpec("A5-landscape", "A5", 210, 148),
}


def page_size_names() -> List[str]:
    return list(PAGE_SIZES)


def get_page_size(name: str | None) -> PageSizeSpec:
    wanted = str(name or "").strip().lower()
    for spec in PAGE_SIZES.values():
        if spec.key.lower() == wanted:
            return spec
    return PAGE_SIZES[DEFAULT_PAGE_SIZE]
