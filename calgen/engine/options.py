from __future__ import annotations

import base64
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..config import (
    DEFAULT_IMAGE_MIME,
    DEFAULT_LAYOUT,
    DEFAULT_LOGO_ALIGN,
    DEFAULT_LOGO_MIME,
    DEFAULT_LOGO_POSITION,
    DEFAULT_PAGE_SIZE,
    DEFAULT_THEME,
    IMAGE_MIME_TYPES,
    LOGO_ALIGNMENTS,
    LOGO_POSITIONS,
)

# bmp is accepted for the image page only
LOGO_EXTENSIONS = ("jpg", "jpeg", "png", "gif", "svg", "webp")


@dataclass(frozen=True)
class ImageAsset:
    data: bytes
    mime_type: str
    source: str = ""

    @property
    def data_uri(self) -> str:
        return f"data:{self.mime_type};base64,{base64.b64encode(self.data).decode('ascii')}"


def mime_type_for(filename: str, kind: str = "image") -> str:
    ext = Path(str(filename)).suffix.lower().lstrip(".")
    if kind == "logo":
        if ext not in LOGO_EXTENSIONS:
            return DEFAULT_LOGO_MIME
        return IMAGE_MIME_TYPES[ext]
    return IMAGE_MIME_TYPES.get(ext, DEFAULT_IMAGE_MIME)


@dataclass(frozen=True)
class RenderOptions:
    theme: str = DEFAULT_THEME
    layout: str = DEFAULT_LAYOUT
    page_size: str = DEFAULT_PAGE_SIZE
    image: Optional[str] = None
    logo: Optional[str] = None
    logo_position: str = DEFAULT_LOGO_POSITION
    logo_align: str = DEFAULT_LOGO_ALIGN

    def resolved_logo_position(self, layout_name: str) -> str:
        position = self.logo_position if self.logo_position in LOGO_POSITIONS else DEFAULT_LOGO_POSITION
        if position == "auto":
            return "footer" if layout_name == "Year" else "header"
        return position

    def resolved_logo_align(self) -> str:
        return self.logo_align if self.logo_align in LOGO_ALIGNMENTS else DEFAULT_LOGO_ALIGN
