from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..config import MONTH_NAMES
from .dates import DateGrid
from .events import DEFAULT_STORE, EventStore
from .layouts import LayoutContent, LayoutVariant, get_layout
from .options import ImageAsset, RenderOptions
from .pages import PageSizeSpec, get_page_size
from .themes import THEMES, ThemeDefinition, ThemeRegistry

logger = logging.getLogger(__name__)


@dataclass
class Document:
    month: int
    year: int
    month_name: str
    page_size: PageSizeSpec
    layout: LayoutVariant
    theme: ThemeDefinition
    content: LayoutContent
    style_config: Dict[str, float]
    logo: Optional[ImageAsset] = None
    logo_position: str = "header"
    logo_align: str = "right"
    image: Optional[ImageAsset] = None
    warnings: List[str] = field(default_factory=list)

    @property
    def title(self) -> str:
        return f"{self.month_name} {self.year} Calendar"

    @property
    def theme_class(self) -> str:
        return self.theme.css_class

    @property
    def header_logo(self) -> Optional[ImageAsset]:
        return self.logo if self.logo_position == "header" else None

    @property
    def footer_logo(self) -> Optional[ImageAsset]:
        return self.logo if self.logo_position == "footer" else None


def _usable(asset: Optional[ImageAsset], requested: Optional[str], kind: str, warnings: List[str]) -> Optional[ImageAsset]:
    if asset is not None and asset.data:
        return asset
    if asset is not None or requested:
        source = (asset.source if asset is not None else "") or requested
        message = f"{kind.capitalize()} {source} could not be loaded and was left out"
        logger.warning("%s", message)
        warnings.append(message)
    return None


def compose(
    month: int,
    year: int,
    options: Optional[RenderOptions] = None,
    events: Optional[EventStore] = None,
    image: Optional[ImageAsset] = None,
    logo: Optional[ImageAsset] = None,
    grid: Optional[DateGrid] = None,
    themes: ThemeRegistry = THEMES,
) -> Document:
    """
    Build the full document for one month.

    `month` is 0-based. Unknown page sizes fall back to A4-portrait and
    unknown themes to "default"; an unknown layout raises UnknownLayoutError.
    """
    options = options or RenderOptions()
    events = events if events is not None else DEFAULT_STORE
    grid = grid or DateGrid()
    warnings: List[str] = []

    page_size = get_page_size(options.page_size)
    layout = get_layout(options.layout)
    if not layout.supports(page_size.key):
        message = f"{layout.name} layout is not designed for {page_size.key}; content may overflow"
        logger.warning("%s", message)
        warnings.append(message)

    logo = _usable(logo, options.logo, "logo", warnings)
    image = _usable(image, options.image, "image", warnings)

    return Document(
        month=month,
        year=year,
        month_name=MONTH_NAMES[month],
        page_size=page_size,
        layout=layout,
        theme=themes.get(options.theme),
        content=layout.generate_content(month, year, options, events, grid),
        style_config=layout.style_config(page_size.key),
        logo=logo,
        logo_position=options.resolved_logo_position(layout.name),
        logo_align=options.resolved_logo_align(),
        image=image,
        warnings=warnings,
    )
