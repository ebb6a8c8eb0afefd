from __future__ import annotations

from pathlib import Path
from typing import Dict, List
import json


BASE_DIR = Path(__file__).resolve().parents[1]
OUT_DIR = BASE_DIR / "out"
DB_PATH = OUT_DIR / "calgen.db"
STYLE_PRESET_PATH = Path(__file__).resolve().parent / "assets" / "style_preset.json"

MONTH_NAMES: List[str] = [
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
]

DAY_NAMES: List[str] = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
MINI_DAY_NAMES: List[str] = ["S", "M", "T", "W", "T", "F", "S"]

DEFAULT_THEME = "default"
DEFAULT_LAYOUT = "fortnight"
DEFAULT_PAGE_SIZE = "A4-portrait"
DEFAULT_LOGO_POSITION = "auto"
DEFAULT_LOGO_ALIGN = "right"

LOGO_POSITIONS = ("header", "footer", "auto")
LOGO_ALIGNMENTS = ("left", "center", "right")

EVENT_CATEGORIES = ("birthday", "anniversary", "public", "custom")

IMAGE_MIME_TYPES: Dict[str, str] = {
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "svg": "image/svg+xml",
    "webp": "image/webp",
    "bmp": "image/bmp",
}
DEFAULT_IMAGE_MIME = "image/jpeg"
DEFAULT_LOGO_MIME = "image/png"


def load_style_preset() -> dict:
    with STYLE_PRESET_PATH.open("r", encoding="utf-8") as handle:
        return json.load(handle)


def set_out_dir(path: Path) -> None:
    global OUT_DIR, DB_PATH
    OUT_DIR = path
    DB_PATH = OUT_DIR / "calgen.db"
