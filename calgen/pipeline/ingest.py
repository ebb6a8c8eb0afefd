from __future__ import annotations

import csv
import logging
from pathlib import Path
from typing import Iterable, List, Optional

from slugify import slugify

from sqlmodel import select

from .. import config
from ..engine.errors import LoadError
from ..engine.events import EventStore
from ..engine.options import ImageAsset, mime_type_for
from ..engine.pages import get_page_size
from ..engine.themes import THEMES
from ..models import JobStatus, RenderJob, get_session, init_db


REQUIRED_COLUMNS = {"month", "year"}
logger = logging.getLogger(__name__)


def load_rows(csv_path: Path) -> List[dict]:
    if not csv_path.exists():
        raise FileNotFoundError(f"CSV not found: {csv_path}")
    with csv_path.open("r", encoding="utf-8") as handle:
        reader = csv.DictReader(handle)
        if reader.fieldnames is None:
            raise ValueError("CSV has no header")
        missing = REQUIRED_COLUMNS - set(reader.fieldnames)
        if missing:
            raise ValueError(f"CSV missing columns: {', '.join(sorted(missing))}")
        rows = [row for row in reader if any((value or "").strip() for value in row.values())]
    if not rows:
        raise ValueError("CSV has no data rows")
    return rows


def job_slug(month: int, year: int, theme: str, layout: str, page_size: str) -> str:
    slug = slugify(f"{year}-{month:02d} {theme} {layout} {page_size}")
    if not slug or ".." in slug or "/" in slug or "\\" in slug:
        raise ValueError("Invalid slug generated for job")
    return slug


def _int(row: dict, column: str) -> int:
    value = (row.get(column) or "").strip()
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"Column '{column}' must be an integer, got {value!r}") from None


def _text(row: dict, column: str, default: str) -> str:
    return (row.get(column) or "").strip() or default


def _resolved(row: dict) -> tuple[str, str, str]:
    """Theme and page size after the renderer's fallbacks; layout is only lowercased."""
    raw_theme = _text(row, "theme", config.DEFAULT_THEME)
    raw_size = _text(row, "page_size", config.DEFAULT_PAGE_SIZE)
    theme = THEMES.get(raw_theme).key
    page_size = get_page_size(raw_size).key
    if theme != raw_theme.lower():
        logger.warning("Unknown theme %r, using %s", raw_theme, theme)
    if page_size.lower() != raw_size.lower():
        logger.warning("Unknown page size %r, using %s", raw_size, page_size)
    return theme, _text(row, "layout", config.DEFAULT_LAYOUT).lower(), page_size


def _known_slugs() -> set[str]:
    with get_session() as session:
        return set(session.exec(select(RenderJob.slug)))


def ingest_jobs(csv_path: Path) -> List[RenderJob]:
    """
    Add one DRAFT job per CSV row. Rows whose slug the ledger already holds
    are skipped; `retry` re-renders failed ones.
    """
    init_db()
    rows = load_rows(csv_path)
    known = _known_slugs()
    seen = set()
    jobs: List[RenderJob] = []
    for row in rows:
        month = _int(row, "month")
        year = _int(row, "year")
        theme, layout, page_size = _resolved(row)
        events = (row.get("events") or "").strip() or None
        slug = job_slug(month, year, theme, layout, page_size)
        if slug in seen:
            raise ValueError(f"Duplicate job in CSV: {slug}")
        seen.add(slug)
        if slug in known:
            logger.info("Job %s is already in the ledger, skipping", slug)
            continue
        if events and not Path(events).is_absolute():
            events = str((csv_path.parent / events).resolve())
        jobs.append(
            RenderJob(
                slug=slug,
                month=month,
                year=year,
                theme=theme,
                layout=layout,
                page_size=page_size,
                events_path=events,
                status=JobStatus.DRAFT,
            )
        )
    with get_session() as session:
        session.add_all(jobs)
        session.commit()
        for job in jobs:
            session.refresh(job)
    return jobs


def list_jobs(statuses: Iterable[JobStatus], layout: str | None = None) -> List[RenderJob]:
    init_db()
    with get_session() as session:
        statement = select(RenderJob)
        if layout:
            statement = statement.where(RenderJob.layout == layout)
        if statuses:
            statement = statement.where(RenderJob.status.in_(list(statuses)))
        return list(session.exec(statement))


def load_events_file(path: Path, store: Optional[EventStore] = None) -> EventStore:
    store = store if store is not None else EventStore()
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise LoadError(str(path), str(exc)) from exc
    store.load(text, name=str(path))
    return store


def save_events_file(store: EventStore, path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(store.dump(), encoding="utf-8")
    logger.info("Saved %d events to %s", len(store), path)
    return path


def load_image_asset(path: Optional[Path], kind: str = "image") -> Optional[ImageAsset]:
    """Read an image or logo from disk. Unreadable files come back empty so compose() reports them."""
    if path is None:
        return None
    try:
        data = Path(path).read_bytes()
    except OSError as exc:
        logger.warning("Could not read %s %s: %s", kind, path, exc)
        return ImageAsset(data=b"", mime_type=mime_type_for(str(path), kind), source=str(path))
    return ImageAsset(data=data, mime_type=mime_type_for(str(path), kind), source=str(path))
