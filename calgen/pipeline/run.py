from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import logging
from typing import Dict, Iterable, List, Optional

from ..engine.compose import Document, compose
from ..engine.dates import DateGrid
from ..engine.events import EventStore
from ..engine.options import ImageAsset, RenderOptions
from ..models import JobStatus, RenderJob, get_session, init_db
from ..storage import (
    calendar_files,
    discard_staging,
    open_staging,
    publish,
    record_artifacts,
    write_error_log,
)
from .ingest import load_events_file, save_events_file
from .markup import render_html
from .qa import check_duplicate_job, validate_request
from .render_pdf import calendar_page_index, render_pdf
from .render_preview import render_preview


logger = logging.getLogger(__name__)


@dataclass
class RenderResult:
    document: Document
    html_path: Path
    pdf_path: Optional[Path] = None
    preview_path: Optional[Path] = None

    @property
    def warnings(self) -> List[str]:
        return self.document.warnings


def render_calendar(
    month: int,
    year: int,
    options: RenderOptions,
    html_path: Path,
    pdf_path: Optional[Path] = None,
    preview_path: Optional[Path] = None,
    events: Optional[EventStore] = None,
    image: Optional[ImageAsset] = None,
    logo: Optional[ImageAsset] = None,
    grid: Optional[DateGrid] = None,
) -> RenderResult:
    """Compose one month (0-based) and write its HTML, and the PDF/preview when paths are given."""
    document = compose(month, year, options, events=events, image=image, logo=logo, grid=grid)

    html_path.parent.mkdir(parents=True, exist_ok=True)
    html_path.write_text(render_html(document), encoding="utf-8")
    result = RenderResult(document=document, html_path=html_path)

    if pdf_path is not None:
        result.pdf_path = render_pdf(document, pdf_path)
        if preview_path is not None:
            result.preview_path = render_preview(pdf_path, preview_path, calendar_page_index(document))
    return result


def process_job(job: RenderJob) -> tuple[JobStatus, Dict[str, Path], List[str], Optional[str]]:
    errors = validate_request(job.month, job.year, job.layout)
    if errors:
        return JobStatus.FAILED, {}, errors, "VALIDATION_FAILED"
    duplicate = check_duplicate_job(job)
    if duplicate:
        return JobStatus.FAILED, {}, [duplicate], "DUPLICATE"

    # one store per job so batch jobs never see each other's events
    events = EventStore()
    if job.events_path:
        load_events_file(Path(job.events_path), events)

    staging = open_staging(job.slug)
    files = calendar_files(staging)
    options = RenderOptions(theme=job.theme, layout=job.layout, page_size=job.page_size)
    try:
        result = render_calendar(
            job.month - 1,
            job.year,
            options,
            html_path=files["html"],
            pdf_path=files["pdf"],
            preview_path=files["preview"],
            events=events,
        )
        save_events_file(events, files["events"])
    except Exception:
        discard_staging(staging)
        raise

    for warning in result.warnings:
        logger.warning("%s: %s", job.slug, warning)
    return JobStatus.READY, publish(staging, job.slug), [], None


def run_pipeline(jobs: Iterable[RenderJob]) -> dict[str, list[str]]:
    init_db()
    results: dict[str, list[str]] = {"READY": [], "FAILED": []}
    with get_session() as session:
        for job in jobs:
            try:
                status, files, errors, fail_code = process_job(job)
            except Exception as exc:
                logger.exception("Pipeline error for %s", job.slug)
                status, files, errors, fail_code = JobStatus.FAILED, {}, [str(exc)], "PIPELINE_ERROR"

            job.status = status
            job.fail_code = fail_code
            job.fail_detail = (errors[0] if errors else "Unknown error") if fail_code else None
            session.add(job)
            session.commit()
            session.refresh(job)

            if status == JobStatus.READY:
                record_artifacts(job, files)
                results["READY"].append(job.slug)
                continue
            results["FAILED"].append(job.slug)
            # the folder of a duplicate belongs to the job that rendered it
            if fail_code != "DUPLICATE":
                write_error_log(job.slug, "\n".join(errors) if errors else "Unknown error")
    return results
