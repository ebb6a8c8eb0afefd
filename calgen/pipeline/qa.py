from __future__ import annotations

import logging
from typing import List

from sqlmodel import select
from sqlalchemy.exc import SQLAlchemyError

from ..engine.errors import UnknownLayoutError
from ..engine.layouts import get_layout
from ..models import JobStatus, RenderJob, get_session

logger = logging.getLogger(__name__)

MIN_YEAR = 1
MAX_YEAR = 9999


def validate_request(month: int, year: int, layout: str) -> List[str]:
    """Checks done before anything reaches the engine. `month` is 1-12 here."""
    errors: List[str] = []
    if not 1 <= month <= 12:
        errors.append("Month must be between 1 and 12")
    if not MIN_YEAR <= year <= MAX_YEAR:
        errors.append(f"Year must be between {MIN_YEAR} and {MAX_YEAR}")
    try:
        get_layout(layout)
    except UnknownLayoutError as exc:
        errors.append(str(exc))
    return errors


def check_duplicate_job(job: RenderJob) -> str | None:
    try:
        with get_session() as session:
            statement = select(RenderJob).where(
                RenderJob.slug == job.slug,
                RenderJob.status == JobStatus.READY,
            )
            existing = [other for other in session.exec(statement) if other.id != job.id]
    except SQLAlchemyError:
        return None
    if existing:
        logger.info("Job %s already rendered as #%s", job.slug, existing[0].id)
        return f"Job duplicate of #{existing[0].id} ({job.slug})"
    return None
