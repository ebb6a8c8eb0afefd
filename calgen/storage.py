from __future__ import annotations

import shutil
from pathlib import Path
from typing import Dict

from . import config
from .models import Artifact, RenderJob, get_session


ARTIFACT_NAMES = {
    "pdf": "calendar.pdf",
    "html": "calendar.html",
    "preview": "preview.png",
    "events": "events.json",
}
ERROR_LOG_NAME = "error.log"


def job_folder(slug: str) -> Path:
    return config.OUT_DIR / slug


def calendar_files(folder: Path) -> Dict[str, Path]:
    """Where each rendered artifact of a job lives inside `folder`."""
    return {kind: folder / name for kind, name in ARTIFACT_NAMES.items()}


def open_staging(slug: str) -> Path:
    """
    Fresh `<slug>.tmp` folder next to the job folder. A job is rendered here
    and only replaces the published folder once every artifact is written.
    """
    staging = config.OUT_DIR / f"{slug}.tmp"
    if staging.exists():
        shutil.rmtree(staging)
    staging.mkdir(parents=True)
    return staging


def discard_staging(staging: Path) -> None:
    shutil.rmtree(staging, ignore_errors=True)


def publish(staging: Path, slug: str) -> Dict[str, Path]:
    folder = job_folder(slug)
    if folder.exists():
        shutil.rmtree(folder)
    staging.replace(folder)
    return calendar_files(folder)


def write_error_log(slug: str, message: str) -> Path:
    folder = job_folder(slug)
    folder.mkdir(parents=True, exist_ok=True)
    path = folder / ERROR_LOG_NAME
    path.write_text(message, encoding="utf-8")
    return path


def record_artifacts(job: RenderJob, files: Dict[str, Path]) -> None:
    with get_session() as session:
        session.add_all(
            [
                Artifact(job_id=job.id, type=kind, path=str(path.relative_to(config.OUT_DIR)))
                for kind, path in files.items()
            ]
        )
        session.commit()
