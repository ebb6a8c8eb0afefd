from __future__ import annotations

import csv
import json
import tempfile
from pathlib import Path

from sqlmodel import select

from calgen import config
from calgen.engine.events import EventStore, sample_events
from calgen.models import Artifact, JobStatus, RenderJob, get_session, reset_engine
from calgen.pipeline.ingest import ingest_jobs, list_jobs
from calgen.pipeline.run import run_pipeline


def _write_csv(path: Path, rows: list[dict]) -> None:
    with path.open("w", encoding="utf-8", newline="") as handle:
        writer = csv.DictWriter(handle, fieldnames=["month", "year", "theme", "layout", "page_size", "events"])
        writer.writeheader()
        writer.writerows(rows)


def test_pipeline_outputs_expected_artifacts() -> None:
    with tempfile.TemporaryDirectory() as temp_dir:
        out_dir = Path(temp_dir) / "out"
        config.set_out_dir(out_dir)
        reset_engine()
        (Path(temp_dir) / "family.json").write_text(EventStore(sample_events()).dump(), encoding="utf-8")
        csv_path = Path(temp_dir) / "jobs.csv"
        _write_csv(
            csv_path,
            [
                {"month": "11", "year": "2025", "theme": "ocean", "layout": "fortnight", "page_size": "A4-portrait", "events": "family.json"},
                {"month": "12", "year": "2025", "theme": "", "layout": "weekly", "page_size": "A5-landscape", "events": ""},
                {"month": "1", "year": "2026", "theme": "sunset", "layout": "year", "page_size": "A4-landscape", "events": ""},
            ],
        )
        jobs = ingest_jobs(csv_path)
        assert [job.slug for job in jobs] == [
            "2025-11-ocean-fortnight-a4-portrait",
            "2025-12-default-weekly-a5-landscape",
            "2026-01-sunset-year-a4-landscape",
        ]
        results = run_pipeline(jobs)
        assert len(results["READY"]) == 3
        for slug in results["READY"]:
            job_dir = out_dir / slug
            assert (job_dir / "calendar.pdf").read_bytes().startswith(b"%PDF")
            assert (job_dir / "calendar.html").exists()
            assert (job_dir / "preview.png").exists()
            assert (job_dir / "events.json").exists()
            assert not (out_dir / f"{slug}.tmp").exists()

        events = json.loads((out_dir / results["READY"][0] / "events.json").read_text(encoding="utf-8"))
        assert sorted(events) == ["11-05", "11-14", "12-25"]
        assert json.loads((out_dir / results["READY"][1] / "events.json").read_text(encoding="utf-8")) == {}
        html = (out_dir / results["READY"][0] / "calendar.html").read_text(encoding="utf-8")
        assert "Sarah&#x27;s 21st Birthday" in html

        with get_session() as session:
            artifacts = list(session.exec(select(Artifact)))
            assert len(artifacts) == 12
            assert all(not Path(artifact.path).is_absolute() for artifact in artifacts)
            statuses = {job.status for job in session.exec(select(RenderJob))}
            assert statuses == {JobStatus.READY}


def test_invalid_jobs_fail_with_error_log() -> None:
    with tempfile.TemporaryDirectory() as temp_dir:
        out_dir = Path(temp_dir) / "out"
        config.set_out_dir(out_dir)
        reset_engine()
        csv_path = Path(temp_dir) / "jobs.csv"
        _write_csv(
            csv_path,
            [
                {"month": "13", "year": "2025", "theme": "", "layout": "", "page_size": "", "events": ""},
                {"month": "3", "year": "2025", "theme": "", "layout": "agenda", "page_size": "", "events": ""},
                {"month": "4", "year": "2025", "theme": "", "layout": "", "page_size": "", "events": "missing.json"},
            ],
        )
        jobs = ingest_jobs(csv_path)
        results = run_pipeline(jobs)
        assert results["READY"] == []
        assert len(results["FAILED"]) == 3
        for slug in results["FAILED"]:
            assert (out_dir / slug / "error.log").exists()

        failed = {job.slug: job for job in list_jobs([JobStatus.FAILED])}
        assert failed["2025-13-default-fortnight-a4-portrait"].fail_code == "VALIDATION_FAILED"
        assert failed["2025-03-default-agenda-a4-portrait"].fail_detail.startswith("Unknown layout 'agenda'")
        missing = failed["2025-04-default-fortnight-a4-portrait"]
        assert missing.fail_code == "PIPELINE_ERROR"
        assert "missing.json" in missing.fail_detail
        assert not (out_dir / f"{missing.slug}.tmp").exists()


def test_same_csv_built_twice_keeps_finished_job_clean() -> None:
    with tempfile.TemporaryDirectory() as temp_dir:
        out_dir = Path(temp_dir) / "out"
        config.set_out_dir(out_dir)
        reset_engine()
        csv_path = Path(temp_dir) / "jobs.csv"
        _write_csv(
            csv_path,
            [{"month": "2", "year": "2026", "theme": "", "layout": "weekly", "page_size": "", "events": ""}],
        )
        first = run_pipeline(ingest_jobs(csv_path))
        assert first["READY"] == ["2026-02-default-weekly-a4-portrait"]

        again = ingest_jobs(csv_path)
        assert again == []
        assert run_pipeline(again) == {"READY": [], "FAILED": []}

        job_dir = out_dir / "2026-02-default-weekly-a4-portrait"
        assert sorted(path.name for path in job_dir.iterdir()) == [
            "calendar.html",
            "calendar.pdf",
            "events.json",
            "preview.png",
        ]
        with get_session() as session:
            jobs = list(session.exec(select(RenderJob)))
        assert [job.status for job in jobs] == [JobStatus.READY]


def test_duplicate_job_does_not_touch_rendered_folder() -> None:
    with tempfile.TemporaryDirectory() as temp_dir:
        out_dir = Path(temp_dir) / "out"
        config.set_out_dir(out_dir)
        reset_engine()
        csv_path = Path(temp_dir) / "jobs.csv"
        _write_csv(
            csv_path,
            [{"month": "3", "year": "2026", "theme": "", "layout": "year", "page_size": "", "events": ""}],
        )
        (rendered,) = ingest_jobs(csv_path)
        assert run_pipeline([rendered])["READY"] == [rendered.slug]

        copy = RenderJob(slug=rendered.slug, month=3, year=2026, layout="year")
        with get_session() as session:
            session.add(copy)
            session.commit()
            session.refresh(copy)

        results = run_pipeline([copy])
        assert results["FAILED"] == [rendered.slug]
        assert not (out_dir / rendered.slug / "error.log").exists()
        assert (out_dir / rendered.slug / "calendar.pdf").exists()
        failed = list_jobs([JobStatus.FAILED])
        assert [job.fail_code for job in failed] == ["DUPLICATE"]
        assert failed[0].fail_detail == f"Job duplicate of #{rendered.id} ({rendered.slug})"


def test_slug_uses_resolved_theme_and_page_size() -> None:
    with tempfile.TemporaryDirectory() as temp_dir:
        config.set_out_dir(Path(temp_dir) / "out")
        reset_engine()
        csv_path = Path(temp_dir) / "jobs.csv"
        _write_csv(
            csv_path,
            [
                {"month": "11", "year": "2025", "theme": "neon", "layout": "weekly", "page_size": "a4-landscape", "events": ""},
                {"month": "12", "year": "2025", "theme": "Ocean", "layout": "Weekly", "page_size": "Letter", "events": ""},
            ],
        )
        first, second = ingest_jobs(csv_path)
        assert first.slug == "2025-11-default-weekly-a4-landscape"
        assert (first.theme, first.page_size) == ("default", "A4-landscape")
        assert second.slug == "2025-12-ocean-weekly-a4-portrait"
        assert (second.theme, second.layout, second.page_size) == ("ocean", "weekly", "A4-portrait")
