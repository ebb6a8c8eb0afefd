from __future__ import annotations

import tempfile
from pathlib import Path
import unittest

from sqlmodel import select

from calgen import config
from calgen.models import Artifact, RenderJob, get_session, init_db, reset_engine
from calgen.storage import (
    calendar_files,
    discard_staging,
    job_folder,
    open_staging,
    publish,
    record_artifacts,
    write_error_log,
)


class StorageTests(unittest.TestCase):
    def setUp(self) -> None:
        self.temp_dir = tempfile.TemporaryDirectory()
        self.out = Path(self.temp_dir.name)
        config.set_out_dir(self.out)
        reset_engine()

    def tearDown(self) -> None:
        self.temp_dir.cleanup()

    def test_staging_is_fresh(self) -> None:
        staging = open_staging("2025-01-default-year-a4-portrait")
        (staging / "leftover.txt").write_text("x", encoding="utf-8")
        staging = open_staging("2025-01-default-year-a4-portrait")
        self.assertEqual(staging, self.out / "2025-01-default-year-a4-portrait.tmp")
        self.assertEqual(list(staging.iterdir()), [])
        discard_staging(staging)
        self.assertFalse(staging.exists())

    def test_publish_replaces_previous_output(self) -> None:
        slug = "2025-02-ocean-weekly-a4-portrait"
        write_error_log(slug, "old failure")
        staging = open_staging(slug)
        for path in calendar_files(staging).values():
            path.write_text("data", encoding="utf-8")

        files = publish(staging, slug)
        self.assertFalse(staging.exists())
        self.assertFalse((job_folder(slug) / "error.log").exists())
        self.assertEqual(
            sorted(path.name for path in files.values()),
            ["calendar.html", "calendar.pdf", "events.json", "preview.png"],
        )
        self.assertTrue(all(path.parent == job_folder(slug) for path in files.values()))

    def test_record_artifacts_relative_to_out_dir(self) -> None:
        init_db()
        job = RenderJob(slug="2025-03-default-year-a4-portrait", month=3, year=2025)
        with get_session() as session:
            session.add(job)
            session.commit()
            session.refresh(job)
        record_artifacts(job, calendar_files(job_folder(job.slug)))
        with get_session() as session:
            rows = {row.type: row.path for row in session.exec(select(Artifact))}
        self.assertEqual(rows["pdf"], str(Path(job.slug) / "calendar.pdf"))
        self.assertEqual(set(rows), {"pdf", "html", "preview", "events"})


if __name__ == "__main__":
    unittest.main()
