from __future__ import annotations

from scripts.make_year_jobs import FIELDNAMES, build_rows


def test_one_job_per_month() -> None:
    rows = build_rows(2026, "ocean", "weekly", "A4-landscape", "family.json")
    assert [row["month"] for row in rows] == [str(m) for m in range(1, 13)]
    assert all(set(row) == set(FIELDNAMES) for row in rows)
    assert rows[0]["events"] == "family.json"


def test_year_layout_gets_a_single_job() -> None:
    rows = build_rows(2026, "default", "year", "A4-portrait", "")
    assert len(rows) == 1
    assert rows[0]["year"] == "2026"
