from __future__ import annotations

import argparse
import csv
from pathlib import Path
from typing import Dict, List


FIELDNAMES = ["month", "year", "theme", "layout", "page_size", "events"]


def build_rows(year: int, theme: str, layout: str, page_size: str, events: str) -> List[Dict[str, str]]:
    """
    One job per month of the year. The year layout already shows all twelve
    months, so it only gets a single job.
    """
    months = [1] if layout == "year" else list(range(1, 13))
    return [
        {
            "month": str(month),
            "year": str(year),
            "theme": theme,
            "layout": layout,
            "page_size": page_size,
            "events": events,
        }
        for month in months
    ]


def main() -> None:
    parser = argparse.ArgumentParser(description="Write a batch CSV for `calgen build`.")
    parser.add_argument("year", type=int)
    parser.add_argument("--theme", default="default")
    parser.add_argument("--layout", default="fortnight")
    parser.add_argument("--page-size", default="A4-portrait")
    parser.add_argument("--events", default="", help="Events JSON path, relative to the CSV")
    parser.add_argument("--out", type=Path, default=Path("jobs.csv"))
    args = parser.parse_args()

    rows = build_rows(args.year, args.theme, args.layout, args.page_size, args.events)

    args.out.parent.mkdir(parents=True, exist_ok=True)
    with args.out.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=FIELDNAMES)
        writer.writeheader()
        writer.writerows(rows)

    print(f"OK: wrote {len(rows)} jobs -> {args.out}")


if __name__ == "__main__":
    main()
