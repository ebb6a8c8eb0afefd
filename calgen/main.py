from __future__ import annotations

import logging
from datetime import date
from pathlib import Path
from typing import Optional

import typer

from . import config
from .engine.errors import CalendarError
from .engine.events import DEFAULT_STORE
from .engine.layouts import LAYOUTS
from .engine.options import RenderOptions
from .engine.pages import PAGE_SIZES
from .engine.themes import THEMES
from .models import JobStatus, reset_engine
from .pipeline.ingest import ingest_jobs, list_jobs, load_events_file, load_image_asset
from .pipeline.qa import validate_request
from .pipeline.run import render_calendar, run_pipeline

app = typer.Typer(help="Monthly calendar generator (HTML + PDF)")


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Show info logs")) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@app.command()
def render(
    month: int = typer.Argument(date.today().month, help="Month number (1-12)"),
    year: int = typer.Argument(date.today().year, help="Year, e.g. 2025"),
    theme: str = typer.Argument(config.DEFAULT_THEME, help="Theme name"),
    layout: str = typer.Argument(config.DEFAULT_LAYOUT, help="fortnight, weekly or year"),
    page_size: str = typer.Argument(config.DEFAULT_PAGE_SIZE, help="A4-portrait, A4-landscape, A5-portrait, A5-landscape"),
    events: Optional[Path] = typer.Option(None, "--events", help="Events JSON file"),
    image: Optional[Path] = typer.Option(None, "--image", help="Image for a page ahead of the calendar"),
    logo: Optional[Path] = typer.Option(None, "--logo", help="Logo (PNG, JPG, SVG, ...)"),
    logo_pos: str = typer.Option(config.DEFAULT_LOGO_POSITION, "--logo-pos", help="header, footer or auto"),
    logo_align: str = typer.Option(config.DEFAULT_LOGO_ALIGN, "--logo-align", help="left, center or right"),
    output: Optional[Path] = typer.Option(None, "--output", help="PDF path; the HTML is written next to it"),
    html_only: bool = typer.Option(False, "--html-only", help="Skip the PDF"),
    preview: bool = typer.Option(False, "--preview", help="Also write a PNG preview"),
) -> None:
    errors = validate_request(month, year, layout)
    if logo_pos not in config.LOGO_POSITIONS:
        errors.append(f"Logo position must be one of: {', '.join(config.LOGO_POSITIONS)}")
    if logo_align not in config.LOGO_ALIGNMENTS:
        errors.append(f"Logo alignment must be one of: {', '.join(config.LOGO_ALIGNMENTS)}")
    if errors:
        for error in errors:
            typer.echo(f"Error: {error}", err=True)
        raise typer.Exit(code=1)

    pdf_path = output or Path(f"calendar-{year}-{month:02d}.pdf")
    html_path = pdf_path.with_suffix(".html")
    options = RenderOptions(
        theme=theme,
        layout=layout,
        page_size=page_size,
        image=str(image) if image else None,
        logo=str(logo) if logo else None,
        logo_position=logo_pos,
        logo_align=logo_align,
    )
    try:
        store = load_events_file(events, DEFAULT_STORE) if events else DEFAULT_STORE
        result = render_calendar(
            month - 1,
            year,
            options,
            html_path=html_path,
            pdf_path=None if html_only else pdf_path,
            preview_path=pdf_path.with_suffix(".png") if preview and not html_only else None,
            events=store,
            image=load_image_asset(image, "image"),
            logo=load_image_asset(logo, "logo"),
        )
    except CalendarError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1)

    for warning in result.warnings:
        typer.echo(f"Warning: {warning}", err=True)
    typer.echo(f"HTML: {result.html_path}")
    if result.pdf_path:
        typer.echo(f"PDF: {result.pdf_path}")
    if result.preview_path:
        typer.echo(f"Preview: {result.preview_path}")


@app.command()
def options() -> None:
    """List themes, layouts and page sizes."""
    typer.echo("Themes: " + ", ".join(THEMES.names()))
    typer.echo("Layouts: " + ", ".join(LAYOUTS))
    typer.echo("Page sizes: " + ", ".join(PAGE_SIZES))
    typer.echo("Logo positions: " + ", ".join(config.LOGO_POSITIONS))
    typer.echo("Logo alignments: " + ", ".join(config.LOGO_ALIGNMENTS))


@app.command()
def build(
    csv: Optional[Path] = typer.Option(None, "--csv", help="CSV with month,year[,theme,layout,page_size,events]"),
    out: Optional[Path] = typer.Option(None, "--out", help="Output directory"),
    layout: Optional[str] = typer.Option(None, "--layout", help="Only render jobs with this layout"),
    dry_run_ingest: bool = typer.Option(False, "--dry-run-ingest", help="Only ingest CSV"),
) -> None:
    if out:
        config.set_out_dir(out)
        reset_engine()
    if csv:
        try:
            jobs = ingest_jobs(csv)
        except (OSError, ValueError) as exc:
            typer.echo(f"Error: {exc}", err=True)
            raise typer.Exit(code=1)
        typer.echo(f"Ingested {len(jobs)} jobs")
        if dry_run_ingest:
            return
    jobs = list_jobs([JobStatus.DRAFT], layout=layout)
    if not jobs:
        typer.echo("No jobs to render")
        return
    results = run_pipeline(jobs)
    typer.echo(f"READY: {len(results['READY'])}")
    typer.echo(f"FAILED: {len(results['FAILED'])}")
    for slug in results["FAILED"]:
        typer.echo(f"FAILED: {slug}")


@app.command()
def retry(
    out: Optional[Path] = typer.Option(None, "--out", help="Output directory"),
    failed: bool = typer.Option(True, "--failed", help="Retry failed only"),
) -> None:
    if out:
        config.set_out_dir(out)
        reset_engine()
    statuses = [JobStatus.FAILED] if failed else [JobStatus.DRAFT]
    jobs = list_jobs(statuses)
    if not jobs:
        typer.echo("No jobs to retry")
        return
    results = run_pipeline(jobs)
    typer.echo(f"READY: {len(results['READY'])}")
    typer.echo(f"FAILED: {len(results['FAILED'])}")


if __name__ == "__main__":
    app()
