"""
cli.py — Click CLI entrypoint for the report pipelines.

Usage:
    eda run covid --scope us --top-n 10
    eda run shooting --output-dir ./output
    eda run all --dry-run
    eda sources
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import click
import structlog

from eda_shared.config import settings
from eda_shared.models import RegionTotal, YearlySummary
from eda_pipeline.utils.logging import configure_logging

if TYPE_CHECKING:
    from eda_pipeline.pipelines.covid import CovidReport
    from eda_pipeline.pipelines.shooting import ShootingReport

log = structlog.get_logger(__name__)

PIPELINES = ["covid", "shooting", "all"]


@click.group()
@click.option(
    "--log-level",
    default=settings.log_level,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    help="Log level",
)
@click.option(
    "--log-format",
    default=settings.log_format,
    type=click.Choice(["console", "json"]),
    help="Log renderer",
)
def main(log_level: str, log_format: str) -> None:
    """COVID-19 and NYPD shooting report pipelines."""
    configure_logging(log_level=log_level, log_format=log_format)


def _echo_covid(report: CovidReport) -> None:
    click.echo(f"\nCOVID-19 ({report.scope}): top {report.top_by_deaths.height} regions by deaths")
    for row in report.top_by_deaths.iter_rows(named=True):
        total = RegionTotal.from_row(row)
        rate = "n/a" if total.deaths_per_thou is None else f"{total.deaths_per_thou:.3f}"
        click.echo(f"  {total.region:40s} {total.cases:>12,d} cases {total.deaths or 0:>10,d} deaths  {rate}/1k")
    click.echo(f"  fit: {report.fit.describe()}")


def _echo_shooting(report: ShootingReport) -> None:
    click.echo(f"\nNYPD shootings per year (cleaning rules {report.rules_version})")
    for row in report.yearly.iter_rows(named=True):
        year = YearlySummary.from_row(row)
        share = "n/a" if year.murder_share is None else f"{year.murder_share:.1%}"
        click.echo(f"  {year.year}  {year.incidents:>6d} incidents  {year.murders:>5d} murders  ({share})")
    click.echo(f"  fit: {report.fit.describe()}")


async def _run(
    pipeline: str,
    *,
    scope: str,
    top_n: int | None,
    output_dir: str | None,
    strict: bool,
    dry_run: bool,
) -> None:
    from eda_pipeline.pipelines import covid, shooting

    if pipeline in ("covid", "all"):
        report = await covid.run(scope=scope, top_n=top_n, output_dir=output_dir, dry_run=dry_run)
        _echo_covid(report)
    if pipeline in ("shooting", "all"):
        report = await shooting.run(output_dir=output_dir, strict=strict, dry_run=dry_run)
        _echo_shooting(report)


@main.command()
@click.argument("pipeline", type=click.Choice(PIPELINES, case_sensitive=False))
@click.option("--scope", type=click.Choice(["global", "us"]), default="global", show_default=True,
              help="COVID scope: countries or US states")
@click.option("--top-n", type=click.IntRange(min=1), default=None,
              help="Rows in each ranking table (default: settings.top_n)")
@click.option("--output-dir", type=click.Path(file_okay=False), default=None,
              help="Directory for CSV output (default: settings.output_dir)")
@click.option("--strict/--no-strict", default=True, show_default=True,
              help="Fail on categorical values outside the known vocabulary")
@click.option("--dry-run", is_flag=True, help="Build the report but write no files")
def run(
    pipeline: str,
    scope: str,
    top_n: int | None,
    output_dir: str | None,
    strict: bool,
    dry_run: bool,
) -> None:
    """Run a named pipeline or 'all'."""
    pipeline = pipeline.lower()
    log.info("pipeline_dispatch", pipeline=pipeline, dry_run=dry_run)
    try:
        asyncio.run(
            _run(
                pipeline,
                scope=scope,
                top_n=top_n,
                output_dir=output_dir,
                strict=strict,
                dry_run=dry_run,
            )
        )
    except Exception as exc:
        log.error("pipeline_failed", pipeline=pipeline, error=str(exc), exc_info=True)
        raise SystemExit(1) from exc


@main.command()
def sources() -> None:
    """Show the configured dataset URLs."""
    from eda_pipeline.sources import JHUTimeSeriesSource, NYPDShootingSource, PopulationLookupSource

    entries = [
        JHUTimeSeriesSource("confirmed", scope="global"),
        JHUTimeSeriesSource("deaths", scope="global"),
        JHUTimeSeriesSource("recovered", scope="global"),
        JHUTimeSeriesSource("confirmed", scope="us"),
        JHUTimeSeriesSource("deaths", scope="us"),
        PopulationLookupSource(),
        NYPDShootingSource(),
    ]
    for source in entries:
        metadata = asyncio.run(source.get_metadata())
        click.echo(f"{metadata['description']:50s} {metadata['url']}")


if __name__ == "__main__":
    main()
