"""
pipelines/covid.py — COVID-19 cases/deaths report pipeline.

Steps:
  1. Download the cumulative confirmed and deaths series plus the
     population lookup for the chosen scope (global or us).
  2. Pivot each series to long form and full-join them on
     (sub_region, region, date).
  3. Drop rows with no reported cases, add the combined display key and
     left-join population.
  4. Aggregate per (region, date) with deaths per million and daily
     changes, then per region with cases/deaths per thousand.
  5. Rank the regions with a known population, fit
     deaths_per_thou ~ cases_per_thou and write every table to CSV.

Usage:
    from eda_pipeline.pipelines.covid import run
    report = await run()                                # global scope
    report = await run(scope="us", top_n=15)
    report = await run(dry_run=True)                    # no CSV output
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from pathlib import Path

import polars as pl

from eda_shared.config import settings
from eda_shared.constants import CovidScope
from eda_shared.models.regression import LinearFit
from eda_pipeline.loaders.csv_loader import CsvLoader, LoadResult
from eda_pipeline.sources.jhu import JHUTimeSeriesSource, PopulationLookupSource
from eda_pipeline.transforms.aggregate import (
    add_daily_change,
    aggregate_by_date,
    aggregate_by_region_date,
    drop_zero_cases,
    find_cumulative_decreases,
    region_totals,
    top_n as select_top_n,
    with_known_population,
)
from eda_pipeline.transforms.enrich import add_combined_key, join_population
from eda_pipeline.transforms.model import add_fitted, fit_ols
from eda_pipeline.transforms.reshape import combine_metrics
from eda_pipeline.utils.logging import configure_logging, get_logger

log = get_logger(__name__, pipeline="covid")

OBSERVATION_COLUMNS = [
    "sub_region",
    "region",
    "date",
    "cases",
    "deaths",
    "population",
    "combined_key",
]


@dataclass
class CovidReport:
    """All derived tables of one COVID report run."""

    scope: str
    observations: pl.DataFrame
    by_region_date: pl.DataFrame
    by_date: pl.DataFrame
    region_totals: pl.DataFrame
    top_by_cases: pl.DataFrame
    top_by_deaths: pl.DataFrame
    lowest_death_rate: pl.DataFrame
    highest_death_rate: pl.DataFrame
    case_decreases: pl.DataFrame
    fit: LinearFit
    fitted: pl.DataFrame
    load_results: dict[str, LoadResult] = field(default_factory=dict)

    def tables(self) -> dict[str, pl.DataFrame]:
        return {
            "observations": self.observations,
            "by_region_date": self.by_region_date,
            "by_date": self.by_date,
            "region_totals": self.region_totals,
            "top_by_cases": self.top_by_cases,
            "top_by_deaths": self.top_by_deaths,
            "lowest_death_rate": self.lowest_death_rate,
            "highest_death_rate": self.highest_death_rate,
            "case_decreases": self.case_decreases,
            "fitted": self.fitted,
        }


def build_observations(
    cases: pl.DataFrame,
    deaths: pl.DataFrame,
    lookup: pl.DataFrame,
) -> pl.DataFrame:
    """Combine long cases/deaths tables and enrich them with population."""
    combined = combine_metrics(cases, deaths)
    observed = drop_zero_cases(combined)
    keyed = add_combined_key(observed)
    enriched = join_population(keyed, lookup)
    return enriched.select(OBSERVATION_COLUMNS)


def build_covid_report(
    cases: pl.DataFrame,
    deaths: pl.DataFrame,
    lookup: pl.DataFrame,
    *,
    scope: str = "global",
    top_n: int | None = None,
) -> CovidReport:
    """
    Derive every report table from already-loaded long-form inputs.

    Args:
        cases:  (sub_region, region, date, cases) rows.
        deaths: (sub_region, region, date, deaths) rows.
        lookup: (sub_region, region, population) reference rows.
        scope:  Label carried into the report ("global" | "us").
        top_n:  Size of the ranking tables (default: settings.top_n).
    """
    n = top_n if top_n is not None else settings.top_n

    observations = build_observations(cases, deaths, lookup)

    by_region_date = add_daily_change(aggregate_by_region_date(observations))
    by_date = add_daily_change(aggregate_by_date(by_region_date), group_cols=())
    case_decreases = find_cumulative_decreases(by_region_date)

    totals = region_totals(by_region_date)
    comparable = with_known_population(totals)

    fit = fit_ols(comparable, x="cases_per_thou", y="deaths_per_thou")

    report = CovidReport(
        scope=scope,
        observations=observations,
        by_region_date=by_region_date,
        by_date=by_date,
        region_totals=totals,
        top_by_cases=select_top_n(comparable, "cases", n),
        top_by_deaths=select_top_n(comparable, "deaths", n),
        lowest_death_rate=select_top_n(comparable, "deaths_per_thou", n, largest=False),
        highest_death_rate=select_top_n(comparable, "deaths_per_thou", n),
        case_decreases=case_decreases,
        fit=fit,
        fitted=add_fitted(comparable, fit),
    )
    log.info(
        "covid_report_built",
        scope=scope,
        observations=observations.height,
        regions=totals.height,
        comparable_regions=comparable.height,
        fit=fit.describe(),
    )
    return report


async def run(
    *,
    scope: CovidScope = "global",
    top_n: int | None = None,
    output_dir: str | Path | None = None,
    dry_run: bool = False,
) -> CovidReport:
    """
    Fetch, build and (unless dry_run) write the COVID report.

    Args:
        scope:      "global" (countries) or "us" (states).
        top_n:      Size of the ranking tables.
        output_dir: Base directory for CSVs (default: settings.output_dir);
                    tables go to <output_dir>/covid_<scope>/.
        dry_run:    Build the report but write nothing.

    Returns:
        CovidReport with load_results filled when tables were written.
    """
    configure_logging()
    log.info("covid_pipeline_start", scope=scope, top_n=top_n, dry_run=dry_run)

    try:
        cases, deaths, lookup = await asyncio.gather(
            JHUTimeSeriesSource("confirmed", scope=scope).run(),
            JHUTimeSeriesSource("deaths", scope=scope).run(),
            PopulationLookupSource(scope=scope).run(),
        )

        report = build_covid_report(cases, deaths, lookup, scope=scope, top_n=top_n)

        if dry_run:
            for table, df in report.tables().items():
                log.info("dry_run_skip", table=table, rows=df.height)
        else:
            base = Path(output_dir or settings.output_dir)
            report.load_results = CsvLoader(base / f"covid_{scope}").write_all(report.tables())

    except Exception as exc:
        log.error("covid_pipeline_failed", scope=scope, error=str(exc))
        raise

    log.info(
        "covid_pipeline_complete",
        scope=scope,
        tables={t: r.records_loaded for t, r in report.load_results.items()},
    )
    return report
