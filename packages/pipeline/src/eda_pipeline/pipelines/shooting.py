"""
pipelines/shooting.py — NYPD shooting incident report pipeline.

Steps:
  1. Download the historic incident export and keep date, time, borough,
     murder flag and perpetrator/victim demographics.
  2. Map the known sentinel values ("UNKNOWN", "(null)", "1020", …) to
     null using the versioned rule table, then check every categorical
     column against its vocabulary.
  3. Summarize incidents and murders per year, per borough and per victim
     race, plus an hour-of-day profile.
  4. Fit murders ~ incidents over the yearly summary and write every table
     to CSV.

Usage:
    from eda_pipeline.pipelines.shooting import run
    report = await run()
    report = await run(strict=False, dry_run=True)   # log unknown categories instead of failing
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import polars as pl

from eda_shared.config import settings
from eda_shared.constants import SHOOTING_VOCABULARY
from eda_shared.models.regression import LinearFit
from eda_pipeline.loaders.csv_loader import CsvLoader, LoadResult
from eda_pipeline.sources.nypd import NYPDShootingSource
from eda_pipeline.transforms.aggregate import hourly_profile, summarize_by, yearly_summary
from eda_pipeline.transforms.clean import CategoricalCleaner, CleaningRules, as_categorical
from eda_pipeline.transforms.model import add_fitted, fit_ols
from eda_pipeline.utils.logging import configure_logging, get_logger

log = get_logger(__name__, pipeline="shooting")


@dataclass
class ShootingReport:
    """All derived tables of one shooting report run."""

    incidents: pl.DataFrame
    yearly: pl.DataFrame
    by_boro: pl.DataFrame
    by_vic_race: pl.DataFrame
    hourly: pl.DataFrame
    fit: LinearFit
    fitted: pl.DataFrame
    rules_version: str
    unknown_values: dict[str, list[str]] = field(default_factory=dict)
    load_results: dict[str, LoadResult] = field(default_factory=dict)

    def tables(self) -> dict[str, pl.DataFrame]:
        return {
            "incidents": self.incidents,
            "yearly": self.yearly,
            "by_boro": self.by_boro,
            "by_vic_race": self.by_vic_race,
            "hourly": self.hourly,
            "fitted": self.fitted,
        }


def build_shooting_report(
    incidents: pl.DataFrame,
    *,
    rules: CleaningRules | None = None,
    strict: bool = True,
) -> ShootingReport:
    """
    Clean the incident table and derive every report table.

    Args:
        incidents: Output of NYPDShootingSource.transform().
        rules:     Invalid-value table (default: the shipped version).
        strict:    Raise UnknownCategoryError on values outside the
                   vocabulary instead of logging them.
    """
    cleaner = CategoricalCleaner(rules)
    cleaned = cleaner.clean(incidents)
    unknown = cleaner.validate(cleaned, SHOOTING_VOCABULARY, strict=strict)
    categorical = as_categorical(cleaned, cleaner.rules.columns)

    yearly = yearly_summary(categorical)
    fit = fit_ols(yearly, x="incidents", y="murders")

    report = ShootingReport(
        incidents=categorical,
        yearly=yearly,
        by_boro=summarize_by(categorical, "boro"),
        by_vic_race=summarize_by(categorical, "vic_race"),
        hourly=hourly_profile(categorical),
        fit=fit,
        fitted=add_fitted(yearly, fit),
        rules_version=cleaner.rules.version,
        unknown_values=unknown,
    )
    log.info(
        "shooting_report_built",
        incidents=categorical.height,
        years=yearly.height,
        rules_version=cleaner.rules.version,
        fit=fit.describe(),
    )
    return report


async def run(
    *,
    output_dir: str | Path | None = None,
    strict: bool = True,
    dry_run: bool = False,
) -> ShootingReport:
    """
    Fetch, build and (unless dry_run) write the shooting report.

    Args:
        output_dir: Base directory for CSVs (default: settings.output_dir);
                    tables go to <output_dir>/shooting/.
        strict:     Fail on categorical values missing from the vocabulary.
        dry_run:    Build the report but write nothing.
    """
    configure_logging()
    log.info("shooting_pipeline_start", strict=strict, dry_run=dry_run)

    try:
        incidents = await NYPDShootingSource().run()
        report = build_shooting_report(incidents, strict=strict)

        if dry_run:
            for table, df in report.tables().items():
                log.info("dry_run_skip", table=table, rows=df.height)
        else:
            base = Path(output_dir or settings.output_dir)
            report.load_results = CsvLoader(base / "shooting").write_all(report.tables())

    except Exception as exc:
        log.error("shooting_pipeline_failed", error=str(exc))
        raise

    log.info(
        "shooting_pipeline_complete",
        tables={t: r.records_loaded for t, r in report.load_results.items()},
    )
    return report
