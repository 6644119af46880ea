"""
transforms/aggregate.py — Group-by aggregation and derived rates.

COVID chain:
    observations
      → drop_zero_cases()              policy: cases must be > 0
      → aggregate_by_region_date()     sums over sub-regions, deaths_per_mill
      → add_daily_change()             new_cases / new_deaths
      → region_totals()                max over dates, cases/deaths per thousand
      → with_known_population() → top_n()

Incident summaries:
    yearly_summary(), summarize_by(), hourly_profile()

Every function returns a new DataFrame; inputs are never modified.
"""

from __future__ import annotations

from collections.abc import Sequence

import polars as pl
import structlog

from eda_shared.constants import PER_MILLION, PER_THOUSAND

log = structlog.get_logger(__name__)


def per_unit_rate(numerator: str, denominator: str, scale: float) -> pl.Expr:
    """numerator * scale / denominator, null where denominator is null or ≤ 0."""
    return (
        pl.when(pl.col(denominator) > 0)
        .then(pl.col(numerator).cast(pl.Float64) * scale / pl.col(denominator).cast(pl.Float64))
        .otherwise(None)
    )


# ---------------------------------------------------------------------------
# COVID observations
# ---------------------------------------------------------------------------


def drop_zero_cases(df: pl.DataFrame, *, metric: str = "cases") -> pl.DataFrame:
    """
    Keep rows whose cumulative case count is strictly positive.

    Zero rows precede the first reported case; rows with a missing count
    are dropped as well.
    """
    kept = df.filter(pl.col(metric) > 0)
    dropped = df.height - kept.height
    if dropped:
        log.info("zero_case_rows_dropped", dropped=dropped, kept=kept.height)
    return kept


def aggregate_by_region_date(
    df: pl.DataFrame,
    *,
    region_col: str = "region",
    date_col: str = "date",
) -> pl.DataFrame:
    """
    Sum cases, deaths and population over the sub-regions of each (region, date).

    Missing values are skipped by the sums, so a region whose sub-regions
    all lack a population ends up with population 0 and a null
    deaths_per_mill.
    """
    return (
        df.group_by([region_col, date_col])
        .agg(
            pl.col("cases").sum(),
            pl.col("deaths").sum(),
            pl.col("population").sum(),
        )
        .with_columns(per_unit_rate("deaths", "population", PER_MILLION).alias("deaths_per_mill"))
        .sort([region_col, date_col])
    )


def aggregate_by_date(df: pl.DataFrame, *, date_col: str = "date") -> pl.DataFrame:
    """Collapse a per-(region, date) table to one row per date (national totals)."""
    return (
        df.group_by(date_col)
        .agg(
            pl.col("cases").sum(),
            pl.col("deaths").sum(),
            pl.col("population").sum(),
        )
        .with_columns(per_unit_rate("deaths", "population", PER_MILLION).alias("deaths_per_mill"))
        .sort(date_col)
    )


def add_daily_change(
    df: pl.DataFrame,
    *,
    metrics: Sequence[str] = ("cases", "deaths"),
    group_cols: Sequence[str] = ("region",),
    date_col: str = "date",
) -> pl.DataFrame:
    """
    Add new_<metric> = day-over-day difference of each cumulative metric.

    The first date of each group has a null change. Negative changes
    (upstream corrections) are kept as reported.
    """
    ordered = df.sort([*group_cols, date_col])
    if group_cols:
        changes = [
            (pl.col(m) - pl.col(m).shift(1).over(list(group_cols))).alias(f"new_{m}")
            for m in metrics
        ]
    else:
        changes = [(pl.col(m) - pl.col(m).shift(1)).alias(f"new_{m}") for m in metrics]
    return ordered.with_columns(changes)


def find_cumulative_decreases(
    df: pl.DataFrame,
    *,
    metric: str = "cases",
    group_col: str = "region",
    date_col: str = "date",
) -> pl.DataFrame:
    """
    Return the rows where a cumulative series drops below its previous value.

    These mark upstream data corrections. They are reported, never fixed.
    """
    previous = f"previous_{metric}"
    decreases = (
        df.sort([group_col, date_col])
        .with_columns(pl.col(metric).shift(1).over(group_col).alias(previous))
        .filter(pl.col(metric) < pl.col(previous))
        .select([group_col, date_col, previous, metric])
    )
    if decreases.height:
        log.warning(
            "cumulative_decreases_found",
            metric=metric,
            rows=decreases.height,
            groups=decreases[group_col].n_unique(),
        )
    return decreases


def region_totals(daily: pl.DataFrame, *, region_col: str = "region") -> pl.DataFrame:
    """
    One row per region summarizing the whole date range.

    cases and deaths are the maxima of the cumulative daily series.
    population is the maximum too: it is constant per region but reads 0 on
    days where the reference join came up empty.
    """
    return (
        daily.group_by(region_col)
        .agg(
            pl.col("cases").max(),
            pl.col("deaths").max(),
            pl.col("population").max(),
        )
        .with_columns(
            per_unit_rate("cases", "population", PER_THOUSAND).alias("cases_per_thou"),
            per_unit_rate("deaths", "population", PER_THOUSAND).alias("deaths_per_thou"),
        )
        .sort(region_col)
    )


def with_known_population(df: pl.DataFrame, *, population_col: str = "population") -> pl.DataFrame:
    """Rows with population > 0; the only rows valid for per-capita comparison."""
    return df.filter(pl.col(population_col) > 0)


def top_n(
    df: pl.DataFrame,
    metric: str,
    n: int,
    *,
    largest: bool = True,
) -> pl.DataFrame:
    """
    Select the n rows with the largest (or smallest) metric.

    Ties are broken by row order. The selection is returned sorted
    ascending by metric so the extreme value always sits at the end (or
    start) of a chart. Rows with a null metric are never selected.
    """
    if n < 0:
        raise ValueError(f"n must be non-negative, got {n}")
    return (
        df.filter(pl.col(metric).is_not_null())
        .sort(metric, descending=largest, maintain_order=True)
        .head(n)
        .sort(metric, maintain_order=True)
    )


# ---------------------------------------------------------------------------
# Incident summaries
# ---------------------------------------------------------------------------


def yearly_summary(
    incidents: pl.DataFrame,
    *,
    date_col: str = "occur_date",
    flag_col: str = "is_murder",
) -> pl.DataFrame:
    """Incidents and murders per calendar year of date_col."""
    return (
        incidents.filter(pl.col(date_col).is_not_null())
        .group_by(pl.col(date_col).dt.year().cast(pl.Int64).alias("year"))
        .agg(
            pl.len().cast(pl.Int64).alias("incidents"),
            pl.col(flag_col).sum().cast(pl.Int64).alias("murders"),
        )
        .sort("year")
    )


def summarize_by(
    incidents: pl.DataFrame,
    key: str,
    *,
    flag_col: str = "is_murder",
) -> pl.DataFrame:
    """
    Incidents, murders and murder_rate per value of key.

    Null is reported as its own group. Sorted by incidents, most first.
    """
    return (
        incidents.group_by(pl.col(key).cast(pl.String))
        .agg(
            pl.len().cast(pl.Int64).alias("incidents"),
            pl.col(flag_col).sum().cast(pl.Int64).alias("murders"),
        )
        .with_columns((pl.col("murders") / pl.col("incidents")).alias("murder_rate"))
        .sort(["incidents", key], descending=[True, False], nulls_last=True)
    )


def hourly_profile(incidents: pl.DataFrame, *, time_col: str = "occur_time") -> pl.DataFrame:
    """Incident counts per hour of day (0–23); hours without incidents are omitted."""
    return (
        incidents.filter(pl.col(time_col).is_not_null())
        .group_by(pl.col(time_col).dt.hour().cast(pl.Int64).alias("hour"))
        .agg(pl.len().cast(pl.Int64).alias("incidents"))
        .sort("hour")
    )
