"""
transforms/reshape.py — Wide-to-long pivot of cumulative time series.

The JHU CSSE files carry one column per reporting date. These helpers turn
them into one row per (sub_region, region, date) and merge the cases and
deaths tables into a single observation table.

Usage:
    from eda_pipeline.transforms.reshape import combine_metrics, wide_to_long

    cases = wide_to_long(
        raw_cases,
        id_cols={"Province/State": "sub_region", "Country/Region": "region"},
        value_name="cases",
        drop_cols=("Lat", "Long"),
    )
    observations = combine_metrics(cases, deaths)
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

import polars as pl
import structlog

from eda_shared.constants import JHU_DATE_FORMAT
from eda_shared.time_utils import parse_date_header
from eda_pipeline.transforms.normalize import null_safe_join

log = structlog.get_logger(__name__)

OBSERVATION_KEYS: tuple[str, ...] = ("sub_region", "region", "date")


def wide_to_long(
    df: pl.DataFrame,
    *,
    id_cols: Mapping[str, str],
    value_name: str,
    drop_cols: Sequence[str] = (),
    date_format: str = JHU_DATE_FORMAT,
) -> pl.DataFrame:
    """
    Unpivot the date columns of a wide table.

    Args:
        df:          Wide table; every column other than id_cols/drop_cols
                     is expected to be a date header.
        id_cols:     Raw identifying column → output column name.
        value_name:  Name of the metric column in the output.
        drop_cols:   Columns discarded before the pivot (lat/long etc.).
        date_format: strptime format of the date headers.

    Returns:
        DataFrame with columns (*id_cols.values(), date, value_name); the
        metric is Int64 and unparseable cells are null.
    """
    df = df.drop([c for c in drop_cols if c in df.columns])
    df = df.rename(dict(id_cols))
    index = list(id_cols.values())

    candidates = [c for c in df.columns if c not in index]
    value_cols = [c for c in candidates if parse_date_header(c, date_format) is not None]
    unexpected = sorted(set(candidates) - set(value_cols))
    if unexpected:
        log.warning("unexpected_columns_ignored", columns=unexpected, value_name=value_name)

    if not value_cols:
        return pl.DataFrame(
            schema={
                **{c: pl.String for c in index},
                "date": pl.Date,
                value_name: pl.Int64,
            }
        )

    long = df.unpivot(
        on=value_cols,
        index=index,
        variable_name="date",
        value_name=value_name,
    )
    return long.with_columns(
        [pl.col(c).cast(pl.String) for c in index]
        + [
            pl.col("date").str.to_date(date_format),
            pl.col(value_name).cast(pl.String).str.strip_chars().cast(pl.Int64, strict=False),
        ]
    )


def combine_metrics(
    cases: pl.DataFrame,
    deaths: pl.DataFrame,
    *,
    keys: Sequence[str] = OBSERVATION_KEYS,
) -> pl.DataFrame:
    """
    Full outer join of the cases and deaths tables on (sub_region, region, date).

    A key present in only one input keeps its row with a null for the
    absent metric.
    """
    combined = null_safe_join(cases, deaths, on=keys, how="full")

    only_cases = combined.filter(pl.col("deaths").is_null()).height
    only_deaths = combined.filter(pl.col("cases").is_null()).height
    if only_cases or only_deaths:
        log.warning(
            "unpaired_observations",
            cases_without_deaths=only_cases,
            deaths_without_cases=only_deaths,
        )

    return combined.sort(["region", "sub_region", "date"], nulls_last=False)
