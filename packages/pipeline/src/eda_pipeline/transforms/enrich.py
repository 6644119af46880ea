"""
transforms/enrich.py — Reference-data joins onto the observation table.

Usage:
    from eda_pipeline.transforms.enrich import add_combined_key, join_population

    df = add_combined_key(df)                   # "Ontario, Canada" / "Germany"
    df = join_population(df, lookup)            # adds population (null if unmatched)
"""

from __future__ import annotations

from collections.abc import Sequence

import polars as pl
import structlog

from eda_pipeline.transforms.normalize import null_safe_join

log = structlog.get_logger(__name__)

POPULATION_KEYS: tuple[str, ...] = ("sub_region", "region")


def add_combined_key(
    df: pl.DataFrame,
    parts: Sequence[str] = POPULATION_KEYS,
    *,
    out_col: str = "combined_key",
    separator: str = ", ",
) -> pl.DataFrame:
    """
    Add a display key joining the non-empty parts, e.g. "Ontario, Canada".

    Null or blank parts are omitted together with their separator.
    """
    non_blank = [
        pl.when(pl.col(p).cast(pl.String).str.strip_chars() != "").then(pl.col(p).cast(pl.String))
        for p in parts
    ]
    return df.with_columns(
        pl.concat_str(non_blank, separator=separator, ignore_nulls=True).alias(out_col)
    )


def join_population(
    df: pl.DataFrame,
    lookup: pl.DataFrame,
    *,
    keys: Sequence[str] = POPULATION_KEYS,
    value_col: str = "population",
) -> pl.DataFrame:
    """
    Left-join a population reference table on (sub_region, region).

    Every row of df is kept. Rows without a reference match get a null
    population. Duplicate reference keys are collapsed (first row wins) so
    the join never multiplies observations.

    Args:
        df:        Primary table.
        lookup:    Reference table with keys and value_col.
        keys:      Join key columns, present in both tables.
        value_col: Reference column to bring across.

    Returns:
        df with value_col appended (replacing any existing column of that name).
    """
    reference = lookup.select([*keys, value_col])
    deduped = reference.unique(subset=list(keys), keep="first", maintain_order=True)
    if deduped.height != reference.height:
        log.warning(
            "population_duplicate_keys",
            dropped=reference.height - deduped.height,
        )

    if value_col in df.columns:
        log.debug("population_column_replaced", column=value_col)
        df = df.drop(value_col)

    matched_flag = "__matched"
    joined = null_safe_join(
        df,
        deduped.with_columns(pl.lit(True).alias(matched_flag)),
        on=keys,
        how="left",
    )

    unmatched = joined.filter(pl.col(matched_flag).is_null())
    if unmatched.height:
        sample = (
            unmatched.select(list(keys)).unique(maintain_order=True).head(10).rows()
        )
        log.warning(
            "population_join_unmatched",
            rows=unmatched.height,
            total=joined.height,
            sample_keys=sample,
        )

    return joined.drop(matched_flag)
