"""
transforms/normalize.py — Stateless column helpers shared by the other transforms.

Usage:
    from eda_pipeline.transforms.normalize import (
        cast_numeric_cols,
        clean_string_columns,
        null_safe_join,
    )

    df = clean_string_columns(df)
    df = cast_numeric_cols(df, ["population"], pl.Int64)
    joined = null_safe_join(df, lookup, on=["sub_region", "region"], how="left")
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Literal

import polars as pl

_ROW_INDEX = "__row_index"


def clean_string_columns(df: pl.DataFrame) -> pl.DataFrame:
    """Strip whitespace from all String columns."""
    return df.with_columns(
        [
            pl.col(c).str.strip_chars()
            for c in df.columns
            if df[c].dtype == pl.String
        ]
    )


def blank_to_null(df: pl.DataFrame, columns: Sequence[str]) -> pl.DataFrame:
    """Turn empty strings into null in the given String columns."""
    return df.with_columns(
        [
            pl.when(pl.col(c) != "").then(pl.col(c)).alias(c)
            for c in columns
            if c in df.columns
        ]
    )


def cast_numeric_cols(
    df: pl.DataFrame,
    columns: Sequence[str],
    dtype: type[pl.DataType] = pl.Float64,
) -> pl.DataFrame:
    """Cast specified columns to a numeric dtype, coercing errors to null."""
    return df.with_columns(
        [pl.col(c).cast(dtype, strict=False) for c in columns if c in df.columns]
    )


def _is_text_key(df: pl.DataFrame, col: str) -> bool:
    return df.schema[col] in (pl.String, pl.Null)


def null_safe_join(
    left: pl.DataFrame,
    right: pl.DataFrame,
    *,
    on: Sequence[str],
    how: Literal["left", "full", "inner"] = "left",
) -> pl.DataFrame:
    """
    Join two frames treating null keys as equal to each other.

    Most countries in the JHU files have no province, so a default polars
    join would never match them. All-null text key columns are cast to
    String so both sides agree on the key dtype. Key columns are coalesced.
    """
    text_keys = [k for k in on if _is_text_key(left, k) or _is_text_key(right, k)]

    def _align(frame: pl.DataFrame) -> pl.DataFrame:
        return frame.with_columns([pl.col(k).cast(pl.String) for k in text_keys])

    if how == "left":
        # Left joins keep the left frame's row order.
        return (
            _align(left)
            .with_row_index(_ROW_INDEX)
            .join(_align(right), on=list(on), how=how, coalesce=True, nulls_equal=True)
            .sort(_ROW_INDEX, maintain_order=True)
            .drop(_ROW_INDEX)
        )
    return _align(left).join(_align(right), on=list(on), how=how, coalesce=True, nulls_equal=True)
