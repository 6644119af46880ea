"""
transforms/model.py — Univariate ordinary-least-squares fit.

The fit is descriptive: it shows how strongly y tracks x across the rows of
a summary table. No regularization, outlier handling or intervals.

Usage:
    from eda_pipeline.transforms.model import add_fitted, fit_ols

    fit = fit_ols(totals, x="cases_per_thou", y="deaths_per_thou")
    totals = add_fitted(totals, fit)              # adds pred, residual
"""

from __future__ import annotations

import numpy as np
import polars as pl
import structlog

from eda_shared.models.regression import LinearFit

log = structlog.get_logger(__name__)


def fit_ols(df: pl.DataFrame, *, x: str, y: str) -> LinearFit:
    """
    Fit y ≈ intercept + slope * x by least squares.

    Rows where x or y is null or non-finite are ignored. When x has no
    variance the design matrix is rank deficient and the minimum-norm
    solution from numpy.linalg.lstsq is returned.

    Raises:
        ValueError: no usable rows remain.
    """
    data = (
        df.select(
            pl.col(x).cast(pl.Float64).alias("x"),
            pl.col(y).cast(pl.Float64).alias("y"),
        )
        .drop_nulls()
        .filter(pl.col("x").is_finite() & pl.col("y").is_finite())
    )
    if data.is_empty():
        raise ValueError(f"no rows with both {x!r} and {y!r} to fit")

    xs = data["x"].to_numpy()
    ys = data["y"].to_numpy()
    design = np.column_stack([np.ones_like(xs), xs])
    coef, _, rank, _ = np.linalg.lstsq(design, ys, rcond=None)
    if rank < 2:
        log.warning("ols_rank_deficient", x=x, y=y, n_obs=len(xs))

    fitted = design @ coef
    ss_res = float(np.sum((ys - fitted) ** 2))
    ss_tot = float(np.sum((ys - ys.mean()) ** 2))

    fit = LinearFit(
        x=x,
        y=y,
        intercept=float(coef[0]),
        slope=float(coef[1]),
        r_squared=1.0 - ss_res / ss_tot if ss_tot > 0 else None,
        n_obs=len(xs),
    )
    log.info("ols_fit", summary=fit.describe())
    return fit


def add_fitted(
    df: pl.DataFrame,
    fit: LinearFit,
    *,
    out_col: str = "pred",
    residual_col: str = "residual",
) -> pl.DataFrame:
    """Append the fitted value and residual (observed − fitted) for each row."""
    return df.with_columns(
        (fit.intercept + fit.slope * pl.col(fit.x).cast(pl.Float64)).alias(out_col)
    ).with_columns(
        (pl.col(fit.y).cast(pl.Float64) - pl.col(out_col)).alias(residual_col)
    )
