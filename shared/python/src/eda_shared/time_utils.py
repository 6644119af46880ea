"""
time_utils.py — Date parsing for the upstream CSV exports.

Upstream formats:
- JHU CSSE date headers: "1/22/20" (month/day/two-digit year)
- NYPD OCCUR_DATE:       "01/31/2019"
- NYPD OCCUR_TIME:       "23:05:00"

Usage:
    from eda_shared.time_utils import parse_date_header, parse_date_expr

    dt = parse_date_header("1/22/20")            # date(2020, 1, 22)
    df = df.with_columns(parse_date_expr("occur_date", "%m/%d/%Y"))
"""

from __future__ import annotations

from datetime import date, datetime

import polars as pl

from eda_shared.constants import JHU_DATE_FORMAT


def parse_date_header(raw: str, fmt: str = JHU_DATE_FORMAT) -> date | None:
    """
    Parse a column header such as "1/22/20" into a date.

    Returns None for anything that does not match fmt, so callers can
    tell date columns apart from identifying columns.
    """
    try:
        return datetime.strptime(raw.strip(), fmt).date()
    except (ValueError, AttributeError):
        return None


def parse_date_expr(col: str, fmt: str) -> pl.Expr:
    """Return a polars expression parsing a String column to Date (bad values → null)."""
    return pl.col(col).str.strip_chars().str.to_date(fmt, strict=False).alias(col)


def parse_time_expr(col: str, fmt: str) -> pl.Expr:
    """Return a polars expression parsing a String column to Time (bad values → null)."""
    return pl.col(col).str.strip_chars().str.to_time(fmt, strict=False).alias(col)
