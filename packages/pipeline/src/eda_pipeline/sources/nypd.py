"""
sources/nypd.py — NYPD Shooting Incident Data (Historic).

NYC Open Data export (settings.nypd_shooting_url), one row per incident:
  INCIDENT_KEY, OCCUR_DATE (MM/DD/YYYY), OCCUR_TIME (HH:MM:SS), BORO,
  LOC_OF_OCCUR_DESC, PRECINCT, JURISDICTION_CODE, LOC_CLASSFCTN_DESC,
  LOCATION_DESC, STATISTICAL_MURDER_FLAG (true/false), PERP_AGE_GROUP,
  PERP_SEX, PERP_RACE, VIC_AGE_GROUP, VIC_SEX, VIC_RACE, X_COORD_CD,
  Y_COORD_CD, Latitude, Longitude, Lon_Lat

Only date, time, borough, murder flag and the perpetrator/victim
demographics are kept. Categorical values are passed through as-is;
sentinel cleanup happens in transforms.clean.

Usage:
    incidents = await NYPDShootingSource().run()
    # columns: occur_date, occur_time, boro, is_murder, perp_*, vic_*
"""

from __future__ import annotations

from typing import Any

import polars as pl

from eda_shared.config import settings
from eda_shared.constants import (
    NYPD_COLUMNS,
    NYPD_DATE_FORMAT,
    NYPD_TIME_FORMAT,
    NYPD_TRUE_VALUES,
)
from eda_shared.time_utils import parse_date_expr, parse_time_expr
from eda_pipeline.sources.base import BaseSource
from eda_pipeline.transforms.normalize import clean_string_columns


def parse_flag_expr(col: str) -> pl.Expr:
    """Parse a murder flag: true/Y/1 → True, other text → False, null stays null."""
    c = pl.col(col).cast(pl.String).str.strip_chars().str.to_lowercase()
    return (
        pl.when(c.is_null())
        .then(None)
        .otherwise(c.is_in(sorted(NYPD_TRUE_VALUES)))
        .alias(col)
    )


class NYPDShootingSource(BaseSource):
    """Downloads the historic NYPD shooting incident export."""

    name = "NYPD-shootings"

    @property
    def url(self) -> str:
        return settings.nypd_shooting_url

    async def extract(self, **kwargs: Any) -> pl.DataFrame:
        return await self._download_csv(self.url)

    def transform(self, raw: pl.DataFrame) -> pl.DataFrame:
        self._require_columns(raw, NYPD_COLUMNS)
        df = raw.select([pl.col(src).alias(dst) for src, dst in NYPD_COLUMNS.items()])
        df = clean_string_columns(df.with_columns(pl.all().cast(pl.String)))
        return df.with_columns(
            parse_date_expr("occur_date", NYPD_DATE_FORMAT),
            parse_time_expr("occur_time", NYPD_TIME_FORMAT),
            parse_flag_expr("is_murder"),
        )

    async def get_metadata(self) -> dict[str, Any]:
        return {
            "source_name": self.name,
            "url": self.url,
            "description": "NYPD Shooting Incident Data (Historic)",
        }
