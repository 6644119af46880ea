"""
sources/jhu.py — JHU CSSE COVID-19 time series and population lookup.

Files (under settings.jhu_base_url):
  time_series_covid19_confirmed_global.csv  — Province/State, Country/Region, Lat, Long, <dates…>
  time_series_covid19_deaths_global.csv     — same layout
  time_series_covid19_recovered_global.csv  — same layout (global scope only)
  time_series_covid19_confirmed_US.csv      — UID … Admin2, Province_State, Country_Region, Lat,
                                              Long_, Combined_Key, <dates…>
  time_series_covid19_deaths_US.csv         — as above plus Population
Lookup (settings.jhu_lookup_url):
  UID_ISO_FIPS_LookUp_Table.csv             — UID … Admin2, Province_State, Country_Region,
                                              Combined_Key, Population

Scopes:
  global — region = country, sub_region = province/state
  us     — region = state,   sub_region = county (Admin2)

Usage:
    cases = await JHUTimeSeriesSource("confirmed", scope="global").run()
    # columns: sub_region, region, date, cases
    lookup = await PopulationLookupSource(scope="global").run()
    # columns: sub_region, region, population
"""

from __future__ import annotations

from typing import Any

import polars as pl

from eda_shared.config import settings
from eda_shared.constants import (
    JHU_DATE_FORMAT,
    JHU_DROP_COLUMNS,
    JHU_FILE_SCOPE,
    JHU_ID_COLUMNS,
    JHU_LOOKUP_COLUMNS,
    JHU_METRIC_COLUMNS,
    JHU_METRIC_SCOPES,
    CovidMetric,
    CovidScope,
)
from eda_pipeline.sources.base import BaseSource
from eda_pipeline.transforms.normalize import blank_to_null, cast_numeric_cols
from eda_pipeline.transforms.reshape import wide_to_long


def _check_scope(scope: str) -> None:
    if scope not in JHU_FILE_SCOPE:
        raise ValueError(f"unknown scope {scope!r}; expected one of {sorted(JHU_FILE_SCOPE)}")


class JHUTimeSeriesSource(BaseSource):
    """Downloads one cumulative JHU time series file and pivots it to long form."""

    name = "JHU-CSSE"

    def __init__(
        self,
        metric: CovidMetric,
        *,
        scope: CovidScope = "global",
        timeout: float | None = None,
    ) -> None:
        _check_scope(scope)
        if metric not in JHU_METRIC_COLUMNS:
            raise ValueError(f"unknown metric {metric!r}; expected one of {sorted(JHU_METRIC_COLUMNS)}")
        if scope not in JHU_METRIC_SCOPES[metric]:
            raise ValueError(f"metric {metric!r} is not published for scope {scope!r}")
        self.metric = metric
        self.scope = scope
        super().__init__(timeout)
        self._log = self._log.bind(metric=metric, scope=scope)

    @property
    def url(self) -> str:
        return (
            f"{settings.jhu_base_url}/"
            f"time_series_covid19_{self.metric}_{JHU_FILE_SCOPE[self.scope]}.csv"
        )

    @property
    def value_name(self) -> str:
        return JHU_METRIC_COLUMNS[self.metric]

    async def extract(self, **kwargs: Any) -> pl.DataFrame:
        return await self._download_csv(self.url)

    def transform(self, raw: pl.DataFrame) -> pl.DataFrame:
        """Pivot date columns to rows; lat/long and other metadata are dropped."""
        id_cols = JHU_ID_COLUMNS[self.scope]
        self._require_columns(raw, id_cols)
        long = wide_to_long(
            raw,
            id_cols=id_cols,
            value_name=self.value_name,
            drop_cols=JHU_DROP_COLUMNS[self.scope],
            date_format=JHU_DATE_FORMAT,
        )
        keys = list(id_cols.values())
        return blank_to_null(long.with_columns(pl.col(keys).str.strip_chars()), keys)

    async def get_metadata(self) -> dict[str, Any]:
        return {
            "source_name": self.name,
            "url": self.url,
            "description": f"JHU CSSE cumulative {self.metric} ({self.scope})",
        }


class PopulationLookupSource(BaseSource):
    """Downloads the JHU UID/ISO/FIPS lookup and shapes it into a population reference."""

    name = "JHU-CSSE-lookup"

    def __init__(self, *, scope: CovidScope = "global", timeout: float | None = None) -> None:
        _check_scope(scope)
        self.scope = scope
        super().__init__(timeout)
        self._log = self._log.bind(scope=scope)

    @property
    def url(self) -> str:
        return settings.jhu_lookup_url

    async def extract(self, **kwargs: Any) -> pl.DataFrame:
        return await self._download_csv(self.url)

    def transform(self, raw: pl.DataFrame) -> pl.DataFrame:
        """
        Keep the rows matching the scope's granularity.

        global: country- and province-level rows (no Admin2).
        us:     rows for the United States, counties and state-level rows.
        """
        columns = JHU_LOOKUP_COLUMNS[self.scope]
        self._require_columns(raw, ["Admin2", "Country_Region", *columns])

        if self.scope == "global":
            rows = raw.filter(pl.col("Admin2").is_null() | (pl.col("Admin2").str.strip_chars() == ""))
        else:
            rows = raw.filter(pl.col("Country_Region").str.strip_chars() == "US")

        keys = [v for v in columns.values() if v != "population"]
        lookup = rows.select([pl.col(src).alias(dst) for src, dst in columns.items()])
        lookup = blank_to_null(
            lookup.with_columns(pl.col(keys).str.strip_chars()),
            keys,
        )
        return cast_numeric_cols(lookup, ["population"], pl.Int64)

    async def get_metadata(self) -> dict[str, Any]:
        return {
            "source_name": self.name,
            "url": self.url,
            "description": f"JHU CSSE UID/ISO/FIPS population lookup ({self.scope})",
        }
