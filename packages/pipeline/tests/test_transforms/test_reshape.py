"""
tests/test_transforms/test_reshape.py — Tests for wide_to_long() and combine_metrics().
"""

from __future__ import annotations

from datetime import date

import polars as pl

from eda_pipeline.transforms.reshape import combine_metrics, wide_to_long

ID_COLS = {"Province/State": "sub_region", "Country/Region": "region"}


def _wide() -> pl.DataFrame:
    return pl.DataFrame({
        "Province/State": [None, "Ontario"],
        "Country/Region": ["Germany", "Canada"],
        "Lat": ["51.1", "51.2"],
        "Long": ["10.4", "-85.3"],
        "1/22/20": ["1", "2"],
        "1/23/20": ["3", ""],
    })


class TestWideToLong:
    def test_unpivots_date_columns(self):
        df = wide_to_long(_wide(), id_cols=ID_COLS, value_name="cases", drop_cols=("Lat", "Long"))
        assert df.columns == ["sub_region", "region", "date", "cases"]
        assert len(df) == 4

    def test_date_parsed(self):
        df = wide_to_long(_wide(), id_cols=ID_COLS, value_name="cases", drop_cols=("Lat", "Long"))
        assert set(df["date"].to_list()) == {date(2020, 1, 22), date(2020, 1, 23)}

    def test_blank_value_becomes_null(self):
        df = wide_to_long(_wide(), id_cols=ID_COLS, value_name="cases", drop_cols=("Lat", "Long"))
        ontario = df.filter(pl.col("sub_region") == "Ontario").sort("date")
        assert ontario["cases"].to_list() == [2, None]

    def test_non_date_columns_ignored(self):
        # Lat/Long not listed in drop_cols are not date headers and are skipped
        df = wide_to_long(_wide(), id_cols=ID_COLS, value_name="cases")
        assert df.columns == ["sub_region", "region", "date", "cases"]
        assert len(df) == 4

    def test_integer_input_cast_to_int64(self):
        wide = pl.DataFrame({
            "Province/State": [None],
            "Country/Region": ["Chad"],
            "1/22/20": [0],
            "1/23/20": [4],
        }, schema_overrides={"Province/State": pl.String})
        df = wide_to_long(wide, id_cols=ID_COLS, value_name="deaths")
        assert df["deaths"].dtype == pl.Int64
        assert df.sort("date")["deaths"].to_list() == [0, 4]

    def test_no_date_columns_returns_empty_schema(self):
        wide = pl.DataFrame({"Province/State": ["x"], "Country/Region": ["y"]})
        df = wide_to_long(wide, id_cols=ID_COLS, value_name="cases")
        assert df.is_empty()
        assert df.schema["date"] == pl.Date
        assert df.schema["cases"] == pl.Int64


class TestCombineMetrics:
    def test_pairs_on_keys_with_null_sub_region(
        self, cases_long_df: pl.DataFrame, deaths_long_df: pl.DataFrame
    ):
        df = combine_metrics(cases_long_df, deaths_long_df)
        germany = df.filter(pl.col("region") == "Germany").sort("date")
        assert germany["cases"].to_list() == [10, 8, 12]
        assert germany["deaths"].to_list() == [1, 1, 2]
        assert germany["sub_region"].null_count() == 3

    def test_outer_join_keeps_unpaired_rows(
        self, cases_long_df: pl.DataFrame, deaths_long_df: pl.DataFrame
    ):
        df = combine_metrics(cases_long_df, deaths_long_df)
        assert len(df) == 15
        atlantis = df.filter(pl.col("region") == "Atlantis")
        assert len(atlantis) == 3
        assert atlantis["deaths"].null_count() == 3

    def test_deaths_only_rows_kept(self):
        cases = pl.DataFrame({
            "sub_region": [None],
            "region": ["A"],
            "date": [date(2020, 1, 22)],
            "cases": [1],
        }, schema_overrides={"sub_region": pl.String})
        deaths = pl.DataFrame({
            "sub_region": [None, None],
            "region": ["A", "B"],
            "date": [date(2020, 1, 22), date(2020, 1, 22)],
            "deaths": [0, 5],
        }, schema_overrides={"sub_region": pl.String})
        df = combine_metrics(cases, deaths)
        assert df["region"].to_list() == ["A", "B"]
        assert df["cases"].to_list() == [1, None]
        assert df["deaths"].to_list() == [0, 5]

    def test_keys_coalesced(self, cases_long_df: pl.DataFrame, deaths_long_df: pl.DataFrame):
        df = combine_metrics(cases_long_df, deaths_long_df)
        assert df.columns == ["sub_region", "region", "date", "cases", "deaths"]
        assert df["region"].null_count() == 0
