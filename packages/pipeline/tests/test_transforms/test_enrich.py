"""
tests/test_transforms/test_enrich.py — Tests for add_combined_key() and join_population().
"""

from __future__ import annotations

from datetime import date

import polars as pl

from eda_pipeline.transforms.enrich import add_combined_key, join_population


def _observations() -> pl.DataFrame:
    return pl.DataFrame({
        "sub_region": ["Ontario", None, None, ""],
        "region": ["Canada", "Germany", "Atlantis", "Chad"],
        "date": [date(2020, 1, 22)] * 4,
        "cases": [2, 10, 1, 3],
    })


def _lookup() -> pl.DataFrame:
    return pl.DataFrame({
        "sub_region": ["Ontario", None, None],
        "region": ["Canada", "Germany", "Canada"],
        "population": [14826276, 83155031, 37855702],
    })


class TestAddCombinedKey:
    def test_sub_region_and_region(self):
        df = add_combined_key(_observations())
        assert df["combined_key"][0] == "Ontario, Canada"

    def test_null_part_omitted(self):
        df = add_combined_key(_observations())
        assert df["combined_key"][1] == "Germany"

    def test_blank_part_omitted(self):
        df = add_combined_key(_observations())
        assert df["combined_key"][3] == "Chad"

    def test_custom_parts_and_name(self):
        df = pl.DataFrame({"county": ["Autauga"], "state": ["Alabama"], "country": ["US"]})
        df = add_combined_key(df, ["county", "state", "country"], out_col="key")
        assert df["key"][0] == "Autauga, Alabama, US"


class TestJoinPopulation:
    def test_every_row_kept_in_order(self):
        obs = _observations()
        df = join_population(obs, _lookup())
        assert len(df) == len(obs)
        assert df["region"].to_list() == obs["region"].to_list()

    def test_matches_on_both_keys(self):
        df = join_population(_observations(), _lookup())
        assert df["population"][0] == 14826276

    def test_null_sub_region_matches_null(self):
        df = join_population(_observations(), _lookup())
        assert df["population"][1] == 83155031
        assert df["sub_region"][1] is None

    def test_unmatched_gets_null_population(self):
        df = join_population(_observations(), _lookup())
        assert df["population"][2] is None
        # counts never nulled by a missing reference
        assert df["cases"][2] == 1

    def test_province_row_does_not_match_country_row(self):
        # (Ontario, Canada) must not pick up Canada's national population
        df = join_population(_observations(), _lookup())
        assert df.filter(pl.col("sub_region") == "Ontario")["population"][0] != 37855702

    def test_duplicate_reference_keys_do_not_multiply_rows(self):
        lookup = pl.concat([
            _lookup(),
            pl.DataFrame({
                "sub_region": [None],
                "region": ["Germany"],
                "population": [1],
            }, schema_overrides={"sub_region": pl.String}),
        ])
        df = join_population(_observations(), lookup)
        assert len(df) == 4
        # first reference row wins
        assert df.filter(pl.col("region") == "Germany")["population"][0] == 83155031

    def test_existing_population_replaced(self):
        obs = _observations().with_columns(pl.lit(0).alias("population"))
        df = join_population(obs, _lookup())
        assert df.columns.count("population") == 1
        assert df["population"][0] == 14826276

    def test_extra_lookup_columns_not_carried(self):
        lookup = _lookup().with_columns(pl.lit("x").alias("iso2"))
        df = join_population(_observations(), lookup)
        assert "iso2" not in df.columns
        assert "__matched" not in df.columns

    def test_fixture_join(self, cases_long_df: pl.DataFrame, population_df: pl.DataFrame):
        df = join_population(cases_long_df, population_df)
        assert len(df) == len(cases_long_df)
        quebec = df.filter(pl.col("sub_region") == "Quebec")
        assert quebec["population"].unique().to_list() == [8604495]
        assert df.filter(pl.col("region") == "Atlantis")["population"].null_count() == 3
