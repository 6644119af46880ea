"""
tests/test_transforms/test_normalize.py — Tests for the shared column helpers.
"""

from __future__ import annotations

import polars as pl

from eda_pipeline.transforms.normalize import (
    blank_to_null,
    cast_numeric_cols,
    clean_string_columns,
    null_safe_join,
)


class TestCleanStringColumns:
    def test_strips_whitespace(self):
        df = pl.DataFrame({"a": ["  x ", "y"], "b": [1, 2]})
        result = clean_string_columns(df)
        assert result["a"].to_list() == ["x", "y"]
        assert result["b"].to_list() == [1, 2]


class TestBlankToNull:
    def test_empty_string_becomes_null(self):
        df = pl.DataFrame({"a": ["", "x", None]})
        assert blank_to_null(df, ["a"])["a"].to_list() == [None, "x", None]

    def test_missing_column_ignored(self):
        df = pl.DataFrame({"a": [""]})
        assert blank_to_null(df, ["a", "b"]).columns == ["a"]


class TestCastNumericCols:
    def test_bad_values_become_null(self):
        df = pl.DataFrame({"population": ["100", "n/a", ""]})
        result = cast_numeric_cols(df, ["population"], pl.Int64)
        assert result["population"].to_list() == [100, None, None]

    def test_default_float(self):
        df = pl.DataFrame({"rate": ["1.5"]})
        assert cast_numeric_cols(df, ["rate"])["rate"].dtype == pl.Float64


class TestNullSafeJoin:
    def test_null_keys_match(self):
        left = pl.DataFrame({"k": [None, "a"], "x": [1, 2]}, schema_overrides={"k": pl.String})
        right = pl.DataFrame({"k": [None, "a"], "y": [10, 20]}, schema_overrides={"k": pl.String})
        result = null_safe_join(left, right, on=["k"])
        assert result["y"].to_list() == [10, 20]
        assert result["k"].to_list() == [None, "a"]

    def test_left_join_preserves_left_order(self):
        left = pl.DataFrame({"k": ["c", "a", "b"], "x": [1, 2, 3]})
        right = pl.DataFrame({"k": ["a", "b", "c"], "y": [10, 20, 30]})
        result = null_safe_join(left, right, on=["k"])
        assert result["k"].to_list() == ["c", "a", "b"]
        assert result["y"].to_list() == [30, 10, 20]
        assert "__row_index" not in result.columns

    def test_full_join_keeps_both_sides(self):
        left = pl.DataFrame({"k": ["a", None], "x": [1, 2]}, schema_overrides={"k": pl.String})
        right = pl.DataFrame({"k": [None, "b"], "y": [10, 20]}, schema_overrides={"k": pl.String})
        result = null_safe_join(left, right, on=["k"], how="full").sort("k", nulls_last=True)
        assert result["k"].to_list() == ["a", "b", None]
        assert result["x"].to_list() == [1, None, 2]
        assert result["y"].to_list() == [None, 20, 10]

    def test_all_null_key_column(self):
        left = pl.DataFrame({"k": [None, None], "r": ["a", "b"], "x": [1, 2]})
        right = pl.DataFrame({"k": [None], "r": ["b"], "y": [5]})
        result = null_safe_join(left, right, on=["k", "r"])
        assert result["y"].to_list() == [None, 5]
        assert result["k"].null_count() == 2

    def test_control_character_key_not_matched_to_null(self):
        left = pl.DataFrame({"k": [None, "\x00"], "x": [1, 2]}, schema_overrides={"k": pl.String})
        right = pl.DataFrame({"k": ["\x00"], "y": [10]})
        result = null_safe_join(left, right, on=["k"])
        assert result["k"].to_list() == [None, "\x00"]
        assert result["y"].to_list() == [None, 10]
