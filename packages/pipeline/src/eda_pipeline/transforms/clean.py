"""
transforms/clean.py — Categorical sanitization driven by a versioned rule table.

Upstream exports encode "unknown" with literals such as "UNKNOWN", "(null)"
or implausible codes ("1020" as an age group). The rule table in
eda_shared.constants lists them per column; the cleaner maps each one to
null and leaves every other value untouched, so running it twice is the
same as running it once.

Usage:
    from eda_pipeline.transforms.clean import CategoricalCleaner, as_categorical

    cleaner = CategoricalCleaner()                    # default rule table
    df = cleaner.clean(df)
    cleaner.validate(df, SHOOTING_VOCABULARY)         # raises on unknown values
    df = as_categorical(df, cleaner.rules.columns)
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

import polars as pl
import structlog

from eda_shared.constants import INVALID_VALUES_VERSION, SHOOTING_INVALID_VALUES

log = structlog.get_logger(__name__)


class UnknownCategoryError(ValueError):
    """A categorical column holds values outside its known vocabulary."""

    def __init__(self, unknown: Mapping[str, list[str]], rules_version: str) -> None:
        self.unknown = dict(unknown)
        self.rules_version = rules_version
        details = "; ".join(f"{col}: {vals}" for col, vals in self.unknown.items())
        super().__init__(
            f"unknown categorical values (rules version {rules_version}): {details}"
        )


@dataclass(frozen=True)
class CleaningRules:
    """Column → set of literals that mean "missing"."""

    invalid_values: Mapping[str, frozenset[str]] = field(
        default_factory=lambda: dict(SHOOTING_INVALID_VALUES)
    )
    version: str = INVALID_VALUES_VERSION

    @property
    def columns(self) -> list[str]:
        return list(self.invalid_values)

    def extended(self, column: str, values: Iterable[str], version: str) -> "CleaningRules":
        """Return a copy with extra invalid literals for one column."""
        merged = dict(self.invalid_values)
        merged[column] = frozenset(merged.get(column, frozenset())) | frozenset(values)
        return CleaningRules(invalid_values=merged, version=version)


class CategoricalCleaner:
    """Applies a CleaningRules table to polars DataFrames."""

    def __init__(self, rules: CleaningRules | None = None) -> None:
        self.rules = rules or CleaningRules()
        self._log = log.bind(rules_version=self.rules.version)

    def clean(self, df: pl.DataFrame) -> pl.DataFrame:
        """
        Replace every invalid literal with null.

        Matching ignores surrounding whitespace. Columns named in the rules
        but absent from df are skipped. Cleaned columns come back as String.
        """
        present = [c for c in self.rules.columns if c in df.columns]
        skipped = [c for c in self.rules.columns if c not in df.columns]
        if skipped:
            self._log.debug("clean_columns_absent", columns=skipped)
        if not present:
            return df

        matches = {
            c: pl.col(c).cast(pl.String).str.strip_chars().is_in(sorted(self.rules.invalid_values[c]))
            for c in present
        }

        counts = df.select([m.fill_null(False).sum().alias(c) for c, m in matches.items()]).row(
            0, named=True
        )
        replaced = {c: n for c, n in counts.items() if n}
        if replaced:
            self._log.info("invalid_values_replaced", counts=replaced)

        return df.with_columns(
            [
                pl.when(m).then(None).otherwise(pl.col(c).cast(pl.String)).alias(c)
                for c, m in matches.items()
            ]
        )

    def unknown_values(
        self,
        df: pl.DataFrame,
        vocabulary: Mapping[str, frozenset[str]],
    ) -> dict[str, list[str]]:
        """Return, per column, the non-null values that are not in vocabulary."""
        unknown: dict[str, list[str]] = {}
        for col, allowed in vocabulary.items():
            if col not in df.columns:
                continue
            observed = df[col].cast(pl.String).drop_nulls().unique().to_list()
            extra = sorted(v for v in observed if v not in allowed)
            if extra:
                unknown[col] = extra
        return unknown

    def validate(
        self,
        df: pl.DataFrame,
        vocabulary: Mapping[str, frozenset[str]],
        *,
        strict: bool = True,
    ) -> dict[str, list[str]]:
        """
        Check cleaned columns against their known vocabulary.

        Unknown values mean the rule table is out of date for this snapshot.
        In strict mode that aborts the run; otherwise it is logged and the
        unknown values are returned.

        Raises:
            UnknownCategoryError: strict is True and unknown values exist.
        """
        unknown = self.unknown_values(df, vocabulary)
        if unknown:
            if strict:
                self._log.error("unknown_categorical_values", unknown=unknown)
                raise UnknownCategoryError(unknown, self.rules.version)
            self._log.warning("unknown_categorical_values", unknown=unknown)
        return unknown


def as_categorical(df: pl.DataFrame, columns: Iterable[str]) -> pl.DataFrame:
    """Cast the given columns to pl.Categorical; null stays a distinct value."""
    return df.with_columns(
        [pl.col(c).cast(pl.String).cast(pl.Categorical) for c in columns if c in df.columns]
    )
