"""
models/covid.py — Pydantic model for one row of the per-region totals table.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel


class RegionTotal(BaseModel):
    """
    Matches one row of region_totals().

    cases and deaths are the maxima of the cumulative daily series; the
    per-thousand rates are None where population is unknown or zero.
    """

    region: str
    cases: int
    deaths: int | None = None
    population: int | None = None
    cases_per_thou: float | None = None
    deaths_per_thou: float | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "RegionTotal":
        return cls(**{k: v for k, v in row.items() if k in cls.model_fields})
