"""
eda_shared.models — Pydantic models for report rows and fitted models.

These models are used by:
- packages/pipeline transforms: LinearFit is the result of an OLS fit
- packages/pipeline cli: rows of summary tables rendered for the console

Row models provide:
  .from_row(row: dict) -> Model
"""

from eda_shared.models.covid import RegionTotal
from eda_shared.models.incidents import YearlySummary
from eda_shared.models.regression import LinearFit

__all__ = [
    "LinearFit",
    "RegionTotal",
    "YearlySummary",
]
