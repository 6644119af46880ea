"""
eda_pipeline.sources — data source adapters.

Each source wraps one upstream dataset:
  JHUTimeSeriesSource     — JHU CSSE cumulative confirmed/deaths/recovered time series
  PopulationLookupSource  — JHU CSSE UID/ISO/FIPS lookup (population reference)
  NYPDShootingSource      — NYPD Shooting Incident Data (Historic)
"""

from eda_pipeline.sources.base import BaseSource, SchemaError
from eda_pipeline.sources.jhu import JHUTimeSeriesSource, PopulationLookupSource
from eda_pipeline.sources.nypd import NYPDShootingSource

__all__ = [
    "BaseSource",
    "SchemaError",
    "JHUTimeSeriesSource",
    "PopulationLookupSource",
    "NYPDShootingSource",
]
