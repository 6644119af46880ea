"""
eda_shared — shared configuration, constants, and models for the eda reports.

Usage:
    from eda_shared.config import settings
    from eda_shared.constants import SHOOTING_INVALID_VALUES, SHOOTING_VOCABULARY
    from eda_shared.models import LinearFit, RegionTotal, YearlySummary
    from eda_shared.time_utils import parse_date_header
"""

__version__ = "0.1.0"
