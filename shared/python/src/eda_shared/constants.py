"""
constants.py — shared constants used across the eda pipelines.

Column mappings for the JHU CSSE and NYPD exports, the versioned table of
known-invalid categorical values, and the vocabularies those columns are
expected to hold after cleaning.
"""

from __future__ import annotations

from typing import Final, Literal

CovidScope = Literal["global", "us"]
CovidMetric = Literal["confirmed", "deaths", "recovered"]

# ---------------------------------------------------------------------------
# JHU CSSE time series: scope -> identifying columns in the wide files
# ---------------------------------------------------------------------------
JHU_FILE_SCOPE: Final[dict[str, str]] = {
    "global": "global",
    "us": "US",
}

# Raw column -> pipeline column. Everything not listed here and not dropped
# is treated as a date column by the reshaper.
JHU_ID_COLUMNS: Final[dict[str, dict[str, str]]] = {
    "global": {
        "Province/State": "sub_region",
        "Country/Region": "region",
    },
    "us": {
        "Admin2": "sub_region",
        "Province_State": "region",
    },
}

JHU_DROP_COLUMNS: Final[dict[str, tuple[str, ...]]] = {
    "global": ("Lat", "Long"),
    "us": (
        "UID", "iso2", "iso3", "code3", "FIPS", "Country_Region",
        "Lat", "Long_", "Combined_Key", "Population",
    ),
}

# Header format of the date columns, e.g. "1/22/20"
JHU_DATE_FORMAT: Final[str] = "%m/%d/%y"

# Population lookup (UID_ISO_FIPS_LookUp_Table.csv) key columns per scope
JHU_LOOKUP_COLUMNS: Final[dict[str, dict[str, str]]] = {
    "global": {
        "Province_State": "sub_region",
        "Country_Region": "region",
        "Population": "population",
    },
    "us": {
        "Admin2": "sub_region",
        "Province_State": "region",
        "Population": "population",
    },
}

JHU_METRIC_COLUMNS: Final[dict[str, str]] = {
    "confirmed": "cases",
    "deaths": "deaths",
    "recovered": "recovered",
}

# Upstream publishes recovered counts for the global scope only
JHU_METRIC_SCOPES: Final[dict[str, frozenset[str]]] = {
    "confirmed": frozenset({"global", "us"}),
    "deaths": frozenset({"global", "us"}),
    "recovered": frozenset({"global"}),
}

# ---------------------------------------------------------------------------
# NYPD Shooting Incident Data (Historic)
# ---------------------------------------------------------------------------
NYPD_COLUMNS: Final[dict[str, str]] = {
    "OCCUR_DATE": "occur_date",
    "OCCUR_TIME": "occur_time",
    "BORO": "boro",
    "STATISTICAL_MURDER_FLAG": "is_murder",
    "PERP_AGE_GROUP": "perp_age_group",
    "PERP_SEX": "perp_sex",
    "PERP_RACE": "perp_race",
    "VIC_AGE_GROUP": "vic_age_group",
    "VIC_SEX": "vic_sex",
    "VIC_RACE": "vic_race",
}

NYPD_DATE_FORMAT: Final[str] = "%m/%d/%Y"
NYPD_TIME_FORMAT: Final[str] = "%H:%M:%S"

NYPD_TRUE_VALUES: Final[frozenset[str]] = frozenset({"true", "y", "yes", "1"})

# ---------------------------------------------------------------------------
# Categorical cleaning rules
#
# Literals observed in the upstream export that stand for "unknown" or are
# data-entry errors. Bump INVALID_VALUES_VERSION whenever the table changes.
# ---------------------------------------------------------------------------
INVALID_VALUES_VERSION: Final[str] = "2024.1"

_NULL_MARKERS: Final[frozenset[str]] = frozenset({"", "(null)", "UNKNOWN"})

SHOOTING_INVALID_VALUES: Final[dict[str, frozenset[str]]] = {
    "perp_age_group": _NULL_MARKERS | {"1020", "1028", "224", "940", "2021"},
    "perp_sex": _NULL_MARKERS | {"U"},
    "perp_race": _NULL_MARKERS,
    "vic_age_group": _NULL_MARKERS | {"1022"},
    "vic_sex": _NULL_MARKERS | {"U"},
    "vic_race": _NULL_MARKERS,
    "boro": _NULL_MARKERS,
}

AGE_GROUPS: Final[frozenset[str]] = frozenset({"<18", "18-24", "25-44", "45-64", "65+"})
SEXES: Final[frozenset[str]] = frozenset({"M", "F"})
RACES: Final[frozenset[str]] = frozenset(
    {
        "AMERICAN INDIAN/ALASKAN NATIVE",
        "ASIAN / PACIFIC ISLANDER",
        "BLACK",
        "BLACK HISPANIC",
        "WHITE",
        "WHITE HISPANIC",
    }
)
BOROUGHS: Final[frozenset[str]] = frozenset(
    {"BRONX", "BROOKLYN", "MANHATTAN", "QUEENS", "STATEN ISLAND"}
)

SHOOTING_VOCABULARY: Final[dict[str, frozenset[str]]] = {
    "boro": BOROUGHS,
    "perp_age_group": AGE_GROUPS,
    "perp_sex": SEXES,
    "perp_race": RACES,
    "vic_age_group": AGE_GROUPS,
    "vic_sex": SEXES,
    "vic_race": RACES,
}

# ---------------------------------------------------------------------------
# Rate scales
# ---------------------------------------------------------------------------
PER_THOUSAND: Final[int] = 1_000
PER_MILLION: Final[int] = 1_000_000
