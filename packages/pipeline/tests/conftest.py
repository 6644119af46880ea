"""
tests/conftest.py — Shared pytest fixtures for the pipeline test suite.

Provides:
  fixture_path()   — resolves paths to tests/fixtures/
  *_raw_df         — fixture CSVs loaded exactly as the sources download them
  *_long_df        — JHU fixtures already pivoted by the sources
  incidents_df     — NYPD fixture after NYPDShootingSource.transform()
  mock_http        — configured respx router for faking HTTP responses
  mock_jhu_*       — mock_http serving the JHU fixtures for one scope
"""

from __future__ import annotations

from pathlib import Path

import httpx
import polars as pl
import pytest
import respx

from eda_pipeline.sources.jhu import JHUTimeSeriesSource, PopulationLookupSource
from eda_pipeline.sources.nypd import NYPDShootingSource

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def read_fixture(name: str) -> pl.DataFrame:
    """Load a fixture CSV with every column as String, like BaseSource._download_csv."""
    return pl.read_csv(FIXTURES_DIR / name, infer_schema_length=0)


# ---------------------------------------------------------------------------
# Path helpers
# ---------------------------------------------------------------------------

@pytest.fixture
def fixture_path() -> Path:
    return FIXTURES_DIR


# ---------------------------------------------------------------------------
# Raw downloads
# ---------------------------------------------------------------------------

@pytest.fixture
def confirmed_global_raw_df() -> pl.DataFrame:
    return read_fixture("jhu_confirmed_global_sample.csv")


@pytest.fixture
def deaths_global_raw_df() -> pl.DataFrame:
    return read_fixture("jhu_deaths_global_sample.csv")


@pytest.fixture
def confirmed_us_raw_df() -> pl.DataFrame:
    return read_fixture("jhu_confirmed_us_sample.csv")


@pytest.fixture
def deaths_us_raw_df() -> pl.DataFrame:
    return read_fixture("jhu_deaths_us_sample.csv")


@pytest.fixture
def lookup_raw_df() -> pl.DataFrame:
    return read_fixture("jhu_lookup_sample.csv")


@pytest.fixture
def nypd_raw_df() -> pl.DataFrame:
    return read_fixture("nypd_shooting_sample.csv")


# ---------------------------------------------------------------------------
# Source outputs
# ---------------------------------------------------------------------------

@pytest.fixture
def cases_long_df(confirmed_global_raw_df: pl.DataFrame) -> pl.DataFrame:
    """(sub_region, region, date, cases) for 5 entities x 3 dates."""
    return JHUTimeSeriesSource("confirmed").transform(confirmed_global_raw_df)


@pytest.fixture
def deaths_long_df(deaths_global_raw_df: pl.DataFrame) -> pl.DataFrame:
    """(sub_region, region, date, deaths); Atlantis has no deaths series."""
    return JHUTimeSeriesSource("deaths").transform(deaths_global_raw_df)


@pytest.fixture
def population_df(lookup_raw_df: pl.DataFrame) -> pl.DataFrame:
    """Global-scope population reference; Atlantis is deliberately absent."""
    return PopulationLookupSource(scope="global").transform(lookup_raw_df)


@pytest.fixture
def incidents_df(nypd_raw_df: pl.DataFrame) -> pl.DataFrame:
    """Typed incidents, sentinels not yet cleaned."""
    return NYPDShootingSource().transform(nypd_raw_df)


# ---------------------------------------------------------------------------
# respx HTTP mock router
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_http():
    """
    Activate the respx mock router for all httpx requests.

    Usage in tests:
        def test_something(mock_http):
            mock_http.get(url__regex=r".*confirmed_global\\.csv").mock(
                return_value=httpx.Response(200, text="...")
            )
    """
    with respx.mock(assert_all_called=False) as router:
        yield router


@pytest.fixture
def mock_jhu_global(mock_http, fixture_path: Path):
    """Serve the global JHU fixtures for every JHU URL the COVID pipeline requests."""
    files = {
        r".*time_series_covid19_confirmed_global\.csv$": "jhu_confirmed_global_sample.csv",
        r".*time_series_covid19_deaths_global\.csv$": "jhu_deaths_global_sample.csv",
        r".*UID_ISO_FIPS_LookUp_Table\.csv$": "jhu_lookup_sample.csv",
    }
    for pattern, name in files.items():
        mock_http.get(url__regex=pattern).mock(
            return_value=httpx.Response(200, content=(fixture_path / name).read_bytes())
        )
    return mock_http


@pytest.fixture
def mock_jhu_us(mock_http, fixture_path: Path):
    """Serve the US county fixtures and the lookup for a scope="us" run."""
    files = {
        r".*time_series_covid19_confirmed_US\.csv$": "jhu_confirmed_us_sample.csv",
        r".*time_series_covid19_deaths_US\.csv$": "jhu_deaths_us_sample.csv",
        r".*UID_ISO_FIPS_LookUp_Table\.csv$": "jhu_lookup_sample.csv",
    }
    for pattern, name in files.items():
        mock_http.get(url__regex=pattern).mock(
            return_value=httpx.Response(200, content=(fixture_path / name).read_bytes())
        )
    return mock_http


@pytest.fixture
def mock_nypd(mock_http, fixture_path: Path):
    """Serve the NYPD fixture for the shooting export URL."""
    mock_http.get(url__regex=r".*data\.cityofnewyork\.us.*").mock(
        return_value=httpx.Response(
            200, content=(fixture_path / "nypd_shooting_sample.csv").read_bytes()
        )
    )
    return mock_http
