"""
tests/test_cli.py — Tests for the eda click CLI.

Pipelines run against respx-served fixtures; no network access required.
"""

from __future__ import annotations

from pathlib import Path

import httpx
from click.testing import CliRunner

from eda_pipeline.cli import main


class TestSourcesCommand:
    def test_lists_configured_urls(self):
        result = CliRunner().invoke(main, ["sources"])
        assert result.exit_code == 0
        assert "time_series_covid19_confirmed_global.csv" in result.output
        assert "time_series_covid19_deaths_US.csv" in result.output
        assert "time_series_covid19_recovered_global.csv" in result.output
        assert "UID_ISO_FIPS_LookUp_Table.csv" in result.output
        assert "NYPD Shooting Incident Data" in result.output


class TestRunCommand:
    def test_covid_dry_run(self, mock_jhu_global, tmp_path: Path):
        result = CliRunner().invoke(
            main,
            ["run", "covid", "--top-n", "2", "--output-dir", str(tmp_path), "--dry-run"],
        )
        assert result.exit_code == 0, result.output
        assert "COVID-19 (global)" in result.output
        assert "Canada" in result.output
        assert "fit: deaths_per_thou" in result.output
        assert list(tmp_path.iterdir()) == []

    def test_shooting_writes_output(self, mock_nypd, tmp_path: Path):
        result = CliRunner().invoke(main, ["run", "shooting", "--output-dir", str(tmp_path)])
        assert result.exit_code == 0, result.output
        assert "2021" in result.output
        assert (tmp_path / "shooting" / "yearly.csv").is_file()

    def test_failure_exits_with_code_1(self, mock_http, tmp_path: Path):
        mock_http.get(url__regex=r".*").mock(return_value=httpx.Response(503))
        result = CliRunner().invoke(main, ["run", "shooting", "--output-dir", str(tmp_path)])
        assert result.exit_code == 1

    def test_unknown_pipeline_rejected(self):
        result = CliRunner().invoke(main, ["run", "weather"])
        assert result.exit_code == 2

    def test_top_n_must_be_positive(self):
        result = CliRunner().invoke(main, ["run", "covid", "--top-n", "0"])
        assert result.exit_code == 2
