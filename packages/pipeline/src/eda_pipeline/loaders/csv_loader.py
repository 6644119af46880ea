"""
loaders/csv_loader.py — Writes report tables to CSV files.

Each table is written to a temporary file in the target directory and then
renamed into place, so an interrupted run never leaves a half-written CSV.
Existing files of the same name are replaced.

Usage:
    from eda_pipeline.loaders.csv_loader import CsvLoader

    loader = CsvLoader("./output/covid_global")
    results = loader.write_all({"region_totals": totals, "top_by_cases": top})
    print(results["region_totals"].records_loaded)
"""

from __future__ import annotations

import time
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

import polars as pl
import structlog

log = structlog.get_logger(__name__)


@dataclass
class LoadResult:
    """Summary of one table write."""

    table: str
    path: str | None = None
    records_loaded: int = 0
    duration_ms: int = 0


class CsvLoader:
    """Writes polars DataFrames as CSV files under one output directory."""

    def __init__(self, output_dir: str | Path) -> None:
        self.output_dir = Path(output_dir)

    def path_for(self, table: str) -> Path:
        return self.output_dir / f"{table}.csv"

    def write(self, table: str, df: pl.DataFrame) -> LoadResult:
        """
        Atomically write one table.

        Raises:
            OSError: the directory or file could not be written.
        """
        t0 = time.monotonic()
        path = self.path_for(table)
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_suffix(path.suffix + ".tmp")
        try:
            df.write_csv(tmp_path)
            tmp_path.replace(path)
        except OSError:
            tmp_path.unlink(missing_ok=True)
            log.error("csv_write_failed", table=table, path=str(path))
            raise

        result = LoadResult(
            table=table,
            path=str(path),
            records_loaded=df.height,
            duration_ms=int((time.monotonic() - t0) * 1000),
        )
        log.info("csv_written", table=table, path=str(path), rows=df.height)
        return result

    def write_all(self, tables: Mapping[str, pl.DataFrame]) -> dict[str, LoadResult]:
        return {name: self.write(name, df) for name, df in tables.items()}
