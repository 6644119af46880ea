"""
sources/base.py — Download-and-shape contract shared by the JHU and NYPD sources.

A source downloads one CSV (every column read as String) in extract() and
turns it into the pipeline schema in transform(). Keeping transform() free
of I/O lets tests feed it fixture frames directly.

Pipelines call run(), which chains the two steps and logs row counts and
durations for each.
"""

from __future__ import annotations

import io
import time
from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import Any

import httpx
import polars as pl
import structlog

from eda_shared.config import settings
from eda_pipeline.utils.retry import with_retry

log = structlog.get_logger(__name__)


class SchemaError(ValueError):
    """Raised when a downloaded file lacks columns the pipeline depends on."""

    def __init__(self, source: str, missing: Iterable[str]) -> None:
        self.source = source
        self.missing = sorted(missing)
        super().__init__(f"{source}: missing expected columns {self.missing}")


class BaseSource(ABC):
    """Base class for the CSV download sources."""

    # Appears in log events and SchemaError messages
    name: str = "unknown"

    def __init__(self, timeout: float | None = None) -> None:
        self._timeout = timeout if timeout is not None else settings.http_timeout
        self._log = log.bind(source_name=self.name)

    # ------------------------------------------------------------------
    # Per-source behaviour
    # ------------------------------------------------------------------

    @abstractmethod
    async def extract(self, **kwargs: Any) -> pl.DataFrame:
        """
        Download the upstream file.

        Returns:
            The file as a DataFrame, original headers, every column String.
        """
        ...

    @abstractmethod
    def transform(self, raw: pl.DataFrame) -> pl.DataFrame:
        """
        Select, rename, and type the raw DataFrame.

        Args:
            raw: Output of extract(), or an equivalent fixture frame.

        Returns:
            DataFrame in the pipeline's column schema.
        """
        ...

    @abstractmethod
    async def get_metadata(self) -> dict[str, Any]:
        """Return source-level metadata (source_name, url, description)."""
        ...

    # ------------------------------------------------------------------
    # Entry point for pipelines
    # ------------------------------------------------------------------

    async def run(self, **kwargs: Any) -> pl.DataFrame:
        """
        Download, then shape, logging rows and timing for each step.

        Raises:
            Whatever extract() or transform() raised; the failure is logged first.
        """
        run_log = self._log.bind(**{k: str(v) for k, v in kwargs.items()})
        run_log.info("source_run_start")

        t0 = time.monotonic()
        try:
            raw = await self.extract(**kwargs)
            run_log.info(
                "extract_complete",
                raw_rows=len(raw),
                raw_cols=raw.width,
                duration_ms=int((time.monotonic() - t0) * 1000),
            )

            t1 = time.monotonic()
            result = self.transform(raw)
            run_log.info(
                "transform_complete",
                result_rows=len(result),
                result_cols=result.width,
                duration_ms=int((time.monotonic() - t1) * 1000),
            )
            return result

        except Exception as exc:
            run_log.error(
                "source_run_failed",
                error=str(exc),
                duration_ms=int((time.monotonic() - t0) * 1000),
            )
            raise

    # ------------------------------------------------------------------
    # Download helpers
    # ------------------------------------------------------------------

    @with_retry(max_attempts=3, base_delay=1.0, retry_on=(httpx.TransportError,))
    async def _download(self, url: str) -> bytes:
        """Download raw bytes from a URL. Non-2xx responses raise immediately."""
        self._log.info("download_start", url=url)
        async with httpx.AsyncClient(timeout=self._timeout, follow_redirects=True) as client:
            response = await client.get(url)
            response.raise_for_status()
            return response.content

    async def _download_csv(self, url: str, *, encoding: str = "utf-8-sig") -> pl.DataFrame:
        """Download a CSV file and parse it with every column as String."""
        raw = await self._download(url)
        text = raw.decode(encoding, errors="replace")
        return pl.read_csv(io.StringIO(text), infer_schema_length=0)

    def _require_columns(self, df: pl.DataFrame, columns: Iterable[str]) -> None:
        missing = set(columns) - set(df.columns)
        if missing:
            raise SchemaError(self.name, missing)
