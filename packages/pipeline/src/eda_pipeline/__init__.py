"""
eda_pipeline — data pipelines behind the COVID-19 and NYPD shooting reports.

Architecture:
  sources/     — one module per upstream dataset (JHU CSSE, NYPD open data)
  transforms/  — reshape, categorical cleaning, population join, aggregation, OLS
  loaders/     — atomic CSV writer for result tables
  pipelines/   — orchestrators that wire sources -> transforms -> loaders
  utils/       — structlog configuration, exponential-backoff retry decorator

Quick start:
    from eda_pipeline.pipelines.covid import run as run_covid
    import asyncio
    report = asyncio.run(run_covid(scope="global", dry_run=True))

CLI:
    eda run covid --scope us --top-n 10
    eda run shooting --output-dir ./output
    eda run all --dry-run

Shared code from eda_shared:
    from eda_shared.config import settings
    from eda_shared.constants import SHOOTING_INVALID_VALUES, SHOOTING_VOCABULARY
    from eda_shared.models import LinearFit, RegionTotal, YearlySummary
"""

__version__ = "0.1.0"
