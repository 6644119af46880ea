"""
models/incidents.py — Pydantic model for one row of the yearly incident summary.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class YearlySummary(BaseModel):
    """Matches one row of yearly_summary()."""

    year: int
    incidents: int = Field(ge=0)
    murders: int = Field(ge=0)

    @property
    def murder_share(self) -> float | None:
        if self.incidents == 0:
            return None
        return self.murders / self.incidents

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "YearlySummary":
        return cls(**{k: v for k, v in row.items() if k in cls.model_fields})
