"""
models/regression.py — Result of an ordinary-least-squares line fit.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class LinearFit(BaseModel):
    """
    Fitted line y ≈ intercept + slope * x.

    r_squared is None when y has no variance (the ratio is undefined).
    """

    model_config = ConfigDict(frozen=True)

    x: str
    y: str
    intercept: float
    slope: float
    r_squared: float | None = None
    n_obs: int = Field(ge=0)

    def predict(self, x: float) -> float:
        return self.intercept + self.slope * x

    def describe(self) -> str:
        r2 = "n/a" if self.r_squared is None else f"{self.r_squared:.4f}"
        return (
            f"{self.y} = {self.intercept:.6g} + {self.slope:.6g} * {self.x} "
            f"(n={self.n_obs}, R²={r2})"
        )
