"""Immutable calculation result and chart data structures."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class CalculationResult:
    """Deterministic output of the formula engine.

    ``current_cost`` and ``cost_with_ai`` stay unrounded; display-time
    formatting rounds them.
    """

    total_hours_saved: int
    annual_savings: int
    three_year_roi: int
    current_cost: float
    cost_with_ai: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalHoursSaved": self.total_hours_saved,
            "annualSavings": self.annual_savings,
            "threeYearRoi": self.three_year_roi,
            "currentCost": self.current_cost,
            "costWithAi": self.cost_with_ai,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CalculationResult:
        return cls(
            total_hours_saved=int(data["totalHoursSaved"]),
            annual_savings=int(data["annualSavings"]),
            three_year_roi=int(data["threeYearRoi"]),
            current_cost=float(data["currentCost"]),
            cost_with_ai=float(data["costWithAi"]),
        )


@dataclass(frozen=True)
class ChartDataPoint:
    """One bar of the cost-comparison chart."""

    name: str
    montant: float
    fill: str

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "montant": self.montant, "fill": self.fill}
