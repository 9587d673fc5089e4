"""Core calculation engine.

Takes validated calculator inputs -> produces a CalculationResult and the
three-bar cost comparison consumed by the chart.
"""

from __future__ import annotations

import logging
import math

from backend.engine.result import CalculationResult, ChartDataPoint
from backend.models.inputs import CalculatorInputs

logger = logging.getLogger(__name__)

WEEKS_PER_YEAR = 47
EFFICIENCY_FACTOR = 0.75  # share of repetitive work automation absorbs

# Presentation constants for the chart bars
COLOR_CURRENT_COST = "#ef4444"
COLOR_BRAND_DARK = "#1a365d"
COLOR_BRAND_ACCENT = "#38a169"

LABEL_CURRENT_COST = "Coût Actuel"
LABEL_COST_WITH_AI = "Coût avec IA"
LABEL_SAVINGS = "Économies"


def round_half_up(value: float) -> int:
    """Round to the nearest integer, ties going up (1762.5 -> 1763).

    Compares the fractional part instead of adding 0.5, which would itself
    round for very large or just-below-half values.
    """
    floor = math.floor(value)
    return int(floor + 1 if value - floor >= 0.5 else floor)


class CalculationEngine:
    """Stateless engine that runs the savings calculation."""

    def calculate(self, inputs: CalculatorInputs) -> CalculationResult:
        """Compute the savings estimate.

        Only hours saved and annual savings are rounded, and in that order;
        the ROI and the residual cost derive from the rounded savings.
        """
        total_repetitive_hours = (
            inputs.employees * inputs.hours_repetitive * WEEKS_PER_YEAR
        )
        total_hours_saved = round_half_up(total_repetitive_hours * EFFICIENCY_FACTOR)
        annual_savings = round_half_up(total_hours_saved * inputs.hourly_wage)
        three_year_roi = annual_savings * 3

        current_cost = total_repetitive_hours * inputs.hourly_wage
        cost_with_ai = current_cost - annual_savings

        logger.debug(
            "Calculated %s h saved, %s EUR/year for %s employees",
            total_hours_saved,
            annual_savings,
            inputs.employees,
        )
        return CalculationResult(
            total_hours_saved=total_hours_saved,
            annual_savings=annual_savings,
            three_year_roi=three_year_roi,
            current_cost=current_cost,
            cost_with_ai=cost_with_ai,
        )


def build_chart_data(result: CalculationResult) -> tuple[ChartDataPoint, ...]:
    """Current cost, cost with automation, savings -- always in this order."""
    return (
        ChartDataPoint(
            name=LABEL_CURRENT_COST, montant=result.current_cost, fill=COLOR_CURRENT_COST
        ),
        ChartDataPoint(
            name=LABEL_COST_WITH_AI, montant=result.cost_with_ai, fill=COLOR_BRAND_DARK
        ),
        ChartDataPoint(
            name=LABEL_SAVINGS, montant=result.annual_savings, fill=COLOR_BRAND_ACCENT
        ),
    )


def calculate(inputs: CalculatorInputs) -> CalculationResult:
    return CalculationEngine().calculate(inputs)
