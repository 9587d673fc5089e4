"""Report assembler -- groups inputs, result, chart and narrative into the
immutable bundle consumed by rendering and export."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional

from backend.engine.result import CalculationResult, ChartDataPoint
from backend.models.inputs import CalculatorInputs
from backend.models.insight import Narrative, narrative_to_dict, narrative_to_text

NARRATIVE_PLACEHOLDER = "Génération de l'analyse stratégique en cours..."


@dataclass(frozen=True)
class ReportBundle:
    inputs: CalculatorInputs
    result: CalculationResult
    chart: tuple[ChartDataPoint, ...]
    narrative: Optional[Narrative] = None
    submission_id: Optional[int] = None
    generated_at: datetime = field(default_factory=lambda: datetime.now(tz=timezone.utc))

    @property
    def is_generating(self) -> bool:
        return self.narrative is None

    @property
    def display_narrative(self) -> str:
        return narrative_to_text(self.narrative) or NARRATIVE_PLACEHOLDER

    def to_snapshot(self) -> dict[str, Any]:
        """Plain, JSON-serializable copy with no references into the bundle."""
        return {
            "submissionId": self.submission_id,
            "generatedAt": self.generated_at.isoformat(),
            "inputs": self.inputs.to_dict(),
            "results": self.result.to_dict(),
            "chartData": [point.to_dict() for point in self.chart],
            "narrative": narrative_to_dict(self.narrative),
            "isGenerating": self.is_generating,
            "displayNarrative": self.display_narrative,
        }


def assemble_report(
    inputs: CalculatorInputs,
    result: CalculationResult,
    chart: tuple[ChartDataPoint, ...] | list[ChartDataPoint],
    narrative: Optional[Narrative] = None,
    submission_id: Optional[int] = None,
) -> ReportBundle:
    """Group the pieces of a report. Never recomputes the numbers."""
    chart = tuple(chart)
    if len(chart) != 3:
        raise ValueError(f"Cost comparison chart needs 3 points, got {len(chart)}")
    return ReportBundle(
        inputs=inputs,
        result=result,
        chart=chart,
        narrative=narrative,
        submission_id=submission_id,
    )
