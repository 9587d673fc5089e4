"""Prompt asking the model for a StrategicInsight JSON object."""

from __future__ import annotations

from backend.engine.result import CalculationResult
from backend.models.inputs import CalculatorInputs
from backend.prompts.narrative_system import SECTION_INSTRUCTIONS, format_client_context

STRUCTURED_FORMAT_INSTRUCTIONS = """\
Réponds UNIQUEMENT avec un objet JSON valide, sans balises markdown ni \
commentaire, respectant exactement ce schéma :
{
  "summary": "string (2-3 phrases)",
  "recommendations": [
    {"title": "string", "detail": "string", "priority": "High|Medium|Low"}
  ],
  "sectorTrends": ["string"],
  "roadmap": {
    "quickWins": ["string"],
    "midTerm": ["string"],
    "longTerm": ["string"]
  }
}
Exactement 3 recommandations, classées par priorité décroissante.
"""


def format_structured_prompt(inputs: CalculatorInputs, result: CalculationResult) -> str:
    return "\n\n".join(
        [
            format_client_context(inputs, result),
            SECTION_INSTRUCTIONS,
            STRUCTURED_FORMAT_INSTRUCTIONS,
        ]
    )
