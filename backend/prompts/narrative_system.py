"""System prompt and formatter for the strategic narrative."""

from __future__ import annotations

from backend.engine.result import CalculationResult
from backend.models.inputs import CalculatorInputs
from backend.report.formatting import format_currency, format_number

SYSTEM_PROMPT = """\
Agis comme un Directeur Stratégie Senior chez McKinsey ou BCG. Tu rédiges \
une analyse courte pour le dirigeant d'une PME qui vient d'estimer le gain \
de l'automatisation par l'IA de ses tâches répétitives.

Ton style : expert mais accessible, data-driven, focus sur l'impact \
business concret. Ne recalcule jamais les chiffres fournis et n'invente \
aucun autre montant.
"""

SECTION_INSTRUCTIONS = """\
OBJECTIF :
Génère une analyse stratégique structurée en 3 sections distinctes :

**1. Recommandations Personnalisées**
- 3 actions concrètes prioritaires adaptées à ce secteur et cette taille d'entreprise
- Sois très spécifique et actionnable

**2. Analyse Sectorielle**
- Tendances IA spécifiques à ce secteur
- Benchmarks de ROI dans l'industrie
- Opportunités sectorielles uniques

**3. Points d'Amélioration**
- Quick wins (résultats sous 3 mois)
- Optimisations moyen terme (3-6 mois)
- Transformations long terme (6-12 mois)
"""

TEXT_FORMAT_INSTRUCTIONS = """\
Format : Markdown avec **gras** pour les titres, tirets pour les listes. \
Pas de titre global, commence directement par la section 1.
Longueur : 300-400 mots maximum.
"""


def format_client_context(inputs: CalculatorInputs, result: CalculationResult) -> str:
    """The client facts every narrative prompt embeds."""
    lines = [
        "CONTEXTE CLIENT :",
        f"- Secteur : {inputs.industry.value}",
        f"- Effectif : {inputs.employees} personnes",
        f"- Gain potentiel identifié : {format_currency(result.annual_savings, 2)} / an",
        f"- Heures \"perdues\" récupérables : {format_number(result.total_hours_saved)} h / an",
        f"- ROI projeté sur 3 ans : {format_currency(result.three_year_roi)}",
    ]
    return "\n".join(lines)


def format_narrative_prompt(inputs: CalculatorInputs, result: CalculationResult) -> str:
    """Format the user message for the free-text narrative."""
    return "\n\n".join(
        [
            format_client_context(inputs, result),
            SECTION_INSTRUCTIONS,
            TEXT_FORMAT_INSTRUCTIONS,
        ]
    )
