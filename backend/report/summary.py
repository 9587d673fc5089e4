"""Plain-text summary offered by the "copy summary" action."""

from __future__ import annotations

from backend.report.assembler import ReportBundle
from backend.report.formatting import format_currency, format_hours, format_number

SUMMARY_TITLE = "Audit ROI - Automatisation IA"


def build_copy_summary(bundle: ReportBundle) -> str:
    inputs = bundle.inputs
    result = bundle.result
    lines = [
        SUMMARY_TITLE,
        f"Secteur : {inputs.industry.value}",
        "",
        "Données saisies",
        f"- Employés concernés : {inputs.employees}",
        f"- Salaire horaire moyen (chargé) : {format_currency(inputs.hourly_wage, 2)}",
        f"- Heures répétitives / semaine : {format_number(inputs.hours_repetitive, 1)} h",
        "",
        "Résultats",
        f"- Heures récupérées / an : {format_hours(result.total_hours_saved)}",
        f"- Économies annuelles : {format_currency(result.annual_savings)}",
        f"- ROI sur 3 ans : {format_currency(result.three_year_roi)}",
        f"- Coût actuel des tâches répétitives : {format_currency(result.current_cost)}",
        f"- Coût avec IA : {format_currency(result.cost_with_ai)}",
        "",
        "Analyse stratégique",
        bundle.display_narrative,
    ]
    return "\n".join(lines)
