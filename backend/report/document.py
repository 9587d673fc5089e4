"""Layout-independent description of the exported report.

Built from a ReportBundle only; no reference to any live view. The PDF
renderer walks this description.
"""

from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass, field
from typing import Optional

from backend.report.assembler import ReportBundle
from backend.report.formatting import format_currency, format_hours

REPORT_TITLE = "Audit de Rentabilité IA"
DISCLAIMER = (
    "Les résultats sont des estimations basées sur les données fournies "
    "et des moyennes du secteur."
)

_SECTION_HEADING_RE = re.compile(r"^\*\*(.+?)\*\*\s*$")


@dataclass(frozen=True)
class MetricCard:
    label: str
    value: str
    highlight: bool = False


@dataclass(frozen=True)
class ChartBar:
    label: str
    amount: float
    color: str


@dataclass(frozen=True)
class NarrativeSection:
    heading: Optional[str]
    paragraphs: tuple[str, ...] = ()
    bullets: tuple[str, ...] = ()


@dataclass(frozen=True)
class ReportDocument:
    title: str
    subtitle: str
    author: str
    filename: str
    cards: tuple[MetricCard, ...]
    bars: tuple[ChartBar, ...]
    sections: tuple[NarrativeSection, ...]
    disclaimer: str = DISCLAIMER
    narrative_pending: bool = False
    input_lines: tuple[str, ...] = field(default_factory=tuple)


def report_filename(industry: str) -> str:
    ascii_name = unicodedata.normalize("NFKD", industry).encode("ascii", "ignore").decode()
    safe = re.sub(r"[^A-Za-z0-9-]+", "_", ascii_name).strip("_") or "Rapport"
    return f"Nexalis_Audit_{safe}.pdf"


def split_narrative(text: str) -> tuple[NarrativeSection, ...]:
    """Split markdown narrative into sections on **bold** heading lines."""
    sections: list[NarrativeSection] = []
    heading: Optional[str] = None
    paragraphs: list[str] = []
    bullets: list[str] = []

    def flush() -> None:
        if heading is not None or paragraphs or bullets:
            sections.append(
                NarrativeSection(
                    heading=heading, paragraphs=tuple(paragraphs), bullets=tuple(bullets)
                )
            )

    for raw in text.splitlines():
        line = raw.strip()
        if not line:
            continue
        match = _SECTION_HEADING_RE.match(line)
        if match:
            flush()
            heading, paragraphs, bullets = match.group(1).strip(), [], []
        elif line.startswith(("- ", "* ", "• ")):
            bullets.append(line[2:].strip())
        else:
            paragraphs.append(line)
    flush()
    return tuple(sections)


def build_report_document(bundle: ReportBundle, author: str = "Nexalis Solutions") -> ReportDocument:
    inputs = bundle.inputs
    result = bundle.result
    cards = (
        MetricCard("Heures récupérées / an", format_hours(result.total_hours_saved)),
        MetricCard("Économies annuelles", format_currency(result.annual_savings), highlight=True),
        MetricCard("ROI sur 3 ans", format_currency(result.three_year_roi)),
    )
    bars = tuple(
        ChartBar(label=point.name, amount=point.montant, color=point.fill)
        for point in bundle.chart
    )
    input_lines = (
        f"Employés concernés : {inputs.employees}",
        f"Salaire horaire moyen : {format_currency(inputs.hourly_wage, 2)}",
        f"Heures répétitives / semaine : {inputs.hours_repetitive:g} h",
    )
    return ReportDocument(
        title=REPORT_TITLE,
        subtitle=f"Secteur : {inputs.industry.value}",
        author=author,
        filename=report_filename(inputs.industry.value),
        cards=cards,
        bars=bars,
        sections=split_narrative(bundle.display_narrative),
        narrative_pending=bundle.is_generating,
        input_lines=input_lines,
    )
