"""Structured strategic insight returned by the narrative model."""

from __future__ import annotations

import json
import re
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .enums import Priority

_FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )


class Recommendation(_CamelModel):
    title: str
    detail: str = ""
    priority: Priority = Priority.MEDIUM


class Roadmap(_CamelModel):
    """Phased plan: under 3 months, 3-6 months, 6-12 months."""

    quick_wins: list[str] = Field(default_factory=list)
    mid_term: list[str] = Field(default_factory=list)
    long_term: list[str] = Field(default_factory=list)


class StrategicInsight(_CamelModel):
    summary: str
    recommendations: list[Recommendation] = Field(default_factory=list)
    sector_trends: list[str] = Field(default_factory=list)
    roadmap: Roadmap = Field(default_factory=Roadmap)

    def to_markdown(self) -> str:
        """Flatten to the same markdown layout as the free-text narrative."""
        lines: list[str] = [self.summary, "", "**1. Recommandations Personnalisées**"]
        for rec in self.recommendations:
            detail = f" : {rec.detail}" if rec.detail else ""
            lines.append(f"- {rec.title}{detail}")

        lines.extend(["", "**2. Analyse Sectorielle**"])
        lines.extend(f"- {trend}" for trend in self.sector_trends)

        lines.extend(["", "**3. Points d'Amélioration**"])
        phases = [
            ("Quick wins (0-3 mois)", self.roadmap.quick_wins),
            ("Moyen terme (3-6 mois)", self.roadmap.mid_term),
            ("Long terme (6-12 mois)", self.roadmap.long_term),
        ]
        for label, items in phases:
            if items:
                lines.append(f"- {label} : " + " ; ".join(items))
        return "\n".join(lines).strip()


# What the presentation layer may receive as narrative content.
Narrative = Union[str, StrategicInsight]


def parse_insight_json(raw: str) -> Optional[StrategicInsight]:
    """Parse model output into a StrategicInsight.

    Tolerates surrounding markdown code fences. Returns None when the text
    is not valid JSON or does not match the schema.
    """
    if not raw:
        return None
    cleaned = _FENCE_RE.sub("", raw.strip()).strip()
    try:
        payload = json.loads(cleaned)
    except json.JSONDecodeError:
        return None
    if not isinstance(payload, dict):
        return None
    try:
        return StrategicInsight.model_validate(payload)
    except ValueError:
        return None


def narrative_to_text(narrative: Optional[Narrative]) -> Optional[str]:
    if narrative is None:
        return None
    if isinstance(narrative, StrategicInsight):
        return narrative.to_markdown()
    return narrative


def narrative_to_dict(narrative: Optional[Narrative]) -> Optional[dict[str, Any]]:
    """Wire form: {"type": "text", "text": ...} or {"type": "structured", "insight": {...}}."""
    if narrative is None:
        return None
    if isinstance(narrative, StrategicInsight):
        return {
            "type": "structured",
            "insight": narrative.model_dump(mode="json", by_alias=True),
        }
    return {"type": "text", "text": narrative}
