"""Tests for the narrative prompt builders."""

from backend.prompts.narrative_system import (
    SYSTEM_PROMPT,
    format_client_context,
    format_narrative_prompt,
)
from backend.prompts.structured_insight import format_structured_prompt


class TestNarrativePrompt:
    def test_client_context_carries_the_numbers(self, reference_inputs, reference_result):
        context = format_client_context(reference_inputs, reference_result)
        assert "- Secteur : Services" in context
        assert "- Effectif : 10 personnes" in context
        assert "44\u202f075,00\u00a0€ / an" in context
        assert "1\u202f763 h / an" in context
        assert "132\u202f225\u00a0€" in context

    def test_text_prompt_asks_for_three_sections(self, reference_inputs, reference_result):
        prompt = format_narrative_prompt(reference_inputs, reference_result)
        assert "**1. Recommandations Personnalisées**" in prompt
        assert "**2. Analyse Sectorielle**" in prompt
        assert "**3. Points d'Amélioration**" in prompt
        assert "300-400 mots" in prompt

    def test_structured_prompt_asks_for_json(self, reference_inputs, reference_result):
        prompt = format_structured_prompt(reference_inputs, reference_result)
        assert "JSON" in prompt
        assert '"quickWins"' in prompt
        assert "- Secteur : Services" in prompt

    def test_system_prompt_forbids_recomputing(self):
        assert "Ne recalcule jamais" in SYSTEM_PROMPT
