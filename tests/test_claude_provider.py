"""Tests for ClaudeNarrativeProvider -- SDK query mocked, no API key needed."""

import json
from unittest.mock import MagicMock, patch

import pytest
from claude_agent_sdk import AssistantMessage, TextBlock

from backend.config.settings import Settings
from backend.models.insight import StrategicInsight
from backend.providers.base import NarrativeGenerationError
from backend.providers.claude_provider import ClaudeNarrativeProvider


def _make_mock_message(*texts):
    """Create a mock AssistantMessage holding TextBlocks."""
    blocks = []
    for text in texts:
        block = MagicMock(spec=TextBlock)
        block.text = text
        blocks.append(block)
    msg = MagicMock(spec=AssistantMessage)
    msg.content = blocks
    return msg


def _fake_query(*messages, captured=None):
    async def query(prompt, options):
        if captured is not None:
            captured["prompt"] = prompt
            captured["options"] = options
        for msg in messages:
            yield msg

    return query


@pytest.fixture
def settings():
    return Settings(anthropic_api_key="test-key", narrative_model="claude-test")


class TestClaudeNarrativeProvider:
    @pytest.mark.asyncio
    async def test_generate_text_joins_text_blocks(self, settings, reference_inputs, reference_result):
        captured = {}
        fake = _fake_query(
            _make_mock_message("**1. Recommandations** ", "- Automatiser"),
            MagicMock(),  # non-assistant messages are ignored
            captured=captured,
        )
        with patch("backend.providers.claude_provider.query", fake):
            provider = ClaudeNarrativeProvider(settings=settings)
            text = await provider.generate_text(reference_inputs, reference_result)

        assert text == "**1. Recommandations** - Automatiser"
        assert "Secteur : Services" in captured["prompt"]
        assert "Effectif : 10 personnes" in captured["prompt"]
        assert captured["options"].model == "claude-test"
        assert captured["options"].max_turns == 1
        assert captured["options"].env["ANTHROPIC_API_KEY"] == "test-key"

    @pytest.mark.asyncio
    async def test_empty_response_raises(self, settings, reference_inputs, reference_result):
        with patch("backend.providers.claude_provider.query", _fake_query(_make_mock_message("  "))):
            provider = ClaudeNarrativeProvider(settings=settings)
            with pytest.raises(NarrativeGenerationError):
                await provider.generate_text(reference_inputs, reference_result)

    @pytest.mark.asyncio
    async def test_generate_insight_parses_json(self, settings, reference_inputs, reference_result):
        payload = {
            "summary": "Synthèse",
            "recommendations": [{"title": "Automatiser", "priority": "High"}],
            "sectorTrends": ["IA générative"],
            "roadmap": {"quickWins": ["Emails"]},
        }
        captured = {}
        fake = _fake_query(
            _make_mock_message("```json\n" + json.dumps(payload) + "\n```"),
            captured=captured,
        )
        with patch("backend.providers.claude_provider.query", fake):
            provider = ClaudeNarrativeProvider(settings=settings)
            insight = await provider.generate_insight(reference_inputs, reference_result)

        assert isinstance(insight, StrategicInsight)
        assert insight.roadmap.quick_wins == ["Emails"]
        assert "sectorTrends" in captured["prompt"]

    @pytest.mark.asyncio
    async def test_generate_insight_rejects_invalid_json(self, settings, reference_inputs, reference_result):
        with patch("backend.providers.claude_provider.query", _fake_query(_make_mock_message("Voici mon analyse"))):
            provider = ClaudeNarrativeProvider(settings=settings)
            with pytest.raises(NarrativeGenerationError):
                await provider.generate_insight(reference_inputs, reference_result)

    @pytest.mark.asyncio
    async def test_health_check_without_key(self, reference_inputs):
        provider = ClaudeNarrativeProvider(settings=Settings(anthropic_api_key=""))
        assert await provider.health_check() is False

    @pytest.mark.asyncio
    async def test_health_check_failure(self, settings):
        async def failing_query(prompt, options):
            raise RuntimeError("CLI not found")
            yield  # pragma: no cover

        with patch("backend.providers.claude_provider.query", failing_query):
            provider = ClaudeNarrativeProvider(settings=settings)
            assert await provider.health_check() is False
