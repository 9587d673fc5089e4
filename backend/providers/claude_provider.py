"""Claude provider -- generates the strategic narrative with the Claude
Agent SDK, using the credential held by the server."""

from __future__ import annotations

import logging
from typing import Optional

from claude_agent_sdk import AssistantMessage, ClaudeAgentOptions, TextBlock, query

from backend.config.settings import Settings, get_settings
from backend.engine.result import CalculationResult
from backend.models.inputs import CalculatorInputs
from backend.models.insight import StrategicInsight, parse_insight_json
from backend.prompts.narrative_system import SYSTEM_PROMPT, format_narrative_prompt
from backend.prompts.structured_insight import format_structured_prompt

from .base import NarrativeGenerationError, NarrativeProvider

logger = logging.getLogger(__name__)


class ClaudeNarrativeProvider(NarrativeProvider):
    """Single-turn narrative generation, no tools."""

    def __init__(self, settings: Optional[Settings] = None):
        self._settings = settings or get_settings()

    def _options(self) -> ClaudeAgentOptions:
        return ClaudeAgentOptions(
            system_prompt=SYSTEM_PROMPT,
            model=self._settings.narrative_model,
            max_turns=1,
            allowed_tools=[],
            env={"ANTHROPIC_API_KEY": self._settings.anthropic_api_key},
        )

    async def _complete(self, prompt: str) -> str:
        chunks: list[str] = []
        async for msg in query(prompt=prompt, options=self._options()):
            if isinstance(msg, AssistantMessage):
                for block in msg.content:
                    if isinstance(block, TextBlock):
                        chunks.append(block.text)
        text = "".join(chunks).strip()
        if not text:
            raise NarrativeGenerationError("Model returned an empty response")
        return text

    async def generate_text(
        self, inputs: CalculatorInputs, result: CalculationResult
    ) -> str:
        return await self._complete(format_narrative_prompt(inputs, result))

    async def generate_insight(
        self, inputs: CalculatorInputs, result: CalculationResult
    ) -> StrategicInsight:
        raw = await self._complete(format_structured_prompt(inputs, result))
        insight = parse_insight_json(raw)
        if insight is None:
            logger.warning("Structured insight did not match schema: %s", raw[:200])
            raise NarrativeGenerationError("Model output is not a valid insight")
        return insight

    async def health_check(self) -> bool:
        if not self._settings.anthropic_api_key:
            return False
        try:
            reply = await self._complete("Réponds uniquement par OK.")
            return bool(reply)
        except Exception as e:
            logger.error(f"Claude health check failed: {e}")
            return False
