"""Narrative requester -- asks the insight relay for the strategic narrative.

Single best-effort attempt per call. Every failure is logged for operators
and turned into a neutral message for the user; nothing is raised.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from backend.config.settings import Settings, get_settings
from backend.engine.result import CalculationResult
from backend.models.inputs import CalculatorInputs
from backend.models.insight import Narrative, StrategicInsight

logger = logging.getLogger(__name__)

INSIGHT_FALLBACK_MESSAGE = (
    "L'analyse IA n'est temporairement pas disponible. "
    "Veuillez réessayer dans quelques instants."
)
INSIGHT_EMPTY_MESSAGE = "Analyse en cours..."


class NarrativeRequester:
    """Client of the same-origin insight relay. Holds no credential."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self._settings = settings or get_settings()
        self._client = client or httpx.AsyncClient(
            timeout=self._settings.insight_timeout_seconds
        )

    async def request_insight(
        self,
        inputs: CalculatorInputs,
        result: CalculationResult,
        structured: bool = False,
    ) -> Narrative:
        body = {"inputs": inputs.to_dict(), "results": result.to_dict()}
        params = {"structured": "true"} if structured else None
        try:
            resp = await self._client.post(
                self._settings.insight_relay_url,
                json=body,
                params=params,
                timeout=self._settings.insight_timeout_seconds,
            )
        except httpx.HTTPError as e:
            logger.warning(f"Insight relay unreachable: {e!r}")
            return INSIGHT_FALLBACK_MESSAGE
        except Exception:
            logger.exception("Insight request failed")
            return INSIGHT_FALLBACK_MESSAGE

        if not resp.is_success:
            logger.warning(
                "Insight relay returned %s: %s",
                resp.status_code,
                _error_detail(resp),
            )
            return INSIGHT_FALLBACK_MESSAGE

        try:
            data = resp.json()
        except ValueError:
            logger.warning("Insight relay returned a non-JSON body")
            return INSIGHT_FALLBACK_MESSAGE

        return _parse_payload(data)

    async def aclose(self) -> None:
        await self._client.aclose()


def _parse_payload(data: Any) -> Narrative:
    if not isinstance(data, dict):
        logger.warning("Insight relay payload is not an object")
        return INSIGHT_FALLBACK_MESSAGE

    if "insight" in data:
        try:
            return StrategicInsight.model_validate(data["insight"])
        except ValueError as e:
            logger.warning(f"Insight payload does not match schema: {e}")
            return INSIGHT_FALLBACK_MESSAGE

    text = data.get("text")
    if text is None:
        logger.warning("Insight relay payload has no text")
        return INSIGHT_FALLBACK_MESSAGE
    if not isinstance(text, str):
        logger.warning("Insight relay text is not a string")
        return INSIGHT_FALLBACK_MESSAGE
    return text or INSIGHT_EMPTY_MESSAGE


def _error_detail(resp: httpx.Response) -> str:
    try:
        data = resp.json()
    except ValueError:
        return resp.text[:200]
    if isinstance(data, dict):
        return str(data.get("error") or data)
    return str(data)
