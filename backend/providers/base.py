from __future__ import annotations

from abc import ABC, abstractmethod

from backend.engine.result import CalculationResult
from backend.models.inputs import CalculatorInputs
from backend.models.insight import StrategicInsight


class NarrativeGenerationError(Exception):
    """The text-generation model failed or returned unusable output."""


class NarrativeProvider(ABC):
    """Abstract base for server-side narrative generators."""

    @abstractmethod
    async def generate_text(
        self, inputs: CalculatorInputs, result: CalculationResult
    ) -> str:
        """Return the free-text markdown narrative."""
        ...

    @abstractmethod
    async def generate_insight(
        self, inputs: CalculatorInputs, result: CalculationResult
    ) -> StrategicInsight:
        """Return the structured narrative."""
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        """Verify the model is reachable and authenticated."""
        ...
