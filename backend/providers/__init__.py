from .base import NarrativeGenerationError, NarrativeProvider
from .claude_provider import ClaudeNarrativeProvider

__all__ = ["NarrativeGenerationError", "NarrativeProvider", "ClaudeNarrativeProvider"]
