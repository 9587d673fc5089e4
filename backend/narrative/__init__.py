from .requester import INSIGHT_FALLBACK_MESSAGE, NarrativeRequester

__all__ = ["INSIGHT_FALLBACK_MESSAGE", "NarrativeRequester"]
