"""Maps session event types to human-readable progress messages for SSE streaming."""

from __future__ import annotations

# Event type value -> user-facing progress message
_EVENT_MESSAGES: dict[str, str] = {
    "submission_received": "Calcul en cours...",
    "calculation_completed": "Votre projection financière est prête.",
    "narrative_started": "Génération de l'analyse stratégique en cours...",
    "narrative_completed": "Analyse stratégique disponible.",
    "narrative_superseded": "Analyse ignorée : une nouvelle simulation a été lancée.",
    "report_exported": "Rapport exporté.",
    "session_error": "Une erreur est survenue. Vous pouvez relancer le calcul.",
}

_DEFAULT_MESSAGE = "Traitement..."


def get_progress_message(event_type: str) -> str:
    """Return a human-readable progress message for a given event type.

    Accepts the enum or its string value. Unknown types get a generic
    "Traitement..." message.
    """
    key = getattr(event_type, "value", event_type)
    return _EVENT_MESSAGES.get(key, _DEFAULT_MESSAGE)
