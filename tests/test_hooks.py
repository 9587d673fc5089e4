"""Tests for progress hooks -- event type to human message mapping."""

from backend.hooks.progress_hooks import get_progress_message
from backend.streaming.events import SessionEventType


class TestProgressHooks:
    def test_event_type_maps_to_human_message(self):
        """Known event type returns the correct human-readable message."""
        msg = get_progress_message(SessionEventType.SUBMISSION_RECEIVED)
        assert msg == "Calcul en cours..."

    def test_string_value_is_accepted(self):
        msg = get_progress_message("narrative_started")
        assert msg == "Génération de l'analyse stratégique en cours..."

    def test_every_event_type_has_a_message(self):
        for event_type in SessionEventType:
            assert get_progress_message(event_type) != "Traitement..."

    def test_unknown_event_gets_generic_message(self):
        """Unknown event type returns the generic 'Traitement...' message."""
        msg = get_progress_message("some_random_event")
        assert msg == "Traitement..."
