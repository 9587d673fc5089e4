from .coordinator import SubmissionCoordinator
from .session import (
    NarrativeResolved,
    SessionState,
    Submission,
    SubmissionStarted,
    reduce,
)

__all__ = [
    "SubmissionCoordinator",
    "NarrativeResolved",
    "SessionState",
    "Submission",
    "SubmissionStarted",
    "reduce",
]
