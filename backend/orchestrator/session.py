"""Immutable per-session state and the reducer that advances it.

Every update returns a new SessionState; nothing is mutated in place. A
narrative that resolves for a submission other than the latest one is
discarded by the reducer.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional, Union

from backend.engine.result import CalculationResult, ChartDataPoint
from backend.models.enums import SubmissionStatus
from backend.models.inputs import CalculatorInputs
from backend.models.insight import Narrative
from backend.report.assembler import ReportBundle, assemble_report


@dataclass(frozen=True)
class Submission:
    id: int
    inputs: CalculatorInputs
    result: CalculationResult
    chart: tuple[ChartDataPoint, ...]
    narrative: Optional[Narrative] = None
    status: SubmissionStatus = SubmissionStatus.NARRATIVE_PENDING

    def report(self) -> ReportBundle:
        return assemble_report(
            self.inputs,
            self.result,
            self.chart,
            narrative=self.narrative,
            submission_id=self.id,
        )


@dataclass(frozen=True)
class SessionState:
    latest_submission_id: int = 0
    submission: Optional[Submission] = None

    def next_submission_id(self) -> int:
        return self.latest_submission_id + 1


@dataclass(frozen=True)
class SubmissionStarted:
    submission: Submission


@dataclass(frozen=True)
class NarrativeResolved:
    submission_id: int
    narrative: Narrative


Action = Union[SubmissionStarted, NarrativeResolved]


def is_current(state: SessionState, submission_id: int) -> bool:
    return state.submission is not None and state.submission.id == submission_id


def reduce(state: SessionState, action: Action) -> SessionState:
    if isinstance(action, SubmissionStarted):
        if action.submission.id <= state.latest_submission_id:
            raise ValueError(
                f"Submission id {action.submission.id} is not newer than "
                f"{state.latest_submission_id}"
            )
        return SessionState(
            latest_submission_id=action.submission.id,
            submission=action.submission,
        )

    if isinstance(action, NarrativeResolved):
        if not is_current(state, action.submission_id):
            return state
        submission = replace(
            state.submission,
            narrative=action.narrative,
            status=SubmissionStatus.COMPLETED,
        )
        return replace(state, submission=submission)

    raise TypeError(f"Unknown action: {action!r}")
