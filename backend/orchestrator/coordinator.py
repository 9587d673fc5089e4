"""SubmissionCoordinator -- runs one calculator submission end to end.

The numeric result is stored and streamed before the narrative request is
issued. Each session has at most one narrative task in flight; a new
submission cancels the previous one, and a narrative that still resolves
for an older submission is dropped.

At most max_sessions session slots are kept; submitting to a new session
beyond that evicts the least recently submitted one, together with its
pending narrative and its stream buffer.
"""

from __future__ import annotations

import asyncio
import logging
from collections import OrderedDict
from functools import partial
from typing import Optional

from backend.engine.calculator import CalculationEngine, build_chart_data
from backend.models.inputs import CalculatorInputs
from backend.models.insight import narrative_to_dict
from backend.narrative.requester import NarrativeRequester
from backend.orchestrator.session import (
    NarrativeResolved,
    SessionState,
    Submission,
    SubmissionStarted,
    reduce,
)
from backend.streaming.events import SessionEventType
from backend.streaming.manager import DEFAULT_MAX_SESSIONS, StreamManager

logger = logging.getLogger(__name__)


class SubmissionCoordinator:
    """Owns the per-session state slots and the narrative tasks."""

    def __init__(
        self,
        stream_manager: StreamManager,
        requester: NarrativeRequester,
        engine: Optional[CalculationEngine] = None,
        structured_insight: bool = False,
        max_sessions: int = DEFAULT_MAX_SESSIONS,
    ) -> None:
        self._stream_manager = stream_manager
        self._requester = requester
        self._engine = engine or CalculationEngine()
        self._structured = structured_insight
        self._max_sessions = max_sessions
        # least recently submitted first
        self._states: OrderedDict[str, SessionState] = OrderedDict()
        self._tasks: dict[str, asyncio.Task] = {}

    def state(self, session_id: str) -> SessionState:
        return self._states.get(session_id, SessionState())

    def current(self, session_id: str) -> Optional[Submission]:
        return self.state(session_id).submission

    async def submit(self, session_id: str, inputs: CalculatorInputs) -> Submission:
        """Calculate, publish the numbers, then start the narrative request."""
        state = self.state(session_id)
        result = self._engine.calculate(inputs)
        submission = Submission(
            id=state.next_submission_id(),
            inputs=inputs,
            result=result,
            chart=build_chart_data(result),
        )
        # No await between reading and replacing the slot.
        self._states[session_id] = reduce(state, SubmissionStarted(submission))
        self._states.move_to_end(session_id)
        self._cancel_pending(session_id)
        self._evict_oldest_sessions()

        await self._stream_manager.emit(
            session_id,
            SessionEventType.SUBMISSION_RECEIVED,
            {"submission_id": submission.id},
        )
        await self._stream_manager.emit(
            session_id,
            SessionEventType.CALCULATION_COMPLETED,
            {
                "submission_id": submission.id,
                "inputs": inputs.to_dict(),
                "results": result.to_dict(),
                "chartData": [point.to_dict() for point in submission.chart],
            },
        )

        task = asyncio.create_task(self._run_narrative(session_id, submission))
        task.add_done_callback(partial(self._forget_task, session_id))
        self._tasks[session_id] = task
        return submission

    async def wait_for_narrative(self, session_id: str) -> None:
        task = self._tasks.get(session_id)
        if task is not None:
            await asyncio.gather(task, return_exceptions=True)

    async def shutdown(self) -> None:
        for session_id in list(self._tasks):
            self._cancel_pending(session_id)
        await asyncio.gather(*list(self._tasks.values()), return_exceptions=True)
        self._tasks.clear()

    def _cancel_pending(self, session_id: str) -> None:
        task = self._tasks.get(session_id)
        if task is not None and not task.done():
            task.cancel()

    def _forget_task(self, session_id: str, task: asyncio.Task) -> None:
        if self._tasks.get(session_id) is task:
            del self._tasks[session_id]

    def _evict_oldest_sessions(self) -> None:
        while len(self._states) > self._max_sessions:
            session_id, _ = self._states.popitem(last=False)
            self._cancel_pending(session_id)
            self._stream_manager.discard(session_id)
            logger.info("Evicted session %s", session_id)

    async def _run_narrative(self, session_id: str, submission: Submission) -> None:
        await self._stream_manager.emit(
            session_id,
            SessionEventType.NARRATIVE_STARTED,
            {"submission_id": submission.id},
        )
        try:
            narrative = await self._requester.request_insight(
                submission.inputs, submission.result, structured=self._structured
            )
        except asyncio.CancelledError:
            await self._superseded(session_id, submission.id)
            raise
        except Exception as e:
            logger.exception(f"Narrative task failed for session {session_id}")
            await self._stream_manager.emit(
                session_id,
                SessionEventType.SESSION_ERROR,
                {"submission_id": submission.id, "error": type(e).__name__},
            )
            return

        state = self.state(session_id)
        new_state = reduce(state, NarrativeResolved(submission.id, narrative))
        if new_state is state:
            await self._superseded(session_id, submission.id)
            return

        self._states[session_id] = new_state
        await self._stream_manager.emit(
            session_id,
            SessionEventType.NARRATIVE_COMPLETED,
            {
                "submission_id": submission.id,
                "narrative": narrative_to_dict(narrative),
            },
        )

    async def _superseded(self, session_id: str, submission_id: int) -> None:
        if session_id not in self._states:
            return  # evicted
        logger.info(
            "Dropping narrative of submission %s for session %s",
            submission_id,
            session_id,
        )
        await self._stream_manager.emit(
            session_id,
            SessionEventType.NARRATIVE_SUPERSEDED,
            {"submission_id": submission_id},
        )
