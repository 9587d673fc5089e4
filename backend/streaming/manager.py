"""StreamManager -- per-session event buffering and SSE subscriber management."""

from __future__ import annotations

import asyncio
from collections import OrderedDict, deque
from typing import Any, AsyncGenerator, Optional

from backend.hooks.progress_hooks import get_progress_message

from .events import SessionEventType, SSEEvent

DEFAULT_BUFFER_SIZE = 100
DEFAULT_MAX_SESSIONS = 1000


class StreamManager:
    """Manages SSE event distribution for calculator sessions.

    Each session_id has:
    - A list of subscriber queues (asyncio.Queue instances)
    - A bounded buffer of recent events for replay on reconnect
    - Its own monotonically increasing sequence counter

    At most max_sessions sessions are retained. When the cap is exceeded the
    least recently active session without a live subscriber is dropped.
    """

    def __init__(
        self,
        buffer_size: int = DEFAULT_BUFFER_SIZE,
        max_sessions: int = DEFAULT_MAX_SESSIONS,
    ) -> None:
        self._buffer_size = buffer_size
        self._max_sessions = max_sessions
        self._subscribers: dict[str, list[asyncio.Queue[Optional[SSEEvent]]]] = {}
        self._buffers: dict[str, deque[SSEEvent]] = {}
        self._sequences: dict[str, int] = {}
        # session_id -> None, least recently active first
        self._recent: OrderedDict[str, None] = OrderedDict()

    @property
    def session_ids(self) -> list[str]:
        return list(self._recent)

    async def subscribe(self, session_id: str) -> asyncio.Queue[Optional[SSEEvent]]:
        """Create and return a new subscriber queue for a session."""
        queue: asyncio.Queue[Optional[SSEEvent]] = asyncio.Queue()
        self._subscribers.setdefault(session_id, []).append(queue)
        self._touch(session_id)
        return queue

    async def unsubscribe(self, session_id: str, queue: asyncio.Queue[Optional[SSEEvent]]) -> None:
        """Remove a subscriber queue from a session."""
        subs = self._subscribers.get(session_id, [])
        if queue in subs:
            subs.remove(queue)
        if not subs:
            self._subscribers.pop(session_id, None)

    async def emit(
        self,
        session_id: str,
        event_type: SessionEventType,
        data: dict[str, Any],
    ) -> SSEEvent:
        """Build the next event of the session, buffer it and broadcast it."""
        self._touch(session_id)
        sequence_id = self._sequences.get(session_id, 0) + 1
        self._sequences[session_id] = sequence_id
        event = SSEEvent(
            event_type=event_type,
            data={"message": get_progress_message(event_type), **data},
            sequence_id=sequence_id,
        )
        buffer = self._buffers.get(session_id)
        if buffer is None:
            buffer = self._buffers[session_id] = deque(maxlen=self._buffer_size)
        buffer.append(event)
        for queue in list(self._subscribers.get(session_id, [])):
            await queue.put(event)
        return event

    async def close(self, session_id: str) -> None:
        """End every open stream of a session."""
        for queue in list(self._subscribers.get(session_id, [])):
            await queue.put(None)

    async def close_all(self) -> None:
        for session_id in list(self._subscribers):
            await self.close(session_id)

    def discard(self, session_id: str) -> None:
        """Forget the buffer and counter of a session. Live streams stay open."""
        self._buffers.pop(session_id, None)
        self._sequences.pop(session_id, None)
        if session_id not in self._subscribers:
            self._recent.pop(session_id, None)

    def buffered(self, session_id: str) -> list[SSEEvent]:
        return list(self._buffers.get(session_id, ()))

    def _touch(self, session_id: str) -> None:
        self._recent[session_id] = None
        self._recent.move_to_end(session_id)
        while len(self._recent) > self._max_sessions:
            idle = next(
                (
                    sid
                    for sid in self._recent
                    if sid != session_id and sid not in self._subscribers
                ),
                None,
            )
            if idle is None:
                return
            self.discard(idle)

    async def event_generator(
        self, session_id: str, last_event_id: int | None = None
    ) -> AsyncGenerator[str, None]:
        """Async generator yielding SSE strings for a session.

        If last_event_id is provided, replays buffered events with
        sequence_id > last_event_id before switching to live events.
        """
        queue = await self.subscribe(session_id)
        try:
            # SSE comment as connection heartbeat (ignored by browsers)
            yield ": connected\n\n"

            if last_event_id is not None:
                for event in self.buffered(session_id):
                    if event.sequence_id > last_event_id:
                        yield event.to_sse_string()

            while True:
                event = await queue.get()
                if event is None:
                    return
                yield event.to_sse_string()
        finally:
            await self.unsubscribe(session_id, queue)
