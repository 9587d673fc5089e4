"""Session event types and their SSE / JSON wire forms."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class SessionEventType(str, Enum):
    """Everything a session stream can carry, in emission order."""

    SUBMISSION_RECEIVED = "submission_received"
    CALCULATION_COMPLETED = "calculation_completed"

    NARRATIVE_STARTED = "narrative_started"
    NARRATIVE_COMPLETED = "narrative_completed"
    NARRATIVE_SUPERSEDED = "narrative_superseded"

    REPORT_EXPORTED = "report_exported"
    SESSION_ERROR = "session_error"


@dataclass
class SSEEvent:
    event_type: SessionEventType
    data: dict[str, Any]
    sequence_id: int
    timestamp: datetime = field(default_factory=lambda: datetime.now(tz=timezone.utc))

    @property
    def payload(self) -> dict[str, Any]:
        return {**self.data, "timestamp": self.timestamp.isoformat()}

    def to_dict(self) -> dict[str, Any]:
        """JSON form used by the polling endpoint."""
        return {
            "id": self.sequence_id,
            "event": self.event_type.value,
            "data": self.payload,
        }

    def to_sse_string(self) -> str:
        """event / data / id lines terminated by a blank line."""
        data_json = json.dumps(self.payload, default=str, ensure_ascii=False)
        return f"event: {self.event_type.value}\ndata: {data_json}\nid: {self.sequence_id}\n\n"
