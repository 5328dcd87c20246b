"""Structured events recorded while a review session is edited."""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field


class EventType(str, Enum):
    """Types of review events."""

    SESSION_STARTED = "session_started"
    COMMAND_START = "command_start"
    COMMAND_APPLIED = "command_applied"
    COMMAND_REJECTED = "command_rejected"
    PAYLOAD_BUILT = "payload_built"


class ReviewEvent(BaseModel):
    """Base class for all review events."""

    event_type: EventType
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    session_id: Optional[str] = None
    request_id: Optional[str] = None
    duration_ms: Optional[float] = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class SessionEvent(ReviewEvent):
    """Event for a review session being opened."""

    event_type: EventType = EventType.SESSION_STARTED
    exercise_count: int = 0
    set_count: int = 0
    note_count: int = 0
    bucket_counts: dict[str, int] = Field(default_factory=dict)


class CommandEvent(ReviewEvent):
    """Event for a review command applied to a session."""

    command_type: str

    # Populated on success
    affected_ids: list[str] = Field(default_factory=list)
    reuse_count: Optional[int] = None
    create_count: Optional[int] = None
    skip_count: Optional[int] = None

    # Populated on error
    error_type: Optional[str] = None
    error_message: Optional[str] = None


class PayloadEvent(ReviewEvent):
    """Event for an import request built from a session."""

    event_type: EventType = EventType.PAYLOAD_BUILT
    exercises_to_create: int = 0
    exercises_to_reuse: int = 0
    sets_to_create: int = 0
    notes_to_create: int = 0
    patient_bound: bool = False
