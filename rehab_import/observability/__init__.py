"""Observability module for review session telemetry."""

from rehab_import.observability.events import (
    CommandEvent,
    EventType,
    PayloadEvent,
    ReviewEvent,
    SessionEvent,
)
from rehab_import.observability.logger import ReviewEventLogger, get_review_event_logger

__all__ = [
    "CommandEvent",
    "EventType",
    "PayloadEvent",
    "ReviewEvent",
    "ReviewEventLogger",
    "SessionEvent",
    "get_review_event_logger",
]
