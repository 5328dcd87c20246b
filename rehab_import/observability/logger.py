"""Review event logger writing JSON Lines for later analysis."""

import json
import logging
import time
import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Optional

from rehab_import.config import get_settings
from rehab_import.observability.events import (
    CommandEvent,
    EventType,
    PayloadEvent,
    ReviewEvent,
    SessionEvent,
)

logger = logging.getLogger(__name__)


class ReviewEventLogger:
    """Central logger for review session events.

    Writes structured events to JSON Lines files and forwards them to
    registered callbacks. Write failures are logged and never interrupt a
    review.
    """

    _instance: Optional["ReviewEventLogger"] = None

    def __init__(
        self,
        log_dir: Optional[Path] = None,
        enabled: bool = True,
        max_ids_logged: int = 200,
    ):
        """Initialize review event logger.

        Args:
            log_dir: Directory for log files (default: data/logs)
            enabled: Whether file logging is enabled
            max_ids_logged: Cap on affected temp ids stored per event
        """
        self.enabled = enabled
        self.max_ids_logged = max_ids_logged

        if log_dir is None:
            log_dir = Path("data/logs")
        self.log_dir = log_dir
        if self.enabled:
            self.log_dir.mkdir(parents=True, exist_ok=True)

        self._log_files: dict[str, Path] = {
            "sessions": self.log_dir / "sessions.jsonl",
            "commands": self.log_dir / "commands.jsonl",
            "payloads": self.log_dir / "payloads.jsonl",
        }

        # Callbacks run even when file logging is disabled
        self._callbacks: list[Callable[[ReviewEvent], None]] = []

    @classmethod
    def get_instance(cls) -> "ReviewEventLogger":
        """Get or create singleton instance configured from settings."""
        if cls._instance is None:
            settings = get_settings()
            cls._instance = cls(
                log_dir=settings.event_log_dir,
                enabled=settings.event_log_enabled,
            )
        return cls._instance

    def generate_request_id(self) -> str:
        """Generate a unique request ID."""
        return str(uuid.uuid4())[:8]

    def add_callback(self, callback: Callable[[ReviewEvent], None]) -> None:
        """Add callback for real-time event monitoring."""
        self._callbacks.append(callback)

    def _write_event(self, event: ReviewEvent, log_type: str) -> None:
        """Write event to the matching log file and notify callbacks."""
        for callback in self._callbacks:
            try:
                callback(event)
            except Exception as e:
                logger.warning(f"Review event callback failed: {e}")

        if not self.enabled:
            return

        try:
            log_file = self._log_files.get(log_type)
            if log_file:
                with open(log_file, "a") as f:
                    f.write(event.model_dump_json() + "\n")
        except Exception as e:
            logger.warning(f"Failed to write review event: {e}")

    # Session logging

    def log_session_started(
        self,
        session_id: str,
        exercise_count: int,
        set_count: int,
        note_count: int,
        bucket_counts: dict[str, int],
    ) -> None:
        """Log a review session being opened."""
        event = SessionEvent(
            session_id=session_id,
            exercise_count=exercise_count,
            set_count=set_count,
            note_count=note_count,
            bucket_counts=bucket_counts,
        )
        self._write_event(event, "sessions")

    # Command logging

    @contextmanager
    def command(
        self,
        command_type: str,
        session_id: Optional[str] = None,
        request_id: Optional[str] = None,
    ):
        """Context manager for logging a command applied to a session.

        Usage:
            with events.command("approve_all_confident", session_id) as event:
                affected = apply_command(session, command)
                event.affected_ids = affected
        """
        start_time = time.time()
        request_id = request_id or self.generate_request_id()

        event = CommandEvent(
            event_type=EventType.COMMAND_START,
            command_type=command_type,
            session_id=session_id,
            request_id=request_id,
        )

        try:
            yield event
            event.event_type = EventType.COMMAND_APPLIED
            event.affected_ids = event.affected_ids[: self.max_ids_logged]

        except Exception as e:
            event.event_type = EventType.COMMAND_REJECTED
            event.error_type = type(e).__name__
            event.error_message = str(e)[:200]
            raise

        finally:
            event.duration_ms = (time.time() - start_time) * 1000
            self._write_event(event, "commands")

    # Payload logging

    def log_payload(
        self,
        exercises_to_create: int,
        exercises_to_reuse: int,
        sets_to_create: int,
        notes_to_create: int,
        patient_bound: bool,
        session_id: Optional[str] = None,
    ) -> None:
        """Log an import request built from a session."""
        event = PayloadEvent(
            session_id=session_id,
            exercises_to_create=exercises_to_create,
            exercises_to_reuse=exercises_to_reuse,
            sets_to_create=sets_to_create,
            notes_to_create=notes_to_create,
            patient_bound=patient_bound,
        )
        self._write_event(event, "payloads")

    # Utility methods

    def get_recent_events(
        self,
        log_type: str,
        limit: int = 100,
    ) -> list[dict[str, Any]]:
        """Read recent events from a log file."""
        log_file = self._log_files.get(log_type)
        if not log_file or not log_file.exists():
            return []

        events = []
        with open(log_file) as f:
            for line in f:
                try:
                    events.append(json.loads(line))
                except json.JSONDecodeError:
                    continue

        return events[-limit:]

    def get_stats(self, log_type: str = "commands") -> dict[str, Any]:
        """Get basic statistics for a log type."""
        events = self.get_recent_events(log_type, limit=1000)
        if not events:
            return {"total": 0}

        total = len(events)
        rejected = sum(1 for e in events if e.get("event_type") == EventType.COMMAND_REJECTED.value)
        avg_duration = sum(e.get("duration_ms") or 0 for e in events) / total

        return {
            "total": total,
            "rejected": rejected,
            "rejection_rate": rejected / total,
            "avg_duration_ms": avg_duration,
        }


def get_review_event_logger() -> ReviewEventLogger:
    """Get the global review event logger instance."""
    return ReviewEventLogger.get_instance()
