"""Import review session: the aggregate the review screen talks to.

Created when the review screen opens, mutated only through commands, and
discarded or committed when the user proceeds or resets.
"""
from __future__ import annotations

import logging
import uuid
from typing import Any, Callable, Mapping, Optional, Sequence

from rehab_import.config import Settings, get_settings
from rehab_import.exceptions import UnknownItemError
from rehab_import.matching.classifier import (
    ExerciseBuckets,
    MatchBucket,
    categorize_exercises,
    classify_suggestions,
)
from rehab_import.matching.patient import filter_patients, suggest_patient
from rehab_import.models.decisions import (
    ClinicalNoteDecision,
    ExerciseDecision,
    ExerciseSetDecision,
)
from rehab_import.models.extraction import (
    DocumentAnalysisResult,
    DocumentInfo,
    ExtractedClinicalNote,
    ExtractedExercise,
    ExtractedExerciseSet,
    MatchSuggestion,
)
from rehab_import.models.patient import PatientOption
from rehab_import.models.payload import DocumentImportRequest
from rehab_import.observability.logger import ReviewEventLogger, get_review_event_logger
from rehab_import.reconcile.commands import (
    ApproveAllConfident,
    ReviewCommand,
    SetAllCreate,
    SetAllSkip,
    SetExerciseDecision,
    UseAllMatched,
    apply_command,
)
from rehab_import.reconcile.dependency import active_member_ids, is_set_eligible
from rehab_import.reconcile.filters import ExerciseFilter, filter_exercises, reuse_target_name
from rehab_import.reconcile.payload import build_import_request
from rehab_import.reconcile.state import ImportSessionState
from rehab_import.reconcile.stats import (
    ConfidentProgress,
    ExerciseStats,
    ImportStats,
    compute_confident_progress,
    compute_exercise_stats,
    compute_import_stats,
)
from rehab_import.reconcile.store import DecisionStore

logger = logging.getLogger(__name__)

Listener = Callable[["ImportSession", ReviewCommand, list[str]], None]


class ImportSession:
    """Review session over one document analysis result."""

    def __init__(
        self,
        analysis: DocumentAnalysisResult,
        patient_id: Optional[str] = None,
        settings: Optional[Settings] = None,
        event_logger: Optional[ReviewEventLogger] = None,
        session_id: Optional[str] = None,
    ):
        self.settings = settings or get_settings()
        self.session_id = session_id or str(uuid.uuid4())
        self._events = event_logger or get_review_event_logger()
        self._listeners: list[Listener] = []

        self.state = ImportSessionState.initialize(
            analysis,
            confident_threshold=self.settings.confident_threshold,
            patient_id=patient_id,
        )

        buckets = self.buckets()
        logger.info(
            "Opened import session %s: %d exercises (%s), %d sets, %d notes",
            self.session_id,
            len(analysis.exercises),
            ", ".join(f"{k} {v}" for k, v in buckets.counts().items()),
            len(analysis.exercise_sets),
            len(analysis.clinical_notes),
        )
        self._events.log_session_started(
            session_id=self.session_id,
            exercise_count=len(analysis.exercises),
            set_count=len(analysis.exercise_sets),
            note_count=len(analysis.clinical_notes),
            bucket_counts=buckets.counts(),
        )

    # ── Inputs ────────────────────────────────────────────────────────────

    @property
    def analysis(self) -> DocumentAnalysisResult:
        return self.state.analysis

    @property
    def exercises(self) -> list[ExtractedExercise]:
        return self.state.analysis.exercises

    @property
    def exercise_sets(self) -> list[ExtractedExerciseSet]:
        return self.state.analysis.exercise_sets

    @property
    def clinical_notes(self) -> list[ExtractedClinicalNote]:
        return self.state.analysis.clinical_notes

    @property
    def document_info(self) -> DocumentInfo:
        return self.state.analysis.document_info

    @property
    def suggestions(self) -> Mapping[str, tuple[MatchSuggestion, ...]]:
        return self.state.suggestions

    def suggestions_for(self, temp_id: str) -> tuple[MatchSuggestion, ...]:
        return self.state.suggestions.get(temp_id, ())

    # ── Decisions and flags ───────────────────────────────────────────────

    @property
    def exercise_decisions(self) -> DecisionStore[ExerciseDecision]:
        return self.state.exercise_decisions

    @property
    def set_decisions(self) -> DecisionStore[ExerciseSetDecision]:
        return self.state.set_decisions

    @property
    def note_decisions(self) -> DecisionStore[ClinicalNoteDecision]:
        return self.state.note_decisions

    @property
    def patient_id(self) -> Optional[str]:
        return self.state.patient_id

    @property
    def assign_sets_to_patient(self) -> bool:
        return self.state.assign_sets_to_patient

    @property
    def create_set_after_import(self) -> bool:
        return self.state.create_set_after_import

    def decisions_snapshot(self) -> dict[str, dict[str, Any]]:
        """Plain key -> record maps for rendering and commit."""
        return {
            "exercises": self.exercise_decisions.all(),
            "sets": self.set_decisions.all(),
            "notes": self.note_decisions.all(),
        }

    # ── Commands ──────────────────────────────────────────────────────────

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener called once after every applied command.

        Returns:
            A function that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def dispatch(self, command: ReviewCommand) -> list[str]:
        """Apply a command and notify listeners.

        Returns:
            Temp ids affected by the command.
        """
        with self._events.command(command.command, session_id=self.session_id) as event:
            affected = apply_command(self.state, command)
            stats = self.exercise_stats()
            event.affected_ids = affected
            event.reuse_count = stats.reuse_count
            event.create_count = stats.create_count
            event.skip_count = stats.skip_count

        for listener in list(self._listeners):
            try:
                listener(self, command, affected)
            except Exception as e:
                logger.warning(f"Session listener failed: {e}")

        return affected

    def set_exercise_decision(self, temp_id: str, **changes: Any) -> ExerciseDecision:
        """Shortcut for dispatching ``SetExerciseDecision``."""
        self.dispatch(SetExerciseDecision(temp_id=temp_id, **changes))
        return self.exercise_decisions[temp_id]

    def approve_all_confident(self) -> list[str]:
        return self.dispatch(ApproveAllConfident())

    def use_all_matched(self) -> list[str]:
        return self.dispatch(UseAllMatched())

    def set_all_create(self) -> list[str]:
        return self.dispatch(SetAllCreate())

    def set_all_skip(self) -> list[str]:
        return self.dispatch(SetAllSkip())

    # ── Derived views ─────────────────────────────────────────────────────

    def buckets(self) -> ExerciseBuckets:
        return categorize_exercises(
            self.exercises, self.state.suggestions, self.state.confident_threshold
        )

    def bucket_of(self, temp_id: str) -> MatchBucket:
        if temp_id not in self.state.exercise_ids:
            raise UnknownItemError("exercise", temp_id)
        return classify_suggestions(self.suggestions_for(temp_id), self.state.confident_threshold)

    def _exercise_set(self, set_temp_id: str) -> ExtractedExerciseSet:
        for exercise_set in self.exercise_sets:
            if exercise_set.temp_id == set_temp_id:
                return exercise_set
        raise UnknownItemError("set", set_temp_id)

    def is_set_eligible(self, set_temp_id: str) -> bool:
        return is_set_eligible(self._exercise_set(set_temp_id), self.exercise_decisions)

    def active_members(self, set_temp_id: str) -> list[str]:
        return active_member_ids(self._exercise_set(set_temp_id), self.exercise_decisions)

    def exercise_stats(self) -> ExerciseStats:
        return compute_exercise_stats(self.exercise_decisions)

    def can_proceed(self) -> bool:
        return self.exercise_stats().can_proceed

    def confident_progress(self) -> ConfidentProgress:
        return compute_confident_progress(self.buckets().confident, self.exercise_decisions)

    def import_stats(self) -> ImportStats:
        return compute_import_stats(
            self.exercises,
            self.exercise_sets,
            self.clinical_notes,
            self.state.suggestions,
            self.exercise_decisions,
            self.set_decisions,
            self.note_decisions,
            self.patient_id,
        )

    def filtered_exercises(self, exercise_filter: ExerciseFilter = ExerciseFilter.ALL) -> list[ExtractedExercise]:
        return filter_exercises(
            self.exercises, self.exercise_decisions, self.state.suggestions, exercise_filter
        )

    def reuse_target_name(self, temp_id: str) -> Optional[str]:
        return reuse_target_name(self.exercise_decisions.get(temp_id), self.suggestions_for(temp_id))

    # ── Patient matching ──────────────────────────────────────────────────

    def suggest_patient(self, roster: Sequence[PatientOption]) -> Optional[PatientOption]:
        """Roster entry matching the patient name detected in the document."""
        return suggest_patient(
            self.document_info.patient_name,
            roster,
            self.settings.patient_suggest_threshold,
        )

    def search_patients(self, query: str, roster: Sequence[PatientOption]) -> list[PatientOption]:
        return filter_patients(query, roster, self.settings.patient_filter_threshold)

    # ── Commit ────────────────────────────────────────────────────────────

    def build_import_request(self) -> DocumentImportRequest:
        """Import request for the persistence service from the current decisions."""
        request = build_import_request(
            self.state,
            default_sets=self.settings.default_sets,
            imported_set_name=self.settings.imported_set_name,
        )
        self._events.log_payload(
            exercises_to_create=len(request.exercises_to_create),
            exercises_to_reuse=len(request.exercises_to_reuse),
            sets_to_create=len(request.exercise_sets_to_create),
            notes_to_create=len(request.clinical_notes_to_create),
            patient_bound=request.patient_id is not None,
            session_id=self.session_id,
        )
        return request
