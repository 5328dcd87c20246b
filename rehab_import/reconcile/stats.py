"""Aggregate counts that summarize a review and gate the commit.

Every exercise decision falls into exactly one of create, reuse or skip, so
the three counts always add up to the number of decided exercises.
"""
from __future__ import annotations

from typing import Mapping, Optional, Sequence, Union

from pydantic import BaseModel

from rehab_import.models.decisions import (
    ClinicalNoteDecision,
    ExerciseAction,
    ExerciseDecision,
    ExerciseSetDecision,
    ItemAction,
)
from rehab_import.models.extraction import (
    ExtractedClinicalNote,
    ExtractedExercise,
    ExtractedExerciseSet,
    MatchSuggestion,
)
from rehab_import.reconcile.dependency import is_set_eligible


class ExerciseStats(BaseModel):
    """Counts for the sticky summary and the proceed gate."""

    reuse_count: int = 0
    create_count: int = 0
    skip_count: int = 0

    @property
    def total(self) -> int:
        return self.reuse_count + self.create_count + self.skip_count

    @property
    def total_to_import(self) -> int:
        return self.reuse_count + self.create_count

    @property
    def can_proceed(self) -> bool:
        return self.total_to_import > 0


class ConfidentProgress(BaseModel):
    """How many confident matches are currently approved. Display only."""

    approved_count: int = 0
    total: int = 0

    @property
    def all_approved(self) -> bool:
        """False when there are no confident matches to approve."""
        return self.total > 0 and self.approved_count == self.total


class ImportStats(BaseModel):
    """Full review summary across exercises, sets and notes."""

    total_exercises: int = 0
    exercises_to_create: int = 0
    exercises_to_reuse: int = 0
    exercises_to_skip: int = 0
    exercises_with_matches: int = 0

    total_sets: int = 0
    sets_to_create: int = 0
    sets_to_skip: int = 0
    eligible_sets: int = 0

    total_notes: int = 0
    notes_to_create: int = 0
    notes_to_skip: int = 0

    patient_bound: bool = False

    @property
    def exercises_to_import(self) -> int:
        return self.exercises_to_create + self.exercises_to_reuse

    @property
    def notes_require_patient(self) -> bool:
        """Notes marked for creation cannot be imported without a patient."""
        return self.notes_to_create > 0 and not self.patient_bound


def compute_exercise_stats(decisions: Mapping[str, ExerciseDecision]) -> ExerciseStats:
    """Count exercise decisions by action."""
    stats = ExerciseStats()
    for decision in decisions.values():
        if decision.action == ExerciseAction.REUSE.value:
            stats.reuse_count += 1
        elif decision.action == ExerciseAction.CREATE.value:
            stats.create_count += 1
        else:
            stats.skip_count += 1
    return stats


def compute_confident_progress(
    confident_exercises: Sequence[ExtractedExercise],
    decisions: Mapping[str, ExerciseDecision],
) -> ConfidentProgress:
    """Approved (reuse) count within the confident bucket."""
    approved = sum(
        1
        for exercise in confident_exercises
        if (d := decisions.get(exercise.temp_id)) is not None
        and d.action == ExerciseAction.REUSE.value
    )
    return ConfidentProgress(approved_count=approved, total=len(confident_exercises))


def _count_item_actions(decisions: Mapping[str, Union[ExerciseSetDecision, ClinicalNoteDecision]]) -> tuple[int, int]:
    create = sum(1 for d in decisions.values() if d.action == ItemAction.CREATE)
    return create, len(decisions) - create


def compute_import_stats(
    exercises: Sequence[ExtractedExercise],
    exercise_sets: Sequence[ExtractedExerciseSet],
    clinical_notes: Sequence[ExtractedClinicalNote],
    suggestions_map: Mapping[str, Sequence[MatchSuggestion]],
    exercise_decisions: Mapping[str, ExerciseDecision],
    set_decisions: Mapping[str, ExerciseSetDecision],
    note_decisions: Mapping[str, ClinicalNoteDecision],
    patient_id: Optional[str] = None,
) -> ImportStats:
    """Summarize the whole review. An empty extraction gives all zeros."""
    exercise_stats = compute_exercise_stats(exercise_decisions)
    sets_to_create, sets_to_skip = _count_item_actions(set_decisions)
    notes_to_create, notes_to_skip = _count_item_actions(note_decisions)

    return ImportStats(
        total_exercises=len(exercises),
        exercises_to_create=exercise_stats.create_count,
        exercises_to_reuse=exercise_stats.reuse_count,
        exercises_to_skip=exercise_stats.skip_count,
        exercises_with_matches=sum(1 for e in exercises if suggestions_map.get(e.temp_id)),
        total_sets=len(exercise_sets),
        sets_to_create=sets_to_create,
        sets_to_skip=sets_to_skip,
        eligible_sets=sum(1 for s in exercise_sets if is_set_eligible(s, exercise_decisions)),
        total_notes=len(clinical_notes),
        notes_to_create=notes_to_create,
        notes_to_skip=notes_to_skip,
        patient_bound=bool(patient_id),
    )
