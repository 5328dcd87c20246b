"""Set eligibility derived from member exercise decisions.

Always computed from the live exercise decisions, never cached. A set that
is no longer eligible keeps whatever set decision it had; callers re-check
eligibility before treating a create decision as actionable.
"""
from __future__ import annotations

from typing import Mapping, Optional

from rehab_import.models.decisions import ExerciseAction, ExerciseDecision
from rehab_import.models.extraction import ExtractedExerciseSet


def is_active(decision: Optional[ExerciseDecision]) -> bool:
    """An exercise counts toward its sets unless it is missing or skipped."""
    return decision is not None and decision.action != ExerciseAction.SKIP.value


def active_member_ids(
    exercise_set: ExtractedExerciseSet,
    exercise_decisions: Mapping[str, ExerciseDecision],
) -> list[str]:
    """Member temp ids that are not skipped, in set order."""
    return [
        temp_id
        for temp_id in exercise_set.exercise_temp_ids
        if is_active(exercise_decisions.get(temp_id))
    ]


def is_set_eligible(
    exercise_set: ExtractedExerciseSet,
    exercise_decisions: Mapping[str, ExerciseDecision],
) -> bool:
    """Whether the set may be created: at least one active member exercise."""
    return any(
        is_active(exercise_decisions.get(temp_id)) for temp_id in exercise_set.exercise_temp_ids
    )
