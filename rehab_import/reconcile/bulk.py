"""Whole-store transformations over exercise decisions.

Each operation takes a snapshot and returns a new one; the caller publishes
the result in a single step so no half-applied state is observable. Set and
note decisions are never touched here.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Mapping, Sequence

from rehab_import.matching.classifier import (
    CONFIDENT_THRESHOLD,
    MatchBucket,
    classify_suggestions,
)
from rehab_import.models.decisions import (
    ExerciseAction,
    ExerciseDecision,
    merge_exercise_decision,
)
from rehab_import.models.extraction import ExtractedExercise, MatchSuggestion

logger = logging.getLogger(__name__)

Snapshot = dict[str, ExerciseDecision]


class BulkOperation(str, Enum):
    APPROVE_ALL_CONFIDENT = "approve_all_confident"
    USE_ALL_MATCHED = "use_all_matched"
    SET_ALL_CREATE = "set_all_create"
    SET_ALL_SKIP = "set_all_skip"


def _reuse_top(decisions: Snapshot, temp_id: str, suggestions: Sequence[MatchSuggestion]) -> None:
    decisions[temp_id] = merge_exercise_decision(
        decisions.get(temp_id),
        temp_id,
        {"action": ExerciseAction.REUSE.value, "reuse_exercise_id": suggestions[0].existing_exercise_id},
    )


def approve_all_confident(
    decisions: Mapping[str, ExerciseDecision],
    exercises: Sequence[ExtractedExercise],
    suggestions_map: Mapping[str, Sequence[MatchSuggestion]],
    threshold: float = CONFIDENT_THRESHOLD,
) -> Snapshot:
    """Reuse the top suggestion for every confident exercise still set to create.

    Exercises already approved (reuse) or explicitly skipped are left alone,
    so applying this twice gives the same result as applying it once.
    Buckets are taken from the suggestions at call time.
    """
    result: Snapshot = dict(decisions)
    for exercise in exercises:
        suggestions = suggestions_map.get(exercise.temp_id)
        if classify_suggestions(suggestions, threshold) != MatchBucket.CONFIDENT:
            continue
        current = result.get(exercise.temp_id)
        if current is not None and current.action != ExerciseAction.CREATE.value:
            continue
        _reuse_top(result, exercise.temp_id, suggestions)
    return result


def use_all_matched(
    decisions: Mapping[str, ExerciseDecision],
    exercises: Sequence[ExtractedExercise],
    suggestions_map: Mapping[str, Sequence[MatchSuggestion]],
) -> Snapshot:
    """Reuse the top suggestion for every exercise that has any suggestion."""
    result: Snapshot = dict(decisions)
    for exercise in exercises:
        suggestions = suggestions_map.get(exercise.temp_id)
        if suggestions:
            _reuse_top(result, exercise.temp_id, suggestions)
    return result


def _set_all(
    decisions: Mapping[str, ExerciseDecision],
    exercises: Sequence[ExtractedExercise],
    action: ExerciseAction,
) -> Snapshot:
    result: Snapshot = dict(decisions)
    for exercise in exercises:
        result[exercise.temp_id] = merge_exercise_decision(
            result.get(exercise.temp_id),
            exercise.temp_id,
            {"action": action.value, "reuse_exercise_id": None},
        )
    return result


def set_all_create(
    decisions: Mapping[str, ExerciseDecision],
    exercises: Sequence[ExtractedExercise],
) -> Snapshot:
    """Mark every exercise for creation, overriding reuse and skip choices."""
    return _set_all(decisions, exercises, ExerciseAction.CREATE)


def set_all_skip(
    decisions: Mapping[str, ExerciseDecision],
    exercises: Sequence[ExtractedExercise],
) -> Snapshot:
    """Skip every exercise."""
    return _set_all(decisions, exercises, ExerciseAction.SKIP)


def apply_bulk_operation(
    operation: BulkOperation,
    decisions: Mapping[str, ExerciseDecision],
    exercises: Sequence[ExtractedExercise],
    suggestions_map: Mapping[str, Sequence[MatchSuggestion]],
    threshold: float = CONFIDENT_THRESHOLD,
) -> Snapshot:
    """Run one bulk operation over a snapshot of exercise decisions."""
    if operation == BulkOperation.APPROVE_ALL_CONFIDENT:
        result = approve_all_confident(decisions, exercises, suggestions_map, threshold)
    elif operation == BulkOperation.USE_ALL_MATCHED:
        result = use_all_matched(decisions, exercises, suggestions_map)
    elif operation == BulkOperation.SET_ALL_CREATE:
        result = set_all_create(decisions, exercises)
    elif operation == BulkOperation.SET_ALL_SKIP:
        result = set_all_skip(decisions, exercises)
    else:
        raise ValueError(f"Unknown bulk operation: {operation}")

    changed = len(changed_ids(decisions, result))
    logger.info("Bulk %s changed %d of %d exercise decisions", operation.value, changed, len(result))
    return result


def changed_ids(before: Mapping[str, ExerciseDecision], after: Mapping[str, ExerciseDecision]) -> list[str]:
    """Temp ids whose decision differs between two snapshots, in ``after`` order."""
    return [temp_id for temp_id, d in after.items() if before.get(temp_id) != d]
