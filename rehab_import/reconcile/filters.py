"""Review list filters and display helpers."""
from __future__ import annotations

from enum import Enum
from typing import Mapping, Optional, Sequence

from rehab_import.models.decisions import ExerciseDecision
from rehab_import.models.extraction import ExtractedExercise, MatchSuggestion


class ExerciseFilter(str, Enum):
    ALL = "all"
    CREATE = "create"
    REUSE = "reuse"
    SKIP = "skip"
    MATCHED = "matched"


def filter_exercises(
    exercises: Sequence[ExtractedExercise],
    decisions: Mapping[str, ExerciseDecision],
    suggestions_map: Mapping[str, Sequence[MatchSuggestion]],
    exercise_filter: ExerciseFilter = ExerciseFilter.ALL,
) -> list[ExtractedExercise]:
    """Exercises visible under ``exercise_filter``, in extraction order."""
    if exercise_filter == ExerciseFilter.ALL:
        return list(exercises)
    if exercise_filter == ExerciseFilter.MATCHED:
        return [e for e in exercises if suggestions_map.get(e.temp_id)]

    return [
        e
        for e in exercises
        if (d := decisions.get(e.temp_id)) is not None and d.action == exercise_filter.value
    ]


def reuse_target_name(
    decision: Optional[ExerciseDecision],
    suggestions: Optional[Sequence[MatchSuggestion]],
) -> Optional[str]:
    """Catalog name of a reuse target, looked up in the exercise's suggestions.

    Returns None when the decision is not a reuse or its target is no longer
    among the suggestions; stale targets are not corrected.
    """
    if decision is None or decision.reuse_exercise_id is None:
        return None
    for suggestion in suggestions or ():
        if suggestion.existing_exercise_id == decision.reuse_exercise_id:
            return suggestion.existing_exercise_name
    return None
