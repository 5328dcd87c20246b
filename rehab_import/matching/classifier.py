"""Confidence classification of extracted exercises against catalog candidates.

Suggestion lists are sorted by the catalog search service; only the first
entry is inspected and the list is never re-sorted here.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Mapping, Optional, Sequence

from pydantic import BaseModel, Field

from rehab_import.models.decisions import CreateDecision, ExerciseDecision, ReuseDecision
from rehab_import.models.extraction import ExtractedExercise, MatchSuggestion

logger = logging.getLogger(__name__)

CONFIDENT_THRESHOLD = 0.7


class MatchBucket(str, Enum):
    """Review section an extracted exercise is shown in."""

    NEW = "new"
    CONFIDENT = "confident"
    UNCERTAIN = "uncertain"


def top_suggestion(suggestions: Optional[Sequence[MatchSuggestion]]) -> Optional[MatchSuggestion]:
    """Best candidate, or None when there are no suggestions."""
    if not suggestions:
        return None
    return suggestions[0]


def classify_suggestions(
    suggestions: Optional[Sequence[MatchSuggestion]],
    threshold: float = CONFIDENT_THRESHOLD,
) -> MatchBucket:
    """Bucket a suggestion list: new, confident or uncertain."""
    best = top_suggestion(suggestions)
    if best is None:
        return MatchBucket.NEW
    if best.confidence >= threshold:
        return MatchBucket.CONFIDENT
    return MatchBucket.UNCERTAIN


def classify(
    exercise: ExtractedExercise,
    suggestions: Optional[Sequence[MatchSuggestion]],
    threshold: float = CONFIDENT_THRESHOLD,
) -> MatchBucket:
    """Classify one extracted exercise by its top suggestion."""
    bucket = classify_suggestions(suggestions, threshold)
    logger.debug("Classified %s (%s) as %s", exercise.temp_id, exercise.name, bucket.value)
    return bucket


def default_decision(
    temp_id: str,
    suggestions: Optional[Sequence[MatchSuggestion]],
    threshold: float = CONFIDENT_THRESHOLD,
) -> ExerciseDecision:
    """Initial decision for a freshly classified exercise.

    Confident matches reuse the top suggestion. New and uncertain exercises
    default to create, so an untouched uncertain item looks the same as one
    the user chose to create.
    """
    if classify_suggestions(suggestions, threshold) == MatchBucket.CONFIDENT:
        return ReuseDecision(temp_id=temp_id, reuse_exercise_id=suggestions[0].existing_exercise_id)
    return CreateDecision(temp_id=temp_id)


class ExerciseBuckets(BaseModel):
    """Extracted exercises grouped by bucket, each group in extraction order."""

    confident: list[ExtractedExercise] = Field(default_factory=list)
    new: list[ExtractedExercise] = Field(default_factory=list)
    uncertain: list[ExtractedExercise] = Field(default_factory=list)

    def get(self, bucket: MatchBucket) -> list[ExtractedExercise]:
        return getattr(self, bucket.value)

    def counts(self) -> dict[str, int]:
        return {b.value: len(self.get(b)) for b in MatchBucket}


def categorize_exercises(
    exercises: Sequence[ExtractedExercise],
    suggestions_map: Mapping[str, Sequence[MatchSuggestion]],
    threshold: float = CONFIDENT_THRESHOLD,
) -> ExerciseBuckets:
    """Split exercises into confident, new and uncertain groups."""
    buckets = ExerciseBuckets()
    for exercise in exercises:
        bucket = classify(exercise, suggestions_map.get(exercise.temp_id), threshold)
        buckets.get(bucket).append(exercise)
    return buckets
