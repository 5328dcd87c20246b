"""Text similarity, match classification and patient matching."""

from rehab_import.matching.similarity import similarity_score
from rehab_import.matching.classifier import (
    CONFIDENT_THRESHOLD,
    ExerciseBuckets,
    MatchBucket,
    categorize_exercises,
    classify,
    classify_suggestions,
    default_decision,
    top_suggestion,
)
from rehab_import.matching.patient import filter_patients, suggest_patient

__all__ = [
    "similarity_score",
    "CONFIDENT_THRESHOLD",
    "ExerciseBuckets",
    "MatchBucket",
    "categorize_exercises",
    "classify",
    "classify_suggestions",
    "default_decision",
    "top_suggestion",
    "filter_patients",
    "suggest_patient",
]
