"""Data models for the import reconciliation engine."""

from rehab_import.models.extraction import (
    DocumentAnalysisResult,
    DocumentInfo,
    ExerciseSide,
    ExerciseType,
    ExtractedClinicalNote,
    ExtractedExercise,
    ExtractedExerciseSet,
    MatchSuggestion,
    NoteType,
)
from rehab_import.models.decisions import (
    ClinicalNoteDecision,
    CreateDecision,
    ExerciseAction,
    ExerciseDecision,
    ExerciseEdits,
    ExerciseSetDecision,
    ItemAction,
    ReuseDecision,
    SkipDecision,
)
from rehab_import.models.patient import PatientOption
from rehab_import.models.payload import (
    ClinicalNoteImportItem,
    DocumentImportRequest,
    DocumentImportResult,
    ExerciseImportItem,
    ExerciseSetImportItem,
    ExerciseSetMappingImportItem,
)

__all__ = [
    "DocumentAnalysisResult",
    "DocumentInfo",
    "ExerciseSide",
    "ExerciseType",
    "ExtractedClinicalNote",
    "ExtractedExercise",
    "ExtractedExerciseSet",
    "MatchSuggestion",
    "NoteType",
    # Decisions
    "ClinicalNoteDecision",
    "CreateDecision",
    "ExerciseAction",
    "ExerciseDecision",
    "ExerciseEdits",
    "ExerciseSetDecision",
    "ItemAction",
    "ReuseDecision",
    "SkipDecision",
    "PatientOption",
    # Import request
    "ClinicalNoteImportItem",
    "DocumentImportRequest",
    "DocumentImportResult",
    "ExerciseImportItem",
    "ExerciseSetImportItem",
    "ExerciseSetMappingImportItem",
]
