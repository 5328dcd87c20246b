"""Items produced by the document extraction service.

These are read-only snapshots for the lifetime of a review session. The
extraction service speaks camelCase JSON; attributes are snake_case.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model accepting camelCase payloads."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SnapshotModel(CamelModel):
    """Immutable camelCase model for upstream snapshots."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class ExerciseType(str, Enum):
    """How an exercise is dosed."""

    REPS = "reps"
    TIME = "time"
    HOLD = "hold"


class ExerciseSide(str, Enum):
    """Body side an exercise is performed on."""

    NONE = "none"
    LEFT = "left"
    RIGHT = "right"
    BOTH = "both"
    ALTERNATING = "alternating"


class NoteType(str, Enum):
    """Known clinical note kinds. Other values pass through as plain strings."""

    INTERVIEW = "interview"
    EXAMINATION = "examination"
    DIAGNOSIS = "diagnosis"
    PROCEDURE = "procedure"
    OTHER = "other"


class ExtractedExercise(SnapshotModel):
    """Exercise found in the source document."""

    temp_id: str
    name: str
    type: ExerciseType = ExerciseType.REPS
    description: Optional[str] = None
    sets: Optional[int] = None
    reps: Optional[int] = None
    duration: Optional[int] = Field(None, description="Seconds")
    hold_time: Optional[int] = Field(None, description="Seconds")
    rest_between_sets: Optional[int] = None
    rest_between_reps: Optional[int] = None
    exercise_side: Optional[ExerciseSide] = None
    suggested_tags: list[str] = Field(default_factory=list)
    notes: Optional[str] = None
    confidence: float = Field(1.0, ge=0.0, le=1.0, description="Extraction confidence")
    source_line_number: Optional[int] = None
    original_text: Optional[str] = None


class ExtractedExerciseSet(SnapshotModel):
    """Exercise set found in the source document.

    ``exercise_temp_ids`` references extracted exercises; the set does not own them.
    """

    temp_id: str
    name: str
    description: Optional[str] = None
    exercise_temp_ids: list[str] = Field(default_factory=list)
    suggested_frequency: Optional[str] = None
    confidence: float = Field(1.0, ge=0.0, le=1.0)


class ExtractedClinicalNote(SnapshotModel):
    """Clinical note found in the source document."""

    temp_id: str
    note_type: str = NoteType.OTHER.value
    title: Optional[str] = None
    content: str
    points: Optional[list[str]] = None
    confidence: float = Field(1.0, ge=0.0, le=1.0)


class MatchSuggestion(SnapshotModel):
    """Catalog candidate for an extracted exercise.

    Suggestion lists arrive sorted by descending confidence.
    """

    existing_exercise_id: str
    existing_exercise_name: str
    confidence: float = Field(..., ge=0.0, le=1.0)
    match_reason: str = ""
    image_url: Optional[str] = None


class DocumentInfo(SnapshotModel):
    """Document metadata detected during extraction."""

    patient_name: Optional[str] = None
    date: Optional[str] = None
    therapist_name: Optional[str] = None
    clinic_name: Optional[str] = None
    document_type: Optional[str] = None


class DocumentAnalysisResult(SnapshotModel):
    """Complete extraction output for one document."""

    exercises: list[ExtractedExercise] = Field(default_factory=list)
    exercise_sets: list[ExtractedExerciseSet] = Field(default_factory=list)
    clinical_notes: list[ExtractedClinicalNote] = Field(default_factory=list)
    match_suggestions: dict[str, list[MatchSuggestion]] = Field(default_factory=dict)
    document_info: DocumentInfo = Field(default_factory=DocumentInfo)
    raw_text: Optional[str] = None
