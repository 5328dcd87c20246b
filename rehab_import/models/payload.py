"""Import request and result exchanged with the persistence service."""

from typing import Optional

from pydantic import Field

from rehab_import.models.extraction import CamelModel


class ExerciseImportItem(CamelModel):
    """Exercise to create in the catalog."""

    temp_id: str
    name: str
    description: Optional[str] = None
    type: str
    sets: int
    reps: Optional[int] = None
    duration: Optional[int] = None
    hold_time: Optional[int] = None
    rest_sets: Optional[int] = None
    rest_reps: Optional[int] = None
    exercise_side: Optional[str] = None
    tag_ids: list[str] = Field(default_factory=list)
    notes: Optional[str] = None


class ExerciseSetMappingImportItem(CamelModel):
    """Position of an exercise inside a created set."""

    exercise_temp_id: str
    order: int
    sets: Optional[int] = None
    reps: Optional[int] = None
    duration: Optional[int] = None
    custom_name: Optional[str] = None
    notes: Optional[str] = None


class ExerciseSetImportItem(CamelModel):
    temp_id: str
    name: str
    description: Optional[str] = None
    exercises: list[ExerciseSetMappingImportItem] = Field(default_factory=list)
    is_template: bool = False


class ClinicalNoteImportItem(CamelModel):
    temp_id: str
    note_type: str
    title: Optional[str] = None
    content: str


class DocumentImportRequest(CamelModel):
    """Everything the persistence service needs to commit a reviewed import."""

    patient_id: Optional[str] = None
    exercises_to_create: list[ExerciseImportItem] = Field(default_factory=list)
    exercises_to_reuse: dict[str, str] = Field(
        default_factory=dict, description="temp_id -> existing exercise id"
    )
    exercise_sets_to_create: list[ExerciseSetImportItem] = Field(default_factory=list)
    clinical_notes_to_create: list[ClinicalNoteImportItem] = Field(default_factory=list)
    assign_to_patient: bool = False

    @property
    def is_empty(self) -> bool:
        return not (
            self.exercises_to_create
            or self.exercises_to_reuse
            or self.exercise_sets_to_create
            or self.clinical_notes_to_create
        )


class DocumentImportResult(CamelModel):
    """Response of the persistence service after committing an import."""

    success: bool
    message: str = ""
    exercises_created: int = 0
    exercises_reused: int = 0
    exercise_sets_created: int = 0
    clinical_notes_created: int = 0
    exercise_id_mapping: dict[str, str] = Field(default_factory=dict)
    exercise_set_id_mapping: dict[str, str] = Field(default_factory=dict)
    clinical_note_id_mapping: dict[str, str] = Field(default_factory=dict)
    errors: list[str] = Field(default_factory=list)

    @property
    def total_created(self) -> int:
        return self.exercises_created + self.exercise_sets_created + self.clinical_notes_created
