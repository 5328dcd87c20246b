"""Import request building from the final review decisions.

Set eligibility is re-checked here: a set still marked for creation whose
exercises were all skipped is left out.
"""
from __future__ import annotations

import logging
from typing import Optional

from rehab_import.models.decisions import ExerciseAction, ExerciseEdits, ItemAction
from rehab_import.models.extraction import ExtractedExercise
from rehab_import.models.payload import (
    ClinicalNoteImportItem,
    DocumentImportRequest,
    ExerciseImportItem,
    ExerciseSetImportItem,
    ExerciseSetMappingImportItem,
)
from rehab_import.reconcile.dependency import active_member_ids
from rehab_import.reconcile.state import ImportSessionState

logger = logging.getLogger(__name__)

IMPORTED_SET_TEMP_ID = "imported-set"


def _enum_value(value):
    return getattr(value, "value", value)


def exercise_import_item(
    exercise: ExtractedExercise,
    edits: Optional[ExerciseEdits],
    default_sets: int = 3,
) -> ExerciseImportItem:
    """Merge user edits over the extracted exercise.

    Blank text edits fall back to the extracted value; numeric edits apply
    whenever they are set.
    """
    edits = edits or ExerciseEdits()

    def pick(name: str):
        edited = getattr(edits, name)
        return edited if edited is not None else getattr(exercise, name)

    return ExerciseImportItem(
        temp_id=exercise.temp_id,
        name=edits.name or exercise.name,
        description=edits.description or exercise.description,
        type=_enum_value(edits.type or exercise.type),
        sets=edits.sets or exercise.sets or default_sets,
        reps=pick("reps"),
        duration=pick("duration"),
        hold_time=pick("hold_time"),
        rest_sets=pick("rest_between_sets"),
        rest_reps=pick("rest_between_reps"),
        exercise_side=_enum_value(edits.exercise_side or exercise.exercise_side),
        tag_ids=list(edits.suggested_tags or exercise.suggested_tags or []),
        notes=edits.notes or exercise.notes,
    )


def build_import_request(
    state: ImportSessionState,
    default_sets: int = 3,
    imported_set_name: str = "Imported exercises",
) -> DocumentImportRequest:
    """Build the commit payload from the session's current decisions.

    Clinical notes are only included when a patient is bound.
    """
    analysis = state.analysis
    exercise_decisions = state.exercise_decisions

    exercises_to_create: list[ExerciseImportItem] = []
    exercises_to_reuse: dict[str, str] = {}
    imported_ids: list[str] = []

    for exercise in analysis.exercises:
        decision = exercise_decisions.get(exercise.temp_id)
        if decision is None or decision.action == ExerciseAction.SKIP.value:
            continue

        if decision.action == ExerciseAction.REUSE.value:
            exercises_to_reuse[exercise.temp_id] = decision.reuse_exercise_id
        else:
            exercises_to_create.append(
                exercise_import_item(exercise, decision.edited_data, default_sets)
            )
        imported_ids.append(exercise.temp_id)

    exercise_sets_to_create: list[ExerciseSetImportItem] = []
    for exercise_set in analysis.exercise_sets:
        decision = state.set_decisions.get(exercise_set.temp_id)
        if decision is None or decision.action == ItemAction.SKIP:
            continue

        members = active_member_ids(exercise_set, exercise_decisions)
        if not members:
            logger.info("Dropping set %s: no active exercises", exercise_set.temp_id)
            continue

        exercise_sets_to_create.append(
            ExerciseSetImportItem(
                temp_id=exercise_set.temp_id,
                name=decision.edited_name or exercise_set.name,
                description=decision.edited_description or exercise_set.description,
                exercises=[
                    ExerciseSetMappingImportItem(exercise_temp_id=temp_id, order=index)
                    for index, temp_id in enumerate(members, start=1)
                ],
            )
        )

    if state.create_set_after_import and len(imported_ids) > 1:
        exercise_sets_to_create.append(
            ExerciseSetImportItem(
                temp_id=IMPORTED_SET_TEMP_ID,
                name=imported_set_name,
                exercises=[
                    ExerciseSetMappingImportItem(exercise_temp_id=temp_id, order=index)
                    for index, temp_id in enumerate(imported_ids, start=1)
                ],
            )
        )

    clinical_notes_to_create: list[ClinicalNoteImportItem] = []
    for note in analysis.clinical_notes:
        decision = state.note_decisions.get(note.temp_id)
        if decision is None or decision.action == ItemAction.SKIP:
            continue
        if not state.patient_id:
            continue
        clinical_notes_to_create.append(
            ClinicalNoteImportItem(
                temp_id=note.temp_id,
                note_type=note.note_type,
                title=note.title,
                content=decision.edited_content or note.content,
            )
        )

    request = DocumentImportRequest(
        patient_id=state.patient_id,
        exercises_to_create=exercises_to_create,
        exercises_to_reuse=exercises_to_reuse,
        exercise_sets_to_create=exercise_sets_to_create,
        clinical_notes_to_create=clinical_notes_to_create,
        assign_to_patient=bool(state.patient_id) and state.assign_sets_to_patient,
    )
    logger.info(
        "Built import request: %d to create, %d to reuse, %d sets, %d notes",
        len(exercises_to_create),
        len(exercises_to_reuse),
        len(exercise_sets_to_create),
        len(clinical_notes_to_create),
    )
    return request
