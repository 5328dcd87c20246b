"""Review commands and the reducer that applies them.

Every user action on the review screen is expressed as a command value and
processed by ``apply_command``. Bulk commands publish a complete new
snapshot of exercise decisions in one step.
"""
from __future__ import annotations

import logging
from typing import Annotated, Any, Callable, Literal, Optional, Union

from pydantic import BaseModel, Field

from rehab_import.exceptions import UnknownItemError
from rehab_import.models.decisions import ExerciseAction, ExerciseEdits, ItemAction
from rehab_import.models.extraction import MatchSuggestion
from rehab_import.reconcile.bulk import BulkOperation, apply_bulk_operation, changed_ids
from rehab_import.reconcile.dependency import is_set_eligible
from rehab_import.reconcile.state import ImportSessionState, freeze_suggestions

logger = logging.getLogger(__name__)


class _Command(BaseModel):
    def changes(self) -> dict[str, Any]:
        """Fields the caller set explicitly, excluding routing fields."""
        return self.model_dump(exclude_unset=True, exclude={"command", "temp_id"})


# ── Single-item commands ──────────────────────────────────────────────────────


class SetExerciseDecision(_Command):
    """Partial update of one exercise decision."""

    command: Literal["set_exercise_decision"] = "set_exercise_decision"
    temp_id: str
    action: Optional[ExerciseAction] = None
    reuse_exercise_id: Optional[str] = None
    edited_data: Optional[ExerciseEdits] = None


class SetExerciseSetDecision(_Command):
    command: Literal["set_exercise_set_decision"] = "set_exercise_set_decision"
    temp_id: str
    action: Optional[ItemAction] = None
    edited_name: Optional[str] = None
    edited_description: Optional[str] = None


class SetClinicalNoteDecision(_Command):
    command: Literal["set_clinical_note_decision"] = "set_clinical_note_decision"
    temp_id: str
    action: Optional[ItemAction] = None
    edited_content: Optional[str] = None


class RefreshSuggestions(_Command):
    """Replace one exercise's suggestions after a "change match" search."""

    command: Literal["refresh_suggestions"] = "refresh_suggestions"
    temp_id: str
    suggestions: list[MatchSuggestion] = Field(default_factory=list)


# ── Bulk commands ─────────────────────────────────────────────────────────────


class ApproveAllConfident(_Command):
    command: Literal["approve_all_confident"] = "approve_all_confident"


class UseAllMatched(_Command):
    command: Literal["use_all_matched"] = "use_all_matched"


class SetAllCreate(_Command):
    command: Literal["set_all_create"] = "set_all_create"


class SetAllSkip(_Command):
    command: Literal["set_all_skip"] = "set_all_skip"


# ── Session flags ─────────────────────────────────────────────────────────────


class SetPatient(_Command):
    command: Literal["set_patient"] = "set_patient"
    patient_id: Optional[str] = None


class SetAssignSetsToPatient(_Command):
    command: Literal["set_assign_sets_to_patient"] = "set_assign_sets_to_patient"
    enabled: bool


class SetCreateSetAfterImport(_Command):
    command: Literal["set_create_set_after_import"] = "set_create_set_after_import"
    enabled: bool


ReviewCommand = Annotated[
    Union[
        SetExerciseDecision,
        SetExerciseSetDecision,
        SetClinicalNoteDecision,
        RefreshSuggestions,
        ApproveAllConfident,
        UseAllMatched,
        SetAllCreate,
        SetAllSkip,
        SetPatient,
        SetAssignSetsToPatient,
        SetCreateSetAfterImport,
    ],
    Field(discriminator="command"),
]


# ── Reducer ───────────────────────────────────────────────────────────────────


def _require(kind: str, temp_id: str, known: frozenset[str]) -> None:
    if temp_id not in known:
        raise UnknownItemError(kind, temp_id)


def _set_exercise_decision(state: ImportSessionState, command: SetExerciseDecision) -> list[str]:
    _require("exercise", command.temp_id, state.exercise_ids)
    state.exercise_decisions.merge(command.temp_id, command.changes())
    return [command.temp_id]


def _set_exercise_set_decision(state: ImportSessionState, command: SetExerciseSetDecision) -> list[str]:
    _require("set", command.temp_id, state.set_ids)
    decision = state.set_decisions.merge(command.temp_id, command.changes())
    if decision.action == ItemAction.CREATE:
        exercise_set = next(s for s in state.analysis.exercise_sets if s.temp_id == command.temp_id)
        if not is_set_eligible(exercise_set, state.exercise_decisions):
            logger.warning(
                "Set %s marked for creation but has no active exercises; it will not be imported",
                command.temp_id,
            )
    return [command.temp_id]


def _set_clinical_note_decision(state: ImportSessionState, command: SetClinicalNoteDecision) -> list[str]:
    _require("note", command.temp_id, state.note_ids)
    state.note_decisions.merge(command.temp_id, command.changes())
    return [command.temp_id]


def _refresh_suggestions(state: ImportSessionState, command: RefreshSuggestions) -> list[str]:
    _require("exercise", command.temp_id, state.exercise_ids)
    state.suggestions = freeze_suggestions({**state.suggestions, command.temp_id: command.suggestions})
    return [command.temp_id]


def _bulk(operation: BulkOperation) -> Callable[[ImportSessionState, Any], list[str]]:
    def handler(state: ImportSessionState, command: Any) -> list[str]:
        before = state.exercise_decisions.snapshot()
        after = apply_bulk_operation(
            operation,
            before,
            state.analysis.exercises,
            state.suggestions,
            state.confident_threshold,
        )
        state.exercise_decisions.replace_all(after)
        return changed_ids(before, after)

    return handler


def _set_patient(state: ImportSessionState, command: SetPatient) -> list[str]:
    state.patient_id = command.patient_id or None
    return []


def _set_assign_sets(state: ImportSessionState, command: SetAssignSetsToPatient) -> list[str]:
    state.assign_sets_to_patient = command.enabled
    return []


def _set_create_set_after_import(state: ImportSessionState, command: SetCreateSetAfterImport) -> list[str]:
    state.create_set_after_import = command.enabled
    return []


_HANDLERS: dict[type, Callable[[ImportSessionState, Any], list[str]]] = {
    SetExerciseDecision: _set_exercise_decision,
    SetExerciseSetDecision: _set_exercise_set_decision,
    SetClinicalNoteDecision: _set_clinical_note_decision,
    RefreshSuggestions: _refresh_suggestions,
    ApproveAllConfident: _bulk(BulkOperation.APPROVE_ALL_CONFIDENT),
    UseAllMatched: _bulk(BulkOperation.USE_ALL_MATCHED),
    SetAllCreate: _bulk(BulkOperation.SET_ALL_CREATE),
    SetAllSkip: _bulk(BulkOperation.SET_ALL_SKIP),
    SetPatient: _set_patient,
    SetAssignSetsToPatient: _set_assign_sets,
    SetCreateSetAfterImport: _set_create_set_after_import,
}


def apply_command(state: ImportSessionState, command: ReviewCommand) -> list[str]:
    """Apply one command to the session state.

    Returns:
        Temp ids whose decision or suggestions changed.

    Raises:
        UnknownItemError: If the command names a temp id not in the session.
        InvalidDecisionError: If the update would leave a decision invalid.
    """
    handler = _HANDLERS.get(type(command))
    if handler is None:
        raise TypeError(f"Unsupported review command: {type(command).__name__}")
    return handler(state, command)
