"""Per-item review decisions.

Exercise decisions are a tagged union on ``action`` so a reuse decision
always carries its target and create/skip decisions never do.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Literal, Mapping, Optional, Union

from pydantic import Field, TypeAdapter, ValidationError

from rehab_import.exceptions import InvalidDecisionError
from rehab_import.models.extraction import CamelModel, ExerciseSide, ExerciseType


class ExerciseAction(str, Enum):
    CREATE = "create"
    REUSE = "reuse"
    SKIP = "skip"


class ItemAction(str, Enum):
    """Actions available for sets and notes."""

    CREATE = "create"
    SKIP = "skip"


class ExerciseEdits(CamelModel):
    """User overrides applied to an extracted exercise before it is created."""

    name: Optional[str] = None
    description: Optional[str] = None
    type: Optional[ExerciseType] = None
    sets: Optional[int] = None
    reps: Optional[int] = None
    duration: Optional[int] = None
    hold_time: Optional[int] = None
    rest_between_sets: Optional[int] = None
    rest_between_reps: Optional[int] = None
    exercise_side: Optional[ExerciseSide] = None
    suggested_tags: Optional[list[str]] = None
    notes: Optional[str] = None


class _ExerciseDecisionBase(CamelModel):
    temp_id: str
    edited_data: Optional[ExerciseEdits] = None


class CreateDecision(_ExerciseDecisionBase):
    """Create a new catalog exercise from the extracted one."""

    action: Literal["create"] = "create"

    @property
    def reuse_exercise_id(self) -> None:
        return None


class ReuseDecision(_ExerciseDecisionBase):
    """Link the extracted exercise to an existing catalog exercise."""

    action: Literal["reuse"] = "reuse"
    reuse_exercise_id: str = Field(..., min_length=1)


class SkipDecision(_ExerciseDecisionBase):
    """Leave the extracted exercise out of the import."""

    action: Literal["skip"] = "skip"

    @property
    def reuse_exercise_id(self) -> None:
        return None


ExerciseDecision = Annotated[
    Union[CreateDecision, ReuseDecision, SkipDecision],
    Field(discriminator="action"),
]

exercise_decision_adapter: TypeAdapter[ExerciseDecision] = TypeAdapter(ExerciseDecision)


class ExerciseSetDecision(CamelModel):
    temp_id: str
    action: ItemAction = ItemAction.CREATE
    edited_name: Optional[str] = None
    edited_description: Optional[str] = None


class ClinicalNoteDecision(CamelModel):
    temp_id: str
    action: ItemAction = ItemAction.CREATE
    edited_content: Optional[str] = None


# ── Merge helpers ─────────────────────────────────────────────────────────────


def _normalize_action(temp_id: str, action: Any, allowed: type[Enum]) -> str:
    try:
        return allowed(action).value
    except ValueError as e:
        raise InvalidDecisionError(f"Invalid action {action!r} for {temp_id}") from e


def merge_exercise_decision(
    existing: Optional[ExerciseDecision],
    temp_id: str,
    partial: Mapping[str, Any],
) -> ExerciseDecision:
    """Shallow-merge ``partial`` into an exercise decision.

    Switching to create or skip drops any reuse target. Switching to reuse
    requires ``reuse_exercise_id`` in the same partial. A bare
    ``reuse_exercise_id`` retargets an existing reuse decision.

    Raises:
        InvalidDecisionError: If the merged record would be invalid.
    """
    data: dict[str, Any] = existing.model_dump() if existing is not None else {}
    data.update(partial)
    data["temp_id"] = temp_id

    if data.get("action") is None:
        raise InvalidDecisionError(f"Decision for {temp_id} has no action")
    action = _normalize_action(temp_id, data["action"], ExerciseAction)
    data["action"] = action

    target = partial.get("reuse_exercise_id")
    if action == ExerciseAction.REUSE.value:
        if "action" in partial and not target:
            raise InvalidDecisionError(
                f"Reuse decision for {temp_id} requires reuse_exercise_id"
            )
        data["reuse_exercise_id"] = target or data.get("reuse_exercise_id")
    else:
        if target:
            raise InvalidDecisionError(
                f"reuse_exercise_id given for {temp_id} but action is {action}"
            )
        data.pop("reuse_exercise_id", None)

    try:
        return exercise_decision_adapter.validate_python(data)
    except ValidationError as e:
        raise InvalidDecisionError(f"Invalid decision for {temp_id}: {e}") from e


def merge_item_decision(
    model: type[Union[ExerciseSetDecision, ClinicalNoteDecision]],
    existing: Optional[Union[ExerciseSetDecision, ClinicalNoteDecision]],
    temp_id: str,
    partial: Mapping[str, Any],
):
    """Shallow-merge ``partial`` into a set or note decision."""
    data: dict[str, Any] = existing.model_dump() if existing is not None else {}
    data.update(partial)
    data["temp_id"] = temp_id
    if "action" in data:
        data["action"] = _normalize_action(temp_id, data["action"], ItemAction)

    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise InvalidDecisionError(f"Invalid decision for {temp_id}: {e}") from e


def merge_set_decision(
    existing: Optional[ExerciseSetDecision], temp_id: str, partial: Mapping[str, Any]
) -> ExerciseSetDecision:
    return merge_item_decision(ExerciseSetDecision, existing, temp_id, partial)


def merge_note_decision(
    existing: Optional[ClinicalNoteDecision], temp_id: str, partial: Mapping[str, Any]
) -> ClinicalNoteDecision:
    return merge_item_decision(ClinicalNoteDecision, existing, temp_id, partial)
