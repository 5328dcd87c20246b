"""Decision stores, set dependencies, bulk operations and review stats."""

from rehab_import.reconcile.store import (
    DecisionStore,
    exercise_decision_store,
    note_decision_store,
    set_decision_store,
)
from rehab_import.reconcile.dependency import active_member_ids, is_set_eligible
from rehab_import.reconcile.bulk import (
    BulkOperation,
    apply_bulk_operation,
    approve_all_confident,
    set_all_create,
    set_all_skip,
    use_all_matched,
)
from rehab_import.reconcile.stats import (
    ConfidentProgress,
    ExerciseStats,
    ImportStats,
    compute_confident_progress,
    compute_exercise_stats,
    compute_import_stats,
)
from rehab_import.reconcile.filters import ExerciseFilter, filter_exercises, reuse_target_name
from rehab_import.reconcile.state import ImportSessionState
from rehab_import.reconcile.commands import (
    ApproveAllConfident,
    RefreshSuggestions,
    ReviewCommand,
    SetAllCreate,
    SetAllSkip,
    SetAssignSetsToPatient,
    SetClinicalNoteDecision,
    SetCreateSetAfterImport,
    SetExerciseDecision,
    SetExerciseSetDecision,
    SetPatient,
    UseAllMatched,
    apply_command,
)
from rehab_import.reconcile.payload import build_import_request
from rehab_import.reconcile.session import ImportSession

__all__ = [
    "DecisionStore",
    "exercise_decision_store",
    "note_decision_store",
    "set_decision_store",
    "active_member_ids",
    "is_set_eligible",
    "BulkOperation",
    "apply_bulk_operation",
    "approve_all_confident",
    "set_all_create",
    "set_all_skip",
    "use_all_matched",
    "ConfidentProgress",
    "ExerciseStats",
    "ImportStats",
    "compute_confident_progress",
    "compute_exercise_stats",
    "compute_import_stats",
    "ExerciseFilter",
    "filter_exercises",
    "reuse_target_name",
    "ImportSessionState",
    # Commands
    "ApproveAllConfident",
    "RefreshSuggestions",
    "ReviewCommand",
    "SetAllCreate",
    "SetAllSkip",
    "SetAssignSetsToPatient",
    "SetClinicalNoteDecision",
    "SetCreateSetAfterImport",
    "SetExerciseDecision",
    "SetExerciseSetDecision",
    "SetPatient",
    "UseAllMatched",
    "apply_command",
    "build_import_request",
    "ImportSession",
]
