"""Mutable state of one import review session."""
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional, Union

from rehab_import.matching.classifier import CONFIDENT_THRESHOLD, default_decision
from rehab_import.models.decisions import (
    ClinicalNoteDecision,
    ExerciseDecision,
    ExerciseSetDecision,
    ItemAction,
)
from rehab_import.models.extraction import DocumentAnalysisResult, MatchSuggestion
from rehab_import.reconcile.store import (
    DecisionStore,
    exercise_decision_store,
    note_decision_store,
    set_decision_store,
)

SuggestionsMap = Mapping[str, tuple[MatchSuggestion, ...]]


def freeze_suggestions(raw: Mapping[str, Union[list[MatchSuggestion], tuple[MatchSuggestion, ...]]]) -> SuggestionsMap:
    """Read-only copy of a suggestion map; lists become tuples."""
    return MappingProxyType({temp_id: tuple(items) for temp_id, items in raw.items()})


@dataclass
class ImportSessionState:
    """Decision stores plus the session flags.

    The analysis result and suggestion snapshot are read-only; a suggestion
    refresh swaps in a new mapping instead of editing the old one.
    """

    analysis: DocumentAnalysisResult
    suggestions: SuggestionsMap
    exercise_decisions: DecisionStore[ExerciseDecision]
    set_decisions: DecisionStore[ExerciseSetDecision]
    note_decisions: DecisionStore[ClinicalNoteDecision]
    confident_threshold: float = CONFIDENT_THRESHOLD
    patient_id: Optional[str] = None
    assign_sets_to_patient: bool = True
    create_set_after_import: bool = False
    exercise_ids: frozenset[str] = field(init=False)
    set_ids: frozenset[str] = field(init=False)
    note_ids: frozenset[str] = field(init=False)

    def __post_init__(self) -> None:
        self.exercise_ids = frozenset(e.temp_id for e in self.analysis.exercises)
        self.set_ids = frozenset(s.temp_id for s in self.analysis.exercise_sets)
        self.note_ids = frozenset(n.temp_id for n in self.analysis.clinical_notes)

    @classmethod
    def initialize(
        cls,
        analysis: DocumentAnalysisResult,
        confident_threshold: float = CONFIDENT_THRESHOLD,
        patient_id: Optional[str] = None,
    ) -> "ImportSessionState":
        """Build the starting state with a default decision for every item.

        Exercises get their bucket default; sets and notes start as create.
        """
        suggestions = freeze_suggestions(analysis.match_suggestions)
        exercise_decisions = {
            e.temp_id: default_decision(e.temp_id, suggestions.get(e.temp_id), confident_threshold)
            for e in analysis.exercises
        }
        set_decisions = {
            s.temp_id: ExerciseSetDecision(temp_id=s.temp_id, action=ItemAction.CREATE)
            for s in analysis.exercise_sets
        }
        note_decisions = {
            n.temp_id: ClinicalNoteDecision(temp_id=n.temp_id, action=ItemAction.CREATE)
            for n in analysis.clinical_notes
        }
        return cls(
            analysis=analysis,
            suggestions=suggestions,
            exercise_decisions=exercise_decision_store(exercise_decisions),
            set_decisions=set_decision_store(set_decisions),
            note_decisions=note_decision_store(note_decisions),
            confident_threshold=confident_threshold,
            patient_id=patient_id,
        )
