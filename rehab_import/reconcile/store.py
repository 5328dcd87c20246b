"""Keyed decision stores, one mutable record per extracted item.

All updates go through ``merge`` so record invariants are enforced in one
place. Bulk updates build a full snapshot and publish it with
``replace_all``.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Callable, Generic, Iterator, Optional, TypeVar

from rehab_import.models.decisions import (
    ClinicalNoteDecision,
    ExerciseDecision,
    ExerciseSetDecision,
    merge_exercise_decision,
    merge_note_decision,
    merge_set_decision,
)

logger = logging.getLogger(__name__)

D = TypeVar("D")

MergeFn = Callable[[Optional[D], str, Mapping[str, Any]], D]


class DecisionStore(Mapping, Generic[D]):
    """Decision records keyed by temp id."""

    def __init__(
        self,
        kind: str,
        merge_fn: MergeFn,
        records: Optional[Mapping[str, D]] = None,
    ):
        self.kind = kind
        self._merge_fn = merge_fn
        self._records: dict[str, D] = dict(records or {})

    # Mapping protocol

    def __getitem__(self, temp_id: str) -> D:
        return self._records[temp_id]

    def __iter__(self) -> Iterator[str]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __repr__(self) -> str:
        return f"DecisionStore(kind={self.kind!r}, records={len(self._records)})"

    # Store operations

    def get(self, temp_id: str, default: Optional[D] = None) -> Optional[D]:
        return self._records.get(temp_id, default)

    def merge(self, temp_id: str, partial: Mapping[str, Any]) -> D:
        """Merge ``partial`` into the record for ``temp_id``, creating it if absent.

        Fields not named in ``partial`` are left as they are.

        Raises:
            InvalidDecisionError: If the merged record would be invalid. The
                store is left unchanged.
        """
        record = self._merge_fn(self._records.get(temp_id), temp_id, partial)
        self._records[temp_id] = record
        logger.debug("Merged %s decision %s: %s", self.kind, temp_id, dict(partial))
        return record

    def all(self) -> dict[str, D]:
        """Plain copy of every record."""
        return dict(self._records)

    def snapshot(self) -> dict[str, D]:
        return dict(self._records)

    def replace_all(self, records: Mapping[str, D]) -> None:
        """Publish a complete new set of records in one step."""
        self._records = dict(records)


def exercise_decision_store(
    records: Optional[Mapping[str, ExerciseDecision]] = None,
) -> DecisionStore[ExerciseDecision]:
    return DecisionStore("exercise", merge_exercise_decision, records)


def set_decision_store(
    records: Optional[Mapping[str, ExerciseSetDecision]] = None,
) -> DecisionStore[ExerciseSetDecision]:
    return DecisionStore("set", merge_set_decision, records)


def note_decision_store(
    records: Optional[Mapping[str, ClinicalNoteDecision]] = None,
) -> DecisionStore[ClinicalNoteDecision]:
    return DecisionStore("note", merge_note_decision, records)
