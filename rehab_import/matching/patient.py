"""Patient matching for the name detected in an imported document."""
from __future__ import annotations

import logging
from typing import Optional, Sequence

from rehab_import.matching.similarity import similarity_score
from rehab_import.models.patient import PatientOption

logger = logging.getLogger(__name__)

SUGGEST_THRESHOLD = 50
FILTER_THRESHOLD = 20
EMAIL_WEIGHT = 0.5


def suggest_patient(
    detected_name: Optional[str],
    roster: Sequence[PatientOption],
    threshold: int = SUGGEST_THRESHOLD,
) -> Optional[PatientOption]:
    """Propose the roster entry whose full name best matches ``detected_name``.

    Ties go to the earliest roster entry. Nothing is proposed unless the best
    score reaches ``threshold``.
    """
    if not detected_name or not roster:
        return None

    best: Optional[PatientOption] = None
    best_score = -1
    for patient in roster:
        score = similarity_score(detected_name, patient.fullname)
        if score > best_score:
            best, best_score = patient, score

    if best is None or best_score < threshold:
        return None

    logger.debug("Suggested patient %s for %r (score %d)", best.id, detected_name, best_score)
    return best


def patient_search_score(query: str, patient: PatientOption) -> float:
    """Combined name and email score used by interactive search."""
    score: float = similarity_score(query, patient.fullname)
    if patient.email:
        score += similarity_score(query, patient.email) * EMAIL_WEIGHT
    return score


def filter_patients(
    query: Optional[str],
    roster: Sequence[PatientOption],
    threshold: float = FILTER_THRESHOLD,
) -> list[PatientOption]:
    """Search the roster, best matches first.

    A blank query returns the roster unchanged. Entries scoring at or below
    ``threshold`` are dropped; equal scores keep roster order.
    """
    if not query or not query.strip():
        return list(roster)

    scored = [(patient_search_score(query, patient), patient) for patient in roster]
    kept = [item for item in scored if item[0] > threshold]
    kept.sort(key=lambda item: item[0], reverse=True)
    return [patient for _, patient in kept]
