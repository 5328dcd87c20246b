"""Lightweight text similarity for exercise and patient names.

A heuristic score, not a metric: it is not symmetric in every case and does
not normalize punctuation.
"""
from __future__ import annotations

import math
from typing import Optional

EXACT_SCORE = 100
CONTAINS_SCORE = 80
WORD_OVERLAP_WEIGHT = 70


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def similarity_score(query: Optional[str], target: Optional[str]) -> int:
    """Score how closely ``target`` matches ``query`` on a 0-100 scale.

    Args:
        query: Text being searched for (e.g. a detected patient name).
        target: Candidate text (e.g. a roster full name).

    Returns:
        100 for an exact match, 80 when one contains the other, otherwise up
        to 70 in proportion to overlapping words, and 0 with no overlap.
    """
    q = (query or "").lower().strip()
    t = (target or "").lower().strip()
    if not q or not t:
        return 0

    if q == t:
        return EXACT_SCORE

    if q in t or t in q:
        return CONTAINS_SCORE

    q_words = q.split()
    t_words = t.split()

    matched = sum(
        1 for q_word in q_words if any(q_word in t_word or t_word in q_word for t_word in t_words)
    )
    if matched == 0:
        return 0

    return _round_half_up(matched / max(len(q_words), len(t_words)) * WORD_OVERLAP_WEIGHT)
