"""
Remedial round word selection.

This module contains ONLY pure Python logic.
NO database, NO Flask dependencies allowed.
"""
import random
from typing import Dict, Iterable, List, Optional, Tuple


def total_errors_by_word(rows: Iterable[Tuple[int, int]]) -> Dict[int, int]:
    """Sum ``(word_id, error_count)`` rows per word."""
    totals: Dict[int, int] = {}
    for word_id, count in rows:
        totals[word_id] = totals.get(word_id, 0) + (count or 0)
    return totals


def select_round_words(
    error_totals: Dict[int, int],
    word_count: int,
    rng: Optional[random.Random] = None,
) -> List[int]:
    """
    Pick up to ``word_count`` word ids, most-missed first.

    Words with equal totals are ordered randomly, so repeated rounds do not
    always present the same words in the same order. Never pads: fewer
    candidates than ``word_count`` yields all of them.

    Args:
        error_totals: Mapping of word id to summed error count (> 0).
        word_count: Maximum number of words to return.
        rng: Source of the tiebreak; a fresh ``random.Random`` when omitted.
    """
    rng = rng or random.Random()
    candidates = [(word_id, count) for word_id, count in error_totals.items() if count > 0]
    ranked = sorted(candidates, key=lambda item: (-item[1], rng.random()))
    return [word_id for word_id, _count in ranked[:word_count]]
