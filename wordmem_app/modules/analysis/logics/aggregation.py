"""
Aggregation helpers for the analysis views.

This module contains ONLY pure Python logic.
NO database, NO Flask dependencies allowed.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Sequence

# Tier order is also the output order of mastery summaries
MASTERY_TIERS = ('mastered', 'good', 'needs_practice', 'difficult')

GROUP_BY_CHOICES = ('hour', 'day', 'week', 'month')


@dataclass
class SessionFacts:
    """What the rollups need to know about one training session."""
    session_id: int
    created_at: datetime
    word_ids: Sequence[int] = field(default_factory=tuple)
    error_total: int = 0
    accuracy_rate: Optional[float] = None
    total_time_seconds: int = 0


def classify_mastery(error_count: int) -> str:
    """
    Map an in-window error count onto a mastery tier.

    Examples:
        >>> classify_mastery(0)
        'mastered'
        >>> classify_mastery(3)
        'needs_practice'
    """
    if error_count <= 0:
        return 'mastered'
    if error_count <= 2:
        return 'good'
    if error_count <= 5:
        return 'needs_practice'
    return 'difficult'


def percentage(part: float, whole: float) -> float:
    """``part`` as a percentage of ``whole`` rounded to 2 decimals (0 when whole is 0)."""
    if not whole:
        return 0.0
    return round(part * 100.0 / whole, 2)


def mean(values: Iterable[Optional[float]]) -> Optional[float]:
    """Mean of the non-null values, 2 decimals; ``None`` when there are none."""
    present = [value for value in values if value is not None]
    if not present:
        return None
    return round(sum(present) / len(present), 2)


def bucket_key(moment: datetime, group_by: str) -> str:
    """
    Label of the time bucket containing ``moment``.

    hour -> ``2024-03-05 14:00``, day -> ``2024-03-05``,
    week -> ISO week ``2024-W10``, month -> ``2024-03``.
    """
    if group_by == 'hour':
        return moment.strftime('%Y-%m-%d %H:00')
    if group_by == 'day':
        return moment.strftime('%Y-%m-%d')
    if group_by == 'week':
        year, week, _weekday = moment.isocalendar()
        return f'{year}-W{week:02d}'
    if group_by == 'month':
        return moment.strftime('%Y-%m')
    raise ValueError(f'Unsupported groupBy: {group_by}')


def days_between(earlier: datetime, later: datetime) -> int:
    """Whole calendar days from ``earlier`` to ``later``."""
    return (later.date() - earlier.date()).days


def error_frequency(error_count: int, first_error: datetime, now: datetime) -> float:
    """Errors per day since the first error, with a one-day floor."""
    return round(error_count / max(days_between(first_error, now), 1), 2)


def rollup_sessions(sessions: Iterable[SessionFacts], group_by: str) -> List[Dict[str, Any]]:
    """
    Bucket sessions by creation time.

    Returns one row per bucket, newest bucket first, with sessions_count,
    unique_words_learned, total_errors, avg_accuracy and total_time_seconds.
    """
    buckets: Dict[str, Dict[str, Any]] = {}
    for facts in sessions:
        key = bucket_key(facts.created_at, group_by)
        bucket = buckets.setdefault(key, {
            'sessions': set(),
            'words': set(),
            'errors': 0,
            'accuracies': [],
            'seconds': 0,
        })
        bucket['sessions'].add(facts.session_id)
        bucket['words'].update(facts.word_ids)
        bucket['errors'] += facts.error_total
        bucket['accuracies'].append(facts.accuracy_rate)
        bucket['seconds'] += facts.total_time_seconds or 0

    rows = []
    for key in sorted(buckets, reverse=True):
        bucket = buckets[key]
        rows.append({
            'period': key,
            'sessions_count': len(bucket['sessions']),
            'unique_words_learned': len(bucket['words']),
            'total_errors': bucket['errors'],
            'avg_accuracy': mean(bucket['accuracies']),
            'total_time_seconds': bucket['seconds'],
        })
    return rows


def distribution(counts: Dict[str, int], label: str) -> List[Dict[str, Any]]:
    """Counts with their share of the total, largest first."""
    total = sum(counts.values())
    rows = [
        {label: key, 'count': count, 'percentage': percentage(count, total)}
        for key, count in counts.items()
    ]
    rows.sort(key=lambda row: (-row['count'], row[label]))
    return rows


def mastery_summary(levels: Iterable[str]) -> List[Dict[str, Any]]:
    """Word count and share per tier, every tier listed in tier order."""
    counts = {tier: 0 for tier in MASTERY_TIERS}
    for level in levels:
        counts[level] += 1
    total = sum(counts.values())
    return [
        {'mastery_level': tier, 'word_count': counts[tier], 'percentage': percentage(counts[tier], total)}
        for tier in MASTERY_TIERS
    ]


def rank_practice_recommendations(
    entries: Iterable[Dict[str, Any]], now: datetime, limit: int, min_errors: int = 2
) -> List[Dict[str, Any]]:
    """
    Rank frequently-missed words for review.

    Each entry needs ``error_count``, ``first_error`` and ``last_error``
    (datetimes). Entries below ``min_errors`` are dropped; the rest gain
    ``days_since_last_error`` and ``error_frequency`` and are ordered by
    frequency (desc) then recency of the last error.
    """
    ranked = []
    for entry in entries:
        if entry['error_count'] < min_errors:
            continue
        enriched = dict(entry)
        enriched['days_since_last_error'] = days_between(entry['last_error'], now)
        enriched['error_frequency'] = error_frequency(entry['error_count'], entry['first_error'], now)
        ranked.append(enriched)
    ranked.sort(key=lambda item: (-item['error_frequency'], item['days_since_last_error']))
    return ranked[:limit]
