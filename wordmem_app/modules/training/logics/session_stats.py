"""
Session statistics - pure helpers for the training result recorder.

This module contains ONLY pure Python logic.
NO database, NO Flask dependencies allowed.
"""
from typing import Any, Dict, Iterable, Mapping, Optional

DEFAULT_SETTINGS = {
    'repeatCount': 1,
    'interval': 3,
    'accent': 'us',
    'speed': 1.0,
}

ACCENTS = ('us', 'uk')


def normalize_settings(raw: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """
    Fill in training defaults and coerce known keys.

    Unknown keys are kept as given. Raises ValueError for a known key whose
    value is unusable.

    Examples:
        >>> normalize_settings({'accent': 'UK', 'theme': 'dark'})
        {'repeatCount': 1, 'interval': 3, 'accent': 'uk', 'speed': 1.0, 'theme': 'dark'}
    """
    settings = dict(DEFAULT_SETTINGS)
    for key, value in (raw or {}).items():
        if value is not None:
            settings[key] = value

    try:
        settings['repeatCount'] = int(settings['repeatCount'])
        settings['interval'] = float(settings['interval'])
        settings['speed'] = float(settings['speed'])
    except (TypeError, ValueError):
        raise ValueError('repeatCount, interval and speed must be numbers')
    if settings['interval'].is_integer():
        settings['interval'] = int(settings['interval'])

    if settings['repeatCount'] < 1:
        raise ValueError('repeatCount must be at least 1')
    if settings['interval'] < 0:
        raise ValueError('interval must not be negative')
    if settings['speed'] <= 0:
        raise ValueError('speed must be positive')

    accent = str(settings['accent']).lower()
    if accent not in ACCENTS:
        raise ValueError("accent must be 'us' or 'uk'")
    settings['accent'] = accent
    return settings


def accuracy_rate(correct: int, total: int) -> float:
    """Percentage of correct answers, 2 decimals; 0 for an empty session."""
    if total <= 0:
        return 0.0
    return round(correct / total * 100, 2)


def summarize_results(results: Iterable[Any]) -> Dict[str, Any]:
    """
    Aggregate per-word outcomes.

    Args:
        results: Objects exposing ``is_correct`` and ``time_spent``.

    Returns:
        Dict with total_words, correct_words, error_words, accuracy_rate
        and total_time_seconds (summed time rounded to whole seconds).
    """
    total = 0
    correct = 0
    elapsed = 0.0
    for item in results:
        total += 1
        if item.is_correct:
            correct += 1
        elapsed += item.time_spent or 0

    return {
        'total_words': total,
        'correct_words': correct,
        'error_words': total - correct,
        'accuracy_rate': accuracy_rate(correct, total),
        'total_time_seconds': int(round(elapsed)),
    }
