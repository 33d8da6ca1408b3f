"""Helpers for reading and validating query-string / JSON arguments."""

from typing import Any, Optional

from wordmem_app.core.error_handlers import ValidationError


def parse_positive_int(raw_value: Any, name: str, default: Optional[int] = None, maximum: Optional[int] = None):
    """Return ``raw_value`` as an int >= 1, ``default`` when absent.

    Raises:
        ValidationError: value present but not a positive integer.
    """
    if raw_value is None or raw_value == '':
        return default
    if isinstance(raw_value, bool):
        raise ValidationError(f"'{name}' must be a positive integer")
    try:
        value = int(raw_value)
    except (TypeError, ValueError):
        raise ValidationError(f"'{name}' must be a positive integer")
    if isinstance(raw_value, float) and raw_value != value:
        raise ValidationError(f"'{name}' must be a positive integer")
    if value < 1:
        raise ValidationError(f"'{name}' must be a positive integer")
    if maximum is not None:
        value = min(value, maximum)
    return value


def sanitize_pagination_args(page, per_page, default_per_page=50, max_per_page=500):
    """Normalise pagination parameters coming from query strings."""
    try:
        page = int(page)
    except (TypeError, ValueError):
        page = 1
    if page < 1: page = 1
    try:
        per_page = int(per_page)
    except (TypeError, ValueError):
        per_page = default_per_page
    if per_page < 1: per_page = default_per_page
    per_page = min(per_page, max_per_page)
    return page, per_page
