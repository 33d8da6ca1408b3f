"""
Centralized Utilities for Time Handling in Wordmem.
Goal: Ensure consistent UTC storage and comparison.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional


def utcnow() -> datetime:
    """
    Get the current timezone-aware UTC datetime.
    Always use this instead of datetime.utcnow() or datetime.now().
    """
    return datetime.now(timezone.utc)


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """Treat naive datetimes (as read back from SQLite) as UTC."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def window_start(days: int, now: Optional[datetime] = None) -> datetime:
    """Start of a trailing window of ``days`` days ending at ``now``."""
    return (now or utcnow()) - timedelta(days=days)


def parse_client_datetime(raw_value) -> Optional[datetime]:
    """Parse an ISO timestamp sent by a client; ``None`` when absent or invalid."""
    if not raw_value:
        return None
    if isinstance(raw_value, datetime):
        return ensure_utc(raw_value)
    if not isinstance(raw_value, str):
        return None
    try:
        parsed = datetime.fromisoformat(raw_value.replace('Z', '+00:00'))
    except ValueError:
        return None
    return ensure_utc(parsed)


def isoformat(dt: Optional[datetime]) -> Optional[str]:
    """Serialize a stored datetime as an ISO-8601 UTC string."""
    dt = ensure_utc(dt)
    return dt.isoformat() if dt else None
