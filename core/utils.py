"""Utility functions for common operations."""

from datetime import datetime, timezone


def utcnow() -> datetime:
    """Current time as a naive UTC datetime (the storage convention)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    """
    Normalize a datetime to naive UTC.

    Examples:
        2024-01-01T12:00:00+02:00 -> 2024-01-01T10:00:00
        2024-01-01T12:00:00       -> 2024-01-01T12:00:00 (assumed UTC)

    Args:
        value: Aware or naive datetime

    Returns:
        Naive datetime expressed in UTC
    """
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def isoformat_utc(value: datetime) -> str:
    """
    Render a datetime as ISO-8601 UTC with a trailing Z.

    Naive values are the storage convention and are read as UTC.

    Examples:
        2024-01-01T10:00:00 -> "2024-01-01T10:00:00Z"
        2024-01-01T12:00:00+02:00 -> "2024-01-01T10:00:00Z"
    """
    return to_naive_utc(value).isoformat() + "Z"
