"""Timestamps are always timezone-aware UTC inside the backend."""

from datetime import datetime, timezone


def now_utc() -> datetime:
    """Current time as an aware UTC datetime. Use instead of datetime.now()."""
    return datetime.now(timezone.utc)


def to_utc(dt: datetime) -> datetime:
    """
    Normalize an aware datetime to UTC.

    Naive datetimes are rejected rather than guessed at.
    """
    if dt.tzinfo is None:
        raise ValueError("Naive datetime given; attach a timezone before converting.")
    return dt.astimezone(timezone.utc)


def parse_iso(value: str) -> datetime:
    """
    Parse an ISO 8601 string carrying an offset into a UTC datetime.

    Raises ValueError when the string has no offset.
    """
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    dt = datetime.fromisoformat(value)
    if dt.tzinfo is None:
        raise ValueError(f"Timestamp '{value}' has no UTC offset")
    return to_utc(dt)
