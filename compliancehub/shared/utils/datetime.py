"""
UTC datetime utilities for consistent timezone handling.

All datetime values in the engine are timezone-aware UTC. Store rows carry
ISO-8601 strings (or native timestamps from Firestore); use parse_datetime at
the mapping boundary and to_iso when writing rows back.
"""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """
    Return the current UTC datetime with timezone info.

    Use this instead of datetime.now() or datetime.utcnow().

    Returns:
        Timezone-aware datetime in UTC
    """
    return datetime.now(UTC)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """
    Ensure a datetime is UTC-aware.

    - If None, returns None
    - If naive, assumes UTC and attaches timezone
    - If aware, converts to UTC

    Args:
        dt: A datetime that may be naive or aware

    Returns:
        UTC-aware datetime or None
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)

    return dt.astimezone(UTC)


def parse_datetime(value: object) -> datetime | None:
    """
    Parse a stored date value into a UTC-aware datetime.

    Accepts None/empty string (returns None), datetime instances, and ISO-8601
    strings including a trailing 'Z' or a bare date ('2025-01-31').

    Raises:
        ValueError: If the value is present but cannot be parsed.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return ensure_utc(value)
    if not isinstance(value, str):
        raise ValueError(f"Unsupported date value: {value!r}")
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return ensure_utc(datetime.fromisoformat(text))


def to_iso(dt: datetime | None) -> str | None:
    """Serialize a datetime as an ISO-8601 UTC string (None passes through)."""
    if dt is None:
        return None
    return ensure_utc(dt).isoformat()
