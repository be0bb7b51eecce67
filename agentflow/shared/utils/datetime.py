"""
UTC datetime helpers.

Every timestamp stored or compared by the service is timezone-aware UTC.
Spend counters roll over on fixed UTC boundaries (midnight for the daily
counter, the first day of the month for the monthly counter), so the
period helpers below are the single definition of those boundaries.
"""

from datetime import UTC, date, datetime


def utc_now() -> datetime:
    """
    Return the current UTC datetime with timezone info.

    Use this instead of datetime.now() / datetime.utcnow().
    """
    return datetime.now(UTC)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """
    Normalize a datetime to UTC at persistence boundaries.

    Naive values are assumed to already be UTC; aware values are converted.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def utc_today(now: datetime | None = None) -> date:
    """Return the UTC calendar day of now (defaults to utc_now())."""
    return (ensure_utc(now) or utc_now()).date()


def month_period(now: datetime | None = None) -> str:
    """Return the UTC month key ("YYYY-MM") used by monthly spend counters."""
    current = ensure_utc(now) or utc_now()
    return f"{current.year:04d}-{current.month:02d}"


def is_first_day_of_month(now: datetime | None = None) -> bool:
    """Return True when now falls on the first UTC day of a month."""
    return utc_today(now).day == 1


def to_iso(dt: datetime | None) -> str | None:
    """Serialize for JSON state (ISO 8601, UTC)."""
    normalized = ensure_utc(dt)
    return normalized.isoformat() if normalized else None


def parse_iso(value: str | None) -> datetime | None:
    """Parse an ISO 8601 string (accepts trailing Z); returns None for empty or invalid input."""
    if not value:
        return None
    try:
        return ensure_utc(datetime.fromisoformat(value.replace("Z", "+00:00")))
    except ValueError:
        return None
