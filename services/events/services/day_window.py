"""
Calendar-day helpers for conflict detection.

A "day" is the half-open interval between two consecutive local midnights.
Local means the server process's timezone unless an IANA zone name is
given explicitly. Boundaries are returned as UTC instants, which is how
timestamps are stored.
"""

from datetime import date, datetime, time, timedelta, timezone
from typing import Optional, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


def parse_calendar_date(value: Optional[str]) -> Optional[date]:
    """
    Parse an ISO calendar date (``2024-06-01``) or ISO datetime.

    Datetimes contribute their own year/month/day, without converting to UTC
    first. Returns None for missing, blank or unparseable input.
    """
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None

    try:
        return date.fromisoformat(value)
    except ValueError:
        pass

    try:
        return datetime.fromisoformat(value).date()
    except ValueError:
        return None


def load_timezone(tz_name: Optional[str]) -> Optional[ZoneInfo]:
    """Resolve an IANA zone name; None or blank means process-local time."""
    if not tz_name:
        return None
    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ValueError(f"Unknown timezone: {tz_name!r}") from e


def _local_midnight(day: date, tz: Optional[ZoneInfo]) -> datetime:
    if tz is not None:
        return datetime.combine(day, time.min, tzinfo=tz)
    # Naive -> process-local, resolved per date so DST transitions are honored
    return datetime.combine(day, time.min).astimezone()


def local_day_window(
    day: date, tz_name: Optional[str] = None
) -> Tuple[datetime, datetime]:
    """
    Return ``(start, end)`` in UTC for the local calendar day ``day``.

    ``end`` is the next local midnight, so on DST-change days the window is
    23 or 25 hours long.
    """
    tz = load_timezone(tz_name)
    start = _local_midnight(day, tz)
    end = _local_midnight(day + timedelta(days=1), tz)
    return start.astimezone(timezone.utc), end.astimezone(timezone.utc)


def to_utc(value: datetime) -> datetime:
    """Normalize a timestamp for storage. Naive values are taken as process-local."""
    if value.tzinfo is None:
        value = value.astimezone()
    return value.astimezone(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to timestamps read back without tzinfo (SQLite drops it)."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
