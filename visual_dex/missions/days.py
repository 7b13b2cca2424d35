"""Calendar-day identity helpers shared by missions, quota and progress."""

from __future__ import annotations

from datetime import date, datetime, timedelta


def day_of(now: datetime) -> str:
    """Identity of the local calendar day containing `now` (ISO date)."""
    return now.date().isoformat()


def previous_day(day: str) -> str:
    """Identity of the calendar day before `day`."""
    return (date.fromisoformat(day) - timedelta(days=1)).isoformat()


def next_midnight(now: datetime) -> datetime:
    """Start of the calendar day after `now`, in the same timezone."""
    tomorrow = now.date() + timedelta(days=1)
    return datetime.combine(tomorrow, datetime.min.time(), tzinfo=now.tzinfo)


def parse_local_timestamp(value: str) -> datetime:
    """
    Parse a stored ISO timestamp as naive local time.

    Timestamps carrying a UTC offset are converted to local time and the
    offset dropped, so they compare cleanly against `datetime.now()`.
    """
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed
