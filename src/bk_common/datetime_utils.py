"""UTC datetime utilities."""

from datetime import date, datetime, time, timezone


def utc_now() -> datetime:
    """Return timezone-aware UTC now."""
    return datetime.now(timezone.utc)


def start_of_day(day: date) -> datetime:
    """00:00:00 UTC of ``day``."""
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


def end_of_day(day: date) -> datetime:
    """Last representable instant of ``day`` in UTC, so ranges stay inclusive."""
    return datetime.combine(day, time.max, tzinfo=timezone.utc)
