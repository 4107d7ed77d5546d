"""
Validity-day arithmetic for tickets.

A ticket is valid for one calendar day, interpreted in UTC: from 00:00:00 to
23:59:59.999999 of that day. Every function takes ``now`` explicitly so the
clock can be fixed in tests; ``None`` means ``timezone.now()``.
"""
from datetime import date, datetime, time, timezone as dt_timezone

from django.utils import timezone

from core.errors import ValidityInPast

NOT_YET_VALID = 'NOT_YET_VALID'
CURRENT = 'CURRENT'
EXPIRED = 'EXPIRED'


def _now(now):
    return now if now is not None else timezone.now()


def parse_validity_date(value):
    """
    Accept a ``date`` or a ``YYYY-MM-DD`` string
    """
    if isinstance(value, datetime):
        return value.astimezone(dt_timezone.utc).date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(value)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid validity date {value!r}, expected YYYY-MM-DD")


def window_for(day):
    """
    (start, end) instants of ``day`` in UTC, both inclusive
    """
    day = parse_validity_date(day)
    start = datetime.combine(day, time.min, tzinfo=dt_timezone.utc)
    end = datetime.combine(day, time.max, tzinfo=dt_timezone.utc)
    return start, end


def today(now=None):
    return _now(now).astimezone(dt_timezone.utc).date()


def start_of_today(now=None):
    return datetime.combine(today(now), time.min, tzinfo=dt_timezone.utc)


def ensure_not_in_past(day, now=None):
    """
    Return ``day`` as a date, raise ValidityInPast when it ended before today
    """
    day = parse_validity_date(day)
    _, end = window_for(day)

    if end < start_of_today(now):
        raise ValidityInPast()

    return day


def phase(day, now=None):
    now = _now(now)
    start, end = window_for(day)

    if now < start:
        return NOT_YET_VALID
    if now <= end:
        return CURRENT
    return EXPIRED


def is_elapsed(day, now=None):
    """
    True once the whole validity day is over
    """
    return phase(day, now) == EXPIRED
