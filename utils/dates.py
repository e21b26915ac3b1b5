"""
utils/dates.py — Canonical instant handling for stored dates.

Every stored date is an ISO-8601 instant string with a UTC offset.
Date-only input ("YYYY-MM-DD") means midnight local time. Mixed formats
(date-only, naive, "Z"-suffixed, offset) are all accepted on read.

Day arithmetic on local instants follows the local calendar, so adding N
days to a local-midnight planting date lands on local midnight N calendar
days later, whatever offset that day has.
"""

from datetime import date, datetime, time, timedelta, timezone


def is_date_only(value):
    """True for strings like '2024-03-01' that carry no time component."""
    return isinstance(value, str) and 'T' not in value and ' ' not in value.strip()


def to_instant(value):
    """
    Convert a date-like value to a timezone-aware datetime.

    Accepts datetime, date, or string. Naive values are taken as local time.

    Raises:
        ValueError: if a string cannot be parsed.
    """
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime.combine(value, time())
    elif isinstance(value, str):
        text = value.strip()
        if is_date_only(text):
            dt = datetime.combine(date.fromisoformat(text), time())
        else:
            if text.endswith('Z'):
                text = text[:-1] + '+00:00'
            dt = datetime.fromisoformat(text)
    else:
        raise ValueError(f"Unsupported date value: {value!r}")

    if dt.tzinfo is None:
        dt = dt.astimezone()
    return dt


def to_iso(value):
    """Render any accepted date value as a canonical ISO instant string."""
    return to_instant(value).isoformat()


def normalize_iso(value):
    """
    Normalize a stored date string to canonical form.

    Returns (iso_string, changed). Date-only strings become local midnight;
    strings already carrying a time component are left as they are.
    """
    if is_date_only(value):
        return to_iso(value), True
    return value, False


def add_days(value, days):
    """
    Instant `days` calendar days after value.

    Instants in the local offset are moved on the local wall clock and
    re-localized, so local midnight stays local midnight across a DST
    change. Instants in any other offset keep that offset.
    """
    dt = to_instant(value)
    local = dt.astimezone()
    if local.utcoffset() != dt.utcoffset():
        return dt + timedelta(days=days)
    return (local.replace(tzinfo=None) + timedelta(days=days)).astimezone()


def now():
    """Current local time, timezone-aware."""
    return datetime.now().astimezone()


def local_date(value):
    """Calendar date of an instant, in the instant's own offset."""
    return to_instant(value).date()


def days_between(start, end):
    """Whole calendar days from start's date to end's date."""
    return (local_date(end) - local_date(start)).days


def utc_millis_id():
    """Millisecond timestamp string, used for record ids."""
    return str(int(datetime.now(timezone.utc).timestamp() * 1000))


def as_date(value=None):
    """Calendar date for value; today when value is None."""
    if value is None:
        return now().date()
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    return local_date(value)
