"""UTC-everywhere time handling. Record-store dates are UTC calendar days."""

from datetime import date, datetime, timezone


def now_utc() -> datetime:
    """
    Current time in UTC.

    Use this instead of datetime.now() everywhere.
    """
    return datetime.now(timezone.utc)


def today_utc() -> str:
    """
    Today's UTC date as YYYY-MM-DD.

    Date-only record-store fields (completion date, payment date) are
    written in this format, never with a time component.
    """
    return now_utc().date().isoformat()


def from_timestamp(seconds: int | float) -> datetime:
    """Convert a Unix timestamp (as sent by the billing provider) to UTC."""
    return datetime.fromtimestamp(seconds, tz=timezone.utc)


def parse_record_date(value: str | None) -> date | None:
    """
    Parse a record-store date or datetime string to a date.

    Accepts "2024-03-01" as well as "2024-03-01T10:00:00.000Z".
    Returns None for empty or unparseable values.
    """
    if not value:
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return None


def parse_record_datetime(value: str | None) -> datetime | None:
    """
    Parse a record-store ISO 8601 timestamp (e.g. a record's createdTime).

    Returns None for empty or unparseable values. Naive values are taken as UTC.
    """
    if not value:
        return None
    try:
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)
