from __future__ import annotations

from datetime import date, datetime, timezone

from zoneinfo import ZoneInfo

DEFAULT_TIMEZONE_NAME = "Africa/Nairobi"
DEFAULT_TZ = ZoneInfo(DEFAULT_TIMEZONE_NAME)


def farm_today(tz: ZoneInfo | str | None = DEFAULT_TZ) -> date:
    """Calendar date on the farm, which can differ from the UTC date."""
    if isinstance(tz, str):
        tz = ZoneInfo(tz)
    now = datetime.now(timezone.utc)
    if tz is not None:
        now = now.astimezone(tz)
    return now.date()


def _local_date(value: datetime, tz: ZoneInfo | str | None) -> date:
    if isinstance(tz, str):
        tz = ZoneInfo(tz)
    if value.tzinfo is not None and tz is not None:
        value = value.astimezone(tz)
    return value.date()


def parse_calendar_date(
    value: date | datetime | str, tz: ZoneInfo | str | None = DEFAULT_TZ
) -> date:
    """Return the calendar date of a date, datetime or ISO string.

    Accepts 'YYYY-MM-DD' and ISO timestamps with an optional trailing 'Z'.
    Timestamps carrying an offset are read on the farm clock (``tz``), so
    22:00Z in Nairobi is already the next day; naive ones keep their date.
    """
    if isinstance(value, datetime):
        return _local_date(value, tz)
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValueError(f"Expected an ISO date string, got {type(value).__name__}")
    s = value.strip()
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    try:
        return date.fromisoformat(s)
    except ValueError:
        return _local_date(datetime.fromisoformat(s), tz)
