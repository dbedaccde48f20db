"""Time and calendar helpers."""

from __future__ import annotations

from datetime import date, datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import tzlocal


def get_system_timezone() -> str:
    """Detect system timezone.

    Returns:
        Timezone string (e.g., "America/New_York" or "UTC" if detection fails)
    """
    try:
        tz = tzlocal.get_localzone()
    except ZoneInfoNotFoundError:
        return "UTC"
    return str(tz.key) if hasattr(tz, "key") else str(tz)


def now_local() -> datetime:
    """Current time as an aware datetime in the system timezone."""
    return datetime.now().astimezone()


def calendar_day(moment: datetime, timezone: str | None = None) -> date:
    """Calendar date of *moment* as seen in *timezone*.

    Naive datetimes are taken as already local. Unknown timezone names fall
    back to the moment's own offset.
    """
    if moment.tzinfo is None or not timezone:
        return moment.date()
    try:
        return moment.astimezone(ZoneInfo(timezone)).date()
    except (ZoneInfoNotFoundError, ValueError):
        return moment.date()
