"""
Current date and time.

The only place sunevents reads the system clock. Everything else takes
an explicit date or datetime.
"""

from datetime import date, datetime, timezone, tzinfo as tzinfo_type
from typing import Union
from zoneinfo import ZoneInfo


TzInfo = Union[str, tzinfo_type]


def as_tzinfo(tz: TzInfo = None) -> tzinfo_type:
    """Resolve an IANA name or tzinfo object; None and 'utc' mean UTC."""
    if tz is None:
        return timezone.utc
    if isinstance(tz, str):
        if tz.lower() == "utc":
            return timezone.utc
        return ZoneInfo(tz)
    return tz


def now(tz: TzInfo = None) -> datetime:
    """Returns the current time in the specified time zone."""
    return datetime.now(timezone.utc).astimezone(as_tzinfo(tz))


def today(tz: TzInfo = None) -> date:
    """Returns the current date in the specified time zone."""
    return now(tz).date()
