"""
Daily sun event reports.
Collects each day's events into JSON-ready dicts, flagging polar day,
polar night and missing twilights.
"""

import logging
from datetime import date as date_type, timedelta
from typing import Any, Dict, List

from . import config
from .clock import TzInfo, as_tzinfo
from .observer import Depression, Observer
from .sun import DateLike, as_date, dawn, dusk, noon, sunrise, sunset, zenith

logger = logging.getLogger(__name__)

TWILIGHTS = {
    'civil': Depression.CIVIL,
    'nautical': Depression.NAUTICAL,
    'astronomical': Depression.ASTRONOMICAL,
}


def sun_events_for_date(observer: Observer, date: DateLike,
                        tzinfo: TzInfo = None,
                        include_twilight: bool = True) -> Dict[str, Any]:
    """
    Calculate all sun events for a given date and location.

    Returns dict with:
    - date: ISO date string
    - sunrise/sunset/solar_noon: ISO datetime strings in `tzinfo`
    - <kind>_dawn/<kind>_dusk for civil, nautical and astronomical
      twilight (if include_twilight=True)
    - day_length_sec: daylight duration in seconds
    - day_length: the same duration as HH:MM:SS
    - flags: polar_day, polar_night, no_<kind>_twilight
    """
    date = as_date(date)
    tz = as_tzinfo(tzinfo)

    solar_noon = noon(observer, date, tz)
    results: Dict[str, Any] = {
        'date': date.isoformat(),
        'sunrise': None,
        'sunset': None,
        'solar_noon': solar_noon.isoformat(),
        'day_length_sec': 0,
        'flags': {
            'polar_day': False,
            'polar_night': False,
            'no_civil_twilight': False,
            'no_nautical_twilight': False,
            'no_astronomical_twilight': False,
        }
    }

    try:
        rise = sunrise(observer, date)
        set_ = sunset(observer, date)
    except ValueError:
        if zenith(observer, solar_noon) > 90.0:
            results['flags']['polar_night'] = True
            logger.debug("Polar night on %s at (%s, %s)", date, observer.latitude, observer.longitude)
        else:
            results['flags']['polar_day'] = True
            results['day_length_sec'] = 86400
            logger.debug("Polar day on %s at (%s, %s)", date, observer.latitude, observer.longitude)
    else:
        results['sunrise'] = rise.astimezone(tz).isoformat()
        results['sunset'] = set_.astimezone(tz).isoformat()
        results['day_length_sec'] = int((set_ - rise).total_seconds())

    if include_twilight:
        for kind, depression in TWILIGHTS.items():
            try:
                results[f'{kind}_dawn'] = dawn(observer, date, depression, tz).isoformat()
                results[f'{kind}_dusk'] = dusk(observer, date, depression, tz).isoformat()
            except ValueError:
                results[f'{kind}_dawn'] = None
                results[f'{kind}_dusk'] = None
                results['flags'][f'no_{kind}_twilight'] = True

    results['day_length'] = format_duration(results['day_length_sec'])
    return results


def sun_events_for_range(observer: Observer, start_date: DateLike, end_date: DateLike,
                         tzinfo: TzInfo = None, **kwargs) -> List[Dict[str, Any]]:
    """
    Calculate sun events for each date from start_date to end_date inclusive.

    Raises:
        ValueError: if end_date is before start_date or the range is
            longer than MAX_RANGE_DAYS.
    """
    start_date = as_date(start_date)
    end_date = as_date(end_date)

    days = (end_date - start_date).days + 1
    if days < 1:
        raise ValueError("End date must be after or equal to start date")
    if days > config.MAX_RANGE_DAYS:
        raise ValueError(f"Maximum range is {config.MAX_RANGE_DAYS} days, requested {days} days")

    results = []
    current_date: date_type = start_date

    while current_date <= end_date:
        results.append(sun_events_for_date(observer, current_date, tzinfo, **kwargs))
        current_date += timedelta(days=1)

    return results


def format_duration(seconds: int) -> str:
    """Format duration in seconds to human-readable string."""
    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    secs = seconds % 60
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"
