"""
Sun event calculations.
Handles dawn, sunrise, noon, sunset, dusk, twilight windows, solar
position and polar edge cases.
"""

import logging
import math
from datetime import date as date_type, datetime, timedelta, timezone
from typing import Dict, Optional, Tuple, Union

from .clock import TzInfo, as_tzinfo
from .ephemeris import (
    julian_day, julian_century, julian_century_to_day, sun_declination,
    equation_of_time, hour_angle, elevation_adjustment, refraction_at_zenith
)
from .errors import MathError
from .observer import Depression, Observer, SunDirection, depression_degrees

logger = logging.getLogger(__name__)

# 32 arc minutes apparent diameter
SUN_APPARENT_RADIUS = 32.0 / (60.0 * 2.0)

MAX_LATITUDE = 89.8

# Zenith angles bounding the twilight, golden hour and blue hour windows
TWILIGHT_ZENITH = 96.0
GOLDEN_HOUR_ZENITHS = (94.0, 84.0)
BLUE_HOUR_ZENITHS = (96.0, 94.0)

# Rahukaalam octant by ISO weekday, Monday first
RAHUKAALAM_OCTANTS = {1: 1, 2: 6, 3: 4, 4: 5, 5: 3, 6: 2, 7: 7}

DateLike = Union[date_type, datetime]
Window = Tuple[datetime, datetime]


def as_date(date: DateLike) -> date_type:
    """Calendar date of a date or datetime."""
    if isinstance(date, datetime):
        return date.date()
    return date


def _clamp_latitude(latitude: float) -> float:
    return max(-MAX_LATITUDE, min(MAX_LATITUDE, latitude))


def _transit_minutes(longitude: float, hour_angle_rad: float, eqtime: float) -> float:
    delta = -longitude - math.degrees(hour_angle_rad)
    return 720.0 + 4.0 * delta - eqtime


def time_of_transit(observer: Observer, date: DateLike, zenith: float,
                    direction: SunDirection) -> datetime:
    """
    Calculate the UTC time at which the sun transits `zenith`.

    Two passes: the first estimates the time from the sun's position at
    midnight, the second refines declination and equation of time at that
    estimate. Refraction is subtracted from the target zenith on the
    first pass and added on the second.

    Raises:
        MathError: if the sun never reaches `zenith` on this date.
    """
    date = as_date(date)
    latitude = _clamp_latitude(observer.latitude)

    adjustment_for_elevation = elevation_adjustment(observer.elevation)
    adjustment_for_refraction = refraction_at_zenith(zenith + adjustment_for_elevation)

    jc = julian_century(julian_day(date))
    ha = hour_angle(
        latitude,
        sun_declination(jc),
        zenith + adjustment_for_elevation - adjustment_for_refraction,
        direction,
    )
    time_utc = _transit_minutes(observer.longitude, ha, equation_of_time(jc))

    jc = julian_century(julian_century_to_day(jc) + time_utc / 1440.0)
    ha = hour_angle(
        latitude,
        sun_declination(jc),
        zenith + adjustment_for_elevation + adjustment_for_refraction,
        direction,
    )
    time_utc = _transit_minutes(observer.longitude, ha, equation_of_time(jc))

    midnight_utc = datetime(date.year, date.month, date.day, tzinfo=timezone.utc)
    return midnight_utc + timedelta(minutes=time_utc)


def _never_below(depression: float) -> str:
    return f"Sun never reaches {depression} degrees below the horizon, at this location."


def _never_at_elevation(elevation: float) -> str:
    if elevation < 0:
        return _never_below(-elevation)
    return f"Sun never reaches an elevation of {elevation} degrees at this location."


def _transit(observer: Observer, date: DateLike, zenith: float,
             direction: SunDirection, tzinfo: TzInfo,
             message: Optional[str] = None) -> datetime:
    """time_of_transit in `tzinfo`, with MathError reported as ValueError."""
    try:
        return time_of_transit(observer, date, zenith, direction).astimezone(as_tzinfo(tzinfo))
    except MathError as e:
        logger.debug("No transit of zenith %s on %s: %s", zenith, date, e)
        raise ValueError(message or _never_at_elevation(90.0 - zenith)) from e


def time_at_elevation(observer: Observer, elevation: float, date: DateLike,
                      direction: SunDirection = SunDirection.RISING,
                      tzinfo: TzInfo = None) -> datetime:
    """
    Calculate the time at which the sun is at `elevation` degrees above
    the horizon.

    Elevations greater than 90 are taken as a setting sun, i.e. 110 is a
    setting sun at 70 degrees.
    """
    if elevation > 90.0:
        elevation = 180.0 - elevation
        direction = SunDirection.SETTING

    return _transit(observer, date, 90.0 - elevation, direction, tzinfo,
                    _never_at_elevation(elevation))


def split_fractional_hours(time_utc: float) -> Tuple[int, int, int, int]:
    """
    Split fractional hours into (day_offset, hour, minute, second) with
    each field carried into its valid range.
    """
    hour = math.floor(time_utc)
    minute = math.floor((time_utc - hour) * 60)
    second = math.floor(((time_utc - hour) * 60 - minute) * 60)
    day_offset = 0

    if second > 59:
        second -= 60
        minute += 1
    elif second < 0:
        second += 60
        minute -= 1

    if minute > 59:
        minute -= 60
        hour += 1
    elif minute < 0:
        minute += 60
        hour -= 1

    if hour > 23:
        hour -= 24
        day_offset = 1
    elif hour < 0:
        hour += 24
        day_offset = -1

    return day_offset, hour, minute, second


def _utc_from_hours(date: date_type, time_utc: float, tzinfo: TzInfo) -> datetime:
    day_offset, hour, minute, second = split_fractional_hours(time_utc)
    day = date + timedelta(days=day_offset)
    result = datetime(day.year, day.month, day.day, hour, minute, second, tzinfo=timezone.utc)
    return result.astimezone(as_tzinfo(tzinfo))


def noon(observer: Observer, date: DateLike, tzinfo: TzInfo = None) -> datetime:
    """Calculate solar noon, when the sun is at its highest point."""
    date = as_date(date)
    jc = julian_century(julian_day(date))
    time_utc = (720.0 - 4 * observer.longitude - equation_of_time(jc)) / 60.0
    return _utc_from_hours(date, time_utc, tzinfo)


def midnight(observer: Observer, date: DateLike, tzinfo: TzInfo = None) -> datetime:
    """
    Calculate solar midnight.

    This is the solar midnight closest to 00:00 of the date, so it may
    fall on the previous day.
    """
    date = as_date(date)
    jd = julian_day(date)
    jc = julian_century(jd + 0.5 - observer.longitude / 360.0)
    time_utc = (-observer.longitude * 4.0 - equation_of_time(jc)) / 60.0
    return _utc_from_hours(date, time_utc, tzinfo)


def zenith_and_azimuth(observer: Observer, dateandtime: datetime,
                       with_refraction: bool = True) -> Tuple[float, float]:
    """
    Calculate the sun's zenith and azimuth (degrees) at `dateandtime`.

    Naive datetimes are taken to be UTC.
    """
    latitude = _clamp_latitude(observer.latitude)
    longitude = observer.longitude

    if dateandtime.tzinfo is None:
        dateandtime = dateandtime.replace(tzinfo=timezone.utc)

    utc_datetime = dateandtime.astimezone(timezone.utc)
    zone = -dateandtime.utcoffset().total_seconds() / 3600.0

    time_now = (utc_datetime.hour + utc_datetime.minute / 60.0 +
                (utc_datetime.second + utc_datetime.microsecond / 1e6) / 3600.0)

    jc = julian_century(julian_day(utc_datetime) + time_now / 24.0)
    solar_dec = sun_declination(jc)
    eqtime = equation_of_time(jc)

    solar_time_fix = eqtime + 4.0 * longitude + 60 * zone
    true_solar_time = (dateandtime.hour * 60.0 + dateandtime.minute +
                       (dateandtime.second + dateandtime.microsecond / 1e6) / 60.0 +
                       solar_time_fix)
    true_solar_time %= 1440

    ha = true_solar_time / 4.0 - 180.0
    if ha < -180:
        ha += 360.0

    lat_rad = math.radians(latitude)
    decl_rad = math.radians(solar_dec)
    ha_rad = math.radians(ha)

    cos_zenith = (math.sin(lat_rad) * math.sin(decl_rad) +
                  math.cos(lat_rad) * math.cos(decl_rad) * math.cos(ha_rad))
    cos_zenith = max(-1.0, min(1.0, cos_zenith))
    zenith = math.degrees(math.acos(cos_zenith))

    az_denom = math.cos(lat_rad) * math.sin(math.radians(zenith))
    if abs(az_denom) > 0.001:
        az_rad = (math.sin(lat_rad) * math.cos(math.radians(zenith)) -
                  math.sin(decl_rad)) / az_denom
        az_rad = max(-1.0, min(1.0, az_rad))

        azimuth = 180.0 - math.degrees(math.acos(az_rad))
        if ha > 0.0:
            azimuth = -azimuth
    else:
        azimuth = 180.0 if latitude > 0.0 else 0.0

    azimuth %= 360.0

    if with_refraction:
        zenith -= refraction_at_zenith(zenith)

    return zenith, azimuth


def zenith(observer: Observer, dateandtime: datetime, with_refraction: bool = True) -> float:
    """Calculate the sun's zenith angle in degrees."""
    return zenith_and_azimuth(observer, dateandtime, with_refraction)[0]


def azimuth(observer: Observer, dateandtime: datetime) -> float:
    """Calculate the sun's azimuth in degrees clockwise from north."""
    return zenith_and_azimuth(observer, dateandtime)[1]


def elevation(observer: Observer, dateandtime: datetime, with_refraction: bool = True) -> float:
    """Calculate the sun's angle of elevation in degrees."""
    return 90.0 - zenith(observer, dateandtime, with_refraction)


def dawn(observer: Observer, date: DateLike,
         depression: Union[Depression, float] = Depression.CIVIL,
         tzinfo: TzInfo = None) -> datetime:
    """
    Calculate dawn, when the rising sun is `depression` degrees below
    the horizon.

    Raises:
        ValueError: if the sun never reaches the depression on this date.
    """
    dep = depression_degrees(depression)
    return _transit(observer, date, 90.0 + dep, SunDirection.RISING, tzinfo,
                    _never_below(dep))


def dusk(observer: Observer, date: DateLike,
         depression: Union[Depression, float] = Depression.CIVIL,
         tzinfo: TzInfo = None) -> datetime:
    """
    Calculate dusk, when the setting sun is `depression` degrees below
    the horizon.

    Raises:
        ValueError: if the sun never reaches the depression on this date.
    """
    dep = depression_degrees(depression)
    return _transit(observer, date, 90.0 + dep, SunDirection.SETTING, tzinfo,
                    _never_below(dep))


def _horizon_crossing(observer: Observer, date: DateLike, direction: SunDirection,
                      tzinfo: TzInfo) -> datetime:
    try:
        return time_of_transit(
            observer, date, 90.0 + SUN_APPARENT_RADIUS, direction
        ).astimezone(as_tzinfo(tzinfo))
    except MathError as e:
        if zenith(observer, noon(observer, date)) > 90.0:
            msg = "Sun is always below the horizon on this day, at this location."
        else:
            msg = "Sun is always above the horizon on this day, at this location."
        logger.debug("No horizon crossing on %s: %s", date, msg)
        raise ValueError(msg) from e


def sunrise(observer: Observer, date: DateLike, tzinfo: TzInfo = None) -> datetime:
    """
    Calculate sunrise.

    Raises:
        ValueError: if the sun is above or below the horizon all day.
    """
    return _horizon_crossing(observer, date, SunDirection.RISING, tzinfo)


def sunset(observer: Observer, date: DateLike, tzinfo: TzInfo = None) -> datetime:
    """
    Calculate sunset.

    Raises:
        ValueError: if the sun is above or below the horizon all day.
    """
    return _horizon_crossing(observer, date, SunDirection.SETTING, tzinfo)


def _ordered(start: datetime, end: datetime, direction: SunDirection) -> Window:
    if direction is SunDirection.RISING:
        return start, end
    return end, start


def twilight(observer: Observer, date: DateLike,
             direction: SunDirection = SunDirection.RISING,
             tzinfo: TzInfo = None) -> Window:
    """Start and end of twilight, between 6 degrees below the horizon and sunrise/sunset."""
    start = _transit(observer, date, TWILIGHT_ZENITH, direction, tzinfo)
    if direction is SunDirection.RISING:
        end = sunrise(observer, date, tzinfo)
    else:
        end = sunset(observer, date, tzinfo)
    return _ordered(start, end, direction)


def golden_hour(observer: Observer, date: DateLike,
                direction: SunDirection = SunDirection.RISING,
                tzinfo: TzInfo = None) -> Window:
    """Start and end of the golden hour, sun between 4 degrees below and 6 above the horizon."""
    start = _transit(observer, date, GOLDEN_HOUR_ZENITHS[0], direction, tzinfo)
    end = _transit(observer, date, GOLDEN_HOUR_ZENITHS[1], direction, tzinfo)
    return _ordered(start, end, direction)


def blue_hour(observer: Observer, date: DateLike,
              direction: SunDirection = SunDirection.RISING,
              tzinfo: TzInfo = None) -> Window:
    """Start and end of the blue hour, sun between 6 and 4 degrees below the horizon."""
    start = _transit(observer, date, BLUE_HOUR_ZENITHS[0], direction, tzinfo)
    end = _transit(observer, date, BLUE_HOUR_ZENITHS[1], direction, tzinfo)
    return _ordered(start, end, direction)


def daylight(observer: Observer, date: DateLike, tzinfo: TzInfo = None) -> Window:
    """Sunrise to sunset."""
    return sunrise(observer, date, tzinfo), sunset(observer, date, tzinfo)


def night(observer: Observer, date: DateLike, tzinfo: TzInfo = None) -> Window:
    """Civil dusk on `date` to civil dawn on the following day."""
    date = as_date(date)
    start = dusk(observer, date, Depression.CIVIL, tzinfo)
    end = dawn(observer, date + timedelta(days=1), Depression.CIVIL, tzinfo)
    return start, end


def rahukaalam(observer: Observer, date: DateLike, daytime: bool = True,
               tzinfo: TzInfo = None) -> Window:
    """
    Calculate Rahukaalam.

    The day (sunrise to sunset) or night (sunset to the next sunrise) is
    split into eight equal octants; the weekday selects one of them.
    """
    date = as_date(date)
    if daytime:
        start = sunrise(observer, date)
        end = sunset(observer, date)
    else:
        start = sunset(observer, date)
        end = sunrise(observer, date + timedelta(days=1))

    # elapsed time, split in UTC
    octant_duration = (end - start) / 8
    octant = RAHUKAALAM_OCTANTS[date.isoweekday()]

    start = start + octant_duration * octant
    tz = as_tzinfo(tzinfo)
    return start.astimezone(tz), (start + octant_duration).astimezone(tz)


def sun(observer: Observer, date: DateLike,
        dawn_dusk_depression: Union[Depression, float] = Depression.CIVIL,
        tzinfo: TzInfo = None) -> Dict[str, datetime]:
    """
    Calculate dawn, sunrise, noon, sunset and dusk at once.

    Raises:
        ValueError: passed through from any of the event functions.
    """
    return {
        'dawn': dawn(observer, date, dawn_dusk_depression, tzinfo),
        'sunrise': sunrise(observer, date, tzinfo),
        'noon': noon(observer, date, tzinfo),
        'sunset': sunset(observer, date, tzinfo),
        'dusk': dusk(observer, date, dawn_dusk_depression, tzinfo),
    }
