"""
Low-order solar ephemeris (NOAA / Meeus series).

Julian date conversion, the sun's orbital series over Julian Century,
horizon and refraction adjustments, and the hour angle solver used by
every event calculation.
"""

import math
from datetime import date as date_type
from typing import Tuple, Union

from .errors import MathError
from .observer import SunDirection


EARTH_RADIUS_M = 6356900.0
J2000 = 2451545.0
DAYS_PER_CENTURY = 36525.0


def julian_day(date: date_type) -> float:
    """Calculate the Julian Day Number for the calendar date (time of day ignored)."""
    year = date.year
    month = date.month
    day = date.day

    if month <= 2:
        year -= 1
        month += 12

    a = math.floor(year / 100.0)
    b = 2 - a + math.floor(a / 4.0)

    jd = math.floor(365.25 * (year + 4716)) + math.floor(30.6001 * (month + 1)) + day + b - 1524.5
    return jd


def julian_century(jd: float) -> float:
    """Calculate Julian Century from Julian Day."""
    return (jd - J2000) / DAYS_PER_CENTURY


def julian_century_to_day(jc: float) -> float:
    """Calculate Julian Day from Julian Century."""
    return jc * DAYS_PER_CENTURY + J2000


def sun_geometric_mean_longitude(jc: float) -> float:
    """Calculate sun's geometric mean longitude (degrees, 0..360)."""
    l0 = 280.46646 + jc * (36000.76983 + jc * 0.0003032)
    return l0 % 360


def sun_geometric_mean_anomaly(jc: float) -> float:
    """Calculate sun's geometric mean anomaly (degrees)."""
    return 357.52911 + jc * (35999.05029 - 0.0001537 * jc)


def earth_orbit_eccentricity(jc: float) -> float:
    """Calculate eccentricity of Earth's orbit."""
    return 0.016708634 - jc * (0.000042037 + 0.0000001267 * jc)


def sun_equation_of_center(jc: float) -> float:
    """Calculate sun's equation of center (degrees)."""
    m = math.radians(sun_geometric_mean_anomaly(jc))

    c = (math.sin(m) * (1.914602 - jc * (0.004817 + 0.000014 * jc)) +
         math.sin(2 * m) * (0.019993 - 0.000101 * jc) +
         math.sin(3 * m) * 0.000289)

    return c


def sun_true_longitude(jc: float) -> float:
    """Calculate sun's true longitude (degrees)."""
    return sun_geometric_mean_longitude(jc) + sun_equation_of_center(jc)


def sun_true_anomaly(jc: float) -> float:
    """Calculate sun's true anomaly (degrees)."""
    return sun_geometric_mean_anomaly(jc) + sun_equation_of_center(jc)


def sun_radius_vector(jc: float) -> float:
    """Calculate the sun-earth distance in astronomical units."""
    v = math.radians(sun_true_anomaly(jc))
    e = earth_orbit_eccentricity(jc)
    return (1.000001018 * (1 - e * e)) / (1 + e * math.cos(v))


def _omega(jc: float) -> float:
    # longitude of the moon's ascending node
    return 125.04 - 1934.136 * jc


def sun_apparent_longitude(jc: float) -> float:
    """Calculate sun's apparent longitude (degrees)."""
    true_long = sun_true_longitude(jc)
    return true_long - 0.00569 - 0.00478 * math.sin(math.radians(_omega(jc)))


def mean_obliquity_of_ecliptic(jc: float) -> float:
    """Calculate mean obliquity of ecliptic (degrees)."""
    seconds = 21.448 - jc * (46.8150 + jc * (0.00059 - jc * 0.001813))
    return 23.0 + (26.0 + (seconds / 60.0)) / 60.0


def obliquity_correction(jc: float) -> float:
    """Calculate obliquity of the ecliptic corrected for nutation (degrees)."""
    e0 = mean_obliquity_of_ecliptic(jc)
    return e0 + 0.00256 * math.cos(math.radians(_omega(jc)))


def sun_right_ascension(jc: float) -> float:
    """Calculate sun's right ascension (degrees, -180..180)."""
    oc = math.radians(obliquity_correction(jc))
    al = math.radians(sun_apparent_longitude(jc))

    return math.degrees(math.atan2(math.cos(oc) * math.sin(al), math.cos(al)))


def sun_declination(jc: float) -> float:
    """Calculate sun's declination angle (degrees)."""
    e = obliquity_correction(jc)
    app_long = sun_apparent_longitude(jc)

    declination = math.degrees(math.asin(
        math.sin(math.radians(e)) * math.sin(math.radians(app_long))
    ))

    return declination


def equation_of_time(jc: float) -> float:
    """Calculate equation of time (minutes)."""
    epsilon = obliquity_correction(jc)
    l0 = sun_geometric_mean_longitude(jc)
    e = earth_orbit_eccentricity(jc)
    m = sun_geometric_mean_anomaly(jc)

    y = math.tan(math.radians(epsilon) / 2.0)
    y = y * y

    sin2l0 = math.sin(2.0 * math.radians(l0))
    sinm = math.sin(math.radians(m))
    cos2l0 = math.cos(2.0 * math.radians(l0))
    sin4l0 = math.sin(4.0 * math.radians(l0))
    sin2m = math.sin(2.0 * math.radians(m))

    etime = y * sin2l0 - 2.0 * e * sinm + 4.0 * e * y * sinm * cos2l0 - \
        0.5 * y * y * sin4l0 - 1.25 * e * e * sin2m

    return math.degrees(etime) * 4.0


def hour_angle(lat: float, declination: float, zenith: float,
               direction: SunDirection) -> float:
    """
    Calculate the hour angle (radians) at which the sun reaches `zenith`.

    Negative when the sun is setting.

    Raises:
        MathError: the sun never reaches `zenith` at this latitude and
            declination (perpetual day or night for that threshold).
    """
    lat_rad = math.radians(lat)
    decl_rad = math.radians(declination)
    zenith_rad = math.radians(zenith)

    h = (math.cos(zenith_rad) - math.sin(lat_rad) * math.sin(decl_rad)) / \
        (math.cos(lat_rad) * math.cos(decl_rad))

    if math.isnan(h) or not -1.0 <= h <= 1.0:
        raise MathError(
            f"Unable to calculate hour angle for zenith {zenith} at latitude "
            f"{lat} with declination {declination}"
        )

    ha = math.acos(h)
    if direction is SunDirection.SETTING:
        ha = -ha
    return ha


def adjust_to_horizon(elevation_m: float) -> float:
    """
    Extra degrees of depression visible round the earth due to the
    observer's height above it.
    """
    if elevation_m <= 0:
        return 0.0

    r = EARTH_RADIUS_M
    theta1 = math.acos(r / (r + elevation_m))

    a2 = r * math.sin(theta1)
    b2 = r - r * math.cos(theta1)
    h2 = math.hypot(a2, b2)
    alpha = math.acos(a2 / h2)

    return math.degrees(alpha)


def adjust_to_obscuring_feature(elevation: Tuple[float, float]) -> float:
    """
    Extra degrees of depression needed for the sun to clear an obscuring
    feature given as (horizontal distance, vertical distance) in metres.
    """
    horizontal, vertical = elevation
    if horizontal == 0.0:
        return 0.0

    sign = -1 if horizontal < 0.0 else 1
    return sign * math.degrees(
        math.acos(abs(horizontal) / math.hypot(horizontal, vertical))
    )


def elevation_adjustment(elevation: Union[float, Tuple[float, float]]) -> float:
    """Depression adjustment for either form of observer elevation."""
    if isinstance(elevation, tuple):
        return adjust_to_obscuring_feature(elevation)
    if elevation > 0.0:
        return adjust_to_horizon(elevation)
    return 0.0


def refraction_at_zenith(zenith: float) -> float:
    """Degrees of atmospheric refraction for the sun at `zenith`."""
    elevation = 90 - zenith
    if elevation >= 85.0:
        return 0.0

    te = math.tan(math.radians(elevation))
    if elevation > 5.0:
        refraction = 58.1 / te - 0.07 / te ** 3 + 0.000086 / te ** 5
    elif elevation > -0.575:
        # Horner form of the near-horizon polynomial
        step1 = -12.79 + elevation * 0.711
        step2 = 103.4 + elevation * step1
        step3 = -518.2 + elevation * step2
        refraction = 1735.0 + elevation * step3
    else:
        refraction = -20.774 / te

    return refraction / 3600.0
