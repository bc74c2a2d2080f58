"""
Observer and location value types.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .errors import TimezoneError


Elevation = Union[float, Tuple[float, float]]

_DMS_RE = re.compile(
    r"(?P<deg>\d{1,3})[°]?((?P<min>\d{1,2})[′'])?((?P<sec>\d{1,2})[″\"])?(?P<dir>[NSEW])?",
    re.IGNORECASE,
)


class SunDirection(Enum):
    """Direction of the sun either RISING or SETTING."""
    RISING = 1
    SETTING = -1


class Depression(Enum):
    """Degrees below the horizon for the dawn/dusk calculations."""
    CIVIL = 6.0
    NAUTICAL = 12.0
    ASTRONOMICAL = 18.0


def depression_degrees(depression: Union[Depression, float]) -> float:
    """Resolve a Depression member or an explicit degree count to degrees."""
    if isinstance(depression, Depression):
        return depression.value
    value = float(depression)
    if value <= 0.0:
        raise ValueError(f"Depression must be a positive number of degrees, got {depression}")
    return value


def dms_to_float(dms: Union[str, float], limit: Optional[float] = None) -> float:
    """
    Convert a string of the form degrees°minutes'seconds"[N|S|E|W], or a
    number encoded as a string, to a float.

    N and E return positive values, S and W negative. The result is
    clamped to +/- `limit` when one is given.
    """
    try:
        res = float(dms)
    except (ValueError, TypeError):
        m = _DMS_RE.match(str(dms).strip())
        if m is None:
            raise ValueError(f"Unable to convert {dms!r} to a float")

        res = float(m.group("deg"))
        if m.group("min"):
            res += float(m.group("min")) / 60
        if m.group("sec"):
            res += float(m.group("sec")) / 3600

        direction = (m.group("dir") or "E").upper()
        if direction in ("S", "W"):
            res = -res

    if limit is not None:
        res = max(-limit, min(limit, res))
    return res


@dataclass
class Observer:
    """
    An observer on Earth.

    latitude and longitude may be floats or DMS strings (e.g. 51°31'N).
    elevation is either metres above sea level or a
    (horizontal, vertical) distance in metres to the nearest obscuring
    feature.
    """
    latitude: float = 51.4733
    longitude: float = -0.0008333
    elevation: Elevation = 0.0

    def __post_init__(self):
        self.latitude = dms_to_float(self.latitude, 90.0)
        self.longitude = dms_to_float(self.longitude, 180.0)
        if isinstance(self.elevation, (tuple, list)):
            if len(self.elevation) != 2:
                raise ValueError("Elevation pair must be (horizontal, vertical)")
            self.elevation = (float(self.elevation[0]), float(self.elevation[1]))
        else:
            self.elevation = float(self.elevation)


@dataclass
class LocationInfo:
    """Name, region, timezone and coordinates of a place."""
    name: str = "Greenwich"
    region: str = "England"
    timezone: str = "Europe/London"
    latitude: float = 51.4733
    longitude: float = -0.0008333
    elevation: Elevation = field(default=0.0)

    def __post_init__(self):
        self.latitude = dms_to_float(self.latitude, 90.0)
        self.longitude = dms_to_float(self.longitude, 180.0)

    @property
    def observer(self) -> Observer:
        return Observer(self.latitude, self.longitude, self.elevation)

    @property
    def tzinfo(self) -> ZoneInfo:
        try:
            return ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise TimezoneError(f"Invalid timezone: {self.timezone}") from e

    @property
    def timezone_group(self) -> str:
        return self.timezone.split("/")[0]
