"""
Sun calculations for the current date and time.

Thin wrappers that read the clock and hand an explicit date or instant
to the functions in sun.py.
"""

from datetime import datetime
from typing import Dict, Union

from . import sun as sun_calc
from .clock import TzInfo, now, today
from .observer import Depression, Observer


def sun_today(observer: Observer,
              dawn_dusk_depression: Union[Depression, float] = Depression.CIVIL,
              tzinfo: TzInfo = None) -> Dict[str, datetime]:
    """Dawn, sunrise, noon, sunset and dusk for today's date in `tzinfo`."""
    return sun_calc.sun(observer, today(tzinfo), dawn_dusk_depression, tzinfo)


def elevation_now(observer: Observer, with_refraction: bool = True) -> float:
    """The sun's elevation at this moment."""
    return sun_calc.elevation(observer, now(), with_refraction)


def azimuth_now(observer: Observer) -> float:
    """The sun's azimuth at this moment."""
    return sun_calc.azimuth(observer, now())
