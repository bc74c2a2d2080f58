"""
Geocoding and timezone resolution for sunevents.
Looks up places in a built-in database, optionally falling back to
Nominatim (OpenStreetMap), and resolves IANA timezones from coordinates.
"""

import logging
import time
from functools import lru_cache
from typing import Dict, Iterator, List, Optional, Sequence, Union

import requests
from timezonefinder import TimezoneFinder

from . import config
from .errors import GeocodingError
from .observer import LocationInfo

logger = logging.getLogger(__name__)

# name,region,timezone,latitude,longitude,elevation
LOCATIONS = """Abu Dhabi,UAE,Asia/Dubai,24°28'N,54°22'E,5.0
Amsterdam,Netherlands,Europe/Amsterdam,52°23'N,04°54'E,2.0
Athens,Greece,Europe/Athens,37°58'N,23°46'E,70.0
Beijing,China,Asia/Shanghai,39°55'N,116°20'E,44.0
Berlin,Germany,Europe/Berlin,52°30'N,13°25'E,34.0
Birmingham,England,Europe/London,52°29'N,01°53'W,140.0
Birmingham,USA,America/Chicago,33°31'N,86°48'W,183.0
Buenos Aires,Argentina,America/Argentina/Buenos_Aires,34°30'S,58°20'W,25.0
Cairo,Egypt,Africa/Cairo,30°01'N,31°14'E,23.0
Cape Town,South Africa,Africa/Johannesburg,33°55'S,18°22'E,42.0
Honolulu,USA,Pacific/Honolulu,21°18'N,157°51'W,6.0
Lisbon,Portugal,Europe/Lisbon,38°42'N,09°10'W,2.0
London,England,Europe/London,51.4733,-0.0008333,24.0
Longyearbyen,Svalbard,Arctic/Longyearbyen,78°13'N,15°37'E,10.0
Madrid,Spain,Europe/Madrid,40°25'N,03°45'W,582.0
Mexico City,Mexico,America/Mexico_City,19°20'N,99°10'W,2254.0
Moscow,Russia,Europe/Moscow,55°45'N,37°35'E,200.0
New Delhi,India,Asia/Kolkata,28.61,77.22,233.0
New York,USA,America/New_York,40°43'N,74°00'W,10.0
Paris,France,Europe/Paris,48°50'N,02°20'E,35.0
Reykjavik,Iceland,Atlantic/Reykjavik,64°09'N,21°57'W,61.0
Rio de Janeiro,Brazil,America/Sao_Paulo,22°54'S,43°12'W,6.0
San Francisco,USA,America/Los_Angeles,37°46'N,122°25'W,16.0
Santiago,Chile,America/Santiago,33°24'S,70°40'W,476.0
Singapore,Singapore,Asia/Singapore,01°17'N,103°51'E,15.0
Sydney,Australia,Australia/Sydney,33°52'S,151°12'E,3.0
Tokyo,Japan,Asia/Tokyo,35°40'N,139°45'E,40.0
Wellington,New Zealand,Pacific/Auckland,41°17'S,174°47'E,20.0
"""

LocationDatabase = Dict[str, Dict[str, List[LocationInfo]]]

# Rate limiting for Nominatim
NOMINATIM_DELAY = 1.0  # seconds between requests
last_nominatim_request = 0.0


def _key(name: str) -> str:
    return name.strip().lower().replace(" ", "_")


def _parse_location(fields: Sequence[str]) -> LocationInfo:
    parts = [str(p).strip() for p in fields]
    if len(parts) not in (5, 6):
        raise ValueError(f"Location must have 5 or 6 fields: {list(fields)!r}")

    elevation = float(parts[5]) if len(parts) == 6 else 0.0
    return LocationInfo(
        name=parts[0],
        region=parts[1],
        timezone=parts[2],
        latitude=parts[3],
        longitude=parts[4],
        elevation=elevation,
    )


def add_locations(locations: Union[str, List[str], List[Sequence[str]]],
                  db: LocationDatabase) -> None:
    """
    Add locations to the database.

    `locations` is either a string of newline separated lines, a list of
    such lines, or a list of field lists. Each location has the fields
    name,region,timezone,latitude,longitude[,elevation].
    """
    if isinstance(locations, str):
        locations = locations.splitlines()

    for location in locations:
        if isinstance(location, str):
            if not location.strip():
                continue
            location = location.split(",")
        info = _parse_location(location)
        group_key = _key(info.timezone_group)
        db.setdefault(group_key, {}).setdefault(_key(info.name), []).append(info)


def database() -> LocationDatabase:
    """Create a new database of the built-in locations."""
    db: LocationDatabase = {}
    add_locations(LOCATIONS, db)
    return db


def all_locations(db: LocationDatabase) -> Iterator[LocationInfo]:
    """Iterate over every location in the database."""
    for group_locations in db.values():
        for infos in group_locations.values():
            yield from infos


def group(name: str, db: LocationDatabase) -> Dict[str, List[LocationInfo]]:
    """Locations in a timezone group, e.g. 'europe' or 'asia'."""
    try:
        return db[_key(name)]
    except KeyError:
        raise GeocodingError(f"Unrecognised group - {name}")


def _lookup_in_db(name: str, db: LocationDatabase) -> Optional[LocationInfo]:
    place, _, region = name.partition(",")
    place_key = _key(place)
    region = region.strip().lower()

    for group_locations in db.values():
        for info in group_locations.get(place_key, []):
            if not region or info.region.lower() == region:
                return info
    return None


def lookup(name: str, db: Optional[LocationDatabase] = None
           ) -> Union[LocationInfo, Dict[str, List[LocationInfo]]]:
    """
    Look up a location by name, optionally as "name,region", or a whole
    timezone group such as "europe".

    Falls back to Nominatim when the GEOCODER setting is 'nominatim'.

    Raises:
        GeocodingError: if the location cannot be found.
    """
    if db is None:
        db = database()

    if _key(name) in db:
        return db[_key(name)]

    info = _lookup_in_db(name, db)
    if info is not None:
        return info

    if config.GEOCODER == 'nominatim':
        return geocode_with_nominatim(name)

    raise GeocodingError(f"Unrecognised location name - {name}")


def geocode_with_nominatim(query: str) -> LocationInfo:
    """
    Geocode using Nominatim (OpenStreetMap).
    The timezone is resolved from the returned coordinates.
    """
    global last_nominatim_request

    # Rate limiting
    elapsed = time.time() - last_nominatim_request
    if elapsed < NOMINATIM_DELAY:
        time.sleep(NOMINATIM_DELAY - elapsed)

    headers = {
        'User-Agent': 'sunevents/1.0 (sun event calculation library)'
    }

    params = {
        'q': query,
        'format': 'json',
        'limit': 1,
        'extratags': 1
    }

    try:
        response = requests.get(
            f"{config.GEOCODER_BASE_URL}/search",
            params=params,
            headers=headers,
            timeout=config.GEOCODER_TIMEOUT_SECONDS
        )
        last_nominatim_request = time.time()

        response.raise_for_status()
        data = response.json()

        if not data:
            raise GeocodingError(f"No results found for query: {query}")

        result = data[0]
        lat = float(result['lat'])
        lon = float(result['lon'])

        elevation = 0.0
        if 'ele' in (result.get('extratags') or {}):
            try:
                elevation = float(result['extratags']['ele'])
            except (ValueError, TypeError):
                logger.debug("Ignoring unparseable elevation for '%s'", query)

        display_name = result.get('display_name', query)
        region = display_name.split(',')[-1].strip() if ',' in display_name else ''

        logger.info(f"Nominatim geocoded '{query}' to ({lat}, {lon}, {elevation}m)")
        return LocationInfo(
            name=query.split(',')[0].strip(),
            region=region,
            timezone=resolve_timezone(lat, lon),
            latitude=lat,
            longitude=lon,
            elevation=elevation,
        )

    except requests.RequestException as e:
        logger.error(f"Nominatim request failed: {e}")
        raise GeocodingError(f"Geocoding service error: {str(e)}")
    except (KeyError, ValueError, TypeError) as e:
        logger.error(f"Invalid Nominatim response: {e}")
        raise GeocodingError("Invalid geocoding response")


@lru_cache(maxsize=1)
def _timezone_finder() -> TimezoneFinder:
    return TimezoneFinder()


@lru_cache(maxsize=1000)
def resolve_timezone(lat: float, lon: float) -> str:
    """
    Resolve IANA timezone ID from coordinates.
    Returns timezone ID string (e.g., 'Europe/London').
    """
    tf = _timezone_finder()

    tz_name = tf.timezone_at(lat=lat, lng=lon)
    if tz_name:
        logger.debug("Resolved timezone for (%s, %s): %s", lat, lon, tz_name)
        return tz_name

    # Closest timezone for edge cases like ocean points
    closest = getattr(tf, 'closest_timezone_at', None)
    tz_name = closest(lat=lat, lng=lon) if closest else None
    if tz_name:
        logger.warning(f"Using closest timezone for ({lat}, {lon}): {tz_name}")
        return tz_name

    # Final fallback based on longitude (rough UTC offset)
    offset_hours = round(lon / 15)
    if offset_hours == 0:
        return 'UTC'
    elif offset_hours > 0:
        return f'Etc/GMT-{offset_hours}'  # signs are reversed in Etc/GMT
    else:
        return f'Etc/GMT+{abs(offset_hours)}'
