"""
Environment configuration for sunevents.
"""

import logging
import os
from typing import Optional

LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

GEOCODER = os.environ.get('GEOCODER', 'static')
GEOCODER_BASE_URL = os.environ.get('GEOCODER_BASE_URL', 'https://nominatim.openstreetmap.org')
GEOCODER_TIMEOUT_SECONDS = float(os.environ.get('GEOCODER_TIMEOUT_SECONDS', '5'))

MAX_RANGE_DAYS = int(os.environ.get('MAX_RANGE_DAYS', '366'))


def configure_logging(level: Optional[str] = None) -> int:
    """Configure root logging at `level` (default LOG_LEVEL) and return the numeric level."""
    numeric_level = getattr(logging, (level or LOG_LEVEL).upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {level or LOG_LEVEL}")
    logging.basicConfig(level=numeric_level)
    return numeric_level
