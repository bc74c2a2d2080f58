"""
Test daily sun event reports.
"""

from datetime import date, datetime
from unittest.mock import patch
from zoneinfo import ZoneInfo

import pytest

from sunevents import config
from sunevents.daily import (
    format_duration, sun_events_for_date, sun_events_for_range
)
from sunevents.observer import Observer

LONDON = Observer(51.5074, -0.1278)
LONGYEARBYEN = Observer(78.2232, 15.6267)


class TestSunEventsForDate:
    """Test a single day's report."""

    def test_london_sunrise_sunset(self):
        events = sun_events_for_date(LONDON, date(2025, 9, 1), ZoneInfo('Europe/London'))

        assert events['date'] == '2025-09-01'
        sunrise = datetime.fromisoformat(events['sunrise'])
        sunset = datetime.fromisoformat(events['sunset'])

        # BST, from the NOAA calculator: sunrise ~06:14, sunset ~19:47
        assert sunrise.hour == 6
        assert 8 <= sunrise.minute <= 20
        assert sunset.hour == 19
        assert 40 <= sunset.minute <= 55

        assert events['day_length_sec'] == int((sunset - sunrise).total_seconds())
        assert events['day_length'] == format_duration(events['day_length_sec'])
        assert not any(events['flags'].values())

    def test_day_length_across_clock_change(self):
        """Clocks go back at 02:00 BST on 2015-10-25, before sunrise."""
        events = sun_events_for_date(LONDON, date(2015, 10, 25), 'Europe/London')
        sunrise = datetime.fromisoformat(events['sunrise'])
        sunset = datetime.fromisoformat(events['sunset'])
        assert sunrise.utcoffset() == sunset.utcoffset()
        assert events['day_length_sec'] == int((sunset - sunrise).total_seconds())

    def test_twilight_fields(self):
        events = sun_events_for_date(LONDON, date(2025, 9, 1))
        for kind in ('civil', 'nautical', 'astronomical'):
            assert events[f'{kind}_dawn'] < events['sunrise']
            assert events[f'{kind}_dusk'] > events['sunset']

    def test_without_twilight(self):
        events = sun_events_for_date(LONDON, date(2025, 9, 1), include_twilight=False)
        assert 'civil_dawn' not in events

    def test_polar_day(self):
        events = sun_events_for_date(LONGYEARBYEN, date(2025, 6, 15))
        assert events['flags']['polar_day'] is True
        assert events['flags']['polar_night'] is False
        assert events['sunrise'] is None
        assert events['day_length_sec'] == 86400
        assert events['day_length'] == "24:00:00"
        assert events['flags']['no_civil_twilight'] is True
        assert events['civil_dawn'] is None

    def test_polar_night(self):
        events = sun_events_for_date(LONGYEARBYEN, date(2025, 12, 15))
        assert events['flags']['polar_night'] is True
        assert events['flags']['polar_day'] is False
        assert events['day_length_sec'] == 0
        assert events['solar_noon'] is not None


class TestSunEventsForRange:
    """Test multi-day reports."""

    def test_range(self):
        days = sun_events_for_range(LONDON, date(2025, 9, 1), date(2025, 9, 3))
        assert [d['date'] for d in days] == ['2025-09-01', '2025-09-02', '2025-09-03']

    def test_single_day_range(self):
        days = sun_events_for_range(LONDON, date(2025, 9, 1), date(2025, 9, 1))
        assert len(days) == 1

    def test_end_before_start(self):
        with pytest.raises(ValueError):
            sun_events_for_range(LONDON, date(2025, 9, 3), date(2025, 9, 1))

    def test_range_too_large(self):
        with patch.object(config, 'MAX_RANGE_DAYS', 2):
            with pytest.raises(ValueError, match="Maximum range"):
                sun_events_for_range(LONDON, date(2025, 9, 1), date(2025, 9, 3))


class TestHelpers:
    """Test duration formatting."""

    def test_format_duration(self):
        assert format_duration(0) == "00:00:00"
        assert format_duration(3661) == "01:01:01"
        assert format_duration(86400) == "24:00:00"
