"""
Test the location database, Nominatim fallback and timezone resolution.
"""

import pytest
import requests
from unittest.mock import patch, MagicMock

from sunevents import config, geo
from sunevents.errors import GeocodingError


def location_count(db):
    return sum(1 for _ in geo.all_locations(db))


class TestDatabase:
    """Test the built-in location database."""

    def test_find_group(self):
        group = geo.group("asia", geo.database())
        assert len(group) > 0

    def test_unknown_group(self):
        with pytest.raises(GeocodingError):
            geo.group("atlantis", geo.database())

    def test_find_location(self):
        loc = geo.lookup("london", geo.database())
        assert loc.name == "London"
        assert loc.region == "England"
        assert abs(loc.latitude - 51.4733) < 0.001
        assert abs(loc.longitude + 0.0008333) < 0.000001
        assert loc.timezone == "Europe/London"

    def test_find_location_with_region(self):
        db = geo.database()
        loc = geo.lookup("Birmingham,England", db)
        assert loc.region == "England"

        loc = geo.lookup("Birmingham,USA", db)
        assert loc.region == "USA"
        assert loc.timezone == "America/Chicago"

    def test_multi_word_name(self):
        loc = geo.lookup("New Delhi")
        assert loc.timezone == "Asia/Kolkata"
        assert abs(loc.latitude - 28.61) < 0.001

    def test_location_not_in_db(self):
        with patch.object(config, 'GEOCODER', 'static'):
            with pytest.raises(GeocodingError):
                geo.lookup("somewhere", geo.database())

    def test_all_locations_have_a_name(self):
        for loc in geo.all_locations(geo.database()):
            assert loc.name

    def test_add_location_string(self):
        db = geo.database()
        count = location_count(db)
        geo.add_locations("A Place,A Region,Asia/Nicosia,35°10'N,33°25'E,162.0\n", db)
        assert location_count(db) == count + 1

        loc = geo.lookup("a place", db)
        assert abs(loc.latitude - 35.166666) < 0.0001
        assert loc.elevation == 162.0

    def test_add_location_list(self):
        db = geo.database()
        count = location_count(db)
        geo.add_locations([
            "Somewhere,Secret Location,UTC,24°28'N,39°36'E",
            "Elsewhere,Other Location,UTC,10°00'S,20°00'W",
        ], db)
        assert location_count(db) == count + 2
        assert geo.lookup("somewhere", db).observer.elevation == 0.0

    def test_lookup_group(self):
        europe = geo.lookup("europe", geo.database())
        assert "london" in europe
        assert europe["london"][0].name == "London"

    def test_add_location_fields(self):
        db = geo.database()
        count = location_count(db)
        geo.add_locations([
            ["Somewhere", "Secret Location", "UTC", "24°28'N", "39°36'E"],
            ("Elsewhere", "Other Location", "UTC", "10°00'S", "20°00'W", 25.0),
        ], db)
        assert location_count(db) == count + 2
        assert geo.lookup("elsewhere", db).elevation == 25.0
        assert geo.lookup("elsewhere", db).latitude == -10.0

    def test_add_malformed_location(self):
        with pytest.raises(ValueError):
            geo.add_locations("Nowhere,Region", geo.database())


class TestNominatim:
    """Test the remote geocoder fallback."""

    @patch('sunevents.geo.resolve_timezone', return_value='Europe/Paris')
    @patch('sunevents.geo.requests.get')
    def test_fallback_to_nominatim(self, mock_get, mock_tz):
        mock_response = MagicMock()
        mock_response.json.return_value = [{
            'lat': '45.7640',
            'lon': '4.8357',
            'display_name': 'Lyon, Auvergne-Rhône-Alpes, France',
            'extratags': {'ele': '173'}
        }]
        mock_get.return_value = mock_response

        with patch.object(config, 'GEOCODER', 'nominatim'):
            loc = geo.lookup("Lyon", geo.database())

        assert loc.name == "Lyon"
        assert loc.region == "France"
        assert loc.timezone == "Europe/Paris"
        assert abs(loc.latitude - 45.764) < 0.0001
        assert loc.elevation == 173.0
        mock_tz.assert_called_once_with(45.764, 4.8357)

    @patch('sunevents.geo.requests.get')
    def test_database_hit_skips_network(self, mock_get):
        with patch.object(config, 'GEOCODER', 'nominatim'):
            geo.lookup("London", geo.database())
        mock_get.assert_not_called()

    @patch('sunevents.geo.requests.get')
    def test_no_results(self, mock_get):
        mock_response = MagicMock()
        mock_response.json.return_value = []
        mock_get.return_value = mock_response

        with pytest.raises(GeocodingError):
            geo.geocode_with_nominatim("Nowhere")

    @patch('sunevents.geo.requests.get')
    def test_service_error(self, mock_get):
        mock_get.side_effect = requests.ConnectionError("connection refused")

        with pytest.raises(GeocodingError):
            geo.geocode_with_nominatim("Lyon")

    @patch('sunevents.geo.requests.get')
    def test_invalid_response(self, mock_get):
        mock_response = MagicMock()
        mock_response.json.return_value = [{'display_name': 'No coordinates'}]
        mock_get.return_value = mock_response

        with pytest.raises(GeocodingError):
            geo.geocode_with_nominatim("Lyon")


class TestTimezone:
    """Test timezone resolution from coordinates."""

    def test_resolve_london(self):
        assert geo.resolve_timezone(51.5074, -0.1278) == 'Europe/London'

    @patch('sunevents.geo._timezone_finder')
    def test_closest_timezone(self, mock_finder):
        tf = MagicMock()
        tf.timezone_at.return_value = None
        tf.closest_timezone_at.return_value = 'Atlantic/Azores'
        mock_finder.return_value = tf

        geo.resolve_timezone.cache_clear()
        assert geo.resolve_timezone(38.0, -30.0) == 'Atlantic/Azores'
        geo.resolve_timezone.cache_clear()

    @patch('sunevents.geo._timezone_finder')
    def test_longitude_fallback(self, mock_finder):
        tf = MagicMock()
        tf.timezone_at.return_value = None
        tf.closest_timezone_at.return_value = None
        mock_finder.return_value = tf

        geo.resolve_timezone.cache_clear()
        assert geo.resolve_timezone(0.0, 30.0) == 'Etc/GMT-2'
        assert geo.resolve_timezone(0.0, -45.0) == 'Etc/GMT+3'
        assert geo.resolve_timezone(0.0, 1.0) == 'UTC'
        geo.resolve_timezone.cache_clear()
