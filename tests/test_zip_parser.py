"""Unit tests for resolving community zip codes."""
import pytest

from src.geo.zip_index import lookup_zip
from src.geo.zip_parser import CITY_TO_ZIP, extract_zip_from_location, resolve_zip


class TestCityTable:
    """Test the city to zip table."""

    def test_zips_are_five_digits(self):
        """Test every table zip is a 5-digit string."""
        for city, zip_code in CITY_TO_ZIP.items():
            assert len(zip_code) == 5 and zip_code.isdigit(), city

    def test_local_cities_have_coordinates(self):
        """Test common cities resolve to mapped zips."""
        for city in ["Cleveland", "Lakewood", "Rocky River", "Beachwood", "Akron"]:
            assert lookup_zip(CITY_TO_ZIP[city]) is not None


class TestExtractZipFromLocation:
    """Test city-based zip lookup."""

    def test_exact_city(self):
        """Test a known "City, ST" string."""
        assert extract_zip_from_location("Rocky River, OH") == "44116"
        assert extract_zip_from_location("Lakewood") == "44107"

    def test_fuzzy_city(self):
        """Test a misspelled city matches fuzzily."""
        assert extract_zip_from_location("Rocky Rivr, OH") == "44116"

    def test_fuzzy_disabled(self):
        """Test exact-only lookup rejects misspellings."""
        assert extract_zip_from_location("Rocky Rivr, OH", fuzzy=False) is None

    def test_unknown_city(self):
        """Test an unrelated city."""
        assert extract_zip_from_location("Sacramento, CA") is None

    def test_empty(self):
        """Test empty input."""
        assert extract_zip_from_location(None) is None
        assert extract_zip_from_location("") is None
        assert extract_zip_from_location(", OH") is None


class TestResolveZip:
    """Test zip resolution order."""

    def test_explicit_zip_wins(self):
        """Test an explicit zip beats address and city."""
        assert resolve_zip("44145", "1 Main St, Solon, OH 44139", "Solon, OH") == "44145"

    def test_explicit_zip_plus_four(self):
        """Test ZIP+4 in the zip field."""
        assert resolve_zip("44145-2210") == "44145"

    def test_address_before_city(self):
        """Test the address zip beats the city."""
        assert resolve_zip(None, "1 Main St, Solon, OH 44139", "Lakewood, OH") == "44139"

    def test_invalid_zip_falls_through(self):
        """Test a malformed zip is ignored."""
        assert resolve_zip("OH", None, "Lakewood, OH") == "44107"

    def test_street_number_not_taken_for_zip(self):
        """Test a 5-digit street number does not block the city fallback."""
        assert resolve_zip(None, "23300 Chagrin Blvd, Beachwood, OH", "Beachwood, OH") == "44122"

    def test_city_only(self):
        """Test falling back to the city."""
        assert resolve_zip(None, "1 Main St", "Beachwood, OH") == "44122"

    def test_nothing(self):
        """Test nothing to resolve."""
        assert resolve_zip() is None
