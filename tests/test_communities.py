"""Unit tests for the community datastore adapter."""
import pandas as pd
import pytest

from src.entity.communities import (
    communities_from_dataframe,
    communities_from_records,
    community_from_record,
    load_communities,
    load_communities_file,
    normalize_care_type,
    save_communities,
)
from src.models import Community, Coordinate
from src.utils.io import read_data_file


class TestNormalizeCareType:
    """Test care type canonicalization."""

    def test_aliases(self):
        """Test common spellings map to canonical labels."""
        assert normalize_care_type("memory-care") == "Memory Care"
        assert normalize_care_type("MEMORY CARE") == "Memory Care"
        assert normalize_care_type("assisted_living") == "Assisted Living"
        assert normalize_care_type("Alzheimer's Care") == "Memory Care"

    def test_unknown_kept(self):
        """Test unknown labels pass through trimmed."""
        assert normalize_care_type("  Hospice ") == "Hospice"


class TestCommunityFromRecord:
    """Test conversion of raw records."""

    def test_camel_case_record(self):
        """Test a BaaS-style record with camelCase keys."""
        community = community_from_record({
            "id": 7,
            "name": " Lakeside Commons ",
            "careTypes": ["memory-care", "Assisted Living", "Memory Care"],
            "amenities": "Pool; Library, Garden",
            "rating": "4.5",
            "lat": 41.4823,
            "lng": -81.7979,
            "zipCode": "44107",
        })
        assert community.id == "7"
        assert community.name == "Lakeside Commons"
        assert community.care_types == ("Memory Care", "Assisted Living")
        assert community.amenities == ("Pool", "Library", "Garden")
        assert community.rating == 4.5
        assert community.coordinates == Coordinate(lat=41.4823, lng=-81.7979)
        assert community.zip == "44107"

    def test_nested_coordinates(self):
        """Test a coordinates object."""
        community = community_from_record({
            "id": "a", "name": "A", "coordinates": {"lat": 41.5, "lng": -81.6},
        })
        assert community.coordinates == Coordinate(lat=41.5, lng=-81.6)

    def test_defaults(self):
        """Test missing optional fields default to empty."""
        community = community_from_record({"id": "a", "name": "A"})
        assert community.care_types == ()
        assert community.amenities == ()
        assert community.rating is None
        assert community.coordinates is None
        assert community.zip is None

    def test_missing_name(self):
        """Test a record without a name is skipped."""
        assert community_from_record({"id": "a"}) is None
        assert community_from_record({"id": "a", "name": "  "}) is None
        assert community_from_record({"name": "A"}) is None

    def test_bad_rating_ignored(self):
        """Test out-of-range and non-numeric ratings become None."""
        assert community_from_record({"id": "a", "name": "A", "rating": 7}).rating is None
        assert community_from_record({"id": "a", "name": "A", "rating": -1}).rating is None
        assert community_from_record({"id": "a", "name": "A", "rating": "great"}).rating is None
        assert community_from_record({"id": "a", "name": "A", "rating": 0}).rating == 0.0

    def test_bad_coordinates_ignored(self):
        """Test unusable coordinates become None."""
        community = community_from_record({"id": "a", "name": "A", "lat": 141.0, "lng": -81.6})
        assert community.coordinates is None
        community = community_from_record({"id": "a", "name": "A", "lat": "x", "lng": -81.6})
        assert community.coordinates is None

    def test_zip_from_address(self):
        """Test the zip comes from the street address."""
        community = community_from_record({
            "id": "a", "name": "A", "address": "22401 Center Ridge Rd, Rocky River, OH 44116",
        })
        assert community.zip == "44116"

    def test_zip_from_location(self):
        """Test the zip comes from the city when nothing else has one."""
        community = community_from_record({"id": "a", "name": "A", "location": "Beachwood, OH"})
        assert community.zip == "44122"
        assert community.location == "Beachwood, OH"

    def test_street_number_ignored_for_zip(self):
        """Test a community with a 5-digit street number still resolves its city zip."""
        community = community_from_record({
            "id": "a", "name": "A",
            "address": "23300 Chagrin Blvd, Beachwood, OH", "location": "Beachwood, OH",
        })
        assert community.zip == "44122"

    def test_numeric_zip(self):
        """Test a zip read as a float."""
        community = community_from_record({"id": 3.0, "name": "A", "zip": 44107.0})
        assert community.id == "3"
        assert community.zip == "44107"

    def test_batch_skips_unusable(self):
        """Test unusable records are dropped from a batch."""
        communities = communities_from_records([
            {"id": "a", "name": "A"},
            {"id": "b"},
            {"id": "c", "name": "C", "rating": 9},
        ])
        assert [c.id for c in communities] == ["a", "c"]


class TestDataFrameLoading:
    """Test loading from tabular exports."""

    def test_fuzzy_headers(self):
        """Test headers that differ in case and spacing."""
        df = pd.DataFrame([
            {"ID": "1", "Name": "Maple Grove", "Care Types": "Assisted Living", "Amenities": float("nan")},
            {"ID": "2", "Name": "Lakeside", "Care Types": "Memory Care; Assisted Living", "Amenities": "Pool|Spa"},
        ])
        communities = communities_from_dataframe(df)
        assert [c.id for c in communities] == ["1", "2"]
        assert communities[0].amenities == ()
        assert communities[1].care_types == ("Memory Care", "Assisted Living")
        assert communities[1].amenities == ("Pool", "Spa")

    def test_csv_file(self, tmp_path):
        """Test loading a CSV export keeps zips as text."""
        csv_path = tmp_path / "communities.csv"
        csv_path.write_text(
            "id,name,care_types,amenities,rating,zip\n"
            "001,Maple Grove,Assisted Living,,4.0,04107\n"
            "002,Lakeside,Memory Care|Assisted Living,Pool;Garden,,44107\n"
        )
        communities = load_communities_file(csv_path)
        assert [c.id for c in communities] == ["001", "002"]
        assert communities[0].zip == "04107"
        assert communities[0].rating == 4.0
        assert communities[1].rating is None
        assert communities[1].amenities == ("Pool", "Garden")

    def test_missing_file(self, tmp_path):
        """Test a missing file raises."""
        with pytest.raises(FileNotFoundError):
            read_data_file(tmp_path / "missing.csv")

    def test_unsupported_format(self, tmp_path):
        """Test an unsupported extension raises."""
        path = tmp_path / "communities.txt"
        path.write_text("id,name\n")
        with pytest.raises(ValueError):
            read_data_file(path)


class TestDuckDBStorage:
    """Test the community table in DuckDB."""

    def test_round_trip(self, tmp_path):
        """Test saved communities load back unchanged in save order."""
        db_path = str(tmp_path / "test.duckdb")
        communities = [
            Community(
                id="b", name="Lakeside", care_types=["Memory Care"], amenities=["Pool", "Garden"],
                rating=4.5, coordinates=Coordinate(lat=41.4823, lng=-81.7979), zip="44107",
                address="1 Main St, Lakewood, OH 44107", location="Lakewood, OH",
            ),
            Community(id="a", name="Maple Grove", care_types=["Assisted Living"]),
        ]
        assert save_communities(communities, db_path=db_path) == 2

        loaded = load_communities(db_path=db_path)
        assert loaded == communities

    def test_numeric_ids_keep_save_order(self, tmp_path):
        """Test text ids are not sorted lexically on load."""
        db_path = str(tmp_path / "test.duckdb")
        save_communities(
            [Community(id=community_id, name=f"C{community_id}") for community_id in ["2", "10", "1"]],
            db_path=db_path,
        )
        assert [c.id for c in load_communities(db_path=db_path)] == ["2", "10", "1"]

    def test_upsert(self, tmp_path):
        """Test saving an id again replaces the row."""
        db_path = str(tmp_path / "test.duckdb")
        save_communities([Community(id="a", name="Old")], db_path=db_path)
        save_communities([Community(id="a", name="New")], db_path=db_path)
        loaded = load_communities(db_path=db_path)
        assert [(c.id, c.name) for c in loaded] == [("a", "New")]

    def test_empty_table(self, tmp_path):
        """Test an empty table loads no communities."""
        assert load_communities(db_path=str(tmp_path / "test.duckdb")) == []
