"""Community datastore adapter.

Raw community records arrive as loosely typed dicts (CMS exports, BaaS rows,
CSV files). Everything here turns them into validated ``Community`` models:
care types are canonicalized, amenity strings are split, missing or invalid
ratings and coordinates become ``None`` and zips are resolved from the address
or city when the record has none. The matching core never sees raw records.
"""
import logging
import math
import re
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

import duckdb
import pandas as pd
from pydantic import ValidationError

from src.config import settings
from src.geo.zip_parser import resolve_zip
from src.match.rules import CARE_MEMORY, CARE_ASSISTED
from src.models import Community, Coordinate
from src.utils.fuzzy import map_headers
from src.utils.io import read_data_file

logger = logging.getLogger(__name__)

# Lower-cased, separator-free label -> canonical care type
CARE_TYPE_ALIASES: Dict[str, str] = {
    "memorycare": CARE_MEMORY,
    "memory": CARE_MEMORY,
    "dementiacare": CARE_MEMORY,
    "alzheimerscare": CARE_MEMORY,
    "assistedliving": CARE_ASSISTED,
    "assisted": CARE_ASSISTED,
    "independentliving": "Independent Living",
    "skillednursing": "Skilled Nursing",
    "nursinghome": "Skilled Nursing",
    "respitecare": "Respite Care",
}

EXPECTED_COLUMNS: Dict[str, str] = {
    "id": "id",
    "name": "name",
    "care_types": "care_types",
    "amenities": "amenities",
    "rating": "rating",
    "latitude": "latitude",
    "longitude": "longitude",
    "zip": "zip",
    "address": "address",
    "location": "location",
}

# Alternate keys seen in raw records, checked in order
FIELD_KEYS: Dict[str, List[str]] = {
    "id": ["id", "community_id", "slug"],
    "name": ["name", "community_name", "facility_name"],
    "care_types": ["care_types", "careTypes", "services", "type"],
    "amenities": ["amenities"],
    "rating": ["rating", "overall_rating", "overallRating"],
    "latitude": ["latitude", "lat"],
    "longitude": ["longitude", "lng", "lon"],
    "zip": ["zip", "zip_code", "zipCode", "postal_code"],
    "address": ["address", "street_address"],
    "location": ["location", "city"],
}


def _is_missing(value: Any) -> bool:
    if isinstance(value, (list, tuple, set)):
        return len(value) == 0
    if isinstance(value, str):
        return not value.strip()
    return bool(pd.isna(value))


def _get_field(record: Dict, field: str) -> Any:
    for key in FIELD_KEYS[field]:
        value = record.get(key)
        if not _is_missing(value):
            return value
    return None


def _split_list(value: Any) -> List[str]:
    """Turn a list-like or delimited string into a list of clean strings."""
    if _is_missing(value):
        return []
    if isinstance(value, str):
        items = re.split(r"[;,|]", value)
    else:
        items = list(value)
    return [str(item).strip() for item in items if item is not None and str(item).strip()]


def normalize_care_type(label: str) -> str:
    """Canonicalize a care type label, e.g. "memory-care" -> "Memory Care"."""
    key = re.sub(r"[^a-z]", "", label.lower())
    return CARE_TYPE_ALIASES.get(key, label.strip())


def _clean_rating(value: Any, community_name: str) -> Optional[float]:
    if _is_missing(value):
        return None
    try:
        rating = float(value)
    except (TypeError, ValueError):
        logger.warning(f"Ignoring non-numeric rating {value!r} for {community_name}")
        return None
    if math.isnan(rating) or not 0 <= rating <= 5:
        logger.warning(f"Ignoring out-of-range rating {value!r} for {community_name}")
        return None
    return rating


def _clean_coordinates(record: Dict) -> Optional[Coordinate]:
    nested = record.get("coordinates")
    if isinstance(nested, dict):
        lat, lng = nested.get("lat"), nested.get("lng")
    else:
        lat, lng = _get_field(record, "latitude"), _get_field(record, "longitude")

    if _is_missing(lat) or _is_missing(lng):
        return None
    try:
        lat, lng = float(lat), float(lng)
    except (TypeError, ValueError):
        return None
    if math.isnan(lat) or math.isnan(lng) or not (-90 <= lat <= 90 and -180 <= lng <= 180):
        return None
    return Coordinate(lat=lat, lng=lng)


def community_from_record(record: Dict) -> Optional[Community]:
    """
    Build a Community from a raw datastore record.

    Args:
        record: Raw record dict (snake_case or camelCase keys)

    Returns:
        Community, or None if the record lacks an id or name
    """
    raw_id = _get_field(record, "id")
    name = _get_field(record, "name")
    if raw_id is None or name is None:
        logger.warning(f"Skipping community record without id/name: {str(record)[:80]}")
        return None

    name = str(name).strip()
    if isinstance(raw_id, float) and raw_id.is_integer():
        raw_id = int(raw_id)

    care_types = []
    for label in _split_list(_get_field(record, "care_types")):
        care_type = normalize_care_type(label)
        if care_type not in care_types:
            care_types.append(care_type)

    address = _get_field(record, "address")
    location = _get_field(record, "location")
    zip_value = _get_field(record, "zip")
    if isinstance(zip_value, float) and zip_value.is_integer():
        zip_value = int(zip_value)

    try:
        return Community(
            id=str(raw_id),
            name=name,
            care_types=tuple(care_types),
            amenities=tuple(_split_list(_get_field(record, "amenities"))),
            rating=_clean_rating(_get_field(record, "rating"), name),
            coordinates=_clean_coordinates(record),
            zip=resolve_zip(
                str(zip_value) if zip_value is not None else None,
                str(address) if address is not None else None,
                str(location) if location is not None else None,
            ),
            address=str(address) if address is not None else None,
            location=str(location) if location is not None else None,
        )
    except ValidationError as e:
        logger.warning(f"Skipping invalid community record {raw_id}: {e}")
        return None


def communities_from_records(records: Iterable[Dict]) -> List[Community]:
    """Convert raw records, dropping the ones that cannot be used."""
    communities = []
    skipped = 0
    for record in records:
        community = community_from_record(record)
        if community is None:
            skipped += 1
        else:
            communities.append(community)

    if skipped:
        logger.warning(f"Skipped {skipped} unusable community records")
    return communities


def communities_from_dataframe(df: pd.DataFrame) -> List[Community]:
    """
    Convert a DataFrame of community rows, mapping fuzzy column headers.

    Args:
        df: DataFrame with community columns (headers may vary in case/spelling)

    Returns:
        List of Community models
    """
    mapping = map_headers(EXPECTED_COLUMNS, [str(c) for c in df.columns])
    renamed = df.rename(columns={actual: canonical for canonical, actual in mapping.items()})
    return communities_from_records(renamed.to_dict("records"))


def load_communities_file(file_path: Union[str, Path]) -> List[Community]:
    """Load communities from a CSV or XLSX export."""
    df = read_data_file(file_path)
    communities = communities_from_dataframe(df)
    logger.info(f"Loaded {len(communities)} communities from {file_path}")
    return communities


def init_community_table(db_path: str, table: Optional[str] = None):
    """Initialize the community table in DuckDB."""
    table = table or settings.community_table
    conn = duckdb.connect(db_path)
    conn.execute(f"""
        CREATE TABLE IF NOT EXISTS {table} (
            id VARCHAR PRIMARY KEY,
            name VARCHAR,
            care_types VARCHAR[],
            amenities VARCHAR[],
            rating DOUBLE,
            latitude DOUBLE,
            longitude DOUBLE,
            zip VARCHAR,
            address VARCHAR,
            location VARCHAR
        )
    """)
    conn.close()


def save_communities(
    communities: List[Community],
    db_path: Optional[str] = None,
    table: Optional[str] = None
) -> int:
    """
    Upsert communities into DuckDB.

    Returns:
        Number of rows written
    """
    db_path = db_path or settings.duckdb_path
    table = table or settings.community_table
    init_community_table(db_path, table)

    rows = [
        [
            c.id, c.name, list(c.care_types), list(c.amenities), c.rating,
            c.coordinates.lat if c.coordinates else None,
            c.coordinates.lng if c.coordinates else None,
            c.zip, c.address, c.location,
        ]
        for c in communities
    ]

    conn = duckdb.connect(db_path)
    if rows:
        conn.executemany(f"""
            INSERT OR REPLACE INTO {table}
            (id, name, care_types, amenities, rating, latitude, longitude, zip, address, location)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """, rows)
    conn.close()

    logger.info(f"Saved {len(rows)} communities to {table}")
    return len(rows)


def load_communities(db_path: Optional[str] = None, table: Optional[str] = None) -> List[Community]:
    """Load the candidate pool from DuckDB in the order rows were first saved."""
    db_path = db_path or settings.duckdb_path
    table = table or settings.community_table
    init_community_table(db_path, table)

    conn = duckdb.connect(db_path)
    cursor = conn.execute(f"SELECT * FROM {table} ORDER BY rowid")
    columns = [d[0] for d in cursor.description]
    records = [dict(zip(columns, row)) for row in cursor.fetchall()]
    conn.close()

    if not records:
        logger.warning(f"No communities found in {table}")
        return []

    return communities_from_records(records)
