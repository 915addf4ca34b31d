"""Zip code resolution for community records."""
import logging
from typing import Dict, Optional

from src.config import settings
from src.utils.addresses import extract_zip_from_address
from src.utils.fuzzy import find_best_match

logger = logging.getLogger(__name__)

# Primary zip code per city, used when a record's address has no zip
CITY_TO_ZIP: Dict[str, str] = {
    "Cleveland": "44114",
    "Shaker Heights": "44120",
    "Beachwood": "44122",
    "Parma": "44134",
    "Lakewood": "44107",
    "Westlake": "44145",
    "Strongsville": "44136",
    "Independence": "44131",
    "Seven Hills": "44131",
    "Rocky River": "44116",
    "North Olmsted": "44070",
    "Mayfield Heights": "44124",
    "Richmond Heights": "44143",
    "Solon": "44139",
    "Macedonia": "44056",
    "Bedford": "44146",
    "Garfield Heights": "44125",
    "Maple Heights": "44137",
    "Middleburg Heights": "44130",
    "Brook Park": "44142",
    "Berea": "44017",
    "Lyndhurst": "44124",
    "Mentor": "44060",
    "Akron": "44308",
    "Cuyahoga Falls": "44221",
    "Medina": "44256",
    "Brunswick": "44212",
    "Avon": "44011",
    "North Royalton": "44133",
    "Broadview Heights": "44147",
    "Brecksville": "44141",
    "Wickliffe": "44092",
    "Willoughby": "44094",
    "Euclid": "44123",
    "Cleveland Heights": "44118",
    "University Heights": "44118",
    "South Euclid": "44121",
    "East Cleveland": "44112",
    "Warrensville Heights": "44128",
    "Brooklyn": "44144",
    "Olmsted Falls": "44138",
    "Northfield": "44067",
    "Twinsburg": "44087",
    "Stow": "44224",
    "Hudson": "44236",
    "Streetsboro": "44241",
    "Wooster": "44691",
    "Chardon": "44024",
    "Painesville": "44077",
    "Ashtabula": "44004",
    "Elyria": "44035",
    "Lorain": "44052",
    "North Ridgeville": "44039",
    "Amherst": "44001",
    "Grafton": "44044",
    "Columbia Station": "44028",
    "Sheffield Lake": "44054",
    "Vermilion": "44089",
    "Poland": "44514",
    "Boardman": "44512",
    "Canfield": "44406",
    "Austintown": "44515",
    "Cortland": "44410",
    "Warren": "44483",
    "Niles": "44446",
    "Girard": "44420",
    "Youngstown": "44505",
    "Dover": "44622",
    "New Philadelphia": "44663",
    "Troy": "45373",
}


def extract_zip_from_location(location: Optional[str], fuzzy: bool = True) -> Optional[str]:
    """
    Resolve a "City, ST" location string to the city's primary zip code.

    Args:
        location: Location text such as "Rocky River, OH"
        fuzzy: Fall back to fuzzy city-name matching for misspellings

    Returns:
        Zip code or None if the city is unknown
    """
    if not location:
        return None

    city = location.split(",")[0].strip()
    if not city:
        return None

    zip_code = CITY_TO_ZIP.get(city)
    if zip_code or not fuzzy:
        return zip_code

    match = find_best_match(city, CITY_TO_ZIP.keys(), settings.city_match_threshold)
    if match:
        logger.debug(f"Matched city {city!r} to {match!r}")
        return CITY_TO_ZIP[match]
    return None


def resolve_zip(
    zip_code: Optional[str] = None,
    address: Optional[str] = None,
    location: Optional[str] = None
) -> Optional[str]:
    """
    Pick a zip code for a community: explicit zip, then address, then city.

    Returns:
        5-digit zip code or None
    """
    if zip_code:
        cleaned = str(zip_code).strip()[:5]
        if len(cleaned) == 5 and cleaned.isdigit():
            return cleaned

    from_address = extract_zip_from_address(address)
    if from_address:
        return from_address

    return extract_zip_from_location(location)
