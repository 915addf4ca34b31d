"""Zip code coordinates and distance utilities for proximity search."""
import logging
import math
import re
from typing import Dict, List, Optional, Tuple

from src.config import settings
from src.models import Community, Coordinate, PostalCoordinate

logger = logging.getLogger(__name__)

EARTH_RADIUS_MILES = 3959

ZIP_PATTERN = re.compile(r"^\d{5}$")

# Approximate center points of Cleveland-area zip codes
_ZIP_CENTERS: Dict[str, Tuple[float, float]] = {
    # Cleveland proper
    "44102": (41.4784, -81.7034),
    "44103": (41.5034, -81.6306),
    "44104": (41.4851, -81.6234),
    "44105": (41.4645, -81.6190),
    "44106": (41.5067, -81.6073),
    "44107": (41.4823, -81.7979),  # Lakewood
    "44108": (41.5273, -81.6190),
    "44109": (41.4445, -81.6973),
    "44110": (41.5484, -81.5556),
    "44111": (41.4506, -81.7640),
    "44112": (41.5306, -81.5867),  # East Cleveland
    "44113": (41.4823, -81.7034),
    "44114": (41.5006, -81.6940),
    "44115": (41.4973, -81.6473),
    "44116": (41.4756, -81.8412),  # Rocky River
    "44117": (41.5234, -81.5556),  # Euclid
    "44118": (41.5123, -81.5673),  # Cleveland Heights
    "44119": (41.5067, -81.5290),
    "44120": (41.4739, -81.5667),  # Shaker Heights
    "44121": (41.5234, -81.5373),  # South Euclid
    "44122": (41.4756, -81.5090),  # Beachwood
    "44123": (41.5856, -81.5167),  # Euclid
    "44124": (41.5634, -81.4673),  # Lyndhurst/Mayfield Heights
    "44125": (41.4173, -81.6012),  # Garfield Heights
    "44126": (41.4506, -81.8356),  # Fairview Park
    "44127": (41.4506, -81.6123),
    "44128": (41.4734, -81.5167),  # Warrensville Heights
    "44129": (41.3934, -81.7456),  # Parma
    "44130": (41.3634, -81.8190),  # Middleburg Heights
    "44131": (41.3773, -81.6762),  # Independence/Seven Hills
    "44132": (41.5895, -81.4790),  # Euclid
    "44133": (41.3134, -81.7234),  # North Royalton
    "44134": (41.3912, -81.7234),  # Parma
    "44135": (41.4245, -81.7690),
    "44136": (41.3145, -81.8356),  # Strongsville
    "44137": (41.4156, -81.5623),  # Maple Heights
    "44138": (41.3712, -81.9090),  # Olmsted Falls
    "44139": (41.3890, -81.4412),  # Solon
    "44140": (41.3634, -81.6012),  # Bay Village
    "44141": (41.3134, -81.6262),  # Brecksville
    "44142": (41.4067, -81.8223),  # Brook Park
    "44143": (41.5534, -81.5034),  # Richmond Heights
    "44144": (41.4423, -81.7334),  # Brooklyn
    "44145": (41.4556, -81.9179),  # Westlake
    "44146": (41.3912, -81.5334),  # Bedford
    "44147": (41.3145, -81.6673),  # Broadview Heights

    # Suburbs
    "44017": (41.3662, -81.8543),  # Berea
    "44056": (41.3079, -81.5090),  # Macedonia
    "44060": (41.6662, -81.3395),  # Mentor
    "44070": (41.4162, -81.9234),  # North Olmsted
    "44092": (41.6123, -81.4690),  # Wickliffe
    "44094": (41.6395, -81.4067),  # Willoughby

    # Akron area
    "44221": (41.1434, -81.4812),  # Cuyahoga Falls
    "44256": (41.1434, -81.8643),  # Medina
    "44308": (41.0814, -81.5190),  # Akron

    "44067": (41.3645, -81.5623),  # Northfield
    "44212": (41.2379, -81.8023),  # Brunswick
    "44224": (41.1590, -81.4401),  # Stow
    "44011": (41.4512, -82.0312),  # Avon
    "44039": (41.3873, -82.0190),  # North Ridgeville
}

ZIP_COORDINATES: Dict[str, PostalCoordinate] = {
    zip_code: PostalCoordinate(zip_code=zip_code, latitude=lat, longitude=lng)
    for zip_code, (lat, lng) in _ZIP_CENTERS.items()
}


def is_valid_zip_code(zip_code: Optional[str]) -> bool:
    """Return True for a 5-digit US zip code."""
    return isinstance(zip_code, str) and bool(ZIP_PATTERN.match(zip_code))


def format_zip_code(raw: Optional[str]) -> str:
    """Strip non-digits and keep at most five digits."""
    if not raw:
        return ""
    return re.sub(r"\D", "", str(raw))[:5]


def lookup_zip(zip_code: Optional[str]) -> Optional[PostalCoordinate]:
    """
    Get approximate coordinates for a zip code.

    Args:
        zip_code: 5-digit zip code

    Returns:
        PostalCoordinate, or None if the zip is malformed or not in the table
    """
    if not is_valid_zip_code(zip_code):
        return None
    return ZIP_COORDINATES.get(zip_code)


def distance_miles(a: Coordinate, b: Coordinate) -> float:
    """
    Calculate distance between two points in miles using Haversine formula.

    Args:
        a: First point
        b: Second point

    Returns:
        Distance in miles rounded to one decimal place
    """
    lat1, lon1, lat2, lon2 = map(math.radians, [a.lat, a.lng, b.lat, b.lng])

    dlat = lat2 - lat1
    dlon = lon2 - lon1
    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    c = 2 * math.asin(math.sqrt(min(1.0, h)))

    # Round half up, not to even
    return math.floor(EARTH_RADIUS_MILES * c * 10 + 0.5) / 10


def community_coordinates(community: Community) -> Optional[Coordinate]:
    """Community's own coordinates, falling back to its zip code center."""
    if community.coordinates is not None:
        return community.coordinates
    postal = lookup_zip(community.zip)
    return postal.coordinate if postal else None


def distance_to_community(user_zip: Optional[str], community: Community) -> Optional[float]:
    """
    Distance from a user's zip code to a community.

    Returns:
        Distance in miles, or None if either side has no coordinates
    """
    user_point = lookup_zip(user_zip)
    if user_point is None:
        return None

    community_point = community_coordinates(community)
    if community_point is None:
        return None

    return distance_miles(user_point.coordinate, community_point)


def sort_by_distance(
    communities: List[Community],
    user_zip: Optional[str]
) -> List[Tuple[Community, float]]:
    """
    Sort communities by distance from a zip code, nearest first.

    Communities without a resolvable distance are left out.
    """
    with_distance = []
    for community in communities:
        distance = distance_to_community(user_zip, community)
        if distance is not None:
            with_distance.append((community, distance))

    with_distance.sort(key=lambda pair: pair[1])
    return with_distance


def nearby_communities(
    communities: List[Community],
    user_zip: Optional[str],
    max_miles: Optional[float] = None,
    limit: Optional[int] = None
) -> List[Tuple[Community, float]]:
    """
    Communities within max_miles of a zip code, nearest first.

    Args:
        communities: Candidate communities
        user_zip: User's zip code
        max_miles: Radius in miles (defaults to settings.nearby_max_miles)
        limit: Maximum results (defaults to settings.nearby_limit)

    Returns:
        List of (community, distance) pairs
    """
    max_miles = settings.nearby_max_miles if max_miles is None else max_miles
    limit = settings.nearby_limit if limit is None else limit

    if lookup_zip(user_zip) is None:
        logger.debug(f"No coordinates for zip {user_zip!r}, nearby search is empty")
        return []

    within = [pair for pair in sort_by_distance(communities, user_zip) if pair[1] <= max_miles]
    return within[:limit]


def format_distance(miles: float) -> str:
    """Format a distance for display, e.g. "4.9 mi"."""
    return f"{math.floor(miles * 10 + 0.5) / 10} mi"
