"""Care recommendation thresholds and community ranking weights."""
from typing import Dict

# Recommendation keys
MEMORY_CARE = "memory-care"
BOTH = "both"
ASSISTED_LIVING = "assisted-living"

# Care type labels as stored on community records
CARE_MEMORY = "Memory Care"
CARE_ASSISTED = "Assisted Living"

# Score bands: memory-care >= 7, both 3-6, assisted-living < 3
MEMORY_CARE_MIN = 7
BOTH_MIN = 3

# Ranking points by signal type
RANKING_WEIGHTS: Dict[str, float] = {
    "PRIMARY_CARE": 100,     # Care types satisfy the recommendation's primary type
    "MC_PREFERENCE": 50,     # Memory care requested and offered
    "PER_AMENITY": 2,        # Per listed amenity, when amenities are a priority
    "LOCATION": 20,          # Location is a priority and the community is placed
    "PER_RATING_POINT": 10,  # Per rating star
}

# Number of matches returned by default
TOP_N = 3

# Justification limits
MAX_REASONS = 2
AMENITY_HIGHLIGHT_OVER = 5

# community-priorities answer value -> preference flag
PRIORITY_FLAGS: Dict[str, str] = {
    "specialized-care": "prioritize_memory_care",
    "location": "prioritize_location",
    "activities": "prioritize_activities",
    "amenities": "prioritize_amenities",
    "value": "prioritize_value",
}

PRIORITIES_QUESTION_ID = "community-priorities"
