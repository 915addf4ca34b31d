"""Community matching module."""
import logging
from typing import List, Optional, Union

from src.config import settings
from src.geo.zip_index import distance_to_community
from src.match.reasons import compose_reasons
from src.match.rules import (
    MEMORY_CARE, BOTH, ASSISTED_LIVING,
    CARE_MEMORY, CARE_ASSISTED,
    RANKING_WEIGHTS, MAX_REASONS, AMENITY_HIGHLIGHT_OVER,
    PRIORITY_FLAGS, PRIORITIES_QUESTION_ID,
)
from src.models import (
    AssessmentAnswers, Community, MatchPreferences, MatchedCommunity, RecommendationBand,
)

logger = logging.getLogger(__name__)


def _recommendation_key(recommendation: Union[str, RecommendationBand]) -> str:
    if isinstance(recommendation, RecommendationBand):
        return recommendation.recommendation
    return recommendation


def extract_preferences(answers: Optional[AssessmentAnswers]) -> MatchPreferences:
    """
    Derive ranking preferences from the community-priorities answer.

    Args:
        answers: Assessment answers

    Returns:
        MatchPreferences with the flag for the selected priority set
    """
    if not answers:
        return MatchPreferences()

    selected = answers.get(PRIORITIES_QUESTION_ID)
    if selected is None:
        return MatchPreferences()

    values = [selected] if isinstance(selected, str) else list(selected)
    flags = {PRIORITY_FLAGS[v]: True for v in values if v in PRIORITY_FLAGS}
    return MatchPreferences(**flags)


def filter_by_care_type(
    communities: List[Community],
    recommendation: Union[str, RecommendationBand]
) -> List[Community]:
    """
    Keep communities that offer the recommended care.

    Memory care keeps communities with Memory Care. Assisted living keeps
    communities with Assisted Living that do not also offer Memory Care.
    Both keeps communities with either.
    """
    key = _recommendation_key(recommendation)

    if key == MEMORY_CARE:
        return [c for c in communities if c.has_care_type(CARE_MEMORY)]
    elif key == ASSISTED_LIVING:
        return [
            c for c in communities
            if c.has_care_type(CARE_ASSISTED) and not c.has_care_type(CARE_MEMORY)
        ]
    else:
        return [
            c for c in communities
            if c.has_care_type(CARE_MEMORY) or c.has_care_type(CARE_ASSISTED)
        ]


def satisfies_primary_care(community: Community, recommendation: str) -> bool:
    """True when the community offers the recommendation's primary care type."""
    if recommendation == MEMORY_CARE:
        return community.has_care_type(CARE_MEMORY)
    elif recommendation == ASSISTED_LIVING:
        return community.has_care_type(CARE_ASSISTED)
    # Both: a community offering both levels of care
    return community.has_care_type(CARE_MEMORY) and community.has_care_type(CARE_ASSISTED)


def _earns_location_bonus(community: Community, distance: Optional[float]) -> bool:
    if settings.location_bonus_mode == "distance":
        return distance is not None and distance <= settings.location_bonus_radius_miles
    return community.coordinates is not None


def calculate_rank_score(
    community: Community,
    recommendation: str,
    preferences: MatchPreferences,
    distance: Optional[float] = None
) -> float:
    """
    Weighted ranking score for one community.

    Each signal adds independently; see RANKING_WEIGHTS.
    """
    score = 0.0

    if satisfies_primary_care(community, recommendation):
        score += RANKING_WEIGHTS["PRIMARY_CARE"]

    if preferences.prioritize_memory_care and community.has_care_type(CARE_MEMORY):
        score += RANKING_WEIGHTS["MC_PREFERENCE"]

    if preferences.prioritize_amenities:
        score += RANKING_WEIGHTS["PER_AMENITY"] * len(community.amenities)

    if preferences.prioritize_location and _earns_location_bonus(community, distance):
        score += RANKING_WEIGHTS["LOCATION"]

    if community.rating is not None:
        score += RANKING_WEIGHTS["PER_RATING_POINT"] * community.rating

    return score


def generate_match_reasons(
    community: Community,
    recommendation: Union[str, RecommendationBand],
    preferences: MatchPreferences,
    distance: Optional[float] = None
) -> List[str]:
    """
    Reason codes explaining why a community was matched.

    Returns:
        Up to MAX_REASONS reason codes, most specific first
    """
    key = _recommendation_key(recommendation)
    reason_codes = []

    if key == MEMORY_CARE and community.has_care_type(CARE_MEMORY):
        reason_codes.append("MC_PROGRAM")

    if len(community.amenities) > AMENITY_HIGHLIGHT_OVER:
        reason_codes.append("AMENITIES")

    if preferences.prioritize_activities:
        reason_codes.append("ACTIVITIES")

    if preferences.prioritize_location and _earns_location_bonus(community, distance):
        reason_codes.append("LOCATION")

    if not reason_codes:
        reason_codes = ["RATED", "CARE"]

    return reason_codes[:MAX_REASONS]


def match_communities(
    communities: List[Community],
    recommendation: Union[str, RecommendationBand],
    answers: Optional[AssessmentAnswers] = None,
    user_zip: Optional[str] = None,
    top_n: Optional[int] = None
) -> List[MatchedCommunity]:
    """
    Select and order the best communities for a recommendation.

    Args:
        communities: Candidate pool
        recommendation: Recommendation band or its key
        answers: Assessment answers; enables preference ranking when given
        user_zip: User's zip code, used for distances
        top_n: Number of matches (defaults to settings.match_top_n)

    Returns:
        Up to top_n MatchedCommunity records, best first
    """
    key = _recommendation_key(recommendation)
    if key not in (MEMORY_CARE, BOTH, ASSISTED_LIVING):
        logger.warning(f"Unknown recommendation {key!r}, treating as {BOTH!r}")
        key = BOTH
    top_n = settings.match_top_n if top_n is None else top_n

    filtered = filter_by_care_type(communities, key)
    logger.debug(f"{len(filtered)} of {len(communities)} communities offer {key}")

    preferences = extract_preferences(answers)
    distances = {id(c): distance_to_community(user_zip, c) for c in filtered} if user_zip else {}

    if answers is not None:
        scored = [
            (c, calculate_rank_score(c, key, preferences, distances.get(id(c))))
            for c in filtered
        ]
        # sorted() is stable, ties keep pool order
        scored = sorted(scored, key=lambda pair: -pair[1])
    elif key == MEMORY_CARE:
        scored = sorted(((c, 0.0) for c in filtered),
                        key=lambda pair: not pair[0].has_care_type(CARE_MEMORY))
    else:
        scored = [(c, 0.0) for c in filtered]

    matches = []
    for community, rank_score in scored[:top_n]:
        distance = distances.get(id(community))
        reason_codes = generate_match_reasons(community, key, preferences, distance)
        matches.append(MatchedCommunity(
            community=community,
            rank_score=rank_score,
            distance_miles=distance,
            reasons=tuple(reason_codes),
            reason_text=compose_reasons(reason_codes, settings.region_label),
        ))

    logger.info(f"Matched {len(matches)} communities for {key}")
    return matches
