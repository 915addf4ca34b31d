"""Typed records shared by the scoring, distance and matching modules."""
from typing import Dict, List, Optional, Tuple, Union
from pydantic import BaseModel, ConfigDict, Field


# Question id -> selected option value (single) or values (multiple)
AssessmentAnswers = Dict[str, Union[str, List[str]]]


class Coordinate(BaseModel):
    """Latitude/longitude pair in decimal degrees."""
    model_config = ConfigDict(frozen=True)

    lat: float
    lng: float


class PostalCoordinate(BaseModel):
    """Approximate center point of a 5-digit zip code."""
    model_config = ConfigDict(frozen=True)

    zip_code: str = Field(pattern=r"^\d{5}$")
    latitude: float
    longitude: float

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(lat=self.latitude, lng=self.longitude)


class AssessmentOption(BaseModel):
    model_config = ConfigDict(frozen=True)

    value: str
    label: str
    points: int
    description: Optional[str] = None


class AssessmentQuestion(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    kind: str  # "single" or "multiple"
    prompt: str
    subtext: Optional[str] = None
    options: Tuple[AssessmentOption, ...]

    def find_option(self, value: str) -> Optional[AssessmentOption]:
        """Return the option with the given value, or None if it is not offered."""
        for option in self.options:
            if option.value == value:
                return option
        return None


class RecommendationBand(BaseModel):
    """Care level recommendation with its display copy."""
    model_config = ConfigDict(frozen=True)

    recommendation: str  # "memory-care", "both" or "assisted-living"
    title: str
    description: str
    cost_range: str
    reasons: Tuple[str, ...]


class ScoreResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_score: int
    band: RecommendationBand


class Community(BaseModel):
    """
    Community record as seen by the matching core.

    Defaulting of optional fields happens in src.entity.communities before a
    record reaches this model.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    care_types: Tuple[str, ...] = ()
    amenities: Tuple[str, ...] = ()
    rating: Optional[float] = Field(default=None, ge=0, le=5)
    coordinates: Optional[Coordinate] = None
    zip: Optional[str] = None
    address: Optional[str] = None
    location: Optional[str] = None

    def has_care_type(self, care_type: str) -> bool:
        return care_type in self.care_types


class MatchPreferences(BaseModel):
    """Ranking preferences derived from the community-priorities answer."""
    model_config = ConfigDict(frozen=True)

    prioritize_memory_care: bool = False
    prioritize_location: bool = False
    prioritize_activities: bool = False
    prioritize_amenities: bool = False
    prioritize_value: bool = False


class MatchedCommunity(BaseModel):
    """A community selected for one matching request, with its ranking details."""
    model_config = ConfigDict(frozen=True)

    community: Community
    rank_score: float = 0.0
    distance_miles: Optional[float] = None
    reasons: Tuple[str, ...] = ()
    reason_text: str = ""
