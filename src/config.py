"""Configuration management using Pydantic BaseSettings."""
from pathlib import Path
from typing import Literal
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.match.rules import TOP_N


class Settings(BaseSettings):
    """Application settings with environment variable overrides."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Data paths
    data_dir: Path = Field(default_factory=lambda: Path("./data"), alias="DATA_DIR")
    out_dir: Path = Field(default_factory=lambda: Path("./out"), alias="OUT_DIR")

    # Database (local stand-in for the content datastore and session storage)
    db_path: Path = Field(default_factory=lambda: Path("./data/carematch.duckdb"), alias="DB_PATH")
    community_table: str = Field(default="communities", alias="COMMUNITY_TABLE")
    session_table: str = Field(default="assessment_session", alias="SESSION_TABLE")

    # Matching
    match_top_n: int = Field(default=TOP_N, alias="MATCH_TOP_N")
    region_label: str = Field(default="Greater Cleveland", alias="REGION_LABEL")

    # "presence" rewards known coordinates, "distance" requires the community
    # to sit within location_bonus_radius_miles of the user's zip
    location_bonus_mode: Literal["presence", "distance"] = Field(default="presence", alias="LOCATION_BONUS_MODE")
    location_bonus_radius_miles: float = Field(default=10.0, alias="LOCATION_BONUS_RADIUS_MILES")

    # Proximity search
    nearby_max_miles: float = Field(default=20.0, alias="NEARBY_MAX_MILES")
    nearby_limit: int = Field(default=5, alias="NEARBY_LIMIT")

    # Fuzzy city -> zip fallback
    city_match_threshold: int = Field(default=88, alias="CITY_MATCH_THRESHOLD")

    def __init__(self, **kwargs):
        super().__init__(**kwargs)

        # Ensure directories exist
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.out_dir.mkdir(parents=True, exist_ok=True)

    @property
    def duckdb_path(self) -> str:
        """Return DuckDB path as string."""
        return str(self.db_path)


# Global settings instance
settings = Settings()
