"""Configuration models and YAML loader for the matching service."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, model_validator


class DatabaseConfig(BaseModel):
    """Database configuration."""

    path: str = "data/marketplace.db"


class EmbeddingConfig(BaseModel):
    """Which embedding provider turns composite text into vectors."""

    provider: str = "openai"
    model: str | None = None
    timeout_s: float = Field(default=30.0, gt=0.0)


class ExplanationConfig(BaseModel):
    """LLM used to write the one-line match explanations."""

    provider: str = "openai"
    model: str | None = None
    max_concurrency: int = Field(default=5, ge=1)
    timeout_s: float = Field(default=30.0, gt=0.0)


class MatchingConfig(BaseModel):
    """Ranking knobs for the freelancer matcher."""

    limit: int = Field(default=5, ge=1)
    threshold: float = Field(default=0.2, ge=0.0, le=1.0)
    over_fetch_factor: int = Field(default=3, ge=1)
    availability_boost: float = Field(default=0.2, ge=0.0)
    location_boost: float = Field(default=0.1, ge=0.0)
    hard_filter: bool = True
    search_timeout_s: float = Field(default=30.0, gt=0.0)


class LocationConfig(BaseModel):
    """Postcode-prefix distances used by the location matcher.

    These only make sense inside one city's four-digit postcode numbering.
    """

    nearby_max_distance: int = Field(default=2, ge=0)
    city_plus_max_distance: int = Field(default=10, ge=0)
    city_postcode_min: int = Field(default=1300, ge=0)
    city_postcode_max: int = Field(default=1400, ge=0)

    @model_validator(mode="after")
    def city_range_not_empty(self) -> "LocationConfig":
        if self.city_postcode_max <= self.city_postcode_min:
            msg = "city_postcode_max must be greater than city_postcode_min"
            raise ValueError(msg)
        return self


class Settings(BaseModel):
    """Top-level settings loaded from YAML."""

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    embedding: EmbeddingConfig = Field(default_factory=EmbeddingConfig)
    explanation: ExplanationConfig = Field(default_factory=ExplanationConfig)
    matching: MatchingConfig = Field(default_factory=MatchingConfig)
    location: LocationConfig = Field(default_factory=LocationConfig)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Settings":
        """Load settings from a YAML file."""
        path = Path(path)
        if not path.exists():
            msg = f"Config file not found: {path}"
            raise FileNotFoundError(msg)
        raw: dict[str, Any] = yaml.safe_load(path.read_text()) or {}
        return cls.model_validate(raw)
