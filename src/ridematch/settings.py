from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class FareSettings(BaseSettings):
    road_factor: float = Field(
        default=1.3,
        ge=1.0,
        le=3.0,
        description="Multiplier applied to straight-line distance to approximate road distance",
    )
    average_speed_kmh: float = Field(default=25.0, gt=0, le=120.0)
    ride_sharing_discount: float = Field(
        default=0.3,
        ge=0.0,
        lt=1.0,
        description="Fraction taken off the base fare when the rider shares the trip",
    )
    rounding_unit: int = Field(default=100, ge=1)
    currency: str = Field(default="RWF", min_length=3, max_length=3)

    model_config = SettingsConfigDict(env_prefix="FARE_")


class TrackingSettings(BaseSettings):
    tick_interval_seconds: float = Field(default=1.5, gt=0, le=60.0)
    average_speed_kmh: float = Field(default=30.0, gt=0, le=120.0)
    start_offset_degrees: float = Field(
        default=0.0075,
        ge=0.0,
        le=0.1,
        description="Maximum per-axis offset of the synthetic driver start point from pickup",
    )
    min_route_segments: int = Field(default=15, ge=1)
    segments_per_km: float = Field(default=10.0, gt=0)
    lateral_noise_degrees: float = Field(default=0.001, ge=0.0, le=0.01)
    max_tracked_rides: int = Field(default=1000, ge=1)
    finished_ride_ttl_seconds: float = Field(
        default=300.0,
        ge=0.0,
        description="How long a ride that reached its destination stays queryable",
    )

    model_config = SettingsConfigDict(env_prefix="TRACKING_")


class MatchingSettings(BaseSettings):
    """Nearest-candidate search configuration."""

    search_strategy: Literal["linear", "h3"] = "linear"
    h3_resolution: int = Field(default=9, ge=0, le=15)

    model_config = SettingsConfigDict(env_prefix="MATCHING_")


class RoutingSettings(BaseSettings):
    provider: Literal["straight_line", "osrm"] = "straight_line"
    osrm_base_url: str = "http://localhost:5000"
    timeout_seconds: float = Field(default=5.0, gt=0, le=60.0)
    polyline_segments: int = Field(default=16, ge=1, le=1000)

    model_config = SettingsConfigDict(env_prefix="ROUTING_")

    @field_validator("osrm_base_url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("OSRM base URL must start with http:// or https://")
        return v.rstrip("/")


class LogSettings(BaseSettings):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    format: Literal["text", "json"] = "text"
    environment: str = "development"

    model_config = SettingsConfigDict(env_prefix="LOG_")


class APISettings(BaseSettings):
    key: str = ""
    host: str = "0.0.0.0"
    port: int = Field(default=8000, ge=1, le=65535)

    model_config = SettingsConfigDict(env_prefix="API_")


class Settings(BaseSettings):
    fare: FareSettings = Field(default_factory=FareSettings)
    tracking: TrackingSettings = Field(default_factory=TrackingSettings)
    matching: MatchingSettings = Field(default_factory=MatchingSettings)
    routing: RoutingSettings = Field(default_factory=RoutingSettings)
    log: LogSettings = Field(default_factory=LogSettings)
    api: APISettings = Field(default_factory=APISettings)

    model_config = SettingsConfigDict(
        env_nested_delimiter="__",
        case_sensitive=False,
    )


def get_settings() -> Settings:
    """Load and validate settings from environment variables."""
    return Settings()
