"""Configuration management."""

from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Default fitting options, overridable through VORONOI_MAP_* variables."""

    # Convergence
    convergence_ratio: float = Field(
        default=0.01, gt=0, description="Allowed area error as a share of the clip area"
    )
    max_iteration_count: int = Field(
        default=50, ge=0, description="Iteration cap, reached even without convergence"
    )
    min_weight_ratio: float = Field(
        default=0.01, ge=0, le=1, description="Smallest weight as a share of the max weight"
    )

    # Algorithm
    epsilon: Optional[float] = Field(
        default=None, gt=0, description="Power-weight floor, derived from the clip area when unset"
    )
    epsilon_ratio: float = Field(
        default=1e-4, gt=0, description="Power-weight floor as a share of the clip area"
    )
    overweight_variant: Literal["lower-heavy", "raise-light"] = Field(
        default="raise-light", description="Overweight correction heuristic"
    )
    max_correction_passes: int = Field(
        default=10000, gt=0, description="Max fixes applied by one overweight correction"
    )
    max_seed_attempts: int = Field(
        default=10000, gt=0, description="Max rejection-sampling draws per seed"
    )
    degenerate_retry: bool = Field(
        default=True, description="Retry an adaptation step once on a degenerate diagram"
    )
    degenerate_retry_margin: float = Field(
        default=10.0, ge=1, description="Epsilon multiplier used by the retry"
    )
    flickering_history_length: int = Field(
        default=10, gt=0, description="Flickering events kept by the tracker"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    log_format: str = Field(default="console", description="Logging format (console or json)")

    model_config = SettingsConfigDict(
        env_prefix="VORONOI_MAP_", env_file=".env", extra="ignore"
    )


settings = Settings()
