from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, PositiveFloat, field_validator

from utils.constants import (
    DEFAULT_OPTIMIZATION_MODE,
    DEFAULT_SEARCH_STRATEGY,
    DEFAULT_TIME_LIMIT,
    NUM_WORKERS,
    RANDOM_SEED,
)


class SearchStrategy(Enum):
    """Branching strategy handed to the CP engine."""

    DOMOVERWDEG = "DOMOVERWDEG"
    """Engine-driven first-fail search with conflict-weighted variable selection."""
    MINDOM_UB = "MINDOM_UB"
    """Fixed search on the occupancy grid: smallest domain first, try 1 before 0."""
    MINDOM_LB = "MINDOM_LB"
    """Fixed search on the occupancy grid: smallest domain first, try 0 before 1."""


class OptimizationMode(Enum):
    """How successive solutions relate to the early-start score."""

    NONE = "NONE"
    OPTIMAL = "OPTIMAL"
    STEP = "STEP"
    STEP_STRICT = "STEP_STRICT"


class SolverSettings(BaseModel):
    """Solver configuration. Defaults come from config/constants.json."""

    model_config = ConfigDict(validate_assignment=True)

    search_strategy: SearchStrategy = Field(default=SearchStrategy(DEFAULT_SEARCH_STRATEGY))
    prioritize_timeslots: bool = False
    optimization_mode: OptimizationMode = Field(
        default=OptimizationMode(DEFAULT_OPTIMIZATION_MODE)
    )
    time_limit: Optional[PositiveFloat] = DEFAULT_TIME_LIMIT
    random_seed: int = RANDOM_SEED
    num_workers: int = Field(default=NUM_WORKERS, ge=1)

    @field_validator("search_strategy", "optimization_mode", mode="before")
    @classmethod
    def normalise_enum_name(cls, value: Any) -> Any:
        """Accept enum names in any case, e.g. "mindom_ub"."""
        if isinstance(value, str):
            return value.strip().upper()
        return value
