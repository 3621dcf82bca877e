"""Configuration for the date-recalculation engine."""

from pydantic import BaseModel, Field


class SchedulingConfig(BaseModel):
    """Tunables for duration estimation and dependency resolution."""

    # Duration of a task with no usable resource assignment
    default_duration_days: int = Field(default=1, ge=1)
    # Lower clamp applied to every computed duration
    min_duration_days: int = Field(default=1, ge=1)
    # Raise MissingReferenceError instead of ignoring dependencies outside the project
    strict_references: bool = False
