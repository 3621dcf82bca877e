"""Pydantic schemas for project file validation."""

from __future__ import annotations

import datetime as dt
from typing import Any

from pydantic import BaseModel, Field, field_validator

from .models import DEFAULT_TASK_COLOR, TaskStatus


class ProjectSchema(BaseModel):
    """Schema for a project entry."""

    title: str = ""
    start_date: dt.date | None = None


class ResourceAssignmentSchema(BaseModel):
    """Schema for one resource assigned to a task."""

    resource: str
    estimated_days: float = Field(gt=0)
    focus_factor: float = Field(default=100.0, ge=0, le=100)
    profiles: int = Field(default=1, ge=1)


def _parse_status(value: Any) -> TaskStatus:
    if isinstance(value, TaskStatus):
        return value
    return TaskStatus.parse(str(value))


class TaskSchema(BaseModel):
    """Schema for a task entry."""

    project: str
    title: str = ""
    status: TaskStatus = TaskStatus.TODO
    progress: int = Field(default=0, ge=0, le=100)
    start_date: dt.date | None = None
    end_date: dt.date | None = None
    color: str = DEFAULT_TASK_COLOR
    requires: list[str] = Field(default_factory=list)
    resources: list[ResourceAssignmentSchema] = Field(default_factory=list)

    @field_validator("status", mode="before")
    @classmethod
    def parse_status(cls, v: Any) -> TaskStatus:
        """Accept display forms such as "In Progress"."""
        return _parse_status(v)

    @field_validator("requires", mode="before")
    @classmethod
    def ensure_list(cls, v: Any) -> list[str]:
        """Ensure value is a list."""
        if v is None:
            return []
        if isinstance(v, list):
            return [str(item) for item in v]  # type: ignore[misc]
        return [str(v)]


class SnapshotSchema(BaseModel):
    """Schema for a progress snapshot entry."""

    task: str
    date: dt.date
    remaining_estimate: float = Field(ge=0)
    progress: int = Field(default=0, ge=0, le=100)
    status: TaskStatus = TaskStatus.IN_PROGRESS
    notes: str | None = None
    created_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None

    @field_validator("status", mode="before")
    @classmethod
    def parse_status(cls, v: Any) -> TaskStatus:
        """Accept display forms such as "In Progress"."""
        return _parse_status(v)


class ProjectFileSchema(BaseModel):
    """Schema for the entire project file."""

    projects: dict[str, ProjectSchema] = Field(default_factory=dict)
    tasks: dict[str, TaskSchema] = Field(default_factory=dict)
    snapshots: list[SnapshotSchema] = Field(default_factory=list)
