"""Data models for taskdates."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any

DEFAULT_TASK_COLOR = "#6366f1"


class TaskStatus(str, Enum):
    """Lifecycle status of a task."""

    TODO = "todo"
    IN_PROGRESS = "in_progress"
    DONE = "done"

    @classmethod
    def parse(cls, value: str | TaskStatus) -> TaskStatus:
        """Parse a status string.

        Accepts the canonical values as well as display forms such as
        "Todo", "In Progress" or "in-progress".
        """
        if isinstance(value, TaskStatus):
            return value
        normalized = value.strip().lower().replace(" ", "_").replace("-", "_")
        try:
            return cls(normalized)
        except ValueError as e:
            valid = ", ".join(s.value for s in cls)
            raise ValueError(f"Invalid task status '{value}'. Valid values are: {valid}") from e


class EstimateStatus(str, Enum):
    """How far a task's remaining estimate has drifted from its plan."""

    ON_TRACK = "on-track"
    SCOPE_CREEP = "scope-creep"
    MAJOR_ISSUES = "major-issues"


@dataclass
class Project:
    """A project; its start date anchors tasks without dependencies."""

    id: str
    title: str = ""
    start_date: date | None = None


@dataclass
class Task:
    """A schedulable task.

    start_date and end_date are the persisted (last computed) dates; the
    scheduler overwrites them.
    """

    id: str
    project_id: str
    title: str = ""
    status: TaskStatus = TaskStatus.TODO
    progress: int = 0
    start_date: date | None = None
    end_date: date | None = None
    color: str = DEFAULT_TASK_COLOR


@dataclass(frozen=True)
class TaskDependency:
    """Directed edge: task_id cannot start before depends_on_task_id ends."""

    task_id: str
    depends_on_task_id: str

    def __post_init__(self) -> None:
        if self.task_id == self.depends_on_task_id:
            raise ValueError(f"Task '{self.task_id}' cannot depend on itself")


@dataclass
class TaskResourceAssignment:
    """A resource working on a task.

    estimated_days is person-days of work; focus_factor is the percentage
    (0-100) of each profile's day spent on the task. Assignments of the same
    task work in parallel.
    """

    task_id: str
    resource_id: str
    estimated_days: float
    focus_factor: float = 100.0
    number_of_profiles: int = 1

    @property
    def capacity(self) -> float:
        """Person-days delivered per working day."""
        return self.number_of_profiles * self.focus_factor / 100


@dataclass
class ProgressSnapshot:
    """Recorded progress of a task on a given date."""

    task_id: str
    project_id: str
    date: date
    remaining_estimate: float
    progress: int = 0
    status: TaskStatus = TaskStatus.IN_PROGRESS
    notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def recorded_at(self) -> datetime:
        """Timestamp used to order snapshots sharing the same date."""
        return self.updated_at or self.created_at or datetime.min


@dataclass(frozen=True)
class TaskDates:
    """Computed schedule of a task. Both dates are inclusive working days."""

    start: date
    end: date


@dataclass(frozen=True)
class TaskDateUpdate:
    """Instruction to persist new dates for a task."""

    task_id: str
    new_start_date: date
    new_end_date: date

    def to_dict(self) -> dict[str, Any]:
        """Serialize with ISO 8601 (yyyy-MM-dd) dates."""
        return {
            "task_id": self.task_id,
            "new_start_date": self.new_start_date.isoformat(),
            "new_end_date": self.new_end_date.isoformat(),
        }


@dataclass
class ProjectData:
    """Everything stored about the projects of one document."""

    projects: dict[str, Project] = field(default_factory=dict)
    tasks: list[Task] = field(default_factory=list)
    dependencies: list[TaskDependency] = field(default_factory=list)
    assignments: list[TaskResourceAssignment] = field(default_factory=list)
    snapshots: list[ProgressSnapshot] = field(default_factory=list)

    def get_task_by_id(self, task_id: str) -> Task | None:
        """Find a task by ID."""
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None
