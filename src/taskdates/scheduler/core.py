"""Result dataclasses for the recalculation engine."""

from dataclasses import dataclass, field
from datetime import date

from taskdates.models import EstimateStatus, TaskDates, TaskDateUpdate


@dataclass
class TaskSchedule:
    """Computed schedule of one task with the inputs that explain it."""

    task_id: str
    dates: TaskDates
    duration_days: int
    previous_start: date | None
    previous_end: date | None
    # Estimate drift from the effective snapshot, if any
    scope_change_days: float | None = None
    variance_percent: float | None = None
    estimate_status: EstimateStatus | None = None

    @property
    def changed(self) -> bool:
        """True when the computed dates differ from the stored ones."""
        return self.previous_start != self.dates.start or self.previous_end != self.dates.end


@dataclass
class RecalculationResult:
    """Outcome of one recalculation pass over a project."""

    project_id: str
    as_of: date
    schedules: dict[str, TaskSchedule] = field(default_factory=dict)
    updates: list[TaskDateUpdate] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def dates(self) -> dict[str, TaskDates]:
        """Computed dates keyed by task ID."""
        return {task_id: schedule.dates for task_id, schedule in self.schedules.items()}
