"""Task duration estimation in working days."""

import math
from collections.abc import Iterable
from datetime import date

from taskdates.logger import get_logger
from taskdates.models import EstimateStatus, ProgressSnapshot, Task, TaskResourceAssignment

from .config import SchedulingConfig

logger = get_logger()

# Fractional durations are rounded to this many places before taking the
# ceiling, so 7 / 0.7 counts as 10 days rather than 11.
_ROUNDING_PLACES = 6

# Variance thresholds, in percent of the planned person-days
ON_TRACK_PERCENT = 10
SCOPE_CREEP_PERCENT = 25


def _ceil_days(value: float) -> int:
    return math.ceil(round(value, _ROUNDING_PLACES))


def effective_snapshot(
    snapshots: Iterable[ProgressSnapshot], as_of: date
) -> ProgressSnapshot | None:
    """Most recent snapshot dated on or before as_of.

    Snapshots sharing a date are ordered by their record timestamp.
    """
    candidates = [s for s in snapshots if s.date <= as_of]
    if not candidates:
        return None
    return max(candidates, key=lambda s: (s.date, s.recorded_at))


def is_in_progress(snapshot: ProgressSnapshot | None) -> bool:
    """True when the snapshot records work underway with work left."""
    return snapshot is not None and snapshot.progress > 0 and snapshot.remaining_estimate > 0


def parallel_capacity(assignments: Iterable[TaskResourceAssignment]) -> float:
    """Person-days per working day delivered by all assignments together."""
    return sum(a.capacity for a in assignments if a.capacity > 0)


def planned_days(assignments: Iterable[TaskResourceAssignment]) -> float:
    """Total estimated person-days over all assignments."""
    return sum(a.estimated_days for a in assignments)


def scope_change(
    assignments: Iterable[TaskResourceAssignment], snapshot: ProgressSnapshot
) -> float:
    """Remaining estimate minus the remaining work implied by the snapshot's progress.

    Focus factor stretches the calendar, not the work, so only estimated_days
    count towards the plan. Positive values are scope creep, negative values
    a scope decrease.
    """
    theoretical_remaining = planned_days(assignments) * (1 - snapshot.progress / 100)
    return snapshot.remaining_estimate - theoretical_remaining


def variance_percentage(
    assignments: list[TaskResourceAssignment], snapshot: ProgressSnapshot
) -> float:
    """Scope change as a percentage of the planned person-days (0 without a plan)."""
    planned = planned_days(assignments)
    if planned <= 0:
        return 0.0
    return round(scope_change(assignments, snapshot) * 100 / planned, _ROUNDING_PLACES)


def classify_variance(percentage: float) -> EstimateStatus:
    """Bucket a variance percentage.

    Within 10% either way is on track, up to 25% over is scope creep, and
    anything beyond (including work shrinking by more than 10%) needs a look.
    """
    if abs(percentage) <= ON_TRACK_PERCENT:
        return EstimateStatus.ON_TRACK
    if ON_TRACK_PERCENT < percentage <= SCOPE_CREEP_PERCENT:
        return EstimateStatus.SCOPE_CREEP
    return EstimateStatus.MAJOR_ISSUES


class DurationEstimator:
    """Computes how many working days a task occupies.

    A recorded remaining estimate overrides the static resource estimates:
    the remaining work is spread over the combined capacity of all assigned
    resources. Without one, every assignment runs in parallel and the slowest
    one determines the duration.
    """

    def __init__(self, config: SchedulingConfig | None = None):
        self.config = config or SchedulingConfig()

    def compute_duration(
        self,
        task: Task,
        assignments: list[TaskResourceAssignment],
        snapshots: list[ProgressSnapshot],
        as_of: date,
    ) -> int:
        """Duration of a task in working days (always >= min_duration_days)."""
        snapshot = effective_snapshot(snapshots, as_of)

        if snapshot is not None and snapshot.remaining_estimate > 0:
            capacity = parallel_capacity(assignments)
            if capacity > 0:
                duration = _ceil_days(snapshot.remaining_estimate / capacity)
            else:
                duration = _ceil_days(snapshot.remaining_estimate)
            logger.debug(
                f"      {task.id}: remaining {snapshot.remaining_estimate} "
                f"(snapshot {snapshot.date}) over capacity {capacity} -> {duration}d"
            )
        else:
            duration = self._duration_from_assignments(task, assignments)

        return max(duration, self.config.min_duration_days)

    def _duration_from_assignments(
        self, task: Task, assignments: list[TaskResourceAssignment]
    ) -> int:
        resource_durations = [
            a.estimated_days / a.capacity for a in assignments if a.capacity > 0
        ]
        if not resource_durations:
            logger.debug(
                f"      {task.id}: no usable assignments -> "
                f"default {self.config.default_duration_days}d"
            )
            return self.config.default_duration_days

        duration = _ceil_days(max(resource_durations))
        logger.debug(
            f"      {task.id}: {len(resource_durations)} parallel assignment(s) -> {duration}d"
        )
        return duration
