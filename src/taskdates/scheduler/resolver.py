"""Dependency-ordered start/end date resolution."""

from datetime import date

from taskdates.calendar import (
    as_day,
    next_working_day,
    skip_to_next_weekday,
    working_day_span_end,
)
from taskdates.exceptions import CyclicDependencyError, MissingReferenceError
from taskdates.logger import debug_enabled, get_logger
from taskdates.models import ProgressSnapshot, Project, Task, TaskDates, TaskResourceAssignment

from .config import SchedulingConfig
from .duration import DurationEstimator, effective_snapshot, is_in_progress

logger = get_logger()


class DependencyResolver:
    """Computes every task's (start, end) pair honoring dependency ordering.

    One resolver instance is one recalculation pass: results are memoized per
    instance and must not be reused once the underlying data changes.

    A task with dependencies starts on the next working day after the latest
    end of its dependencies. A task without dependencies starts on its own
    stored start date, else the project's start date, else as_of. Work already
    underway (an in-progress snapshot) cannot resume before as_of.
    """

    def __init__(  # noqa: PLR0913 - one argument per input collection
        self,
        project: Project,
        tasks: list[Task],
        dependencies: dict[str, list[str]],
        assignments: dict[str, list[TaskResourceAssignment]],
        snapshots: dict[str, list[ProgressSnapshot]],
        as_of: date,
        config: SchedulingConfig | None = None,
    ):
        """Initialize the resolver for one pass.

        Args:
            project: Project owning the tasks
            tasks: All tasks of the project
            dependencies: task_id -> IDs of the tasks it depends on
            assignments: task_id -> resource assignments
            snapshots: task_id -> progress snapshots
            as_of: Evaluation date ("today")
            config: Optional scheduling configuration
        """
        self.project = project
        self.tasks = tasks
        self.dependencies = dependencies
        self.assignments = assignments
        self.snapshots = snapshots
        self.as_of = as_of
        self.config = config or SchedulingConfig()
        self.estimator = DurationEstimator(self.config)

        self.durations: dict[str, int] = {}
        self.warnings: list[str] = []
        self._tasks_by_id = {task.id: task for task in tasks}
        self._memo: dict[str, TaskDates] = {}
        self._visiting: list[str] = []
        self._known: dict[str, list[str]] = {}

    def resolve_all(self) -> dict[str, TaskDates]:
        """Resolve every task, in input order."""
        return {task.id: self.resolve(task.id) for task in self.tasks}

    def resolve(self, task_id: str) -> TaskDates:
        """Resolve one task and everything it (transitively) depends on.

        Dependencies are visited depth-first with an explicit stack, so long
        dependency chains don't hit the interpreter's recursion limit. The
        stack doubles as the visiting path used for cycle detection.

        Raises:
            CyclicDependencyError: If task_id is (transitively) its own dependency
            KeyError: If task_id is not a task of the project
        """
        if task_id in self._memo:
            return self._memo[task_id]
        if task_id not in self._tasks_by_id:
            raise KeyError(task_id)

        try:
            self._visiting = [task_id]
            pending = [iter(self._known_dependencies(task_id))]
            while self._visiting:
                dep_id = next(pending[-1], None)
                if dep_id is None:
                    current = self._visiting.pop()
                    pending.pop()
                    self._memo[current] = self._compute(self._tasks_by_id[current])
                    continue
                if dep_id in self._memo:
                    continue
                if dep_id in self._visiting:
                    cycle = self._visiting[self._visiting.index(dep_id) :] + [dep_id]
                    raise CyclicDependencyError(cycle)
                self._visiting.append(dep_id)
                pending.append(iter(self._known_dependencies(dep_id)))
        finally:
            self._visiting = []

        return self._memo[task_id]

    def _compute(self, task: Task) -> TaskDates:
        """Dates of a task whose dependencies are all memoized."""
        dep_ids = self._known_dependencies(task.id)

        if dep_ids:
            latest_end = max(self._memo[dep_id].end for dep_id in dep_ids)
            start = next_working_day(latest_end)
            anchor = f"after dependencies ending {latest_end}"
        else:
            anchor_day = as_day(task.start_date) or as_day(self.project.start_date) or self.as_of
            start = skip_to_next_weekday(anchor_day)
            anchor = "anchor date"

        task_snapshots = self.snapshots.get(task.id, [])
        snapshot = effective_snapshot(task_snapshots, self.as_of)
        if is_in_progress(snapshot):
            resume = skip_to_next_weekday(self.as_of)
            if resume > start:
                start = resume
                anchor = f"in progress, resuming {resume}"

        duration = self.estimator.compute_duration(
            task, self.assignments.get(task.id, []), task_snapshots, self.as_of
        )
        self.durations[task.id] = duration
        end = working_day_span_end(start, duration)

        logger.checks(f"  Resolved {task.id}: {start} -> {end} ({duration}d, {anchor})")
        if debug_enabled() and snapshot is not None:
            logger.debug(
                f"      {task.id}: effective snapshot {snapshot.date} "
                f"progress={snapshot.progress} remaining={snapshot.remaining_estimate}"
            )
        return TaskDates(start=start, end=end)

    def _known_dependencies(self, task_id: str) -> list[str]:
        """Dependency IDs that name tasks of this project."""
        if task_id in self._known:
            return self._known[task_id]

        known: list[str] = []
        for dep_id in self.dependencies.get(task_id, []):
            if dep_id in self._tasks_by_id:
                known.append(dep_id)
                continue
            if self.config.strict_references:
                raise MissingReferenceError(f"Task {task_id} depends on unknown task: {dep_id}")
            message = f"Task '{task_id}' depends on unknown task '{dep_id}' - ignored"
            logger.warning(message)
            self.warnings.append(message)
        self._known[task_id] = known
        return known
