"""Project-level recalculation service."""

import threading
from datetime import date

from taskdates.calendar import as_day
from taskdates.logger import get_logger
from taskdates.models import TaskDateUpdate

from .config import SchedulingConfig
from .core import RecalculationResult, TaskSchedule
from .duration import classify_variance, effective_snapshot, scope_change, variance_percentage
from .protocols import SchedulingStore
from .resolver import DependencyResolver

logger = get_logger()


class ProjectScheduler:
    """Recalculates task dates for one project at a time.

    The scheduler reads everything through the injected store and writes back
    only task dates that changed. A pass is a pure function of the stored
    project state and the evaluation date, so it is safe to re-run at any
    time; an interrupted apply is repaired by the next pass.

    Calls for the same project are serialized; different projects proceed
    independently.
    """

    def __init__(self, store: SchedulingStore, config: SchedulingConfig | None = None):
        """Initialize the scheduler.

        Args:
            store: Persistence collaborator providing entities and accepting date updates
            config: Optional scheduling configuration
        """
        self.store = store
        self.config = config or SchedulingConfig()
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def _project_lock(self, project_id: str) -> threading.Lock:
        with self._locks_guard:
            if project_id not in self._locks:
                self._locks[project_id] = threading.Lock()
            return self._locks[project_id]

    def plan(self, project_id: str, as_of: date | None = None) -> RecalculationResult:
        """Compute dates for every task of a project without writing anything.

        Args:
            project_id: Project to recalculate
            as_of: Evaluation date (defaults to today)

        Returns:
            RecalculationResult; empty when the project or its tasks don't exist

        Raises:
            CyclicDependencyError: If the project's dependency graph has a cycle
        """
        as_of = as_day(as_of) or date.today()  # noqa: DTZ011
        result = RecalculationResult(project_id=project_id, as_of=as_of)

        project = self.store.get_project(project_id)
        if project is None:
            logger.checks(f"Project {project_id} not found - nothing to schedule")
            return result

        tasks = self.store.get_tasks(project_id)
        if not tasks:
            logger.checks(f"Project {project_id} has no tasks - nothing to schedule")
            return result

        dependencies = {task.id: self.store.get_dependencies(task.id) for task in tasks}
        assignments = {task.id: self.store.get_resource_assignments(task.id) for task in tasks}
        snapshots = {task.id: self.store.get_progress_snapshots(task.id) for task in tasks}

        logger.checks(f"Recalculating {len(tasks)} task(s) of {project_id} as of {as_of}")
        resolver = DependencyResolver(
            project, tasks, dependencies, assignments, snapshots, as_of, self.config
        )
        computed = resolver.resolve_all()
        result.warnings.extend(resolver.warnings)

        for task in tasks:
            dates = computed[task.id]
            schedule = TaskSchedule(
                task_id=task.id,
                dates=dates,
                duration_days=resolver.durations[task.id],
                previous_start=as_day(task.start_date),
                previous_end=as_day(task.end_date),
            )
            snapshot = effective_snapshot(snapshots[task.id], as_of)
            if snapshot is not None:
                schedule.scope_change_days = scope_change(assignments[task.id], snapshot)
                schedule.variance_percent = variance_percentage(assignments[task.id], snapshot)
                schedule.estimate_status = classify_variance(schedule.variance_percent)
            result.schedules[task.id] = schedule
            if schedule.changed:
                result.updates.append(
                    TaskDateUpdate(
                        task_id=task.id, new_start_date=dates.start, new_end_date=dates.end
                    )
                )

        return result

    def recalculate(self, project_id: str, as_of: date | None = None) -> list[TaskDateUpdate]:
        """Recalculate a project and persist every changed task's dates.

        Args:
            project_id: Project to recalculate
            as_of: Evaluation date (defaults to today)

        Returns:
            The updates that were applied, in task order
        """
        with self._project_lock(project_id):
            result = self.plan(project_id, as_of)
            for update in result.updates:
                schedule = result.schedules[update.task_id]
                logger.changes(
                    f"{update.task_id}: {schedule.previous_start} .. {schedule.previous_end}"
                    f" -> {update.new_start_date} .. {update.new_end_date}"
                )
                self.store.update_task_dates(
                    update.task_id, update.new_start_date, update.new_end_date
                )
            return result.updates
