"""In-memory implementation of the scheduling storage port."""

from __future__ import annotations

from datetime import date, datetime

from .exceptions import MissingReferenceError
from .models import (
    ProgressSnapshot,
    Project,
    ProjectData,
    Task,
    TaskResourceAssignment,
)


class InMemoryStore:
    """Holds a ProjectData document and serves it to the scheduler.

    Implements the SchedulingStore protocol. The store owns its ProjectData;
    date updates and snapshot upserts mutate it in place.
    """

    def __init__(self, data: ProjectData | None = None):
        self.data = data or ProjectData()

    # Reads used by the scheduler

    def get_project(self, project_id: str) -> Project | None:
        return self.data.projects.get(project_id)

    def get_tasks(self, project_id: str) -> list[Task]:
        return [task for task in self.data.tasks if task.project_id == project_id]

    def get_dependencies(self, task_id: str) -> list[str]:
        return [d.depends_on_task_id for d in self.data.dependencies if d.task_id == task_id]

    def get_resource_assignments(self, task_id: str) -> list[TaskResourceAssignment]:
        return [a for a in self.data.assignments if a.task_id == task_id]

    def get_progress_snapshots(self, task_id: str) -> list[ProgressSnapshot]:
        return [s for s in self.data.snapshots if s.task_id == task_id]

    # Writes

    def update_task_dates(self, task_id: str, start_date: date, end_date: date) -> None:
        task = self._require_task(task_id)
        task.start_date = start_date
        task.end_date = end_date

    def upsert_snapshot(self, snapshot: ProgressSnapshot) -> ProgressSnapshot:
        """Insert a snapshot, or overwrite the one recorded for the same task and date."""
        task = self._require_task(snapshot.task_id)
        if snapshot.project_id != task.project_id:
            raise MissingReferenceError(
                f"Snapshot for task {task.id} names project {snapshot.project_id}, "
                f"but the task belongs to {task.project_id}"
            )

        now = datetime.now()  # noqa: DTZ005
        for index, existing in enumerate(self.data.snapshots):
            if existing.task_id == snapshot.task_id and existing.date == snapshot.date:
                snapshot.created_at = existing.created_at or snapshot.created_at or now
                snapshot.updated_at = now
                self.data.snapshots[index] = snapshot
                return snapshot

        snapshot.created_at = snapshot.created_at or now
        snapshot.updated_at = snapshot.updated_at or snapshot.created_at
        self.data.snapshots.append(snapshot)
        return snapshot

    def _require_task(self, task_id: str) -> Task:
        task = self.data.get_task_by_id(task_id)
        if task is None:
            raise MissingReferenceError(f"Unknown task: {task_id}")
        return task
