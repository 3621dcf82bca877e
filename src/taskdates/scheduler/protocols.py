"""Protocol definitions for the persistence collaborator."""

from datetime import date
from typing import Protocol

from taskdates.models import ProgressSnapshot, Project, Task, TaskResourceAssignment


class SchedulingStore(Protocol):
    """Storage port read by the scheduler.

    The scheduler only reads entities and writes task dates back; it never
    creates or deletes anything.
    """

    def get_project(self, project_id: str) -> Project | None:
        """Return the project, or None if it does not exist."""
        ...

    def get_tasks(self, project_id: str) -> list[Task]:
        """Return all tasks of a project in a stable order."""
        ...

    def get_dependencies(self, task_id: str) -> list[str]:
        """Return the IDs of the tasks this task depends on."""
        ...

    def get_resource_assignments(self, task_id: str) -> list[TaskResourceAssignment]:
        """Return the resource assignments of a task."""
        ...

    def get_progress_snapshots(self, task_id: str) -> list[ProgressSnapshot]:
        """Return every progress snapshot recorded for a task."""
        ...

    def update_task_dates(self, task_id: str, start_date: date, end_date: date) -> None:
        """Persist new start/end dates for a task."""
        ...
