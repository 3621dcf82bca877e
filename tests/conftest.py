"""Pytest configuration and fixtures for taskdates tests."""

from __future__ import annotations

from datetime import date

import pytest

from taskdates.logger import reset_logger
from taskdates.models import (
    ProgressSnapshot,
    Project,
    ProjectData,
    Task,
    TaskDependency,
    TaskResourceAssignment,
)
from taskdates.storage import InMemoryStore

PROJECT_START = date(2025, 1, 1)  # Wednesday


@pytest.fixture(autouse=True)
def clean_logger() -> None:
    """Reset logger state before each test for isolation."""
    reset_logger()


def assignment(
    task_id: str, estimated_days: float, focus_factor: float = 100.0, profiles: int = 1
) -> TaskResourceAssignment:
    """Create a resource assignment with a generated resource ID."""
    return TaskResourceAssignment(
        task_id=task_id,
        resource_id=f"{task_id}-dev",
        estimated_days=estimated_days,
        focus_factor=focus_factor,
        number_of_profiles=profiles,
    )


def snapshot(
    task_id: str, day: date, remaining: float, progress: int = 50, project_id: str = "proj"
) -> ProgressSnapshot:
    """Create a progress snapshot."""
    return ProgressSnapshot(
        task_id=task_id,
        project_id=project_id,
        date=day,
        remaining_estimate=remaining,
        progress=progress,
    )


def build_store(
    estimates: dict[str, float],
    requires: dict[str, list[str]] | None = None,
    *,
    start_date: date | None = PROJECT_START,
    snapshots: list[ProgressSnapshot] | None = None,
    project_id: str = "proj",
) -> InMemoryStore:
    """Build a single-project store.

    Each task gets one full-time resource with the given estimate.

    Example:
        build_store({"b": 10, "a": 5}, {"a": ["b"]})
    """
    data = ProjectData(projects={project_id: Project(id=project_id, start_date=start_date)})
    for task_id, days in estimates.items():
        data.tasks.append(Task(id=task_id, project_id=project_id, title=task_id.upper()))
        data.assignments.append(assignment(task_id, days))
    for task_id, dep_ids in (requires or {}).items():
        for dep_id in dep_ids:
            data.dependencies.append(TaskDependency(task_id=task_id, depends_on_task_id=dep_id))
    data.snapshots.extend(snapshots or [])
    return InMemoryStore(data)


@pytest.fixture
def scenario_store() -> InMemoryStore:
    """Task B (10 days) and task A (5 days) depending on B, project start 2025-01-01."""
    return build_store({"b": 10, "a": 5}, {"a": ["b"]})
