"""YAML project file reading and writing."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError as PydanticValidationError

from .exceptions import MissingReferenceError, ParseError, ValidationError
from .models import (
    ProgressSnapshot,
    Project,
    ProjectData,
    Task,
    TaskDependency,
    TaskResourceAssignment,
)
from .schemas import ProjectFileSchema


def load_project_file(file_path: Path | str) -> ProjectData:
    """Parse and validate a project file.

    Raises:
        ParseError: If the file is missing or is not valid YAML
        ValidationError: If the structure or the values are invalid
        MissingReferenceError: If a task, dependency or snapshot names an unknown ID
    """
    path = Path(file_path)
    if not path.exists():
        raise ParseError(f"File not found: {file_path}")

    try:
        with path.open(encoding="utf-8") as f:
            data: Any = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ParseError(f"Failed to parse YAML: {e}") from e

    if not isinstance(data, dict):
        raise ParseError("YAML must contain a dictionary at the root level")

    return parse_project_data(data)  # type: ignore[arg-type]


def parse_project_data(data: dict[str, Any]) -> ProjectData:
    """Convert already-loaded YAML data into ProjectData."""
    try:
        schema = ProjectFileSchema(**data)
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid project file structure: {e}") from e

    result = ProjectData()
    for project_id, project_data in schema.projects.items():
        result.projects[project_id] = Project(
            id=project_id, title=project_data.title, start_date=project_data.start_date
        )

    for task_id, task_data in schema.tasks.items():
        if task_data.project not in result.projects:
            raise MissingReferenceError(
                f"Task {task_id} belongs to unknown project: {task_data.project}"
            )
        result.tasks.append(
            Task(
                id=task_id,
                project_id=task_data.project,
                title=task_data.title,
                status=task_data.status,
                progress=task_data.progress,
                start_date=task_data.start_date,
                end_date=task_data.end_date,
                color=task_data.color,
            )
        )
        for resource in task_data.resources:
            result.assignments.append(
                TaskResourceAssignment(
                    task_id=task_id,
                    resource_id=resource.resource,
                    estimated_days=resource.estimated_days,
                    focus_factor=resource.focus_factor,
                    number_of_profiles=resource.profiles,
                )
            )

    for task_id, task_data in schema.tasks.items():
        for dep_id in task_data.requires:
            if dep_id not in schema.tasks:
                raise MissingReferenceError(f"Task {task_id} requires unknown task: {dep_id}")
            try:
                dependency = TaskDependency(task_id=task_id, depends_on_task_id=dep_id)
            except ValueError as e:
                raise ValidationError(str(e)) from e
            if dependency not in result.dependencies:
                result.dependencies.append(dependency)

    # At most one snapshot per (task, date): later entries overwrite earlier ones
    snapshots: dict[tuple[str, Any], ProgressSnapshot] = {}
    for snapshot_data in schema.snapshots:
        task = result.get_task_by_id(snapshot_data.task)
        if task is None:
            raise MissingReferenceError(f"Snapshot refers to unknown task: {snapshot_data.task}")
        snapshots[(task.id, snapshot_data.date)] = ProgressSnapshot(
            task_id=task.id,
            project_id=task.project_id,
            date=snapshot_data.date,
            remaining_estimate=snapshot_data.remaining_estimate,
            progress=snapshot_data.progress,
            status=snapshot_data.status,
            notes=snapshot_data.notes,
            created_at=snapshot_data.created_at,
            updated_at=snapshot_data.updated_at,
        )
    result.snapshots = list(snapshots.values())

    return result


def dump_project_data(data: ProjectData) -> dict[str, Any]:
    """Convert ProjectData into the plain structure written to YAML."""
    projects: dict[str, Any] = {}
    for project in data.projects.values():
        project_entry: dict[str, Any] = {"title": project.title}
        if project.start_date:
            project_entry["start_date"] = project.start_date.isoformat()
        projects[project.id] = project_entry

    tasks: dict[str, Any] = {}
    for task in data.tasks:
        task_entry: dict[str, Any] = {
            "project": task.project_id,
            "title": task.title,
            "status": task.status.value,
            "progress": task.progress,
        }
        if task.start_date:
            task_entry["start_date"] = task.start_date.isoformat()
        if task.end_date:
            task_entry["end_date"] = task.end_date.isoformat()
        task_entry["color"] = task.color

        requires = [d.depends_on_task_id for d in data.dependencies if d.task_id == task.id]
        if requires:
            task_entry["requires"] = requires

        resources = [
            {
                "resource": a.resource_id,
                "estimated_days": a.estimated_days,
                "focus_factor": a.focus_factor,
                "profiles": a.number_of_profiles,
            }
            for a in data.assignments
            if a.task_id == task.id
        ]
        if resources:
            task_entry["resources"] = resources
        tasks[task.id] = task_entry

    snapshots: list[dict[str, Any]] = []
    for snapshot in data.snapshots:
        snapshot_entry: dict[str, Any] = {
            "task": snapshot.task_id,
            "date": snapshot.date.isoformat(),
            "remaining_estimate": snapshot.remaining_estimate,
            "progress": snapshot.progress,
            "status": snapshot.status.value,
        }
        if snapshot.notes:
            snapshot_entry["notes"] = snapshot.notes
        if snapshot.created_at:
            snapshot_entry["created_at"] = snapshot.created_at.isoformat()
        if snapshot.updated_at:
            snapshot_entry["updated_at"] = snapshot.updated_at.isoformat()
        snapshots.append(snapshot_entry)

    output: dict[str, Any] = {"projects": projects, "tasks": tasks}
    if snapshots:
        output["snapshots"] = snapshots
    return output


def write_project_file(path: Path, data: ProjectData) -> None:
    """Write ProjectData to a YAML project file."""
    with path.open("w", encoding="utf-8") as f:
        yaml.safe_dump(dump_project_data(data), f, default_flow_style=False, sort_keys=False)
