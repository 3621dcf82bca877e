"""Command-line interface for taskdates."""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Annotated

import typer
import yaml

from . import context
from .exceptions import TaskdatesError
from .logger import changes_enabled, setup_logger
from .models import ProgressSnapshot, ProjectData, TaskStatus
from .parser import load_project_file, write_project_file
from .scheduler import ProjectScheduler, RecalculationResult, SchedulingConfig, TaskSchedule
from .storage import InMemoryStore

app = typer.Typer(
    name="taskdates",
    help="Recalculate task start/end dates from dependencies, resources and progress",
    add_completion=False,
)


@app.callback()
def main_callback(
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose",
            "-v",
            help="Verbosity level: 0=silent (default), 1=show changes, 2=show all checks, 3=debug",
            min=0,
            max=3,
        ),
    ] = 0,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to config file (default: taskdates_config.yaml)",
        ),
    ] = None,
) -> None:
    """Global options for taskdates commands."""
    setup_logger(verbose)
    context.set_config_path(config)


def _parse_date_option(value: str | None, option_name: str) -> date | None:
    """Parse a date option string to a date object."""
    if value is None:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise typer.BadParameter(f"Invalid date format for --{option_name}: {value}") from e


def _load(file: Path) -> tuple[ProjectData, SchedulingConfig]:
    """Load the project file and the scheduling config, exiting on errors."""
    try:
        data = load_project_file(file)
        config = context.scheduling_config(file)
    except (TaskdatesError, FileNotFoundError, ValueError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from e
    return data, config


def _require_project(data: ProjectData, project: str) -> None:
    if project not in data.projects:
        typer.echo(f"Error: Unknown project: {project}", err=True)
        raise typer.Exit(1)


@app.command()
def recalculate(  # noqa: PLR0913 - CLI command needs multiple options
    file: Annotated[Path, typer.Argument(help="Path to the project YAML file")],
    *,
    project: Annotated[str, typer.Option("--project", "-p", help="Project ID to recalculate")],
    as_of: Annotated[
        str | None,
        typer.Option("--as-of", help="Evaluation date (YYYY-MM-DD, default: today)"),
    ] = None,
    write: Annotated[
        bool, typer.Option("--write", help="Persist the new dates into the project file")
    ] = False,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="With --write, write to this file instead"),
    ] = None,
    output_format: Annotated[
        str, typer.Option("--format", "-f", help="Output format (text or yaml)")
    ] = "text",
) -> None:
    """Recalculate task dates and print the tasks whose dates change."""
    if output_format not in ("text", "yaml"):
        typer.echo(
            f"Error: Invalid format '{output_format}'. Must be 'text' or 'yaml'.", err=True
        )
        raise typer.Exit(1)

    as_of_date = _parse_date_option(as_of, "as-of")
    data, config = _load(file)
    _require_project(data, project)

    store = InMemoryStore(data)
    scheduler = ProjectScheduler(store, config)
    try:
        updates = scheduler.recalculate(project, as_of_date)
    except TaskdatesError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from e

    if output_format == "yaml":
        typer.echo(
            yaml.safe_dump(
                [u.to_dict() for u in updates], default_flow_style=False, sort_keys=False
            ),
            nl=False,
        )
    elif not updates:
        typer.echo("All task dates are up to date")
    else:
        for update in updates:
            typer.echo(f"{update.task_id}: {update.new_start_date} -> {update.new_end_date}")

    if write:
        target = output or file
        write_project_file(target, store.data)
        if changes_enabled():
            typer.echo(f"Wrote {len(updates)} update(s) to {target}", err=True)


def _format_scope(value: float | None) -> str:
    if value is None:
        return "-"
    return f"{value:+.1f}d"


def _format_variance(schedule: TaskSchedule) -> tuple[str, str]:
    if schedule.variance_percent is None or schedule.estimate_status is None:
        return "-", "-"
    return f"{schedule.variance_percent:+.0f}%", schedule.estimate_status.value


@app.command()
def show(
    file: Annotated[Path, typer.Argument(help="Path to the project YAML file")],
    *,
    project: Annotated[str, typer.Option("--project", "-p", help="Project ID to show")],
    as_of: Annotated[
        str | None,
        typer.Option("--as-of", help="Evaluation date (YYYY-MM-DD, default: today)"),
    ] = None,
) -> None:
    """Print the computed schedule of every task in a project."""
    as_of_date = _parse_date_option(as_of, "as-of")
    data, config = _load(file)
    _require_project(data, project)

    try:
        result = ProjectScheduler(InMemoryStore(data), config).plan(project, as_of_date)
    except TaskdatesError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from e

    _print_schedule(result)


def _print_schedule(result: RecalculationResult) -> None:
    if not result.schedules:
        typer.echo(f"Project {result.project_id} has no tasks")
        return

    width = max(len("task"), *(len(task_id) for task_id in result.schedules))
    typer.echo(
        f"{'task':<{width}}  start       end         days  scope   "
        "variance  estimate      changed"
    )
    for task_id, schedule in result.schedules.items():
        variance, estimate = _format_variance(schedule)
        typer.echo(
            f"{task_id:<{width}}  {schedule.dates.start}  {schedule.dates.end}  "
            f"{schedule.duration_days:>4}  {_format_scope(schedule.scope_change_days):<6}  "
            f"{variance:>8}  {estimate:<12}  {'yes' if schedule.changed else 'no'}"
        )
    for warning in result.warnings:
        typer.echo(f"Warning: {warning}", err=True)


@app.command()
def check(
    file: Annotated[Path, typer.Argument(help="Path to the project YAML file")],
) -> None:
    """Validate the project file and report dependency cycles."""
    data, config = _load(file)
    scheduler = ProjectScheduler(InMemoryStore(data), config)

    failed = False
    for project_id in data.projects:
        try:
            result = scheduler.plan(project_id)
        except TaskdatesError as e:
            typer.echo(f"Project {project_id}: {e}", err=True)
            failed = True
            continue
        for warning in result.warnings:
            typer.echo(f"Project {project_id}: Warning: {warning}", err=True)

    if failed:
        raise typer.Exit(1)
    typer.echo(f"OK: {len(data.projects)} project(s), {len(data.tasks)} task(s)")


@app.command()
def snapshot(  # noqa: PLR0913 - CLI command needs multiple options
    file: Annotated[Path, typer.Argument(help="Path to the project YAML file")],
    *,
    task: Annotated[str, typer.Option("--task", "-t", help="Task ID")],
    snapshot_date: Annotated[
        str, typer.Option("--date", "-d", help="Snapshot date (YYYY-MM-DD)")
    ],
    remaining: Annotated[
        float, typer.Option("--remaining", "-r", help="Remaining estimate in person-days", min=0)
    ],
    progress: Annotated[
        int, typer.Option("--progress", help="Progress percentage", min=0, max=100)
    ] = 0,
    status: Annotated[
        str, typer.Option("--status", help="Task status (todo, in_progress, done)")
    ] = "in_progress",
    notes: Annotated[str | None, typer.Option("--notes", help="Free-form notes")] = None,
    as_of: Annotated[
        str | None,
        typer.Option("--as-of", help="Evaluation date for --recalculate (default: today)"),
    ] = None,
    recalculate_after: Annotated[
        bool,
        typer.Option("--recalculate", help="Recalculate the task's project after recording"),
    ] = False,
) -> None:
    """Record (or overwrite) a progress snapshot in the project file."""
    day = _parse_date_option(snapshot_date, "date")
    assert day is not None
    as_of_date = _parse_date_option(as_of, "as-of")
    try:
        task_status = TaskStatus.parse(status)
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e

    data, config = _load(file)
    store = InMemoryStore(data)
    existing = data.get_task_by_id(task)
    if existing is None:
        typer.echo(f"Error: Unknown task: {task}", err=True)
        raise typer.Exit(1)

    store.upsert_snapshot(
        ProgressSnapshot(
            task_id=task,
            project_id=existing.project_id,
            date=day,
            remaining_estimate=remaining,
            progress=progress,
            status=task_status,
            notes=notes,
        )
    )
    typer.echo(f"Recorded snapshot for {task} on {day}")

    if recalculate_after:
        try:
            updates = ProjectScheduler(store, config).recalculate(existing.project_id, as_of_date)
        except TaskdatesError as e:
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(1) from e
        for update in updates:
            typer.echo(f"{update.task_id}: {update.new_start_date} -> {update.new_end_date}")

    write_project_file(file, store.data)


def main() -> int:
    """Main entry point."""
    # Typer handles sys.exit() internally
    app()
    return 0


if __name__ == "__main__":
    main()
