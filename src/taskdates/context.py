"""Settings shared by every CLI command of one invocation."""

from __future__ import annotations

from pathlib import Path

from .config import discover_config
from .scheduler.config import SchedulingConfig


class _Invocation:
    """What the global options of the current command line asked for."""

    def __init__(self) -> None:
        self.config_path: Path | None = None


_invocation = _Invocation()


def set_config_path(path: Path | None) -> None:
    """Remember the --config path (None to search for taskdates_config.yaml)."""
    _invocation.config_path = path


def scheduling_config(project_file: Path) -> SchedulingConfig:
    """Scheduler settings for a project file.

    An explicit --config wins; otherwise the config next to the project file
    or in the current directory is used, falling back to defaults.

    Raises:
        FileNotFoundError: If --config names a missing file
        ValueError: If the config file is empty or invalid
    """
    return discover_config(project_file, _invocation.config_path).scheduler
