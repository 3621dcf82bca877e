"""Configuration file loading.

A single taskdates_config.yaml holds the settings of every component. Only
the ``scheduler`` section exists today.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from .scheduler.config import SchedulingConfig

CONFIG_FILENAME = "taskdates_config.yaml"


class TaskdatesConfig(BaseModel):
    """Top-level configuration."""

    scheduler: SchedulingConfig = Field(default_factory=SchedulingConfig)


def load_config(config_path: Path | str) -> TaskdatesConfig:
    """Load configuration from a YAML file.

    Raises:
        FileNotFoundError: If the config file doesn't exist
        ValueError: If the config is empty or not a mapping
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with config_path.open(encoding="utf-8") as f:
        data: Any = yaml.safe_load(f)

    if not data:
        raise ValueError("Empty configuration file")
    if not isinstance(data, dict):
        raise ValueError("Configuration file must contain a mapping at the root level")

    return TaskdatesConfig.model_validate(data)


def discover_config(
    project_file: Path | None = None,
    config_path: Path | None = None,
) -> TaskdatesConfig:
    """Find and load the configuration, falling back to defaults.

    Search order:
    1. Explicit config_path argument
    2. Directory of the project file
    3. Current directory
    """
    if config_path is not None:
        return load_config(config_path)

    if project_file is not None:
        dir_config = Path(project_file).parent / CONFIG_FILENAME
        if dir_config.exists():
            return load_config(dir_config)

    cwd_config = Path(CONFIG_FILENAME)
    if cwd_config.exists():
        return load_config(cwd_config)

    return TaskdatesConfig()
