"""Scheduler package - task date recalculation.

Main entry points:
- ProjectScheduler: recalculates and persists task dates for a project
- DependencyResolver: memoized start/end resolution over the dependency graph
- DurationEstimator: task durations from resource assignments or progress

Configuration:
- SchedulingConfig: duration defaults and reference strictness
"""

from .config import SchedulingConfig
from .core import RecalculationResult, TaskSchedule
from .duration import (
    DurationEstimator,
    classify_variance,
    effective_snapshot,
    is_in_progress,
    scope_change,
    variance_percentage,
)
from .protocols import SchedulingStore
from .resolver import DependencyResolver
from .service import ProjectScheduler

__all__ = [
    # Configuration
    "SchedulingConfig",
    # Results
    "RecalculationResult",
    "TaskSchedule",
    # Protocols
    "SchedulingStore",
    # Components
    "DurationEstimator",
    "DependencyResolver",
    "ProjectScheduler",
    # Snapshot helpers
    "effective_snapshot",
    "is_in_progress",
    "scope_change",
    "variance_percentage",
    "classify_variance",
]
