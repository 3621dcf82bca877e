"""Custom exceptions for taskdates."""

from __future__ import annotations


class TaskdatesError(Exception):
    """Base exception for all taskdates errors."""

    pass


class ValidationError(TaskdatesError):
    """Raised when validation fails."""

    pass


class CyclicDependencyError(ValidationError):
    """Raised when the task dependency graph contains a cycle.

    The ``cycle`` attribute lists the task IDs on the cycle, starting and
    ending with the same task (e.g. ``["a", "b", "a"]``).
    """

    def __init__(self, cycle: list[str]):
        self.cycle = cycle
        super().__init__(f"Cyclic dependency detected: {' -> '.join(cycle)}")


class MissingReferenceError(ValidationError):
    """Raised when a referenced ID does not exist."""

    pass


class ParseError(TaskdatesError):
    """Raised when YAML parsing fails."""

    pass
