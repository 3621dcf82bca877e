"""taskdates - working-day task date recalculation for project plans."""

__version__ = "0.1.0"
