"""Tests for task duration estimation."""

from datetime import date, datetime

from taskdates.models import Task
from taskdates.scheduler import DurationEstimator, SchedulingConfig
from taskdates.models import EstimateStatus
from taskdates.scheduler.duration import (
    classify_variance,
    effective_snapshot,
    is_in_progress,
    parallel_capacity,
    scope_change,
    variance_percentage,
)
from tests.conftest import assignment, snapshot

TASK = Task(id="t", project_id="proj")
AS_OF = date(2025, 1, 8)


def duration_for(estimated_days: float, profiles: int, focus_factor: float) -> int:
    """Duration of a task with a single assignment and no snapshots."""
    estimator = DurationEstimator()
    return estimator.compute_duration(
        TASK, [assignment("t", estimated_days, focus_factor, profiles)], [], AS_OF
    )


class TestAssignmentDurations:
    """Duration = estimated_days / (profiles * focus_factor), rounded up."""

    def test_single_full_time_profile(self) -> None:
        assert duration_for(10, 1, 100) == 10

    def test_partial_focus_rounds_up(self) -> None:
        """10 days at 80% = 12.5 -> 13 days."""
        assert duration_for(10, 1, 80) == 13

    def test_multiple_profiles(self) -> None:
        """10 days with 2 profiles at 80% = 6.25 -> 7 days."""
        assert duration_for(10, 2, 80) == 7
        assert duration_for(30, 3, 75) == 14
        assert duration_for(100, 10, 90) == 12

    def test_small_work_is_at_least_one_day(self) -> None:
        """2 days with 3 profiles = 0.67 -> 1 day."""
        assert duration_for(2, 3, 100) == 1

    def test_exact_ratio_is_not_rounded_up(self) -> None:
        """7 days at 70% is exactly 10 days despite floating point error."""
        assert duration_for(7, 1, 70) == 10
        assert duration_for(15, 3, 70) == 8

    def test_parallel_resources_take_the_slowest(self) -> None:
        """Resources work in parallel; the longest one bottlenecks the task."""
        estimator = DurationEstimator()
        backend = assignment("t", 20, 80, 2)  # 12.5 -> 13
        frontend = assignment("t", 10, 100, 1)  # 10
        assert estimator.compute_duration(TASK, [backend, frontend], [], AS_OF) == 13

        backend = assignment("t", 10, 100, 3)  # 3.3
        frontend = assignment("t", 20, 80, 1)  # 25
        assert estimator.compute_duration(TASK, [backend, frontend], [], AS_OF) == 25


class TestDegenerateCapacity:
    """Zero focus factors and missing assignments fall back to defaults."""

    def test_no_assignments_is_one_day(self) -> None:
        assert DurationEstimator().compute_duration(TASK, [], [], AS_OF) == 1

    def test_zero_focus_is_excluded(self) -> None:
        """An idle assignment doesn't make the task infinite."""
        estimator = DurationEstimator()
        idle = assignment("t", 50, 0)
        busy = assignment("t", 4, 100)
        assert estimator.compute_duration(TASK, [idle, busy], [], AS_OF) == 4

    def test_all_zero_focus_uses_default(self) -> None:
        estimator = DurationEstimator(SchedulingConfig(default_duration_days=3))
        assert estimator.compute_duration(TASK, [assignment("t", 10, 0)], [], AS_OF) == 3

    def test_min_duration_clamp(self) -> None:
        estimator = DurationEstimator(SchedulingConfig(min_duration_days=2))
        assert estimator.compute_duration(TASK, [assignment("t", 1)], [], AS_OF) == 2


class TestSnapshotDurations:
    """A recorded remaining estimate overrides the static estimates."""

    def test_remaining_spread_over_capacity(self) -> None:
        """Remaining 6 days over capacity 1.0 + 2 * 0.5 = 3 days."""
        estimator = DurationEstimator()
        assignments = [assignment("t", 10, 100), assignment("t", 10, 50, 2)]
        snapshots = [snapshot("t", AS_OF, remaining=6)]
        assert estimator.compute_duration(TASK, assignments, snapshots, AS_OF) == 3

    def test_fractional_remaining_rounds_up(self) -> None:
        estimator = DurationEstimator()
        snapshots = [snapshot("t", AS_OF, remaining=2.5)]
        assert estimator.compute_duration(TASK, [assignment("t", 10)], snapshots, AS_OF) == 3

    def test_remaining_without_capacity(self) -> None:
        """Without usable capacity the remaining estimate is used as-is."""
        estimator = DurationEstimator()
        snapshots = [snapshot("t", AS_OF, remaining=4)]
        assert estimator.compute_duration(TASK, [assignment("t", 10, 0)], snapshots, AS_OF) == 4
        assert estimator.compute_duration(TASK, [], snapshots, AS_OF) == 4

    def test_zero_remaining_falls_back_to_assignments(self) -> None:
        estimator = DurationEstimator()
        snapshots = [snapshot("t", AS_OF, remaining=0, progress=100)]
        assert estimator.compute_duration(TASK, [assignment("t", 10)], snapshots, AS_OF) == 10

    def test_future_snapshot_is_ignored(self) -> None:
        estimator = DurationEstimator()
        snapshots = [snapshot("t", date(2025, 1, 9), remaining=2)]
        assert estimator.compute_duration(TASK, [assignment("t", 10)], snapshots, AS_OF) == 10

    def test_latest_snapshot_wins(self) -> None:
        estimator = DurationEstimator()
        snapshots = [
            snapshot("t", date(2025, 1, 7), remaining=2),
            snapshot("t", date(2025, 1, 3), remaining=9),
        ]
        assert estimator.compute_duration(TASK, [assignment("t", 10)], snapshots, AS_OF) == 2


class TestSnapshotHelpers:
    """Tests for effective_snapshot, is_in_progress, parallel_capacity and scope_change."""

    def test_same_date_tie_broken_by_timestamp(self) -> None:
        older = snapshot("t", AS_OF, remaining=5)
        older.updated_at = datetime(2025, 1, 8, 9, 0)
        newer = snapshot("t", AS_OF, remaining=3)
        newer.updated_at = datetime(2025, 1, 8, 17, 0)
        assert effective_snapshot([newer, older], AS_OF) is newer
        assert effective_snapshot([older, newer], AS_OF) is newer

    def test_no_snapshot_before_as_of(self) -> None:
        assert effective_snapshot([snapshot("t", date(2025, 2, 1), 3)], AS_OF) is None

    def test_in_progress_requires_progress_and_remaining(self) -> None:
        assert is_in_progress(snapshot("t", AS_OF, remaining=3, progress=10))
        assert not is_in_progress(snapshot("t", AS_OF, remaining=3, progress=0))
        assert not is_in_progress(snapshot("t", AS_OF, remaining=0, progress=100))
        assert not is_in_progress(None)

    def test_parallel_capacity(self) -> None:
        assignments = [assignment("t", 5, 80, 2), assignment("t", 5, 0, 3)]
        assert parallel_capacity(assignments) == 1.6

    def test_scope_increase_and_decrease(self) -> None:
        """Half done with 10 planned days leaves 5; 8 remaining is +3, 2 remaining is -3."""
        assignments = [assignment("t", 10)]
        assert scope_change(assignments, snapshot("t", AS_OF, remaining=8, progress=50)) == 3
        assert scope_change(assignments, snapshot("t", AS_OF, remaining=2, progress=50)) == -3

    def test_focus_factor_does_not_change_planned_work(self) -> None:
        """10 person-days at 50% focus is still 10 days of work."""
        assignments = [assignment("t", 10, 50)]
        assert scope_change(assignments, snapshot("t", AS_OF, remaining=10, progress=0)) == 0
        assert scope_change(assignments, snapshot("t", AS_OF, remaining=6, progress=50)) == 1

    def test_planned_work_sums_all_assignments(self) -> None:
        assignments = [assignment("t", 6, 80, 2), assignment("t", 4, 25)]
        assert scope_change(assignments, snapshot("t", AS_OF, remaining=12, progress=0)) == 2


class TestVariance:
    """Variance percentage and its on-track / scope-creep / major-issues buckets."""

    def test_percentage_of_planned_work(self) -> None:
        assignments = [assignment("t", 10, 50)]
        over = snapshot("t", AS_OF, remaining=8, progress=50)
        under = snapshot("t", AS_OF, remaining=4, progress=50)
        assert variance_percentage(assignments, over) == 30
        assert variance_percentage(assignments, under) == -10

    def test_exact_ten_percent_stays_on_track(self) -> None:
        """6 remaining of 10 at half done is exactly +10%, not a hair above it."""
        pct = variance_percentage([assignment("t", 10)], snapshot("t", AS_OF, remaining=6))
        assert pct == 10
        assert classify_variance(pct) == EstimateStatus.ON_TRACK

    def test_without_plan_is_zero(self) -> None:
        assert variance_percentage([], snapshot("t", AS_OF, remaining=5)) == 0

    def test_thresholds(self) -> None:
        assert classify_variance(0) == EstimateStatus.ON_TRACK
        assert classify_variance(10) == EstimateStatus.ON_TRACK
        assert classify_variance(-10) == EstimateStatus.ON_TRACK
        assert classify_variance(10.5) == EstimateStatus.SCOPE_CREEP
        assert classify_variance(25) == EstimateStatus.SCOPE_CREEP
        assert classify_variance(25.5) == EstimateStatus.MAJOR_ISSUES
        assert classify_variance(-10.5) == EstimateStatus.MAJOR_ISSUES
        assert classify_variance(-60) == EstimateStatus.MAJOR_ISSUES
