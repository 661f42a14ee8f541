from datetime import date, timedelta, timezone

import pytest

from support import InMemoryEmployees, UnavailableDirectory, shift

from timesheet_engine.batch.service import BatchProcessor
from timesheet_engine.core.exceptions import InvalidRangeError, StoreUnavailableError
from timesheet_engine.timesheets.service import DailyTimesheetBuilder, WeeklyAggregator


class FailingSummaries:
    """Wraps a summary store and fails the upsert for chosen employees."""

    def __init__(self, inner, fail_for):
        self._inner = inner
        self._fail_for = set(fail_for)

    def upsert(self, **kwargs):
        if kwargs["employee_id"] in self._fail_for:
            raise StoreUnavailableError("deadlock on upsert")
        return self._inner.upsert(**kwargs)


def make_processor(events_repo, employees, summaries_repo, pool_size=3):
    aggregator = WeeklyAggregator(DailyTimesheetBuilder(events_repo, tz=timezone.utc))
    return BatchProcessor(employees, aggregator, summaries_repo, pool_size=pool_size, tz=timezone.utc)


def seed_week(events_repo, week_start):
    monday = week_start + timedelta(days=1)
    events_repo.add(*shift("alice", monday, 8, 19))
    events_repo.add(*shift("bob", monday, 9, 17))


def test_batch_upserts_one_summary_per_employee(events_repo, summaries_repo, week_start):
    seed_week(events_repo, week_start)
    processor = make_processor(events_repo, InMemoryEmployees.of("alice", "bob", "carol"), summaries_repo)

    report = processor.run(week_start)

    assert report.is_complete
    assert [s.employee_id for s in report.summaries] == ["alice", "bob", "carol"]
    alice, bob, carol = report.summaries
    assert (alice.total_hours, alice.regular_hours, alice.overtime_hours) == (11.0, 8.0, 3.0)
    assert bob.total_hours == 8.0
    # zero-hour employees are still summarized
    assert carol.total_hours == 0.0
    assert carol.week_end == date(2025, 1, 25)


def test_batch_is_idempotent(events_repo, summaries_repo, week_start):
    seed_week(events_repo, week_start)
    processor = make_processor(events_repo, InMemoryEmployees.of("alice", "bob"), summaries_repo)

    first = processor.run(week_start)
    rows_after_first = sorted(summaries_repo.all_rows(), key=lambda r: r.employee_id)
    second = processor.run(week_start)
    rows_after_second = sorted(summaries_repo.all_rows(), key=lambda r: r.employee_id)

    assert len(rows_after_second) == 2
    assert rows_after_first == rows_after_second
    assert first.summaries == second.summaries


def test_recompute_overwrites_existing_row(events_repo, summaries_repo, week_start):
    processor = make_processor(events_repo, InMemoryEmployees.of("alice"), summaries_repo)
    processor.run(week_start)

    events_repo.add(*shift("alice", week_start + timedelta(days=3), 9, 12))
    processor.run(week_start)

    rows = summaries_repo.all_rows()
    assert len(rows) == 1
    assert rows[0].total_hours == 3.0


def test_one_failing_employee_does_not_abort_the_batch(events_repo, summaries_repo, week_start):
    seed_week(events_repo, week_start)
    events_repo.fail_for.add("bob")
    processor = make_processor(events_repo, InMemoryEmployees.of("alice", "bob", "carol"), summaries_repo)

    report = processor.run(week_start)

    assert [s.employee_id for s in report.summaries] == ["alice", "carol"]
    assert report.failed_employee_ids == ["bob"]
    assert not report.is_complete
    assert isinstance(report.failures[0].cause, RuntimeError)
    assert summaries_repo.get(employee_id="bob", week_start=week_start) is None


def test_upsert_failure_is_isolated(events_repo, summaries_repo, week_start):
    seed_week(events_repo, week_start)
    processor = make_processor(
        events_repo,
        InMemoryEmployees.of("alice", "bob"),
        FailingSummaries(summaries_repo, fail_for={"alice"}),
    )

    report = processor.run(week_start)

    assert [s.employee_id for s in report.summaries] == ["bob"]
    assert report.failed_employee_ids == ["alice"]


def test_failures_are_logged(events_repo, summaries_repo, week_start, caplog):
    events_repo.fail_for.add("bob")
    processor = make_processor(events_repo, InMemoryEmployees.of("bob"), summaries_repo)

    with caplog.at_level("ERROR", logger="timesheet_engine"):
        processor.run(week_start)

    assert any("bob" in r.getMessage() for r in caplog.records)


def test_directory_failure_propagates(events_repo, summaries_repo, week_start):
    processor = make_processor(events_repo, UnavailableDirectory(), summaries_repo)

    with pytest.raises(StoreUnavailableError):
        processor.run(week_start)


def test_empty_directory_gives_empty_report(events_repo, summaries_repo, week_start):
    report = make_processor(events_repo, InMemoryEmployees(), summaries_repo).run(week_start)

    assert report.summaries == []
    assert report.is_complete


def test_process_employee_single_path(events_repo, summaries_repo, week_start):
    seed_week(events_repo, week_start)
    processor = make_processor(events_repo, InMemoryEmployees.of("alice", "bob"), summaries_repo)

    summary = processor.process_employee("alice", week_start)

    assert summary.overtime_hours == 3.0
    assert summaries_repo.get(employee_id="bob", week_start=week_start) is None


def test_non_sunday_week_is_rejected(events_repo, summaries_repo):
    processor = make_processor(events_repo, InMemoryEmployees.of("alice"), summaries_repo)

    with pytest.raises(InvalidRangeError):
        processor.run(date(2025, 1, 22))


def test_pool_size_must_be_positive(events_repo, summaries_repo):
    with pytest.raises(ValueError):
        make_processor(events_repo, InMemoryEmployees(), summaries_repo, pool_size=0)
