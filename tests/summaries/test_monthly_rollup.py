from datetime import date, timedelta

import pytest

from support import InMemoryEmployees

from timesheet_engine.core.exceptions import InvalidRangeError
from timesheet_engine.summaries.service import MonthlyRollupService


def store_week(repo, employee_id, week_start, total, regular, overtime):
    repo.upsert(
        employee_id=employee_id,
        week_start=week_start,
        week_end=week_start + timedelta(days=6),
        total_hours=total,
        regular_hours=regular,
        overtime_hours=overtime,
    )


def test_month_sums_weeks_starting_inside_the_month(summaries_repo):
    # January 2025 Sundays: 5, 12, 19, 26 (Dec 29 starts the first partial week)
    store_week(summaries_repo, "e1", date(2024, 12, 29), 40, 40, 0)
    store_week(summaries_repo, "e1", date(2025, 1, 5), 42.5, 40, 2.5)
    store_week(summaries_repo, "e1", date(2025, 1, 12), 38.25, 38.25, 0)
    store_week(summaries_repo, "e1", date(2025, 1, 26), 44, 40, 4)
    store_week(summaries_repo, "e1", date(2025, 2, 2), 40, 40, 0)

    rollup = MonthlyRollupService(summaries_repo).build(employee_id="e1", year=2025, month=1)

    assert rollup.month_start == date(2025, 1, 1)
    assert rollup.month_end == date(2025, 1, 31)
    assert [w.week_start for w in rollup.weeks] == [date(2025, 1, 5), date(2025, 1, 12), date(2025, 1, 26)]
    # week of Jan 19 is missing and contributes zero
    assert rollup.total_hours == 124.75
    assert rollup.regular_hours == 118.25
    assert rollup.overtime_hours == 6.5


def test_month_without_summaries_is_zero(summaries_repo):
    rollup = MonthlyRollupService(summaries_repo).build(employee_id="e1", year=2025, month=3)

    assert (rollup.total_hours, rollup.regular_hours, rollup.overtime_hours) == (0.0, 0.0, 0.0)
    assert rollup.weeks == ()


def test_other_employees_are_not_counted(summaries_repo):
    store_week(summaries_repo, "e1", date(2025, 1, 5), 10, 10, 0)
    store_week(summaries_repo, "e2", date(2025, 1, 5), 30, 30, 0)

    rollup = MonthlyRollupService(summaries_repo).build(employee_id="e1", year=2025, month=1)
    assert rollup.total_hours == 10.0


def test_rollup_for_all_employees_labels_names(summaries_repo):
    store_week(summaries_repo, "e1", date(2025, 1, 5), 10, 10, 0)
    service = MonthlyRollupService(summaries_repo, InMemoryEmployees.of("e1", "e2"))

    rollups = service.build_for_all(year=2025, month=1)

    assert [(r.employee_id, r.total_hours) for r in rollups] == [("e1", 10.0), ("e2", 0.0)]
    assert rollups[0].employee_name == "Employee e1"
    assert rollups[0].to_dict()["period"] == "2025-01-01 to 2025-01-31"


def test_invalid_month_is_rejected(summaries_repo):
    with pytest.raises(InvalidRangeError):
        MonthlyRollupService(summaries_repo).build(employee_id="e1", year=2025, month=13)
