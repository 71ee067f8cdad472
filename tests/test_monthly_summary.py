from __future__ import annotations

from decimal import Decimal

import pytest

from src.commission_system.commission_system.access.scope import Visibility
from src.commission_system.commission_system.core.enums import Status
from src.commission_system.commission_system.core.exceptions import ValidationError
from src.commission_system.commission_system.reports.model import NewReport


def add_report(repos, *, date, employee_id, project_id, value, status=Status.ACTIVE) -> int:
    employee = repos.employees.get_by_id(employee_id)
    return repos.reports.create(
        NewReport(
            date=date,
            employee_id=employee_id,
            commission_project_id=project_id,
            commission_value=Decimal(value),
            company_id=employee.company_id,
            department_id=employee.department_id,
            position_id=employee.position_id,
            employee_name=employee.name,
            status=status,
        )
    )


@pytest.fixture
def january(repos):
    repos.projects.create(field_name="Annual membership", project_perm_id=1, status=Status.ACTIVE)
    add_report(repos, date="2024-01-15", employee_id=1, project_id=1, value="100")
    add_report(repos, date="2024-01-15", employee_id=1, project_id=2, value="200")
    add_report(repos, date="2024-01-16", employee_id=2, project_id=3, value="150")
    return repos


def keys(summary):
    return [(r.employee_id, r.commission_project_id, r.total_value) for r in summary.summaries]


def test_groups_by_employee_and_project(container, january):
    summary = container.aggregation_engine.monthly_summary("2024-01")

    assert summary.month == "2024-01"
    assert summary.start_date == "2024-01-01"
    assert summary.end_date == "2024-01-31"
    # Alice before Bob; within Alice, "Group lessons" sorts before "Private lessons".
    assert keys(summary) == [
        (1, 2, Decimal("200")),
        (1, 1, Decimal("100")),
        (2, 3, Decimal("150")),
    ]


def test_rows_carry_joined_names(container, january):
    row = container.aggregation_engine.monthly_summary("2024-01").summaries[-1]
    assert row.employee_name == "Bob"
    assert row.company_name == "Meilu"
    assert row.department_name == "Camp"
    assert row.position_name == "Coach"
    assert row.project_name == "Annual membership"


def test_visibility_restricts_rows_without_changing_totals(container, january):
    summary = container.aggregation_engine.monthly_summary("2024-01", Visibility.only({2}))
    assert keys(summary) == [(2, 3, Decimal("150"))]


def test_empty_visibility_yields_no_rows(container, january):
    assert container.aggregation_engine.monthly_summary("2024-01", Visibility.only(())).summaries == ()


def test_running_twice_gives_identical_results(container, january):
    engine = container.aggregation_engine
    assert engine.monthly_summary("2024-01") == engine.monthly_summary("2024-01")


def test_sums_exactly_and_skips_inactive_and_out_of_month(container, repos):
    add_report(repos, date="2024-02-01", employee_id=3, project_id=1, value="0.1")
    add_report(repos, date="2024-02-29", employee_id=3, project_id=1, value="0.2")
    add_report(repos, date="2024-02-10", employee_id=3, project_id=1, value="-0.05")
    add_report(repos, date="2024-02-11", employee_id=3, project_id=1, value="1000", status=Status.INACTIVE)
    add_report(repos, date="2024-03-01", employee_id=3, project_id=1, value="1000")
    add_report(repos, date="2024-01-31", employee_id=3, project_id=1, value="1000")

    summary = container.aggregation_engine.monthly_summary("2024-02")
    assert summary.end_date == "2024-02-29"
    assert keys(summary) == [(3, 1, Decimal("0.25"))]


def test_display_fields_follow_latest_report(container, repos):
    add_report(repos, date="2024-05-02", employee_id=1, project_id=1, value="10")
    repos.employees.update(1, {"name": "Alicia"})
    add_report(repos, date="2024-05-20", employee_id=1, project_id=1, value="5")

    (row,) = container.aggregation_engine.monthly_summary("2024-05").summaries
    assert row.employee_name == "Alicia"
    assert row.total_value == Decimal("15")


def test_missing_joins_give_empty_names(container, repos):
    add_report(repos, date="2024-06-01", employee_id=3, project_id=2, value="7")
    repos.projects.rows.pop(2)
    repos.companies.rows.pop(2)

    (row,) = container.aggregation_engine.monthly_summary("2024-06").summaries
    assert row.project_name is None
    assert row.company_name is None
    assert row.total_value == Decimal("7")


@pytest.mark.parametrize("month", [None, "", "   "])
def test_month_is_required(container, month):
    with pytest.raises(ValidationError, match="month required"):
        container.aggregation_engine.monthly_summary(month)


@pytest.mark.parametrize("month", ["2024-13", "2024-1", "202401", "2024-01-05", "abcd-ef"])
def test_malformed_month_is_rejected(container, month):
    with pytest.raises(ValidationError, match="invalid date format"):
        container.aggregation_engine.monthly_summary(month)
