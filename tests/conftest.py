from __future__ import annotations

from contextlib import contextmanager
from dataclasses import asdict, replace
from decimal import Decimal
from typing import Any, Dict, Optional, Sequence

import pytest
from werkzeug.security import generate_password_hash

from src.commission_system.commission_system.access.authorizer import RequestAuthorizer
from src.commission_system.commission_system.access.scope import Scope
from src.commission_system.commission_system.common.pagination import ListFilter, Page, PageRequest
from src.commission_system.commission_system.container import Container, Repositories, assemble
from src.commission_system.commission_system.core.enums import Status
from src.commission_system.commission_system.employees.model import Employee
from src.commission_system.commission_system.organization.model import Company, Department, Position
from src.commission_system.commission_system.projects.model import CommissionProject, ProjectPermission
from src.commission_system.commission_system.reports.model import NewReport, Report, ReportSummaryInput
from src.commission_system.commission_system.users.model import User

TEST_JWT_SECRET = "test-jwt-secret"


class InMemoryTable:
    """Dict-backed stand-in for one MySQL table repository."""

    search_fields: Sequence[str] = ("name",)
    countable: Sequence[str] = ()

    def __init__(self):
        self.rows: Dict[int, Any] = {}
        self._next_id = 0

    def _add(self, factory, **values) -> int:
        self._next_id += 1
        self.rows[self._next_id] = factory(id=self._next_id, **values)
        return self._next_id

    def get_by_id(self, row_id: int):
        return self.rows.get(int(row_id))

    def exists(self, row_id: int) -> bool:
        return int(row_id) in self.rows

    def count_by(self, column: str, value: int) -> int:
        if column not in self.countable:
            raise ValueError(f"column {column!r} is not countable")
        return sum(1 for r in self.rows.values() if getattr(r, column) == value)

    def _coerce(self, changes: Dict[str, Any]) -> Dict[str, Any]:
        out = dict(changes)
        if "status" in out:
            out["status"] = Status(int(out["status"]))
        return out

    def update(self, row_id: int, changes: Dict[str, Any]) -> bool:
        row = self.rows.get(int(row_id))
        if row is None:
            return False
        self.rows[row.id] = replace(row, **self._coerce(changes))
        return True

    def delete_by_id(self, row_id: int) -> bool:
        return self.rows.pop(int(row_id), None) is not None

    def _matches(self, row, filters: ListFilter) -> bool:
        if filters.search:
            needle = filters.search.lower()
            if not any(needle in (getattr(row, f) or "").lower() for f in self.search_fields):
                return False
        if filters.status is not None and row.status != filters.status:
            return False
        return all(getattr(row, k) == v for k, v in filters.refs.items())

    def _sorted(self, rows):
        return sorted(rows, key=lambda r: r.id)

    def list_page(self, filters: ListFilter, page: PageRequest) -> Page:
        rows = self._sorted(r for r in self.rows.values() if self._matches(r, filters))
        items = rows[page.offset : page.offset + page.page_size]
        return Page(items=items, total=len(rows), page=page.page, page_size=page.page_size)


class InMemoryCompanies(InMemoryTable):
    def create(self, *, name: str, status: Status) -> int:
        return self._add(Company, name=name, status=status)


class InMemoryDepartments(InMemoryTable):
    countable = ("company_id",)

    def create(self, *, company_id: int, name: str, status: Status) -> int:
        return self._add(Department, company_id=company_id, name=name, status=status)


class InMemoryPositions(InMemoryTable):
    def create(self, *, name: str, status: Status) -> int:
        return self._add(Position, name=name, status=status)


class InMemoryPermissions(InMemoryTable):
    search_fields = ("permission",)

    def create(self, *, permission: str, status: Status) -> int:
        return self._add(ProjectPermission, permission=permission, status=status)


class InMemoryProjects(InMemoryTable):
    search_fields = ("field_name",)
    countable = ("project_perm_id",)

    def create(self, *, field_name: str, project_perm_id: int, status: Status) -> int:
        return self._add(CommissionProject, field_name=field_name, project_perm_id=project_perm_id, status=status)


class InMemoryEmployees(InMemoryTable):
    countable = ("company_id", "department_id", "position_id")

    def create(self, *, company_id, department_id, position_id, name, project_perm_ids, status) -> int:
        return self._add(
            Employee,
            company_id=company_id,
            department_id=department_id,
            position_id=position_id,
            name=name,
            project_perm_ids=project_perm_ids,
            status=status,
        )

    def list_ids(self) -> Sequence[int]:
        return sorted(self.rows)

    def _matches(self, row, filters: ListFilter) -> bool:
        if filters.employee_ids is not None and row.id not in filters.employee_ids:
            return False
        return super()._matches(row, filters)


class InMemoryUsers(InMemoryTable):
    search_fields = ("username", "name")

    def get_by_username(self, username: str) -> Optional[User]:
        return next((u for u in self.rows.values() if u.username == username), None)

    def create_user(self, *, username, name, password_hash, is_admin, employee_scope: str, status) -> int:
        return self._add(
            User,
            username=username,
            name=name,
            password_hash=password_hash,
            is_admin=bool(is_admin),
            employee_scope=Scope.parse(employee_scope),
            status=status,
        )

    def _coerce(self, changes: Dict[str, Any]) -> Dict[str, Any]:
        out = super()._coerce(changes)
        if "employee_scope" in out:
            out["employee_scope"] = Scope.parse(out["employee_scope"])
        if "is_admin" in out:
            out["is_admin"] = bool(out["is_admin"])
        return out


class InMemoryReports(InMemoryTable):
    search_fields = ("employee_name",)
    countable = ("employee_id", "commission_project_id")

    def __init__(self, *, companies, departments, positions, projects):
        super().__init__()
        self._companies = companies
        self._departments = departments
        self._positions = positions
        self._projects = projects

    def create(self, report: NewReport) -> int:
        return self._add(Report, **asdict(report))

    def create_many(self, reports: Sequence[NewReport]) -> int:
        for report in reports:
            self.create(report)
        return len(reports)

    def _matches(self, row, filters: ListFilter) -> bool:
        if filters.employee_ids is not None and row.employee_id not in filters.employee_ids:
            return False
        if filters.start_date and row.date < filters.start_date:
            return False
        if filters.end_date and row.date > filters.end_date:
            return False
        return super()._matches(row, filters)

    def _sorted(self, rows):
        return sorted(rows, key=lambda r: (r.date, r.id), reverse=True)

    @staticmethod
    def _name(table, row_id, attr="name") -> Optional[str]:
        row = table.get_by_id(row_id)
        return getattr(row, attr) if row else None

    def list_active_in_range(self, *, start_date, end_date, employee_ids=None) -> Sequence[ReportSummaryInput]:
        out = []
        for r in sorted(self.rows.values(), key=lambda r: r.id):
            if r.status != Status.ACTIVE or not (start_date <= r.date <= end_date):
                continue
            if employee_ids is not None and r.employee_id not in employee_ids:
                continue
            out.append(
                ReportSummaryInput(
                    report_id=r.id,
                    date=r.date,
                    employee_id=r.employee_id,
                    employee_name=r.employee_name,
                    company_id=r.company_id,
                    company_name=self._name(self._companies, r.company_id),
                    department_id=r.department_id,
                    department_name=self._name(self._departments, r.department_id),
                    position_id=r.position_id,
                    position_name=self._name(self._positions, r.position_id),
                    commission_project_id=r.commission_project_id,
                    project_name=self._name(self._projects, r.commission_project_id, "field_name"),
                    commission_value=Decimal(r.commission_value),
                )
            )
        return out


class FakeTransactions:
    def __init__(self):
        self.blocks = 0

    @contextmanager
    def atomic(self):
        self.blocks += 1
        yield


def make_repositories() -> Repositories:
    companies = InMemoryCompanies()
    departments = InMemoryDepartments()
    positions = InMemoryPositions()
    projects = InMemoryProjects()
    return Repositories(
        companies=companies,
        departments=departments,
        positions=positions,
        permissions=InMemoryPermissions(),
        projects=projects,
        employees=InMemoryEmployees(),
        reports=InMemoryReports(
            companies=companies, departments=departments, positions=positions, projects=projects
        ),
        users=InMemoryUsers(),
    )


def seed_world(repos: Repositories) -> None:
    """Two companies, three employees, two projects and three users."""
    repos.companies.create(name="Meilu", status=Status.ACTIVE)
    repos.companies.create(name="Aohan", status=Status.ACTIVE)
    repos.departments.create(company_id=1, name="Camp", status=Status.ACTIVE)
    repos.departments.create(company_id=2, name="Water Sports", status=Status.ACTIVE)
    repos.positions.create(name="Coach", status=Status.ACTIVE)
    repos.permissions.create(permission="Course sales", status=Status.ACTIVE)
    repos.projects.create(field_name="Private lessons", project_perm_id=1, status=Status.ACTIVE)
    repos.projects.create(field_name="Group lessons", project_perm_id=1, status=Status.ACTIVE)
    for company_id, department_id, name in ((1, 1, "Alice"), (1, 1, "Bob"), (2, 2, "Carol")):
        repos.employees.create(
            company_id=company_id,
            department_id=department_id,
            position_id=1,
            name=name,
            project_perm_ids="1",
            status=Status.ACTIVE,
        )

    repos.users.create_user(
        username="admin",
        name="Administrator",
        password_hash=generate_password_hash("admin123"),
        is_admin=True,
        employee_scope="0",
        status=Status.ACTIVE,
    )
    repos.users.create_user(
        username="user1",
        name="Scoped User",
        password_hash=generate_password_hash("user123"),
        is_admin=False,
        employee_scope="2",
        status=Status.ACTIVE,
    )
    repos.users.create_user(
        username="nobody",
        name="No Scope",
        password_hash=generate_password_hash("user123"),
        is_admin=False,
        employee_scope="",
        status=Status.ACTIVE,
    )


@pytest.fixture
def repos() -> Repositories:
    r = make_repositories()
    seed_world(r)
    return r


@pytest.fixture
def tx() -> FakeTransactions:
    return FakeTransactions()


@pytest.fixture
def container(repos, tx) -> Container:
    return assemble(repos, tx=tx, authorizer=RequestAuthorizer(TEST_JWT_SECRET, expire_hours=1))


@pytest.fixture
def app(container, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    from src.commission_system.commission_system.main import create_app

    return create_app(container)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_header(container):
    def _header(user_id: int) -> dict:
        user = container.repos.users.get_by_id(user_id)
        token = container.authorizer.issue(user_id=user.id, username=user.username, is_admin=user.is_admin)
        return {"Authorization": f"Bearer {token}"}

    return _header
