from __future__ import annotations

from typing import Any, List, Optional, Sequence

from ..common.pagination import ListFilter, Page, PageRequest
from ..core.enums import Status
from ..database.mysql_base import db_cursor, fetchall, in_clause
from ..database.mysql_repository import MySQLTableRepository
from .model import Employee
from .repository import EmployeeRepository


def _employee(r: dict) -> Employee:
    return Employee(
        id=int(r["id"]),
        company_id=int(r["company_id"]),
        department_id=int(r["department_id"]),
        position_id=int(r["position_id"]),
        name=r["name"],
        project_perm_ids=r.get("project_perm_ids") or "",
        status=Status(int(r["status"])),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
        company_name=r.get("company_name"),
        department_name=r.get("department_name"),
        position_name=r.get("position_name"),
    )


class MySQLEmployeeRepository(MySQLTableRepository, EmployeeRepository):
    table = "employees"
    updatable = ("company_id", "department_id", "position_id", "name", "project_perm_ids", "status")
    countable = ("company_id", "department_id", "position_id")

    _SELECT = """
        SELECT e.id, e.company_id, e.department_id, e.position_id, e.name, e.project_perm_ids,
               e.status, e.created_at, e.updated_at,
               c.name AS company_name, d.name AS department_name, p.name AS position_name
        FROM employees e
        LEFT JOIN companies c ON c.id = e.company_id
        LEFT JOIN departments d ON d.id = e.department_id
        LEFT JOIN positions p ON p.id = e.position_id
    """

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        return self._fetch_one(self._SELECT + " WHERE e.id=%s", (int(employee_id),), _employee)

    def list_ids(self) -> Sequence[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id FROM employees ORDER BY id")
            return [int(r["id"]) for r in fetchall(cur)]

    def list_page(self, filters: ListFilter, page: PageRequest) -> Page[Employee]:
        if filters.employee_ids is not None and not filters.employee_ids:
            return Page(items=[], total=0, page=page.page, page_size=page.page_size)

        conditions: List[str] = []
        params: List[Any] = []
        if filters.search:
            conditions.append("e.name LIKE %s")
            params.append(f"%{filters.search}%")
        if filters.status is not None:
            conditions.append("e.status=%s")
            params.append(int(filters.status))
        for column in ("company_id", "department_id", "position_id"):
            if column in filters.refs:
                conditions.append(f"e.{column}=%s")
                params.append(int(filters.refs[column]))
        if filters.employee_ids is not None:
            placeholders, ids = in_clause(sorted(filters.employee_ids))
            conditions.append(f"e.id IN {placeholders}")
            params.extend(ids)

        return self._page(
            select_sql=self._SELECT,
            count_sql="SELECT COUNT(*) AS total FROM employees e",
            conditions=conditions,
            params=params,
            order_by="e.id",
            page=page,
            mapper=_employee,
        )

    def create(
        self,
        *,
        company_id: int,
        department_id: int,
        position_id: int,
        name: str,
        project_perm_ids: str,
        status: Status,
    ) -> int:
        return self._insert(
            ("company_id", "department_id", "position_id", "name", "project_perm_ids", "status"),
            (int(company_id), int(department_id), int(position_id), name, project_perm_ids, int(status)),
        )
