from __future__ import annotations

from decimal import Decimal
from typing import Any, List, Optional, Sequence

from ..common.pagination import ListFilter, Page, PageRequest
from ..core.enums import Status
from ..database.mysql_base import db_cursor, fetchall, in_clause, where_clause
from ..database.mysql_repository import MySQLTableRepository
from .model import NewReport, Report, ReportSummaryInput
from .repository import ReportRepository

_INSERT_COLUMNS = (
    "date",
    "employee_id",
    "company_id",
    "department_id",
    "position_id",
    "employee_name",
    "commission_project_id",
    "commission_value",
    "status",
)


def _values(r: NewReport) -> tuple:
    return (
        r.date,
        int(r.employee_id),
        int(r.company_id),
        int(r.department_id),
        int(r.position_id),
        r.employee_name,
        int(r.commission_project_id),
        r.commission_value,
        int(r.status),
    )


def _as_date_str(value: Any) -> str:
    # DATE columns come back as datetime.date.
    return value.isoformat() if hasattr(value, "isoformat") else str(value)


def _report(r: dict) -> Report:
    return Report(
        id=int(r["id"]),
        date=_as_date_str(r["date"]),
        employee_id=int(r["employee_id"]),
        commission_project_id=int(r["commission_project_id"]),
        commission_value=Decimal(r["commission_value"]),
        company_id=int(r["company_id"]),
        department_id=int(r["department_id"]),
        position_id=int(r["position_id"]),
        employee_name=r["employee_name"],
        status=Status(int(r["status"])),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
        company_name=r.get("company_name"),
        department_name=r.get("department_name"),
        position_name=r.get("position_name"),
        project_name=r.get("project_name"),
    )


def _summary_input(r: dict) -> ReportSummaryInput:
    return ReportSummaryInput(
        report_id=int(r["id"]),
        date=_as_date_str(r["date"]),
        employee_id=int(r["employee_id"]),
        employee_name=r["employee_name"],
        company_id=int(r["company_id"]),
        company_name=r.get("company_name"),
        department_id=int(r["department_id"]),
        department_name=r.get("department_name"),
        position_id=int(r["position_id"]),
        position_name=r.get("position_name"),
        commission_project_id=int(r["commission_project_id"]),
        project_name=r.get("project_name"),
        commission_value=Decimal(r["commission_value"]),
    )


class MySQLReportRepository(MySQLTableRepository, ReportRepository):
    table = "daily_monthly_reports"
    updatable = _INSERT_COLUMNS
    countable = ("employee_id", "commission_project_id")

    _SELECT = """
        SELECT r.id, r.date, r.employee_id, r.company_id, r.department_id, r.position_id,
               r.employee_name, r.commission_project_id, r.commission_value, r.status,
               r.created_at, r.updated_at,
               c.name AS company_name, d.name AS department_name,
               p.name AS position_name, cp.field_name AS project_name
        FROM daily_monthly_reports r
        LEFT JOIN companies c ON c.id = r.company_id
        LEFT JOIN departments d ON d.id = r.department_id
        LEFT JOIN positions p ON p.id = r.position_id
        LEFT JOIN commission_projects cp ON cp.id = r.commission_project_id
    """

    def get_by_id(self, report_id: int) -> Optional[Report]:
        return self._fetch_one(self._SELECT + " WHERE r.id=%s", (int(report_id),), _report)

    def list_page(self, filters: ListFilter, page: PageRequest) -> Page[Report]:
        if filters.employee_ids is not None and not filters.employee_ids:
            return Page(items=[], total=0, page=page.page, page_size=page.page_size)

        conditions: List[str] = []
        params: List[Any] = []
        if filters.search:
            conditions.append("r.employee_name LIKE %s")
            params.append(f"%{filters.search}%")
        if filters.status is not None:
            conditions.append("r.status=%s")
            params.append(int(filters.status))
        for column in ("employee_id", "company_id", "department_id", "commission_project_id"):
            if column in filters.refs:
                conditions.append(f"r.{column}=%s")
                params.append(int(filters.refs[column]))
        if filters.start_date:
            conditions.append("r.date >= %s")
            params.append(filters.start_date)
        if filters.end_date:
            conditions.append("r.date <= %s")
            params.append(filters.end_date)
        if filters.employee_ids is not None:
            placeholders, ids = in_clause(sorted(filters.employee_ids))
            conditions.append(f"r.employee_id IN {placeholders}")
            params.extend(ids)

        return self._page(
            select_sql=self._SELECT,
            count_sql="SELECT COUNT(*) AS total FROM daily_monthly_reports r",
            conditions=conditions,
            params=params,
            order_by="r.date DESC, r.id DESC",
            page=page,
            mapper=_report,
        )

    def create(self, report: NewReport) -> int:
        return self._insert(_INSERT_COLUMNS, _values(report))

    def create_many(self, reports: Sequence[NewReport]) -> int:
        if not reports:
            return 0
        placeholders = ",".join(["%s"] * len(_INSERT_COLUMNS))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                f"INSERT INTO {self.table}({', '.join(_INSERT_COLUMNS)}) VALUES({placeholders})",
                [_values(r) for r in reports],
            )
        return len(reports)

    def list_active_in_range(
        self,
        *,
        start_date: str,
        end_date: str,
        employee_ids: Optional[frozenset[int]] = None,
    ) -> Sequence[ReportSummaryInput]:
        if employee_ids is not None and not employee_ids:
            return []

        conditions = ["r.date >= %s", "r.date <= %s", "r.status = %s"]
        params: List[Any] = [start_date, end_date, int(Status.ACTIVE)]
        if employee_ids is not None:
            placeholders, ids = in_clause(sorted(employee_ids))
            conditions.append(f"r.employee_id IN {placeholders}")
            params.extend(ids)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(self._SELECT + where_clause(conditions) + " ORDER BY r.id", tuple(params))
            return [_summary_input(r) for r in fetchall(cur)]
