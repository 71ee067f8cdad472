from __future__ import annotations

from typing import Any, List, Optional

from ..common.pagination import ListFilter, Page, PageRequest
from ..core.enums import Status
from ..database.mysql_repository import MySQLTableRepository
from .model import Company, Department, Position
from .repository import CompanyRepository, DepartmentRepository, PositionRepository


def _company(r: dict) -> Company:
    return Company(
        id=int(r["id"]),
        name=r["name"],
        status=Status(int(r["status"])),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


def _department(r: dict) -> Department:
    return Department(
        id=int(r["id"]),
        company_id=int(r["company_id"]),
        name=r["name"],
        status=Status(int(r["status"])),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
        company_name=r.get("company_name"),
    )


def _position(r: dict) -> Position:
    return Position(
        id=int(r["id"]),
        name=r["name"],
        status=Status(int(r["status"])),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


def _common_conditions(filters: ListFilter, *, alias: str, search_column: str) -> tuple[List[str], List[Any]]:
    conditions: List[str] = []
    params: List[Any] = []
    if filters.search:
        conditions.append(f"{alias}.{search_column} LIKE %s")
        params.append(f"%{filters.search}%")
    if filters.status is not None:
        conditions.append(f"{alias}.status=%s")
        params.append(int(filters.status))
    return conditions, params


class MySQLCompanyRepository(MySQLTableRepository, CompanyRepository):
    table = "companies"
    updatable = ("name", "status")

    _SELECT = "SELECT c.id, c.name, c.status, c.created_at, c.updated_at FROM companies c"

    def get_by_id(self, company_id: int) -> Optional[Company]:
        return self._fetch_one(self._SELECT + " WHERE c.id=%s", (int(company_id),), _company)

    def list_page(self, filters: ListFilter, page: PageRequest) -> Page[Company]:
        conditions, params = _common_conditions(filters, alias="c", search_column="name")
        return self._page(
            select_sql=self._SELECT,
            count_sql="SELECT COUNT(*) AS total FROM companies c",
            conditions=conditions,
            params=params,
            order_by="c.id",
            page=page,
            mapper=_company,
        )

    def create(self, *, name: str, status: Status) -> int:
        return self._insert(("name", "status"), (name, int(status)))


class MySQLDepartmentRepository(MySQLTableRepository, DepartmentRepository):
    table = "departments"
    updatable = ("company_id", "name", "status")
    countable = ("company_id",)

    _SELECT = """
        SELECT d.id, d.company_id, d.name, d.status, d.created_at, d.updated_at,
               c.name AS company_name
        FROM departments d
        LEFT JOIN companies c ON c.id = d.company_id
    """

    def get_by_id(self, department_id: int) -> Optional[Department]:
        return self._fetch_one(self._SELECT + " WHERE d.id=%s", (int(department_id),), _department)

    def list_page(self, filters: ListFilter, page: PageRequest) -> Page[Department]:
        conditions, params = _common_conditions(filters, alias="d", search_column="name")
        if "company_id" in filters.refs:
            conditions.append("d.company_id=%s")
            params.append(int(filters.refs["company_id"]))
        return self._page(
            select_sql=self._SELECT,
            count_sql="SELECT COUNT(*) AS total FROM departments d",
            conditions=conditions,
            params=params,
            order_by="d.id",
            page=page,
            mapper=_department,
        )

    def create(self, *, company_id: int, name: str, status: Status) -> int:
        return self._insert(("company_id", "name", "status"), (int(company_id), name, int(status)))


class MySQLPositionRepository(MySQLTableRepository, PositionRepository):
    table = "positions"
    updatable = ("name", "status")

    _SELECT = "SELECT p.id, p.name, p.status, p.created_at, p.updated_at FROM positions p"

    def get_by_id(self, position_id: int) -> Optional[Position]:
        return self._fetch_one(self._SELECT + " WHERE p.id=%s", (int(position_id),), _position)

    def list_page(self, filters: ListFilter, page: PageRequest) -> Page[Position]:
        conditions, params = _common_conditions(filters, alias="p", search_column="name")
        return self._page(
            select_sql=self._SELECT,
            count_sql="SELECT COUNT(*) AS total FROM positions p",
            conditions=conditions,
            params=params,
            order_by="p.id",
            page=page,
            mapper=_position,
        )

    def create(self, *, name: str, status: Status) -> int:
        return self._insert(("name", "status"), (name, int(status)))
