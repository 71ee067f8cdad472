from __future__ import annotations

from typing import Any, List, Optional

from ..common.pagination import ListFilter, Page, PageRequest
from ..core.enums import Status
from ..database.mysql_repository import MySQLTableRepository
from .model import CommissionProject, ProjectPermission
from .repository import CommissionProjectRepository, ProjectPermissionRepository


def _permission(r: dict) -> ProjectPermission:
    return ProjectPermission(
        id=int(r["id"]),
        permission=r["permission"],
        status=Status(int(r["status"])),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


def _project(r: dict) -> CommissionProject:
    return CommissionProject(
        id=int(r["id"]),
        field_name=r["field_name"],
        project_perm_id=int(r["project_perm_id"]),
        status=Status(int(r["status"])),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
        permission=r.get("permission"),
    )


class MySQLProjectPermissionRepository(MySQLTableRepository, ProjectPermissionRepository):
    table = "project_permissions"
    updatable = ("permission", "status")

    _SELECT = "SELECT pp.id, pp.permission, pp.status, pp.created_at, pp.updated_at FROM project_permissions pp"

    def get_by_id(self, permission_id: int) -> Optional[ProjectPermission]:
        return self._fetch_one(self._SELECT + " WHERE pp.id=%s", (int(permission_id),), _permission)

    def list_page(self, filters: ListFilter, page: PageRequest) -> Page[ProjectPermission]:
        conditions: List[str] = []
        params: List[Any] = []
        if filters.search:
            conditions.append("pp.permission LIKE %s")
            params.append(f"%{filters.search}%")
        if filters.status is not None:
            conditions.append("pp.status=%s")
            params.append(int(filters.status))
        return self._page(
            select_sql=self._SELECT,
            count_sql="SELECT COUNT(*) AS total FROM project_permissions pp",
            conditions=conditions,
            params=params,
            order_by="pp.id",
            page=page,
            mapper=_permission,
        )

    def create(self, *, permission: str, status: Status) -> int:
        return self._insert(("permission", "status"), (permission, int(status)))


class MySQLCommissionProjectRepository(MySQLTableRepository, CommissionProjectRepository):
    table = "commission_projects"
    updatable = ("field_name", "project_perm_id", "status")
    countable = ("project_perm_id",)

    _SELECT = """
        SELECT cp.id, cp.field_name, cp.project_perm_id, cp.status, cp.created_at, cp.updated_at,
               pp.permission
        FROM commission_projects cp
        LEFT JOIN project_permissions pp ON pp.id = cp.project_perm_id
    """

    def get_by_id(self, project_id: int) -> Optional[CommissionProject]:
        return self._fetch_one(self._SELECT + " WHERE cp.id=%s", (int(project_id),), _project)

    def list_page(self, filters: ListFilter, page: PageRequest) -> Page[CommissionProject]:
        conditions: List[str] = []
        params: List[Any] = []
        if filters.search:
            conditions.append("cp.field_name LIKE %s")
            params.append(f"%{filters.search}%")
        if filters.status is not None:
            conditions.append("cp.status=%s")
            params.append(int(filters.status))
        if "project_perm_id" in filters.refs:
            conditions.append("cp.project_perm_id=%s")
            params.append(int(filters.refs["project_perm_id"]))
        return self._page(
            select_sql=self._SELECT,
            count_sql="SELECT COUNT(*) AS total FROM commission_projects cp",
            conditions=conditions,
            params=params,
            order_by="cp.id",
            page=page,
            mapper=_project,
        )

    def create(self, *, field_name: str, project_perm_id: int, status: Status) -> int:
        return self._insert(
            ("field_name", "project_perm_id", "status"),
            (field_name, int(project_perm_id), int(status)),
        )
