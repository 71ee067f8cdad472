from __future__ import annotations

from typing import Any, List, Optional

from ..access.scope import Scope
from ..common.pagination import ListFilter, Page, PageRequest
from ..core.enums import Status
from ..database.mysql_repository import MySQLTableRepository
from .model import User
from .repository import UserRepository


def _user(r: dict) -> User:
    return User(
        id=int(r["id"]),
        username=r["username"],
        name=r["name"],
        is_admin=bool(r.get("is_admin", 0)),
        employee_scope=Scope.parse(r.get("employee_scope") or ""),
        password_hash=r.get("password_hash") or "",
        status=Status(int(r["status"])),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLUserRepository(MySQLTableRepository, UserRepository):
    table = "users"
    updatable = ("username", "name", "password_hash", "is_admin", "employee_scope", "status")

    _SELECT = """
        SELECT u.id, u.username, u.name, u.password_hash, u.is_admin, u.employee_scope,
               u.status, u.created_at, u.updated_at
        FROM users u
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self._fetch_one(self._SELECT + " WHERE u.id=%s", (int(user_id),), _user)

    def get_by_username(self, username: str) -> Optional[User]:
        return self._fetch_one(self._SELECT + " WHERE u.username=%s", (username,), _user)

    def list_page(self, filters: ListFilter, page: PageRequest) -> Page[User]:
        conditions: List[str] = []
        params: List[Any] = []
        if filters.search:
            conditions.append("(u.username LIKE %s OR u.name LIKE %s)")
            params.extend([f"%{filters.search}%", f"%{filters.search}%"])
        if filters.status is not None:
            conditions.append("u.status=%s")
            params.append(int(filters.status))
        return self._page(
            select_sql=self._SELECT,
            count_sql="SELECT COUNT(*) AS total FROM users u",
            conditions=conditions,
            params=params,
            order_by="u.id",
            page=page,
            mapper=_user,
        )

    def create_user(
        self,
        *,
        username: str,
        name: str,
        password_hash: str,
        is_admin: bool,
        employee_scope: str,
        status: Status,
    ) -> int:
        return self._insert(
            ("username", "name", "password_hash", "is_admin", "employee_scope", "status"),
            (username, name, password_hash, 1 if is_admin else 0, employee_scope, int(status)),
        )
