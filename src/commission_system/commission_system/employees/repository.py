from __future__ import annotations

from typing import Any, Dict, Optional, Protocol, Sequence

from ..common.pagination import ListFilter, Page, PageRequest
from ..core.enums import Status
from .model import Employee


class EmployeeRepository(Protocol):
    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def exists(self, employee_id: int) -> bool:
        raise NotImplementedError

    def list_ids(self) -> Sequence[int]:
        """Every employee id currently stored, regardless of status."""

        raise NotImplementedError

    def count_by(self, column: str, value: int) -> int:
        """Countable by ``company_id``, ``department_id`` or ``position_id``."""

        raise NotImplementedError

    def list_page(self, filters: ListFilter, page: PageRequest) -> Page[Employee]:
        """``filters.employee_ids`` restricts the listing to those ids when set."""

        raise NotImplementedError

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
        raise NotImplementedError

    def update(self, employee_id: int, changes: Dict[str, Any]) -> bool:
        raise NotImplementedError

    def delete_by_id(self, employee_id: int) -> bool:
        raise NotImplementedError
