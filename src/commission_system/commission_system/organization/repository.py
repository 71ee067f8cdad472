from __future__ import annotations

from typing import Any, Dict, Optional, Protocol

from ..common.pagination import ListFilter, Page, PageRequest
from ..core.enums import Status
from .model import Company, Department, Position


class CompanyRepository(Protocol):
    """Repository interface for Company.

    Services depend on these protocols, never on a concrete database.
    """

    def get_by_id(self, company_id: int) -> Optional[Company]:
        raise NotImplementedError

    def exists(self, company_id: int) -> bool:
        raise NotImplementedError

    def list_page(self, filters: ListFilter, page: PageRequest) -> Page[Company]:
        raise NotImplementedError

    def create(self, *, name: str, status: Status) -> int:
        raise NotImplementedError

    def update(self, company_id: int, changes: Dict[str, Any]) -> bool:
        raise NotImplementedError

    def delete_by_id(self, company_id: int) -> bool:
        raise NotImplementedError


class DepartmentRepository(Protocol):
    def get_by_id(self, department_id: int) -> Optional[Department]:
        raise NotImplementedError

    def exists(self, department_id: int) -> bool:
        raise NotImplementedError

    def count_by(self, column: str, value: int) -> int:
        """Count departments whose ``column`` (only ``company_id``) equals value."""

        raise NotImplementedError

    def list_page(self, filters: ListFilter, page: PageRequest) -> Page[Department]:
        raise NotImplementedError

    def create(self, *, company_id: int, name: str, status: Status) -> int:
        raise NotImplementedError

    def update(self, department_id: int, changes: Dict[str, Any]) -> bool:
        raise NotImplementedError

    def delete_by_id(self, department_id: int) -> bool:
        raise NotImplementedError


class PositionRepository(Protocol):
    def get_by_id(self, position_id: int) -> Optional[Position]:
        raise NotImplementedError

    def exists(self, position_id: int) -> bool:
        raise NotImplementedError

    def list_page(self, filters: ListFilter, page: PageRequest) -> Page[Position]:
        raise NotImplementedError

    def create(self, *, name: str, status: Status) -> int:
        raise NotImplementedError

    def update(self, position_id: int, changes: Dict[str, Any]) -> bool:
        raise NotImplementedError

    def delete_by_id(self, position_id: int) -> bool:
        raise NotImplementedError
