from __future__ import annotations

from typing import Any, Dict, Optional, Protocol

from ..common.pagination import ListFilter, Page, PageRequest
from ..core.enums import Status
from .model import CommissionProject, ProjectPermission


class ProjectPermissionRepository(Protocol):
    def get_by_id(self, permission_id: int) -> Optional[ProjectPermission]:
        raise NotImplementedError

    def exists(self, permission_id: int) -> bool:
        raise NotImplementedError

    def list_page(self, filters: ListFilter, page: PageRequest) -> Page[ProjectPermission]:
        raise NotImplementedError

    def create(self, *, permission: str, status: Status) -> int:
        raise NotImplementedError

    def update(self, permission_id: int, changes: Dict[str, Any]) -> bool:
        raise NotImplementedError

    def delete_by_id(self, permission_id: int) -> bool:
        raise NotImplementedError


class CommissionProjectRepository(Protocol):
    def get_by_id(self, project_id: int) -> Optional[CommissionProject]:
        raise NotImplementedError

    def exists(self, project_id: int) -> bool:
        raise NotImplementedError

    def count_by(self, column: str, value: int) -> int:
        """Only ``project_perm_id`` is countable."""

        raise NotImplementedError

    def list_page(self, filters: ListFilter, page: PageRequest) -> Page[CommissionProject]:
        raise NotImplementedError

    def create(self, *, field_name: str, project_perm_id: int, status: Status) -> int:
        raise NotImplementedError

    def update(self, project_id: int, changes: Dict[str, Any]) -> bool:
        raise NotImplementedError

    def delete_by_id(self, project_id: int) -> bool:
        raise NotImplementedError
