from __future__ import annotations

from typing import Any, Dict, Optional, Protocol

from ..common.pagination import ListFilter, Page, PageRequest
from ..core.enums import Status
from .model import User


class UserRepository(Protocol):
    """Repository interface for User.

    Note (DIP): services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_username(self, username: str) -> Optional[User]:
        raise NotImplementedError

    def list_page(self, filters: ListFilter, page: PageRequest) -> Page[User]:
        """``filters.search`` matches username or display name."""

        raise NotImplementedError

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
        raise NotImplementedError

    def update(self, user_id: int, changes: Dict[str, Any]) -> bool:
        raise NotImplementedError

    def delete_by_id(self, user_id: int) -> bool:
        raise NotImplementedError
