from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..access.scope import Scope
from ..core.enums import Status


@dataclass(frozen=True)
class User:
    """Domain entity: User.

    ``employee_scope`` is parsed from its stored text when the row is read.
    """

    id: int
    username: str
    name: str
    is_admin: bool
    employee_scope: Scope
    password_hash: str = ""
    status: Status = Status.ACTIVE
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_active(self) -> bool:
        return self.status == Status.ACTIVE
