from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Status


@dataclass(frozen=True)
class Employee:
    """Domain entity: Employee.

    ``project_perm_ids`` is informational only; nothing enforces it.
    """

    id: int
    company_id: int
    department_id: int
    position_id: int
    name: str
    project_perm_ids: str = ""
    status: Status = Status.ACTIVE
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    company_name: Optional[str] = None
    department_name: Optional[str] = None
    position_name: Optional[str] = None
