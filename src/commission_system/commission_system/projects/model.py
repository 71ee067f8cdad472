from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Status


@dataclass(frozen=True)
class ProjectPermission:
    """Named permission category that commission projects belong to."""

    id: int
    permission: str
    status: Status = Status.ACTIVE
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class CommissionProject:
    id: int
    field_name: str
    project_perm_id: int
    status: Status = Status.ACTIVE
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    permission: Optional[str] = None
