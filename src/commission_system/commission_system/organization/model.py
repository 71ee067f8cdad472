from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Status


@dataclass(frozen=True)
class Company:
    id: int
    name: str
    status: Status = Status.ACTIVE
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class Department:
    id: int
    company_id: int
    name: str
    status: Status = Status.ACTIVE
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    company_name: Optional[str] = None


@dataclass(frozen=True)
class Position:
    id: int
    name: str
    status: Status = Status.ACTIVE
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
