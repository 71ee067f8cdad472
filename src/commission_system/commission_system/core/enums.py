from __future__ import annotations

from enum import Enum


class Status(int, Enum):
    """Soft enable/disable flag shared by every entity."""

    INACTIVE = 0
    ACTIVE = 1

    def toggled(self) -> "Status":
        return Status.INACTIVE if self is Status.ACTIVE else Status.ACTIVE


class EntityType(str, Enum):
    COMPANY = "company"
    DEPARTMENT = "department"
    POSITION = "position"
    PROJECT_PERMISSION = "project_permission"
    COMMISSION_PROJECT = "commission_project"
    EMPLOYEE = "employee"
    REPORT = "report"
    USER = "user"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ")


class ScopeKind(str, Enum):
    """Shapes a user's employee scope can take."""

    NONE = "none"
    ALL = "all"
    EXPLICIT = "explicit"
