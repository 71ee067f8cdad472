from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional, Sequence

from ..core.enums import Status


@dataclass(frozen=True)
class Report:
    """Daily/monthly commission record.

    ``employee_name``, ``company_id``, ``department_id`` and ``position_id`` are a
    copy of the employee taken when the report is written or re-pointed.
    """

    id: int
    date: str
    employee_id: int
    commission_project_id: int
    commission_value: Decimal
    company_id: int
    department_id: int
    position_id: int
    employee_name: str
    status: Status = Status.ACTIVE
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    company_name: Optional[str] = None
    department_name: Optional[str] = None
    position_name: Optional[str] = None
    project_name: Optional[str] = None


@dataclass(frozen=True)
class NewReport:
    """Validated report ready to insert, denormalized fields already filled."""

    date: str
    employee_id: int
    commission_project_id: int
    commission_value: Decimal
    company_id: int
    department_id: int
    position_id: int
    employee_name: str
    status: Status = Status.ACTIVE


@dataclass(frozen=True)
class ReportSummaryInput:
    """Read-model row for aggregation: one active report with joined names."""

    report_id: int
    date: str
    employee_id: int
    employee_name: str
    company_id: int
    company_name: Optional[str]
    department_id: int
    department_name: Optional[str]
    position_id: int
    position_name: Optional[str]
    commission_project_id: int
    project_name: Optional[str]
    commission_value: Decimal


@dataclass(frozen=True)
class SummaryRow:
    employee_id: int
    employee_name: str
    company_id: int
    company_name: Optional[str]
    department_id: int
    department_name: Optional[str]
    position_id: int
    position_name: Optional[str]
    commission_project_id: int
    project_name: Optional[str]
    total_value: Decimal


@dataclass(frozen=True)
class MonthlySummary:
    month: str
    start_date: str
    end_date: str
    summaries: Sequence[SummaryRow] = field(default_factory=tuple)
