from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Dict, List, Mapping, Sequence

from ..access.integrity import IntegrityGuard
from ..access.scope import Visibility
from ..common.pagination import ListFilter, Page, PageRequest
from ..common.validators import optional_id, require_decimal, require_id, require_report_date, require_status
from ..core.enums import EntityType, Status
from ..core.exceptions import AuthorizationError, InvalidReferenceError, NotFoundError, ValidationError
from ..database.connection import TransactionManager
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from .model import NewReport, Report
from .repository import ReportRepository

logger = logging.getLogger(__name__)


def denormalized_fields(employee: Employee) -> Dict[str, Any]:
    """Employee values copied onto a report when it is written or re-pointed."""
    return {
        "employee_name": employee.name,
        "company_id": employee.company_id,
        "department_id": employee.department_id,
        "position_id": employee.position_id,
    }


class ReportService:
    """Use case: submit and maintain daily/monthly commission reports."""

    def __init__(
        self,
        reports: ReportRepository,
        employees: EmployeeRepository,
        guard: IntegrityGuard,
        tx: TransactionManager,
    ):
        self._reports = reports
        self._employees = employees
        self._guard = guard
        self._tx = tx

    def _load_employee(self, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise InvalidReferenceError(
                f"employee {employee_id} does not exist",
                field="employee_id",
                entity_type=EntityType.EMPLOYEE,
                entity_id=int(employee_id),
            )
        return employee

    def _prepare(self, payload: Mapping[str, Any], visibility: Visibility) -> NewReport:
        if not isinstance(payload, Mapping):
            raise ValidationError("report must be an object")
        report_date = require_report_date(payload.get("date"))
        employee_id = require_id(payload.get("employee_id"), "employee_id")
        project_id = require_id(payload.get("commission_project_id"), "commission_project_id")
        value = require_decimal(payload.get("commission_value"), "commission_value")
        status = require_status(payload["status"]) if payload.get("status") is not None else Status.ACTIVE

        employee = self._load_employee(employee_id)
        if not visibility.allows(employee.id):
            raise AuthorizationError(f"employee {employee_id} is outside your scope")
        self._guard.ensure_reference(EntityType.COMMISSION_PROJECT, project_id, field="commission_project_id")

        return NewReport(
            date=report_date,
            employee_id=employee.id,
            commission_project_id=project_id,
            commission_value=value,
            status=status,
            **denormalized_fields(employee),
        )

    def create(self, payload: Mapping[str, Any], visibility: Visibility = Visibility.everyone()) -> Report:
        with self._tx.atomic():
            new_report = self._prepare(payload, visibility)
            report_id = self._reports.create(new_report)
        logger.info("created report %s for employee %s", report_id, new_report.employee_id)
        return self.get(report_id)

    def batch_create(self, payloads: Sequence[Mapping[str, Any]], visibility: Visibility = Visibility.everyone()) -> int:
        """Validate every item, then insert all of them or none."""
        if not isinstance(payloads, (list, tuple)):
            raise ValidationError("reports must be a list")
        if not payloads:
            raise ValidationError("reports must not be empty")

        with self._tx.atomic():
            prepared: List[NewReport] = [self._prepare(p, visibility) for p in payloads]
            count = self._reports.create_many(prepared)
        logger.info("batch created %d report(s)", count)
        return count

    def get(self, report_id: int, visibility: Visibility = Visibility.everyone()) -> Report:
        report = self._reports.get_by_id(int(report_id))
        if not report or not visibility.allows(report.employee_id):
            raise NotFoundError("report not found")
        return report

    def list(
        self,
        filters: ListFilter,
        page: PageRequest,
        visibility: Visibility = Visibility.everyone(),
    ) -> Page[Report]:
        if not visibility.is_all:
            filters = replace(filters, employee_ids=visibility.filter_ids())
        return self._reports.list_page(filters, page)

    def update(self, report_id: int, payload: Mapping[str, Any]) -> Report:
        changes: Dict[str, Any] = {}
        if payload.get("date") is not None:
            changes["date"] = require_report_date(payload["date"])
        if payload.get("commission_value") is not None:
            changes["commission_value"] = require_decimal(payload["commission_value"], "commission_value")
        if payload.get("status") is not None:
            changes["status"] = int(require_status(payload["status"]))
        new_employee_id = optional_id(payload.get("employee_id"), "employee_id")
        new_project_id = optional_id(payload.get("commission_project_id"), "commission_project_id")

        with self._tx.atomic():
            current = self.get(report_id)

            if new_employee_id is not None and new_employee_id != current.employee_id:
                employee = self._load_employee(new_employee_id)
                changes["employee_id"] = employee.id
                changes.update(denormalized_fields(employee))

            if new_project_id is not None and new_project_id != current.commission_project_id:
                self._guard.ensure_reference(
                    EntityType.COMMISSION_PROJECT, new_project_id, field="commission_project_id"
                )
                changes["commission_project_id"] = new_project_id

            self._reports.update(current.id, changes)
        return self.get(report_id)

    def delete(self, report_id: int) -> None:
        with self._tx.atomic():
            self.get(report_id)
            self._reports.delete_by_id(int(report_id))
        logger.info("deleted report %s", report_id)

    def toggle_status(self, report_id: int) -> Report:
        report = self.get(report_id)
        self._reports.update(report.id, {"status": int(report.status.toggled())})
        return self.get(report_id)
