from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Dict, Mapping

from ..access.integrity import IntegrityGuard, ReferenceRule
from ..access.scope import Visibility
from ..common.pagination import ListFilter, Page, PageRequest
from ..common.validators import normalize_id_list, require_id, require_non_empty, require_status
from ..core.enums import EntityType, Status
from ..core.exceptions import NotFoundError
from ..database.connection import TransactionManager
from .model import Employee
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)

EMPLOYEE_REFERENCES = (
    ReferenceRule("company_id", EntityType.COMPANY),
    ReferenceRule("department_id", EntityType.DEPARTMENT),
    ReferenceRule("position_id", EntityType.POSITION),
)


class EmployeeService:
    def __init__(self, employees: EmployeeRepository, guard: IntegrityGuard, tx: TransactionManager):
        self._employees = employees
        self._guard = guard
        self._tx = tx

    def get(self, employee_id: int, visibility: Visibility = Visibility.everyone()) -> Employee:
        employee = self._employees.get_by_id(int(employee_id))
        # Out-of-scope employees look the same as missing ones.
        if not employee or not visibility.allows(employee.id):
            raise NotFoundError("employee not found")
        return employee

    def list(
        self,
        filters: ListFilter,
        page: PageRequest,
        visibility: Visibility = Visibility.everyone(),
    ) -> Page[Employee]:
        if not visibility.is_all:
            filters = replace(filters, employee_ids=visibility.filter_ids())
        return self._employees.list_page(filters, page)

    def create(self, payload: Mapping[str, Any]) -> Employee:
        name = require_non_empty(payload.get("name"), "name")
        refs = {rule.field: require_id(payload.get(rule.field), rule.field) for rule in EMPLOYEE_REFERENCES}
        project_perm_ids = normalize_id_list(payload.get("project_perm_ids"), "project_perm_ids")
        status = require_status(payload["status"]) if payload.get("status") is not None else Status.ACTIVE

        with self._tx.atomic():
            self._guard.ensure_references(refs, EMPLOYEE_REFERENCES)
            employee_id = self._employees.create(
                company_id=refs["company_id"],
                department_id=refs["department_id"],
                position_id=refs["position_id"],
                name=name,
                project_perm_ids=project_perm_ids,
                status=status,
            )
        logger.info("created employee %s", employee_id)
        return self.get(employee_id)

    def update(self, employee_id: int, payload: Mapping[str, Any]) -> Employee:
        changes: Dict[str, Any] = {}
        if payload.get("name") is not None:
            changes["name"] = require_non_empty(payload["name"], "name")
        for rule in EMPLOYEE_REFERENCES:
            if payload.get(rule.field) is not None:
                changes[rule.field] = require_id(payload[rule.field], rule.field)
        if "project_perm_ids" in payload:
            changes["project_perm_ids"] = normalize_id_list(payload["project_perm_ids"], "project_perm_ids")
        if payload.get("status") is not None:
            changes["status"] = int(require_status(payload["status"]))

        # Existing reports keep the name/org ids they were written with.
        with self._tx.atomic():
            current = self.get(employee_id)
            self._guard.ensure_references(changes, EMPLOYEE_REFERENCES, current=current)
            self._employees.update(current.id, changes)
        return self.get(employee_id)

    def delete(self, employee_id: int) -> None:
        with self._tx.atomic():
            self.get(employee_id)
            self._guard.ensure_deletable(EntityType.EMPLOYEE, int(employee_id))
            self._employees.delete_by_id(int(employee_id))
        logger.info("deleted employee %s", employee_id)

    def toggle_status(self, employee_id: int) -> Employee:
        employee = self.get(employee_id)
        self._employees.update(employee.id, {"status": int(employee.status.toggled())})
        return self.get(employee_id)
