from __future__ import annotations

import logging
from typing import Any, Dict, Mapping

from ..access.integrity import IntegrityGuard, ReferenceRule
from ..common.pagination import ListFilter, Page, PageRequest
from ..common.validators import require_id, require_non_empty, require_status
from ..core.enums import EntityType, Status
from ..core.exceptions import NotFoundError
from ..database.connection import TransactionManager
from .model import Company, Department, Position
from .repository import CompanyRepository, DepartmentRepository, PositionRepository

logger = logging.getLogger(__name__)

DEPARTMENT_REFERENCES = (ReferenceRule("company_id", EntityType.COMPANY),)


def _status_of(payload: Mapping[str, Any]) -> Status:
    return require_status(payload["status"]) if payload.get("status") is not None else Status.ACTIVE


class CompanyService:
    """Use case: manage companies (admin)."""

    def __init__(self, companies: CompanyRepository, guard: IntegrityGuard, tx: TransactionManager):
        self._companies = companies
        self._guard = guard
        self._tx = tx

    def get(self, company_id: int) -> Company:
        company = self._companies.get_by_id(int(company_id))
        if not company:
            raise NotFoundError("company not found")
        return company

    def list(self, filters: ListFilter, page: PageRequest) -> Page[Company]:
        return self._companies.list_page(filters, page)

    def create(self, payload: Mapping[str, Any]) -> Company:
        name = require_non_empty(payload.get("name"), "name")
        company_id = self._companies.create(name=name, status=_status_of(payload))
        logger.info("created company %s", company_id)
        return self.get(company_id)

    def update(self, company_id: int, payload: Mapping[str, Any]) -> Company:
        self.get(company_id)
        changes: Dict[str, Any] = {}
        if payload.get("name") is not None:
            changes["name"] = require_non_empty(payload["name"], "name")
        if payload.get("status") is not None:
            changes["status"] = int(require_status(payload["status"]))
        self._companies.update(int(company_id), changes)
        return self.get(company_id)

    def delete(self, company_id: int) -> None:
        with self._tx.atomic():
            self.get(company_id)
            self._guard.ensure_deletable(EntityType.COMPANY, int(company_id))
            self._companies.delete_by_id(int(company_id))
        logger.info("deleted company %s", company_id)

    def toggle_status(self, company_id: int) -> Company:
        company = self.get(company_id)
        self._companies.update(company.id, {"status": int(company.status.toggled())})
        return self.get(company_id)


class DepartmentService:
    def __init__(self, departments: DepartmentRepository, guard: IntegrityGuard, tx: TransactionManager):
        self._departments = departments
        self._guard = guard
        self._tx = tx

    def get(self, department_id: int) -> Department:
        department = self._departments.get_by_id(int(department_id))
        if not department:
            raise NotFoundError("department not found")
        return department

    def list(self, filters: ListFilter, page: PageRequest) -> Page[Department]:
        return self._departments.list_page(filters, page)

    def create(self, payload: Mapping[str, Any]) -> Department:
        name = require_non_empty(payload.get("name"), "name")
        company_id = require_id(payload.get("company_id"), "company_id")
        with self._tx.atomic():
            self._guard.ensure_references({"company_id": company_id}, DEPARTMENT_REFERENCES)
            department_id = self._departments.create(company_id=company_id, name=name, status=_status_of(payload))
        logger.info("created department %s", department_id)
        return self.get(department_id)

    def update(self, department_id: int, payload: Mapping[str, Any]) -> Department:
        changes: Dict[str, Any] = {}
        if payload.get("name") is not None:
            changes["name"] = require_non_empty(payload["name"], "name")
        if payload.get("company_id") is not None:
            changes["company_id"] = require_id(payload["company_id"], "company_id")
        if payload.get("status") is not None:
            changes["status"] = int(require_status(payload["status"]))

        with self._tx.atomic():
            current = self.get(department_id)
            self._guard.ensure_references(changes, DEPARTMENT_REFERENCES, current=current)
            self._departments.update(current.id, changes)
        return self.get(department_id)

    def delete(self, department_id: int) -> None:
        with self._tx.atomic():
            self.get(department_id)
            self._guard.ensure_deletable(EntityType.DEPARTMENT, int(department_id))
            self._departments.delete_by_id(int(department_id))
        logger.info("deleted department %s", department_id)

    def toggle_status(self, department_id: int) -> Department:
        department = self.get(department_id)
        self._departments.update(department.id, {"status": int(department.status.toggled())})
        return self.get(department_id)


class PositionService:
    def __init__(self, positions: PositionRepository, guard: IntegrityGuard, tx: TransactionManager):
        self._positions = positions
        self._guard = guard
        self._tx = tx

    def get(self, position_id: int) -> Position:
        position = self._positions.get_by_id(int(position_id))
        if not position:
            raise NotFoundError("position not found")
        return position

    def list(self, filters: ListFilter, page: PageRequest) -> Page[Position]:
        return self._positions.list_page(filters, page)

    def create(self, payload: Mapping[str, Any]) -> Position:
        name = require_non_empty(payload.get("name"), "name")
        position_id = self._positions.create(name=name, status=_status_of(payload))
        logger.info("created position %s", position_id)
        return self.get(position_id)

    def update(self, position_id: int, payload: Mapping[str, Any]) -> Position:
        self.get(position_id)
        changes: Dict[str, Any] = {}
        if payload.get("name") is not None:
            changes["name"] = require_non_empty(payload["name"], "name")
        if payload.get("status") is not None:
            changes["status"] = int(require_status(payload["status"]))
        self._positions.update(int(position_id), changes)
        return self.get(position_id)

    def delete(self, position_id: int) -> None:
        with self._tx.atomic():
            self.get(position_id)
            self._guard.ensure_deletable(EntityType.POSITION, int(position_id))
            self._positions.delete_by_id(int(position_id))
        logger.info("deleted position %s", position_id)

    def toggle_status(self, position_id: int) -> Position:
        position = self.get(position_id)
        self._positions.update(position.id, {"status": int(position.status.toggled())})
        return self.get(position_id)
