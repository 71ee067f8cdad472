from __future__ import annotations

import logging
from typing import Any, Dict, Mapping

from ..access.integrity import IntegrityGuard, ReferenceRule
from ..common.pagination import ListFilter, Page, PageRequest
from ..common.validators import require_id, require_non_empty, require_status
from ..core.enums import EntityType, Status
from ..core.exceptions import NotFoundError
from ..database.connection import TransactionManager
from .model import CommissionProject, ProjectPermission
from .repository import CommissionProjectRepository, ProjectPermissionRepository

logger = logging.getLogger(__name__)

PROJECT_REFERENCES = (ReferenceRule("project_perm_id", EntityType.PROJECT_PERMISSION),)


class ProjectPermissionService:
    def __init__(self, permissions: ProjectPermissionRepository, guard: IntegrityGuard, tx: TransactionManager):
        self._permissions = permissions
        self._guard = guard
        self._tx = tx

    def get(self, permission_id: int) -> ProjectPermission:
        permission = self._permissions.get_by_id(int(permission_id))
        if not permission:
            raise NotFoundError("project permission not found")
        return permission

    def list(self, filters: ListFilter, page: PageRequest) -> Page[ProjectPermission]:
        return self._permissions.list_page(filters, page)

    def create(self, payload: Mapping[str, Any]) -> ProjectPermission:
        name = require_non_empty(payload.get("permission"), "permission")
        status = require_status(payload["status"]) if payload.get("status") is not None else Status.ACTIVE
        permission_id = self._permissions.create(permission=name, status=status)
        logger.info("created project permission %s", permission_id)
        return self.get(permission_id)

    def update(self, permission_id: int, payload: Mapping[str, Any]) -> ProjectPermission:
        self.get(permission_id)
        changes: Dict[str, Any] = {}
        if payload.get("permission") is not None:
            changes["permission"] = require_non_empty(payload["permission"], "permission")
        if payload.get("status") is not None:
            changes["status"] = int(require_status(payload["status"]))
        self._permissions.update(int(permission_id), changes)
        return self.get(permission_id)

    def delete(self, permission_id: int) -> None:
        with self._tx.atomic():
            self.get(permission_id)
            self._guard.ensure_deletable(EntityType.PROJECT_PERMISSION, int(permission_id))
            self._permissions.delete_by_id(int(permission_id))
        logger.info("deleted project permission %s", permission_id)

    def toggle_status(self, permission_id: int) -> ProjectPermission:
        permission = self.get(permission_id)
        self._permissions.update(permission.id, {"status": int(permission.status.toggled())})
        return self.get(permission_id)


class CommissionProjectService:
    """Use case: manage commission fields that reports are booked against."""

    def __init__(self, projects: CommissionProjectRepository, guard: IntegrityGuard, tx: TransactionManager):
        self._projects = projects
        self._guard = guard
        self._tx = tx

    def get(self, project_id: int) -> CommissionProject:
        project = self._projects.get_by_id(int(project_id))
        if not project:
            raise NotFoundError("commission project not found")
        return project

    def list(self, filters: ListFilter, page: PageRequest) -> Page[CommissionProject]:
        return self._projects.list_page(filters, page)

    def create(self, payload: Mapping[str, Any]) -> CommissionProject:
        field_name = require_non_empty(payload.get("field_name"), "field_name")
        project_perm_id = require_id(payload.get("project_perm_id"), "project_perm_id")
        status = require_status(payload["status"]) if payload.get("status") is not None else Status.ACTIVE

        with self._tx.atomic():
            self._guard.ensure_references({"project_perm_id": project_perm_id}, PROJECT_REFERENCES)
            project_id = self._projects.create(field_name=field_name, project_perm_id=project_perm_id, status=status)
        logger.info("created commission project %s", project_id)
        return self.get(project_id)

    def update(self, project_id: int, payload: Mapping[str, Any]) -> CommissionProject:
        changes: Dict[str, Any] = {}
        if payload.get("field_name") is not None:
            changes["field_name"] = require_non_empty(payload["field_name"], "field_name")
        if payload.get("project_perm_id") is not None:
            changes["project_perm_id"] = require_id(payload["project_perm_id"], "project_perm_id")
        if payload.get("status") is not None:
            changes["status"] = int(require_status(payload["status"]))

        with self._tx.atomic():
            current = self.get(project_id)
            self._guard.ensure_references(changes, PROJECT_REFERENCES, current=current)
            self._projects.update(current.id, changes)
        return self.get(project_id)

    def delete(self, project_id: int) -> None:
        with self._tx.atomic():
            self.get(project_id)
            self._guard.ensure_deletable(EntityType.COMMISSION_PROJECT, int(project_id))
            self._projects.delete_by_id(int(project_id))
        logger.info("deleted commission project %s", project_id)

    def toggle_status(self, project_id: int) -> CommissionProject:
        project = self.get(project_id)
        self._projects.update(project.id, {"status": int(project.status.toggled())})
        return self.get(project_id)
