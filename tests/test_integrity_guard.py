from __future__ import annotations

import pytest

from src.commission_system.commission_system.access.integrity import ReferenceRule
from src.commission_system.commission_system.core.enums import EntityType, Status
from src.commission_system.commission_system.core.exceptions import ConflictError, InvalidReferenceError


def test_company_with_departments_cannot_be_deleted(container):
    check = container.integrity_guard.can_delete(EntityType.COMPANY, 1)
    assert not check.allowed
    assert check.blocking_type == EntityType.DEPARTMENT
    assert check.blocking_count == 1


def test_company_checks_employees_after_departments(container, repos):
    repos.departments.delete_by_id(1)
    check = container.integrity_guard.can_delete(EntityType.COMPANY, 1)
    assert check.blocking_type == EntityType.EMPLOYEE
    assert check.blocking_count == 2


def test_unreferenced_entity_is_deletable(container, repos):
    position_id = repos.positions.create(name="Unused", status=Status.ACTIVE)
    assert container.integrity_guard.can_delete(EntityType.POSITION, position_id).allowed


def test_ensure_deletable_raises_conflict(container):
    with pytest.raises(ConflictError) as exc:
        container.integrity_guard.ensure_deletable(EntityType.PROJECT_PERMISSION, 1)
    assert exc.value.blocking_type == EntityType.COMMISSION_PROJECT
    assert exc.value.blocking_count == 2


def test_missing_reference_names_the_field(container):
    with pytest.raises(InvalidReferenceError) as exc:
        container.integrity_guard.ensure_reference(EntityType.COMPANY, 99, field="company_id")
    assert exc.value.field == "company_id"
    assert exc.value.entity_id == 99


def test_disabled_rows_are_still_valid_references(container, repos):
    repos.companies.update(2, {"status": 0})
    assert container.integrity_guard.reference_exists(EntityType.COMPANY, 2)


def test_update_only_checks_changed_foreign_keys(container, repos):
    rules = (ReferenceRule("company_id", EntityType.COMPANY),)
    department = repos.departments.get_by_id(1)
    # The stored company vanished; an update that keeps it is not re-validated.
    repos.companies.rows.pop(1)

    container.integrity_guard.ensure_references({"company_id": 1}, rules, current=department)
    with pytest.raises(InvalidReferenceError):
        container.integrity_guard.ensure_references({"company_id": 1}, rules)


def test_conflict_message_names_the_blocking_type(container):
    with pytest.raises(ConflictError, match="department still has 1 employee record"):
        container.integrity_guard.ensure_deletable(EntityType.DEPARTMENT, 2)
