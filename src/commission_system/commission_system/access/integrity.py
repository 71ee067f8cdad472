"""Referential integrity checks run before destructive or re-pointing writes.

Nothing here relies on storage-level foreign keys. Callers run a check and the
write it guards inside ``TransactionManager.atomic()``; without locking reads a
concurrent insert/delete between the two can still slip through.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Protocol, Sequence, Tuple

from ..core.enums import EntityType
from ..core.exceptions import ConflictError, InvalidReferenceError

logger = logging.getLogger(__name__)


class ExistenceSource(Protocol):
    def exists(self, row_id: int) -> bool:
        raise NotImplementedError


class DependentSource(Protocol):
    def count_by(self, column: str, value: int) -> int:
        raise NotImplementedError


# entity -> ordered (dependent entity, referencing column) pairs
DEPENDENTS: dict[EntityType, Tuple[Tuple[EntityType, str], ...]] = {
    EntityType.COMPANY: (
        (EntityType.DEPARTMENT, "company_id"),
        (EntityType.EMPLOYEE, "company_id"),
    ),
    EntityType.DEPARTMENT: ((EntityType.EMPLOYEE, "department_id"),),
    EntityType.POSITION: ((EntityType.EMPLOYEE, "position_id"),),
    EntityType.PROJECT_PERMISSION: ((EntityType.COMMISSION_PROJECT, "project_perm_id"),),
    EntityType.COMMISSION_PROJECT: ((EntityType.REPORT, "commission_project_id"),),
    EntityType.EMPLOYEE: ((EntityType.REPORT, "employee_id"),),
    EntityType.USER: (),
    EntityType.REPORT: (),
}


@dataclass(frozen=True)
class DeleteCheck:
    allowed: bool
    blocking_count: int = 0
    blocking_type: Optional[EntityType] = None


@dataclass(frozen=True)
class ReferenceRule:
    """A foreign key field and the entity type it must point at."""

    field: str
    entity_type: EntityType


class IntegrityGuard:
    def __init__(
        self,
        *,
        existence: Mapping[EntityType, ExistenceSource],
        dependents: Mapping[EntityType, DependentSource],
    ):
        self._existence = dict(existence)
        self._dependents = dict(dependents)

    def can_delete(self, entity_type: EntityType, entity_id: int) -> DeleteCheck:
        for dependent_type, column in DEPENDENTS.get(entity_type, ()):
            count = self._dependents[dependent_type].count_by(column, int(entity_id))
            if count > 0:
                return DeleteCheck(allowed=False, blocking_count=count, blocking_type=dependent_type)
        return DeleteCheck(allowed=True)

    def ensure_deletable(self, entity_type: EntityType, entity_id: int) -> None:
        check = self.can_delete(entity_type, entity_id)
        if check.allowed:
            return
        blocking = check.blocking_type.label if check.blocking_type is not None else "dependent"
        logger.info(
            "delete of %s %s blocked by %d %s row(s)",
            entity_type.value,
            entity_id,
            check.blocking_count,
            blocking,
        )
        raise ConflictError(
            f"{entity_type.label} still has {check.blocking_count} {blocking} record(s)",
            blocking_type=check.blocking_type,
            blocking_count=check.blocking_count,
        )

    def reference_exists(self, entity_type: EntityType, entity_id: int) -> bool:
        """Existence only; a disabled row is still a valid target."""
        return bool(self._existence[entity_type].exists(int(entity_id)))

    def ensure_reference(self, entity_type: EntityType, entity_id: int, *, field: str) -> None:
        if not self.reference_exists(entity_type, entity_id):
            raise InvalidReferenceError(
                f"{entity_type.label} {entity_id} does not exist",
                field=field,
                entity_type=entity_type,
                entity_id=int(entity_id),
            )

    def ensure_references(
        self,
        values: Mapping[str, Any],
        rules: Sequence[ReferenceRule],
        *,
        current: Optional[Any] = None,
    ) -> None:
        """Check every rule whose field is present in ``values``.

        With ``current`` (an update), a field is only checked when its value
        differs from the stored one.
        """
        for rule in rules:
            if rule.field not in values or values[rule.field] is None:
                continue
            new_value = int(values[rule.field])
            if current is not None and getattr(current, rule.field) == new_value:
                continue
            self.ensure_reference(rule.entity_type, new_value, field=rule.field)
