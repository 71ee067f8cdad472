"""Employee scope: who a non-admin user may see.

A user's stored ``employee_scope`` is parsed once, when the user row is read,
into a :class:`Scope`. :class:`ScopeResolver` turns that scope into a concrete
:class:`Visibility` for a single request.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable, Optional, Protocol, Sequence

from ..core.constants import SCOPE_ALL_EMPLOYEES
from ..core.enums import ScopeKind
from ..core.exceptions import AuthorizationError

logger = logging.getLogger(__name__)

# ASCII digits with an optional sign; "1_0" or non-ASCII digits are not ids.
_SCOPE_TOKEN_RE = re.compile(r"^[+-]?[0-9]+\Z")


@dataclass(frozen=True)
class Scope:
    kind: ScopeKind
    employee_ids: frozenset[int] = frozenset()

    @classmethod
    def none(cls) -> "Scope":
        return cls(ScopeKind.NONE)

    @classmethod
    def all(cls) -> "Scope":
        return cls(ScopeKind.ALL)

    @classmethod
    def explicit(cls, employee_ids: Iterable[int]) -> "Scope":
        return cls(ScopeKind.EXPLICIT, frozenset(int(i) for i in employee_ids))

    @classmethod
    def parse(cls, raw: Optional[str]) -> "Scope":
        """Parse the stored descriptor.

        ``"0"`` means every employee, ``""`` means none, anything else is a
        comma-separated id list. Tokens that are not integers are dropped.
        """
        if raw is None or raw == "":
            return cls.none()
        if raw == SCOPE_ALL_EMPLOYEES:
            return cls.all()

        ids: set[int] = set()
        for token in raw.split(","):
            token = token.strip()
            if _SCOPE_TOKEN_RE.match(token):
                ids.add(int(token))
            else:
                logger.debug("dropping malformed scope token %r", token)
        return cls.explicit(ids)

    def encode(self) -> str:
        if self.kind == ScopeKind.ALL:
            return SCOPE_ALL_EMPLOYEES
        if self.kind == ScopeKind.NONE:
            return ""
        return ",".join(str(i) for i in sorted(self.employee_ids))


@dataclass(frozen=True)
class Principal:
    """Caller identity decoded from a bearer credential."""

    user_id: int
    is_admin: bool
    username: str = ""


@dataclass(frozen=True)
class Visibility:
    """Which employees a request may touch. ``employee_ids=None`` means all."""

    employee_ids: Optional[frozenset[int]] = None

    @classmethod
    def everyone(cls) -> "Visibility":
        return cls(None)

    @classmethod
    def only(cls, employee_ids: Iterable[int]) -> "Visibility":
        return cls(frozenset(int(i) for i in employee_ids))

    @property
    def is_all(self) -> bool:
        return self.employee_ids is None

    def allows(self, employee_id: int) -> bool:
        if self.employee_ids is None:
            return True
        return int(employee_id) in self.employee_ids

    def filter_ids(self) -> Optional[frozenset[int]]:
        """Value for store queries: None leaves the query unrestricted."""
        return self.employee_ids


class ScopeUser(Protocol):
    is_admin: bool
    employee_scope: Scope


class ScopeUserSource(Protocol):
    def get_by_id(self, user_id: int) -> Optional[ScopeUser]:
        raise NotImplementedError


class EmployeeIdSource(Protocol):
    def list_ids(self) -> Sequence[int]:
        raise NotImplementedError


class ScopeResolver:
    """Resolve a principal into the employees it may see for one request."""

    def __init__(self, users: ScopeUserSource, employees: EmployeeIdSource):
        self._users = users
        self._employees = employees

    def resolve(self, principal: Principal) -> Visibility:
        if principal.is_admin:
            return Visibility.everyone()

        user = self._users.get_by_id(int(principal.user_id))
        if user is None:
            raise AuthorizationError("user not found")
        return self.resolve_scope(user.employee_scope)

    def resolve_scope(self, scope: Scope) -> Visibility:
        if scope.kind == ScopeKind.ALL:
            # Snapshot: employees created after this call are not included.
            return Visibility.only(self._employees.list_ids())
        if scope.kind == ScopeKind.EXPLICIT:
            return Visibility.only(scope.employee_ids)
        return Visibility.only(())
