from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..access.authorizer import RequestAuthorizer
from ..access.scope import Scope
from ..common.pagination import ListFilter, Page, PageRequest
from ..common.validators import require_min_length, require_non_empty, require_status
from ..core.enums import Status
from ..core.exceptions import AuthenticationError, ConflictError, NotFoundError, ValidationError
from .model import User
from .repository import UserRepository

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


def parse_scope_input(value: Any) -> Scope:
    """Accept the stored text form or a list of ids from API payloads."""
    if value is None:
        return Scope.none()
    if isinstance(value, (list, tuple)):
        return Scope.parse(",".join(str(v) for v in value))
    if isinstance(value, int) and not isinstance(value, bool):
        return Scope.parse(str(value))
    if isinstance(value, str):
        return Scope.parse(value.strip())
    raise ValidationError("employee_scope must be a string or a list of ids")


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes"}
    return bool(value)


@dataclass(frozen=True)
class LoginResult:
    token: str
    user: User


class AuthService:
    """Use case: authenticate user (login) and manage one's own profile."""

    def __init__(self, users: UserRepository, authorizer: RequestAuthorizer):
        self._users = users
        self._authorizer = authorizer

    def login(self, username: Any, password: Any) -> LoginResult:
        if not isinstance(username, str) or not isinstance(password, str):
            raise AuthenticationError("invalid username or password")
        username = username.strip()
        user = self._users.get_by_username(username) if username else None
        if not user or not user.is_active:
            raise AuthenticationError("invalid username or password")

        try:
            ok = check_password_hash(user.password_hash, password)
        except ValueError:
            # e.g. placeholder or corrupted hashes
            ok = False
        if not ok:
            logger.info("failed login for %s", username)
            raise AuthenticationError("invalid username or password")

        token = self._authorizer.issue(user_id=user.id, username=user.username, is_admin=user.is_admin)
        return LoginResult(token=token, user=user)

    def profile(self, user_id: int) -> User:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("user not found")
        return user

    def update_profile(self, user_id: int, payload: Mapping[str, Any]) -> User:
        user = self.profile(user_id)
        if payload.get("name"):
            self._users.update(user.id, {"name": require_non_empty(payload["name"], "name")})
        return self.profile(user_id)


class UserService:
    """Use case: manage users (admin)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def get(self, user_id: int) -> User:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("user not found")
        return user

    def list(self, filters: ListFilter, page: PageRequest) -> Page[User]:
        return self._users.list_page(filters, page)

    def _ensure_username_free(self, username: str, *, exclude_id: Optional[int] = None) -> None:
        existing = self._users.get_by_username(username)
        if existing and existing.id != exclude_id:
            raise ConflictError("username already exists", field="username")

    def create(self, payload: Mapping[str, Any]) -> User:
        username = require_non_empty(payload.get("username"), "username")
        name = require_non_empty(payload.get("name"), "name")
        password = payload.get("password") or ""
        require_min_length(password, "password", MIN_PASSWORD_LENGTH)
        scope = parse_scope_input(payload.get("employee_scope"))
        status = require_status(payload["status"]) if payload.get("status") is not None else Status.ACTIVE

        self._ensure_username_free(username)
        user_id = self._users.create_user(
            username=username,
            name=name,
            password_hash=generate_password_hash(password),
            is_admin=_as_bool(payload.get("is_admin", False)),
            employee_scope=scope.encode(),
            status=status,
        )
        logger.info("created user %s (%s)", user_id, username)
        return self.get(user_id)

    def update(self, user_id: int, payload: Mapping[str, Any]) -> User:
        user = self.get(user_id)
        changes: Dict[str, Any] = {}
        if payload.get("username") is not None:
            username = require_non_empty(payload["username"], "username")
            if username != user.username:
                self._ensure_username_free(username, exclude_id=user.id)
                changes["username"] = username
        if payload.get("name") is not None:
            changes["name"] = require_non_empty(payload["name"], "name")
        if payload.get("password"):
            require_min_length(payload["password"], "password", MIN_PASSWORD_LENGTH)
            changes["password_hash"] = generate_password_hash(payload["password"])
        if "is_admin" in payload:
            changes["is_admin"] = 1 if _as_bool(payload["is_admin"]) else 0
        if "employee_scope" in payload:
            changes["employee_scope"] = parse_scope_input(payload["employee_scope"]).encode()
        if payload.get("status") is not None:
            changes["status"] = int(require_status(payload["status"]))

        self._users.update(user.id, changes)
        return self.get(user_id)

    def delete(self, user_id: int) -> None:
        # Users have no dependents.
        user = self.get(user_id)
        self._users.delete_by_id(user.id)
        logger.info("deleted user %s", user_id)

    def toggle_status(self, user_id: int) -> User:
        user = self.get(user_id)
        self._users.update(user.id, {"status": int(user.status.toggled())})
        return self.get(user_id)
