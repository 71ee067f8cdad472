from __future__ import annotations

import pytest

from src.commission_system.commission_system.access.scope import Scope
from src.commission_system.commission_system.core.enums import ScopeKind
from src.commission_system.commission_system.core.exceptions import (
    AuthenticationError,
    ConflictError,
    ValidationError,
)
from src.commission_system.commission_system.users.service import parse_scope_input


def test_login_returns_token_for_valid_credentials(container):
    result = container.auth_service.login("admin", "admin123")
    principal = container.authorizer.decode(result.token)

    assert principal.user_id == result.user.id
    assert principal.is_admin is True


@pytest.mark.parametrize("username,password", [("admin", "wrong"), ("ghost", "admin123"), ("", "")])
def test_login_rejects_bad_credentials(container, username, password):
    with pytest.raises(AuthenticationError):
        container.auth_service.login(username, password)


def test_login_rejects_disabled_users(container):
    container.user_service.toggle_status(1)
    with pytest.raises(AuthenticationError):
        container.auth_service.login("admin", "admin123")


def test_login_tolerates_unusable_hash(container, repos):
    repos.users.update(2, {"password_hash": "not-a-hash"})
    with pytest.raises(AuthenticationError):
        container.auth_service.login("user1", "user123")


def test_create_user_encodes_scope(container):
    user = container.user_service.create(
        {"username": "user9", "name": "Nine", "password": "secret9", "employee_scope": [5, 2, 2]}
    )
    assert user.employee_scope == Scope.explicit({2, 5})
    assert user.is_admin is False
    assert user.password_hash != "secret9"


def test_duplicate_username_conflicts(container):
    with pytest.raises(ConflictError) as exc:
        container.user_service.create({"username": "admin", "name": "Again", "password": "secret9"})
    assert exc.value.field == "username"

    with pytest.raises(ConflictError):
        container.user_service.update(2, {"username": "admin"})


def test_short_password_is_rejected(container):
    with pytest.raises(ValidationError):
        container.user_service.create({"username": "user9", "name": "Nine", "password": "123"})


def test_update_scope_and_profile(container):
    user = container.user_service.update(2, {"employee_scope": "0"})
    assert user.employee_scope.kind == ScopeKind.ALL

    profile = container.auth_service.update_profile(2, {"name": "Renamed"})
    assert profile.name == "Renamed"


@pytest.mark.parametrize(
    "raw,expected",
    [
        (None, Scope.none()),
        ("0", Scope.all()),
        (0, Scope.all()),
        ([1, "x", 3], Scope.explicit({1, 3})),
        (" 4,5 ", Scope.explicit({4, 5})),
    ],
)
def test_parse_scope_input(raw, expected):
    assert parse_scope_input(raw) == expected


def test_parse_scope_input_rejects_objects():
    with pytest.raises(ValidationError):
        parse_scope_input({"ids": [1]})


@pytest.mark.parametrize("username,password", [(123, "admin123"), ("admin", 123456), (None, None)])
def test_login_rejects_non_text_credentials(container, username, password):
    with pytest.raises(AuthenticationError):
        container.auth_service.login(username, password)


def test_non_text_password_is_a_validation_error(container):
    with pytest.raises(ValidationError):
        container.user_service.create({"username": "user9", "name": "Nine", "password": 1234567})
    with pytest.raises(ValidationError):
        container.user_service.update(2, {"password": 1234567})
