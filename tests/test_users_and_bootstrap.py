from datetime import UTC, datetime

import pytest

from app.config import Settings
from app.errors import ConflictError, NotFoundError
from app.models import Role, User, UserRole
from app.schemas.role_schemas import RoleCreate
from app.schemas.ui_element_schemas import UIElementCreate
from app.schemas.user_schemas import UserCreate, UserUpdate
from app.services.bootstrap import bootstrap_admin, initialize_admin_account
from app.utils.auth import verify_password


def test_create_user_hashes_password(users):
    user_id = users.create_user(UserCreate(user_name="judy", password="s3cret", email="judy@example.com"))
    user = users.get_user(user_id)
    assert user.password != "s3cret"
    assert verify_password("s3cret", user.password)
    assert users.authenticate("JUDY", "s3cret").id == user_id
    assert users.authenticate("judy", "wrong") is None


def test_user_names_are_unique_case_insensitively(users):
    users.create_user(UserCreate(user_name="Ken", password="pw"))
    with pytest.raises(ConflictError):
        users.create_user(UserCreate(user_name="ken", password="pw"))


def test_update_and_change_password(users):
    user_id = users.create_user(UserCreate(user_name="leo", password="old"))
    user = users.get_user(user_id)
    users.store_refresh_token(user, "token", datetime.now(UTC))

    users.update_user(user_id, UserUpdate(email="leo@example.com"))
    users.change_password(user_id, "new")

    user = users.get_user(user_id)
    assert user.email == "leo@example.com"
    assert verify_password("new", user.password)
    assert user.refresh_token is None


def test_delete_user_removes_roles_and_grants(users, role_graph, permissions, db_session):
    user_id = users.create_user(UserCreate(user_name="mallory", password="pw"))
    role_id = role_graph.create_role(RoleCreate(role_name="Temps"))
    element_id = permissions.create_element(UIElementCreate(element_key="btn-x", element_name="X"))
    role_graph.assign_role_to_user(user_id, role_id)
    permissions.grant_if_absent(element_id, user_id)

    assert users.delete_user(user_id) is True

    with pytest.raises(NotFoundError):
        users.get_user(user_id)
    assert db_session.query(UserRole).count() == 0
    assert permissions.get_grants_for_element(element_id) == []
    assert users.delete_user(user_id) is False


def _settings(**overrides):
    values = {"admin_username": "admin", "admin_password": "admin-pass", "admin_role_name": "Administrators"}
    values.update(overrides)
    return Settings(**values)


def test_bootstrap_creates_admin_role_and_membership(db_session):
    result = bootstrap_admin(db_session, _settings())

    assert (result.user_created, result.role_created, result.membership_created) == (True, True, True)
    admin = db_session.query(User).filter_by(user_name="admin").one()
    assert verify_password("admin-pass", admin.password)
    assert db_session.query(Role).filter_by(role_name="Administrators").count() == 1
    assert db_session.query(UserRole).filter_by(user_id=admin.id, role_id=result.role_id).count() == 1


def test_bootstrap_is_idempotent(db_session):
    first = bootstrap_admin(db_session, _settings())
    second = bootstrap_admin(db_session, _settings())

    assert (second.user_created, second.role_created, second.membership_created) == (False, False, False)
    assert (second.user_id, second.role_id) == (first.user_id, first.role_id)
    assert db_session.query(User).count() == 1
    assert db_session.query(Role).count() == 1
    assert db_session.query(UserRole).count() == 1


def test_bootstrap_repairs_missing_membership(db_session, users, role_graph):
    user_id = users.create_user(UserCreate(user_name="admin", password="existing"))
    role_graph.create_role(RoleCreate(role_name="administrators"))

    result = initialize_admin_account(users, role_graph, _settings())

    assert result.user_id == user_id
    assert (result.user_created, result.role_created, result.membership_created) == (False, False, True)
    # an existing admin keeps its password
    assert verify_password("existing", users.get_user(user_id).password)
