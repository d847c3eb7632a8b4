import pytest

from app.errors import ConflictError, NotFoundError
from app.models import UIElementUserPermission
from app.repositories import (
    ElementPermissionRepository,
    SqlAlchemyTransactionScope,
    UIElementRepository,
    UserRepository,
)
from app.schemas.ui_element_schemas import UIElementCreate, UIElementUpdate
from app.schemas.user_schemas import UserCreate
from app.services.permissions import PermissionService
from app.utils.pagination import PageRequest


@pytest.fixture
def catalog(permissions):
    """Five elements; returns their ids in creation order."""
    return [
        permissions.create_element(UIElementCreate(element_key=f"btn-{i}", element_name=f"Button {i}"))
        for i in range(1, 6)
    ]


@pytest.fixture
def user_id(users):
    return users.create_user(UserCreate(user_name="ivan", password="pw", name="Ivan", email="ivan@example.com"))


def _granted(permissions, user_id):
    return sorted(grant.element_id for grant in permissions.get_grants_for_user(user_id))


def test_grant_if_absent_never_duplicates(permissions, catalog, user_id, db_session):
    assert permissions.grant_if_absent(catalog[0], user_id) is True
    assert permissions.grant_if_absent(catalog[0], user_id) is True
    assert db_session.query(UIElementUserPermission).count() == 1


def test_grant_requires_existing_element_and_user(permissions, catalog, user_id):
    with pytest.raises(NotFoundError):
        permissions.grant_if_absent(999, user_id)
    with pytest.raises(NotFoundError):
        permissions.grant_if_absent(catalog[0], 999)


def test_get_permission(permissions, catalog, user_id):
    permissions.grant_if_absent(catalog[1], user_id)

    grant = permissions.get_permission(catalog[1], user_id)
    assert grant.element_key == "btn-2"
    assert grant.user_name == "ivan"

    with pytest.raises(NotFoundError):
        permissions.get_permission(catalog[2], user_id)


def test_revoke_is_idempotent(permissions, catalog, user_id):
    permissions.grant_if_absent(catalog[0], user_id)
    assert permissions.revoke(catalog[0], user_id) is True
    assert permissions.revoke(catalog[0], user_id) is True
    assert permissions.has_permission(catalog[0], user_id) is False


def test_replace_user_grants_is_a_full_replace(permissions, catalog, user_id):
    for element_id in catalog[:3]:
        permissions.grant_if_absent(element_id, user_id)

    permissions.replace_user_grants(user_id, [])
    assert _granted(permissions, user_id) == []

    for element_id in catalog[:3]:
        permissions.grant_if_absent(element_id, user_id)
    permissions.replace_user_grants(user_id, [catalog[3], catalog[4]])
    assert _granted(permissions, user_id) == [catalog[3], catalog[4]]


def test_replace_user_grants_collapses_duplicate_ids(permissions, catalog, user_id):
    permissions.replace_user_grants(user_id, [catalog[0], catalog[0], catalog[1]])
    assert _granted(permissions, user_id) == [catalog[0], catalog[1]]


def test_replace_user_grants_with_unknown_element_changes_nothing(permissions, catalog, user_id):
    permissions.grant_if_absent(catalog[0], user_id)

    with pytest.raises(NotFoundError):
        permissions.replace_user_grants(user_id, [catalog[1], 4242])

    assert _granted(permissions, user_id) == [catalog[0]]


def test_replace_user_grants_for_unknown_user_fails(permissions, catalog):
    with pytest.raises(NotFoundError):
        permissions.replace_user_grants(999, [catalog[0]])


def test_batch_assignment_replaces_like_replace(permissions, catalog, user_id):
    permissions.grant_if_absent(catalog[0], user_id)
    permissions.assign_permissions_batch(user_id, [catalog[2]])
    assert _granted(permissions, user_id) == [catalog[2]]


def test_elements_with_effective_permission_lists_whole_catalog(permissions, catalog, user_id):
    permissions.grant_if_absent(catalog[1], user_id)
    permissions.grant_if_absent(catalog[3], user_id)

    listing = permissions.get_elements_with_effective_permission(user_id)

    assert [item.element.id for item in listing] == catalog
    assert [item.is_granted for item in listing] == [False, True, False, True, False]


def test_grants_for_element_include_grantee_identity(permissions, catalog, user_id):
    permissions.grant_if_absent(catalog[0], user_id)
    (grant,) = permissions.get_grants_for_element(catalog[0])
    assert (grant.user_name, grant.name, grant.email) == ("ivan", "Ivan", "ivan@example.com")


def test_delete_element_removes_its_grants(permissions, catalog, user_id, db_session):
    permissions.grant_if_absent(catalog[0], user_id)
    permissions.grant_if_absent(catalog[1], user_id)

    assert permissions.delete_element(catalog[0]) is True

    assert _granted(permissions, user_id) == [catalog[1]]
    assert db_session.query(UIElementUserPermission).filter_by(element_id=catalog[0]).count() == 0
    assert permissions.delete_element(catalog[0]) is False


def test_element_catalog_crud(permissions, catalog):
    with pytest.raises(ConflictError):
        permissions.create_element(UIElementCreate(element_key="btn-1", element_name="Again"))

    tab_id = permissions.create_element(UIElementCreate(element_key="tab-audit", element_name="Audit", element_type="tab"))
    permissions.update_element(tab_id, UIElementUpdate(description="Audit trail tab"))

    assert permissions.get_element(tab_id).description == "Audit trail tab"
    assert permissions.get_element_by_key("tab-audit").id == tab_id
    assert [e.id for e in permissions.get_elements_by_type("tab")] == [tab_id]
    with pytest.raises(ConflictError):
        permissions.update_element(tab_id, UIElementUpdate(element_key="btn-2"))

    page = permissions.get_elements_page(PageRequest(page=1, page_size=3, search_term="button"))
    assert page.total_count == 5
    assert len(page.items) == 3


class _FailingGrantRepository(ElementPermissionRepository):
    def insert(self, element_id, user_id):
        raise RuntimeError("insert failed")


def test_failed_replace_keeps_previous_grants(permissions, catalog, user_id, db_session):
    permissions.grant_if_absent(catalog[0], user_id)
    permissions.grant_if_absent(catalog[1], user_id)
    service = PermissionService(
        UIElementRepository(db_session),
        UserRepository(db_session),
        _FailingGrantRepository(db_session),
        SqlAlchemyTransactionScope(db_session),
    )

    # delete_all_for_user runs before the failing insert
    with pytest.raises(RuntimeError):
        service.replace_user_grants(user_id, [catalog[4]])

    assert _granted(permissions, user_id) == [catalog[0], catalog[1]]
