import random

import pytest

from app.errors import ConflictError, InvalidOperationError, NotFoundError
from app.models import Menu, MenuRole
from app.repositories import MenuRepository, MenuRoleRepository, SqlAlchemyTransactionScope
from app.schemas.menu_schemas import MenuCreate, MenuUpdate
from app.schemas.role_schemas import RoleCreate
from app.schemas.user_schemas import UserCreate
from app.services.menu_tree import MenuTreeService


def _create(service, key, parent_id=None, order=0, **extra):
    return service.create_menu(MenuCreate(menu_key=key, title=key.title(), parent_id=parent_id, menu_order=order, **extra))


def _update(service, menu_id, **changes):
    menu = service.get_menu(menu_id)
    data = {
        "parent_id": menu.parent_id,
        "menu_order": menu.menu_order,
        "menu_key": menu.menu_key,
        "title": menu.title,
        "url": menu.url,
        "levels": menu.levels,
        "use_new_icon": menu.use_new_icon,
    }
    data.update(changes)
    return service.update_menu(menu_id, MenuUpdate(**data))


def _assert_acyclic(db_session):
    parents = {menu.id: menu.parent_id for menu in db_session.query(Menu).all()}
    for start in parents:
        seen = set()
        current = start
        while current is not None:
            assert current not in seen, f"cycle through {current}"
            seen.add(current)
            current = parents.get(current)


def test_create_menu_defaults(menu_service):
    menu_id = _create(menu_service, "dashboard")
    menu = menu_service.get_menu(menu_id)
    assert menu.parent_id is None
    assert menu.use_new_icon is False
    assert menu.created_at is not None
    assert menu.updated_at is not None


def test_create_menu_with_missing_parent_fails(menu_service, db_session):
    with pytest.raises(NotFoundError):
        _create(menu_service, "child", parent_id=404)
    assert db_session.query(Menu).count() == 0


def test_create_menu_with_sentinel_parent_is_root(menu_service):
    menu_id = _create(menu_service, "root", parent_id=0)
    assert menu_service.get_menu(menu_id).parent_id is None


def test_duplicate_menu_key_conflicts(menu_service):
    _create(menu_service, "reports")
    with pytest.raises(ConflictError):
        _create(menu_service, "reports")


def test_update_preserves_created_at_and_bumps_updated_at(menu_service):
    menu_id = _create(menu_service, "settings")
    before = menu_service.get_menu(menu_id)
    created_at, updated_at = before.created_at, before.updated_at

    assert _update(menu_service, menu_id, title="Preferences") is True

    after = menu_service.get_menu(menu_id)
    assert after.title == "Preferences"
    assert after.created_at == created_at
    assert after.updated_at >= updated_at


def test_timestamps_reloaded_from_the_store_stay_comparable(menu_service, db_session):
    menu_id = _create(menu_service, "audit")
    _update(menu_service, menu_id, title="Audit log")
    db_session.expire_all()

    menu = menu_service.get_menu(menu_id)
    assert menu.created_at.tzinfo is not None
    assert menu.updated_at.tzinfo is not None
    assert menu.updated_at >= menu.created_at


def test_update_missing_menu_fails(menu_service):
    with pytest.raises(NotFoundError):
        menu_service.update_menu(
            999, MenuUpdate(menu_key="x", title="X", parent_id=None, menu_order=0)
        )


def test_reparent_under_descendant_is_rejected_and_leaves_parent_unchanged(menu_service):
    a = _create(menu_service, "a")
    b = _create(menu_service, "b", parent_id=a)
    c = _create(menu_service, "c", parent_id=b)

    with pytest.raises(InvalidOperationError):
        _update(menu_service, a, parent_id=c)

    assert menu_service.get_menu(a).parent_id is None


def test_reparent_to_self_is_rejected(menu_service):
    a = _create(menu_service, "a")
    with pytest.raises(InvalidOperationError):
        _update(menu_service, a, parent_id=a)


def test_reparent_to_missing_parent_fails(menu_service):
    a = _create(menu_service, "a")
    with pytest.raises(NotFoundError):
        _update(menu_service, a, parent_id=12345)


def test_valid_reparent_moves_subtree(menu_service):
    a = _create(menu_service, "a")
    b = _create(menu_service, "b", parent_id=a)
    x = _create(menu_service, "x")

    _update(menu_service, b, parent_id=x)

    assert [m.id for m in menu_service.get_children(x)] == [b]
    assert menu_service.has_children(a) is False


def test_random_reparenting_never_creates_a_cycle(menu_service, db_session):
    rng = random.Random(20261017)
    ids = [_create(menu_service, f"m{i}") for i in range(8)]
    for step in range(120):
        if step % 10 == 0:
            ids.append(_create(menu_service, f"extra{step}", parent_id=rng.choice(ids)))
        target = rng.choice(ids)
        new_parent = rng.choice(ids + [None])
        try:
            _update(menu_service, target, parent_id=new_parent)
        except InvalidOperationError:
            pass
        _assert_acyclic(db_session)


def test_delete_cascades_to_descendants_and_role_links(menu_service, role_graph, db_session):
    parent = _create(menu_service, "parent")
    first = _create(menu_service, "first", parent_id=parent)
    second = _create(menu_service, "second", parent_id=parent)
    grandchild = _create(menu_service, "grandchild", parent_id=second)
    keeper = _create(menu_service, "keeper")
    role_id = role_graph.create_role(RoleCreate(role_name="Editors"))
    role_graph.assign_role_to_menu(first, role_id)
    role_graph.assign_role_to_menu(second, role_id)
    role_graph.assign_role_to_menu(keeper, role_id)

    assert menu_service.delete_menu(parent) is True

    for menu_id in (parent, first, second, grandchild):
        with pytest.raises(NotFoundError):
            menu_service.get_menu(menu_id)
    remaining_links = db_session.query(MenuRole).all()
    assert [(link.menu_id, link.role_id) for link in remaining_links] == [(keeper, role_id)]
    assert [m.id for m in role_graph.get_menus_for_role(role_id)] == [keeper]


class _FailingMenuRepository(MenuRepository):
    def __init__(self, session, fail_on):
        super().__init__(session)
        self.fail_on = fail_on

    def delete(self, entity_id):
        if entity_id == self.fail_on:
            raise RuntimeError(f"cannot delete menu {entity_id}")
        return super().delete(entity_id)


def test_failed_cascade_delete_keeps_the_whole_subtree(menu_service, role_graph, db_session):
    root = _create(menu_service, "root")
    child = _create(menu_service, "child", parent_id=root)
    role_id = role_graph.create_role(RoleCreate(role_name="Viewers"))
    role_graph.assign_role_to_menu(child, role_id)
    service = MenuTreeService(
        _FailingMenuRepository(db_session, fail_on=root),
        MenuRoleRepository(db_session),
        SqlAlchemyTransactionScope(db_session),
    )

    # the child and its link go first, then the root delete fails
    with pytest.raises(RuntimeError):
        service.delete_menu(root)

    assert menu_service.get_menu(child).parent_id == root
    assert role_graph.menu_has_role(child, role_id) is True
    assert [m.id for m in menu_service.get_children(root)] == [child]


def test_delete_missing_menu_returns_false(menu_service):
    assert menu_service.delete_menu(321) is False


def test_children_and_has_children(menu_service):
    root = _create(menu_service, "root")
    child_b = _create(menu_service, "b", parent_id=root, order=2)
    child_a = _create(menu_service, "a", parent_id=root, order=1)
    _create(menu_service, "deep", parent_id=child_a)

    assert [m.id for m in menu_service.get_children(root)] == [child_a, child_b]
    assert menu_service.has_children(root) is True
    assert menu_service.has_children(child_b) is False


def test_all_for_tree_orders_by_levels_then_order(menu_service):
    deep = _create(menu_service, "deep", order=1, levels=2)
    top_b = _create(menu_service, "top-b", order=2, levels=1)
    top_a = _create(menu_service, "top-a", order=1, levels=1)
    assert [m.id for m in menu_service.get_all_for_tree()] == [top_a, top_b, deep]


def test_menu_tree_rebuilds_hierarchy(menu_service):
    root = _create(menu_service, "root", levels=1)
    child = _create(menu_service, "child", parent_id=root, levels=2)
    tree = menu_service.get_menu_tree()
    assert [node.id for node in tree] == [root]
    assert [node.id for node in tree[0].children] == [child]


def test_hierarchical_page_paths_and_depths(menu_service):
    root = _create(menu_service, "root", order=1)
    child = _create(menu_service, "child", parent_id=root, order=3)
    grandchild = _create(menu_service, "grandchild", parent_id=child, order=2)

    page = menu_service.get_hierarchical_page(page=1, page_size=10, sort_column="path")

    assert [item.menu.id for item in page.items] == [root, child, grandchild]
    assert [item.path for item in page.items] == ["1", "1.3", "1.3.2"]
    assert [item.depth for item in page.items] == [1, 2, 3]


def test_hierarchical_page_search_clamp_and_stable_order(menu_service):
    ids = [_create(menu_service, f"report-{i:02d}", order=5) for i in range(15)]
    _create(menu_service, "settings", order=5)

    first = menu_service.get_hierarchical_page(page=0, page_size=4, search_term="REPORT")
    assert first.page == 1
    assert first.total_count == 15
    assert [item.menu.id for item in first.items] == ids[:4]

    collected = []
    for number in range(1, 5):
        page = menu_service.get_hierarchical_page(page=number, page_size=4, search_term="report")
        assert page.total_count == 15
        collected.extend(item.menu.id for item in page.items)
    assert collected == ids


def test_hierarchical_page_rejects_unknown_sort_column(menu_service):
    _create(menu_service, "root")
    with pytest.raises(InvalidOperationError):
        menu_service.get_hierarchical_page(sort_column="password")


def test_menus_for_user_are_distinct_across_roles(menu_service, role_graph, users):
    reports = _create(menu_service, "reports", order=2)
    home = _create(menu_service, "home", order=1)
    hidden = _create(menu_service, "hidden", order=3)
    viewers = role_graph.create_role(RoleCreate(role_name="Viewers"))
    editors = role_graph.create_role(RoleCreate(role_name="Editors"))
    role_graph.assign_role_to_menu(reports, viewers)
    role_graph.assign_role_to_menu(reports, editors)
    role_graph.assign_role_to_menu(home, editors)
    user_id = users.create_user(UserCreate(user_name="carol", password="pw"))
    role_graph.assign_role_to_user(user_id, viewers)
    role_graph.assign_role_to_user(user_id, editors)

    visible = menu_service.get_menus_for_user(user_id)

    assert [m.id for m in visible] == [home, reports]
    assert hidden not in [m.id for m in visible]
