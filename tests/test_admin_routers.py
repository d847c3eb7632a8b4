from types import SimpleNamespace

from app.dependencies.authz import get_current_user
from app.main import app
from app.schemas.role_schemas import RoleCreate
from app.schemas.user_schemas import UserCreate


def _create_menu(client, key, parent_id=None, order=0):
    resp = client.post(
        "/api/admin/menus",
        json={"menu_key": key, "title": key.title(), "parent_id": parent_id, "menu_order": order},
    )
    assert resp.status_code == 201, resp.json()
    return resp.json()["id"]


def test_menu_crud_and_tree(client):
    root = _create_menu(client, "admin", order=1)
    child = _create_menu(client, "users", parent_id=root, order=2)

    resp = client.get(f"/api/admin/menus/{child}")
    assert resp.status_code == 200
    assert resp.json()["use_new_icon"] is False

    resp = client.put(
        f"/api/admin/menus/{child}",
        json={"menu_key": "users", "title": "People", "parent_id": root, "menu_order": 2, "url": "/admin/people"},
    )
    assert resp.status_code == 200, resp.json()
    assert resp.json()["title"] == "People"

    tree = client.get("/api/admin/menus/tree").json()
    assert [node["id"] for node in tree] == [root]
    assert [node["title"] for node in tree[0]["children"]] == ["People"]

    assert client.get(f"/api/admin/menus/{root}/has-children").json()["has_children"] is True


def test_menu_validation_errors_map_to_status_codes(client):
    a = _create_menu(client, "a")
    b = _create_menu(client, "b", parent_id=a)

    resp = client.put(f"/api/admin/menus/{a}", json={"menu_key": "a", "title": "A", "parent_id": b, "menu_order": 0})
    assert resp.status_code == 400
    assert "cycle" in resp.json()["detail"]

    resp = client.post("/api/admin/menus", json={"menu_key": "c", "title": "C", "parent_id": 999})
    assert resp.status_code == 404

    resp = client.post("/api/admin/menus", json={"menu_key": "a", "title": "Dup"})
    assert resp.status_code == 409

    assert client.get("/api/admin/menus/12345").status_code == 404


def test_delete_menu(client):
    root = _create_menu(client, "root")
    _create_menu(client, "leaf", parent_id=root)

    assert client.delete(f"/api/admin/menus/{root}").status_code == 204
    assert client.delete(f"/api/admin/menus/{root}").status_code == 404
    assert client.get("/api/admin/menus/all").json() == []


def test_hierarchy_endpoint_pages_with_paths(client):
    root = _create_menu(client, "root", order=1)
    for i in range(3):
        _create_menu(client, f"child-{i}", parent_id=root, order=i + 1)

    resp = client.get("/api/admin/menus/hierarchy", params={"page": 1, "page_size": 2, "sort": "path"})
    assert resp.status_code == 200, resp.json()
    body = resp.json()
    assert body["total_count"] == 4
    assert body["total_pages"] == 2
    assert [item["path"] for item in body["items"]] == ["1", "1.1"]
    assert body["items"][1]["depth"] == 2

    assert client.get("/api/admin/menus/hierarchy", params={"sort": "nope"}).status_code == 400


def test_flat_menu_page_search(client):
    for key in ("sales-report", "stock-report", "settings"):
        _create_menu(client, key)

    body = client.get("/api/admin/menus", params={"search": "report", "search_fields": "menu_key"}).json()
    assert body["total_count"] == 2
    assert sorted(item["menu_key"] for item in body["items"]) == ["sales-report", "stock-report"]


def test_role_assignment_endpoints_are_idempotent(client):
    menu_id = _create_menu(client, "billing")
    role = client.post("/api/admin/roles", json={"role_name": "Finance", "role_comment": "Money people"})
    assert role.status_code == 201, role.json()
    role_id = role.json()["id"]

    for _ in range(2):
        resp = client.put(f"/api/admin/menus/{menu_id}/roles/{role_id}")
        assert resp.status_code == 200
        assert resp.json()["success"] is True

    assert [r["id"] for r in client.get(f"/api/admin/menus/{menu_id}/roles").json()] == [role_id]
    assert client.put(f"/api/admin/menus/{menu_id}/roles/999").status_code == 404

    page = client.get("/api/admin/menu-roles", params={"search": "fin"}).json()
    assert page["total_count"] == 1
    assert page["items"][0]["menu_key"] == "billing"

    assert client.delete(f"/api/admin/roles/{role_id}").status_code == 204
    assert client.get(f"/api/admin/menus/{menu_id}/roles").json() == []


def test_user_endpoints_and_grant_replacement(client):
    resp = client.post("/api/admin/users", json={"user_name": "nina", "password": "pw", "email": "nina@example.com"})
    assert resp.status_code == 201, resp.json()
    user = resp.json()
    assert "password" not in user

    element_ids = []
    for key in ("btn-a", "btn-b", "btn-c"):
        created = client.post("/api/admin/ui-elements", json={"element_key": key, "element_name": key.upper()})
        assert created.status_code == 201, created.json()
        element_ids.append(created.json()["id"])

    resp = client.put(f"/api/admin/users/{user['id']}/permissions", json={"element_ids": element_ids[:2]})
    assert resp.status_code == 200, resp.json()

    listing = client.get(f"/api/admin/users/{user['id']}/elements").json()
    assert [item["is_granted"] for item in listing] == [True, True, False]

    resp = client.put(f"/api/admin/users/{user['id']}/permissions", json={"element_ids": [element_ids[2]]})
    assert resp.status_code == 200
    grants = client.get(f"/api/admin/users/{user['id']}/permissions").json()
    assert [g["element_id"] for g in grants] == [element_ids[2]]

    resp = client.put(f"/api/admin/users/{user['id']}/permissions", json={"element_ids": [424242]})
    assert resp.status_code == 404

    assert client.get(f"/api/admin/ui-elements/{element_ids[2]}/grants/{user['id']}").status_code == 200
    assert client.delete(f"/api/admin/ui-elements/{element_ids[2]}/grants/{user['id']}").json()["success"] is True
    assert client.get(f"/api/admin/ui-elements/{element_ids[2]}/grants/{user['id']}").status_code == 404


def test_user_role_membership_page(client, users, role_graph):
    role_id = role_graph.create_role(RoleCreate(role_name="Support"))
    for name in ("olga", "oscar", "pete"):
        user_id = users.create_user(UserCreate(user_name=name, password="pw"))
        assert client.put(f"/api/admin/users/{user_id}/roles/{role_id}").status_code == 200

    body = client.get("/api/admin/user-roles", params={"role_id": role_id, "search": "o"}).json()
    assert body["total_count"] == 3  # "o" also matches the role name "Support"

    body = client.get("/api/admin/user-roles", params={"search": "os", "search_fields": "user_name"}).json()
    assert [item["user_name"] for item in body["items"]] == ["oscar"]


def test_my_menus_follow_role_membership(client, users, role_graph, menu_service):
    from app.schemas.menu_schemas import MenuCreate

    visible = menu_service.create_menu(MenuCreate(menu_key="home", title="Home"))
    menu_service.create_menu(MenuCreate(menu_key="secret", title="Secret"))
    role_id = role_graph.create_role(RoleCreate(role_name="Staff"))
    user_id = users.create_user(UserCreate(user_name="quinn", password="pw"))
    role_graph.assign_role_to_menu(visible, role_id)
    role_graph.assign_role_to_user(user_id, role_id)

    app.dependency_overrides[get_current_user] = lambda: SimpleNamespace(id=user_id, user_name="quinn")

    resp = client.get("/api/menus/mine")
    assert resp.status_code == 200
    assert [m["menu_key"] for m in resp.json()] == ["home"]
    assert [node["menu_key"] for node in client.get("/api/menus/mine/tree").json()] == ["home"]
