from app.config import get_settings
from app.schemas.user_schemas import UserCreate
from app.services.bootstrap import bootstrap_admin


def _login(client, username, password):
    return client.post("/api/auth/login", data={"username": username, "password": password})


def test_login_me_and_refresh_rotation(anonymous_client, db_session):
    bootstrap_admin(db_session)
    settings = get_settings()

    resp = _login(anonymous_client, settings.admin_username, settings.admin_password)
    assert resp.status_code == 200, resp.json()
    tokens = resp.json()
    assert tokens["user"]["is_admin"] is True
    assert settings.admin_role_name in tokens["user"]["roles"]

    me = anonymous_client.get("/api/auth/me", headers={"Authorization": f"Bearer {tokens['access_token']}"})
    assert me.status_code == 200, me.json()
    assert me.json()["user_name"] == settings.admin_username

    rotated = anonymous_client.post("/api/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert rotated.status_code == 200, rotated.json()
    assert rotated.json()["refresh_token"] != tokens["refresh_token"]

    # the old refresh token was replaced on the user row
    replay = anonymous_client.post("/api/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert replay.status_code == 401


def test_refresh_token_cannot_be_used_as_bearer(anonymous_client, db_session):
    bootstrap_admin(db_session)
    settings = get_settings()
    tokens = _login(anonymous_client, settings.admin_username, settings.admin_password).json()

    resp = anonymous_client.get("/api/auth/me", headers={"Authorization": f"Bearer {tokens['refresh_token']}"})
    assert resp.status_code == 401


def test_invalid_credentials(anonymous_client, users):
    users.create_user(UserCreate(user_name="rachel", password="right"))
    assert _login(anonymous_client, "rachel", "wrong").status_code == 401
    assert _login(anonymous_client, "nobody", "right").status_code == 401


def test_admin_routes_require_admin_role(anonymous_client, users):
    assert anonymous_client.get("/api/admin/menus").status_code == 401

    users.create_user(UserCreate(user_name="sam", password="pw"))
    token = _login(anonymous_client, "sam", "pw").json()["access_token"]

    resp = anonymous_client.get("/api/admin/menus", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 403


def test_admin_can_reach_admin_routes(anonymous_client, db_session):
    bootstrap_admin(db_session)
    settings = get_settings()
    token = _login(anonymous_client, settings.admin_username, settings.admin_password).json()["access_token"]

    resp = anonymous_client.get("/api/admin/roles", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 200
    assert [role["role_name"] for role in resp.json()["items"]] == [settings.admin_role_name]


def test_health(anonymous_client):
    resp = anonymous_client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["database"] == "connected"


def test_application_is_only_exposed_by_app_main():
    import app as package
    from app.main import app as application

    assert not hasattr(package, "app")
    assert application.title == get_settings().app_name
