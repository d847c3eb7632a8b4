import os
from types import SimpleNamespace

# Configure the app before it is imported anywhere. Use assignment, not
# setdefault, so a developer's .env or shell cannot leak into the tests.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BOOTSTRAP_ON_STARTUP"] = "false"
os.environ["JWT_SECRET"] = "test-secret-0123456789abcdef0123456789abcdef"
# Cheap Argon2 parameters keep the auth tests fast
os.environ["ARGON2_TIME_COST"] = "1"
os.environ["ARGON2_MEMORY_COST"] = "8192"
os.environ["ARGON2_PARALLELISM"] = "1"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.db import Base, get_db  # noqa: E402
from app.dependencies.authz import require_admin  # noqa: E402
from app.main import app  # noqa: E402
from app.services.factory import (  # noqa: E402
    build_menu_tree_service,
    build_permission_service,
    build_role_graph_service,
    build_user_service,
)


@pytest.fixture
def engine():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(engine):
    session = sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def menu_service(db_session):
    return build_menu_tree_service(db_session)


@pytest.fixture
def role_graph(db_session):
    return build_role_graph_service(db_session)


@pytest.fixture
def permissions(db_session):
    return build_permission_service(db_session)


@pytest.fixture
def users(db_session):
    return build_user_service(db_session)


@pytest.fixture
def anonymous_client(db_session):
    """Client wired to the test database with real authentication."""
    app.dependency_overrides[get_db] = lambda: db_session
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def client(db_session):
    """Client wired to the test database with the admin check bypassed."""
    app.dependency_overrides[get_db] = lambda: db_session
    app.dependency_overrides[require_admin] = lambda: SimpleNamespace(id=0, user_name="tester")
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
