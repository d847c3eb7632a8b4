from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from app.config import get_settings

DATABASE_URL = get_settings().database_url

# Lazy engine creation to avoid environment races (tests may set env vars before importing the app)
_engine = None


def _engine_kwargs(database_url: str) -> dict:
    kwargs: dict = {}
    if database_url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if ":memory:" in database_url or database_url in {"sqlite://", "sqlite:///"}:
            kwargs["poolclass"] = StaticPool
        return kwargs
    timeout_ms = get_settings().db_statement_timeout_ms
    if timeout_ms and database_url.startswith("postgresql"):
        kwargs["connect_args"] = {"options": f"-c statement_timeout={int(timeout_ms)}"}
    return kwargs


def get_engine():
    global _engine
    if _engine is None:
        _engine = create_engine(DATABASE_URL, **_engine_kwargs(DATABASE_URL))
    return _engine


def recreate_engine(new_database_url: str | None = None):
    """
    Re-create the SQLAlchemy engine with an optional new DATABASE_URL.

    Safe to call from test setup or admin scripts when the environment changes.
    Updates the module-level `engine` and re-binds `SessionLocal`.
    """
    global _engine, engine, DATABASE_URL
    if new_database_url:
        DATABASE_URL = new_database_url
    if _engine is not None:
        _engine.dispose()
    _engine = create_engine(DATABASE_URL, **_engine_kwargs(DATABASE_URL))
    engine = _engine
    SessionLocal.configure(bind=engine)
    return engine


engine = get_engine()

SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)
Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# Import models package to register models with Base
import app.models  # noqa: E402,F401
