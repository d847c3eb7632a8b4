import pytest

from app.errors import InvalidOperationError
from app.models import Role
from app.repositories import RoleRepository, SqlAlchemyTransactionScope
from app.repositories.transaction import in_transaction_scope


def test_nested_scope_commits_only_at_the_outermost_level(db_session):
    tx = SqlAlchemyTransactionScope(db_session)
    roles = RoleRepository(db_session)

    outer = tx.begin()
    inner = tx.begin()
    roles.insert(Role(role_name="Nested"))
    tx.commit(inner)
    assert in_transaction_scope(db_session) is True
    assert db_session.in_transaction() is True

    tx.commit(outer)
    assert in_transaction_scope(db_session) is False
    assert roles.get_by_name("nested") is not None


def test_rollback_discards_scoped_writes(db_session):
    tx = SqlAlchemyTransactionScope(db_session)
    roles = RoleRepository(db_session)

    with pytest.raises(ValueError):
        with tx.transaction():
            roles.insert(Role(role_name="Doomed"))
            raise ValueError("abort")

    assert roles.get_by_name("Doomed") is None
    assert in_transaction_scope(db_session) is False


def test_finishing_a_handle_twice_is_rejected(db_session):
    tx = SqlAlchemyTransactionScope(db_session)
    handle = tx.begin()
    tx.commit(handle)
    with pytest.raises(InvalidOperationError):
        tx.rollback(handle)


def test_writes_outside_a_scope_commit_immediately(db_session):
    roles = RoleRepository(db_session)
    roles.insert(Role(role_name="Committed"))
    db_session.rollback()
    assert roles.get_by_name("Committed") is not None
