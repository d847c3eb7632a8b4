"""
Explicit transaction boundaries over a SQLAlchemy ``Session``.

Repositories commit single-row writes immediately unless a scope opened by
``SqlAlchemyTransactionScope`` is active on the same session, in which case
they only flush and the outermost scope decides between commit and rollback.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass

from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from app.errors import InvalidOperationError, TransientError

logger = logging.getLogger(__name__)

_DEPTH_KEY = "authz_tx_depth"


@dataclass
class TransactionHandle:
    outermost: bool
    finished: bool = False


def in_transaction_scope(session: Session) -> bool:
    return session.info.get(_DEPTH_KEY, 0) > 0


def commit_unless_scoped(session: Session) -> None:
    """Flush inside an open scope, commit otherwise."""
    if in_transaction_scope(session):
        session.flush()
        return
    try:
        session.commit()
    except OperationalError as exc:
        session.rollback()
        logger.error("Commit failed, database unavailable: %s", exc, exc_info=True)
        raise TransientError("database unavailable") from exc
    except Exception:
        session.rollback()
        raise


class SqlAlchemyTransactionScope:
    def __init__(self, session: Session):
        self.session = session

    def begin(self) -> TransactionHandle:
        depth = self.session.info.get(_DEPTH_KEY, 0)
        self.session.info[_DEPTH_KEY] = depth + 1
        return TransactionHandle(outermost=depth == 0)

    def _release(self, handle: TransactionHandle) -> None:
        if handle.finished:
            raise InvalidOperationError("transaction handle already finished")
        handle.finished = True
        self.session.info[_DEPTH_KEY] = max(0, self.session.info.get(_DEPTH_KEY, 1) - 1)

    def commit(self, handle: TransactionHandle) -> None:
        self._release(handle)
        if not handle.outermost:
            return
        try:
            self.session.commit()
        except OperationalError as exc:
            self.session.rollback()
            logger.error("Transaction commit failed, database unavailable: %s", exc, exc_info=True)
            raise TransientError("database unavailable") from exc
        except Exception:
            self.session.rollback()
            raise

    def rollback(self, handle: TransactionHandle) -> None:
        self._release(handle)
        # An inner rollback discards the whole unit; the outer scope re-raises anyway.
        self.session.rollback()

    @contextmanager
    def transaction(self):
        handle = self.begin()
        try:
            yield handle
        except OperationalError as exc:
            self.rollback(handle)
            logger.error("Transaction rolled back, database unavailable: %s", exc, exc_info=True)
            raise TransientError("database unavailable") from exc
        except BaseException:
            self.rollback(handle)
            raise
        self.commit(handle)
