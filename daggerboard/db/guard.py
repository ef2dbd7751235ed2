"""Single-writer lock around the store.

Every read and write of shared state goes through StoreGuard.locked(),
so a command's read-modify-write-publish sequence is atomic with respect
to commands issued from other windows.
"""

import logging
import threading
from collections.abc import Callable, Generator
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session as SQLAlchemySession

from ..errors import LockError, PersistenceError

logger = logging.getLogger(__name__)

DEFAULT_LOCK_TIMEOUT = 5.0

_AFTER_COMMIT_KEY = "after_commit"


def after_commit(session: SQLAlchemySession, callback: Callable[[], None]) -> None:
    """Queue callback to run once session commits, before the lock is released.

    Callbacks are dropped if the block fails and the session rolls back.
    """
    session.info.setdefault(_AFTER_COMMIT_KEY, []).append(callback)


def _run_after_commit(session: SQLAlchemySession) -> None:
    errors = []
    for callback in session.info.pop(_AFTER_COMMIT_KEY, []):
        try:
            callback()
        except Exception as e:
            errors.append(e)
    if errors:
        raise errors[0]


class StoreGuard:
    """Exclusive, timed lock that hands out one session per acquisition.

    Usage:
        with guard.locked() as db:
            row = db.get(Entity, entity_id)
            row.hp_current -= 1
            after_commit(db, lambda: bus.emit(...))
        # committed, callbacks run, session closed, lock released
    """

    def __init__(
        self,
        session_factory: Callable[[], SQLAlchemySession],
        timeout: float = DEFAULT_LOCK_TIMEOUT,
    ):
        self._session_factory = session_factory
        self._timeout = timeout
        self._lock = threading.Lock()

    @property
    def timeout(self) -> float:
        return self._timeout

    def is_held(self) -> bool:
        return self._lock.locked()

    @contextmanager
    def locked(self) -> Generator[SQLAlchemySession, None, None]:
        """Acquire the lock and yield a session that commits on success.

        Raises LockError if the lock is not obtained within the timeout,
        and PersistenceError (after rollback) if the database fails.
        Callbacks queued with after_commit() run after the commit while
        the lock is still held; an error they raise leaves the commit in place.
        """
        if not self._lock.acquire(timeout=self._timeout):
            raise LockError(f"Failed to acquire database lock within {self._timeout}s")
        try:
            session = self._session_factory()
            try:
                try:
                    yield session
                    session.commit()
                except SQLAlchemyError as e:
                    session.rollback()
                    session.info.pop(_AFTER_COMMIT_KEY, None)
                    logger.error(f"Storage failure, rolled back: {e}")
                    raise PersistenceError(str(e)) from e
                except BaseException:
                    session.rollback()
                    session.info.pop(_AFTER_COMMIT_KEY, None)
                    raise
                _run_after_commit(session)
            finally:
                session.close()
        finally:
            self._lock.release()
