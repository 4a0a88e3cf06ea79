# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
Storage capability for User rows.

``UserStore`` is the only place that talks to the SQLAlchemy session.  Every
query excludes soft-deleted rows; the uniqueness index is the sole guard
against two concurrent creates of the same (group_id, username), and its
violation surfaces as ``ConflictError``.
"""

from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Callable, ContextManager, Iterator, List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from core.errors import ConflictError, StorageError
from core.logger import logger
from models.user import User


# id and group_id are signed 64-bit columns
MAX_ID = 2**63 - 1


def in_id_range(value: int) -> bool:
    return 0 < value <= MAX_ID


class UserStore:
    def __init__(self, db: Session):
        self._db = db

    def _live(self, **criteria):
        return (
            self._db.query(User)
            .filter(User.deleted_at.is_(None))
            .filter_by(**criteria)
            .order_by(User.id)
        )

    def find_one(self, **criteria) -> Optional[User]:
        try:
            return self._live(**criteria).first()
        except SQLAlchemyError as exc:
            raise StorageError("user lookup failed") from exc

    def find_many(self, **criteria) -> List[User]:
        try:
            return self._live(**criteria).all()
        except SQLAlchemyError as exc:
            raise StorageError("user search failed") from exc

    def save(self, user: User) -> User:
        """Insert or update *user* and reload server-set columns."""
        self._db.add(user)
        self._commit()
        self._db.refresh(user)
        return user

    def delete(self, user: User, hard: bool = True) -> None:
        """Remove the row (hard) or stamp ``deleted_at`` (soft)."""
        if hard:
            self._db.delete(user)
        else:
            user.deleted_at = datetime.now(timezone.utc)
        self._commit()

    def _commit(self) -> None:
        try:
            self._db.commit()
        except IntegrityError as exc:
            self._db.rollback()
            logger.warning("user store: constraint violated: %s", exc.orig)
            raise ConflictError("user already exists in group") from exc
        except SQLAlchemyError as exc:
            self._db.rollback()
            raise StorageError("database failure") from exc


StoreScope = Callable[[], ContextManager[UserStore]]


def scoped_store(session_factory: sessionmaker) -> StoreScope:
    """
    Build a callable that yields a ``UserStore`` on a fresh session and
    closes the session afterwards.  One scope per request.
    """

    @contextmanager
    def _scope() -> Iterator[UserStore]:
        db = session_factory()
        try:
            yield UserStore(db)
        finally:
            db.close()

    return _scope
