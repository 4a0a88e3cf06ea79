"""Root conftest — shared test configuration and database fixtures.

Invariants:
    - Every test gets a fresh SQLite database file with the users table created
    - Sessions handed to tests are separate from the ones the dispatcher opens,
      so assertions read what was actually committed

Design Decisions:
    - File-backed SQLite (tmp_path) instead of :memory: so each session gets
      its own connection and transaction, like a real server
    - DATABASE_URL set before any application import: main.py builds its
      default engine at import time
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest  # noqa: E402

from database import Base, make_engine, make_session_factory  # noqa: E402
from models.user import User  # noqa: E402
from transport.router import RequestRouter  # noqa: E402
from users.dispatcher import UserDispatcher, user_handlers  # noqa: E402
from users.schemas import UserPatch  # noqa: E402
from users.service import UserService  # noqa: E402
from users.store import UserStore, scoped_store  # noqa: E402


@pytest.fixture
def engine(tmp_path):
    engine = make_engine(
        f"sqlite:///{tmp_path / 'users.db'}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return make_session_factory(engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def store(db):
    return UserStore(db)


@pytest.fixture
def service(store):
    return UserService(store)


@pytest.fixture
def dispatcher(session_factory):
    return UserDispatcher(scoped_store(session_factory))


@pytest.fixture
def router(dispatcher):
    return RequestRouter(user_handlers(dispatcher))


@pytest.fixture
def load_user(session_factory):
    """Read a row back through a brand-new session (None when absent)."""

    def _load(user_id):
        session = session_factory()
        try:
            return session.get(User, user_id)
        finally:
            session.close()

    return _load


@pytest.fixture
def create_users(service):
    """Persist *count* users through the entity rules and return them."""

    def _create(count, group_id=0, prefix="user", **fields):
        users = []
        for i in range(count):
            patch = UserPatch(username=f"{prefix}{i}", group_id=group_id, **fields)
            users.append(service.save(service.create(patch)))
        return users

    return _create
