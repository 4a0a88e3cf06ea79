"""User storage — uniqueness, soft vs hard delete.

Invariants:
    - (group_id, username) unique among live rows; violation raises ConflictError
    - a failed save leaves the first record untouched and the session usable
    - hard delete removes the row; soft delete only hides it
"""

import pytest

from core.errors import ConflictError
from models.user import User
from users.schemas import UserPatch


def test_duplicate_username_in_group_conflicts(service, store, create_users, load_user):
    first = create_users(1, group_id=1, prefix="fred", password="supu")[0]
    original = (first.password, first.salt)

    with pytest.raises(ConflictError):
        service.save(service.create(UserPatch(username="fred0", group_id=1, password="x")))

    stored = load_user(first.id)
    assert (stored.password, stored.salt) == original
    assert len(store.find_many(username="fred0")) == 1


def test_same_username_in_other_group_is_allowed(service, create_users):
    create_users(1, group_id=1, prefix="fred")
    other = service.save(service.create(UserPatch(username="fred0", group_id=2)))
    assert other.id


def test_session_usable_after_conflict(service, create_users):
    create_users(1, group_id=1, prefix="fred")
    with pytest.raises(ConflictError):
        service.save(service.create(UserPatch(username="fred0", group_id=1)))

    again = service.save(service.create(UserPatch(username="barney", group_id=1)))
    assert again.id


def test_hard_delete_removes_row(store, create_users, load_user):
    user = create_users(1)[0]
    store.delete(user)
    assert load_user(user.id) is None


def test_soft_delete_hides_row(store, create_users, load_user):
    user = create_users(1)[0]
    store.delete(user, hard=False)

    assert store.find_one(id=user.id) is None
    assert store.find_many() == []
    assert load_user(user.id).deleted_at is not None


def test_soft_deleted_username_can_be_reused(service, store, create_users):
    user = create_users(1, group_id=1, prefix="fred")[0]
    store.delete(user, hard=False)

    again = service.save(service.create(UserPatch(username="fred0", group_id=1)))
    assert again.id != user.id


def test_find_many_orders_by_id(store, create_users):
    create_users(3)
    ids = [u.id for u in store.find_many()]
    assert ids == sorted(ids)


def test_save_sets_timestamps(store):
    user = store.save(User(username="wilma", group_id=0))
    assert user.created_at is not None
    assert user.updated_at is not None
