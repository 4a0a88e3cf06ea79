# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
User entity rules – resolve, search, merge and persist.

Invariants
----------
* ``password`` / ``salt`` only ever hold a scrypt hash and its salt.  An
  empty or absent password in a patch leaves both untouched.
* ``mfa_secret`` is non-empty exactly when ``mfa`` is true.  The flag and the
  secret change together inside :meth:`UserService.merge`.
* A merge that fails to derive credentials changes nothing on the record,
  so an aborted update can never be half-saved.

Known limitations
-----------------
* ``resolve`` by username ignores ``group_id`` while ``search`` honours it.
  Callers rely on the permissive lookup, so it stays.
* Read-merge-save is not one transaction: two concurrent updates of the same
  row can lose one of them.  Two concurrent creates of the same
  (group_id, username) are caught by the unique index instead.
"""

from typing import List, Optional

from core.errors import InvalidRequestError, NotFoundError
from core.security import generate_mfa_secret, hash_password
from models.user import User
from users.schemas import UserDescriptor, UserPatch
from users.store import MAX_ID, UserStore, in_id_range


class UserService:
    def __init__(self, store: UserStore):
        self._store = store

    # -- Lookup --------------------------------------------------------------

    def resolve(self, descriptor: UserDescriptor) -> Optional[User]:
        """Find the live record an id (preferred) or username points at."""
        if descriptor.id:
            # an id the column cannot hold names no record
            if not in_id_range(descriptor.id):
                return None
            return self._store.find_one(id=descriptor.id)
        if descriptor.username:
            return self._store.find_one(username=descriptor.username)
        return None

    def resolve_or_fail(self, descriptor: UserDescriptor) -> User:
        user = self.resolve(descriptor)
        if user is None:
            raise NotFoundError("user not found")
        return user

    def search(self, descriptor: UserDescriptor) -> List[User]:
        username = descriptor.username or ""
        group_id = descriptor.group_id or 0
        if group_id > MAX_ID:
            return []

        if username and group_id:
            return self._store.find_many(username=username, group_id=group_id)
        if username:
            return self._store.find_many(username=username)
        if group_id:
            return self._store.find_many(group_id=group_id)
        return self._store.find_many()

    # -- Mutation ------------------------------------------------------------

    def create(self, patch: UserPatch) -> User:
        """Build a new, unsaved record from *patch*."""
        if not patch.username:
            raise InvalidRequestError("username is required")
        user = User(
            group_id=0,
            password="",
            salt="",
            type="",
            email="",
            mfa_secret="",
        )
        return self.merge(user, patch)

    def merge(self, stored: User, patch: UserPatch) -> User:
        """
        Apply every field present in *patch* onto *stored*.

        Credentials are derived first; ``CredentialError`` propagates before
        any attribute has been assigned.
        """
        if patch.group_id is not None and not 0 <= patch.group_id <= MAX_ID:
            raise InvalidRequestError("group_id out of range")

        password = salt = None
        if patch.password:
            password, salt = hash_password(patch.password)

        mfa_secret = None
        if patch.mfa is True and not (stored.mfa and stored.mfa_secret):
            mfa_secret = generate_mfa_secret()
        elif patch.mfa is False:
            mfa_secret = ""

        if patch.username:
            stored.username = patch.username
        if patch.group_id is not None:
            stored.group_id = patch.group_id
        if patch.type is not None:
            stored.type = patch.type
        if patch.email is not None:
            stored.email = patch.email
        if patch.admin is not None:
            stored.admin = patch.admin
        if patch.mfa is not None:
            stored.mfa = patch.mfa
        if mfa_secret is not None:
            stored.mfa_secret = mfa_secret
        if password is not None:
            stored.password = password
            stored.salt = salt

        return stored

    def save(self, user: User) -> User:
        return self._store.save(user)

    def delete(self, user: User) -> None:
        self._store.delete(user, hard=True)
