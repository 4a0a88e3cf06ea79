# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
Error taxonomy for the user store.

Every failure that can leave the dispatcher is one of these classes.  Each
carries the wire code it maps to and can render itself as the fixed sentinel
payload callers match on byte-for-byte.  Sentinels never include the
exception's message: internal detail stays in the logs.
"""

import json


def _sentinel(message: str, code: int) -> bytes:
    return json.dumps({"_error": message, "_code": code}, separators=(",", ":")).encode()


NOT_FOUND = _sentinel("Not found", 404)
CONFLICT = _sentinel("Conflict", 409)
UNEXPECTED = _sentinel("Unexpected error", 500)
DELETED = b'"deleted"'


class UserStoreError(Exception):
    """Base class.  Subclasses set ``code`` and ``sentinel``."""

    code = 500
    sentinel = UNEXPECTED

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message

    def encoded(self) -> bytes:
        return self.sentinel


class NotFoundError(UserStoreError):
    """No live record matches the request descriptor."""

    code = 404
    sentinel = NOT_FOUND


class ConflictError(UserStoreError):
    """(group_id, username) is already taken."""

    code = 409
    sentinel = CONFLICT


class CredentialError(UserStoreError):
    """Random source or KDF unavailable while hashing / generating a secret."""


class StorageError(UserStoreError):
    """Database failure not otherwise classified."""


class InvalidRequestError(UserStoreError):
    """Payload could not be decoded, or lacks a field a create requires."""


class UnknownSubjectError(UserStoreError):
    """Raised by the router for a subject with no registered handler."""

    code = 404
