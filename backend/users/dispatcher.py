# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
User operations over raw request / reply payloads.

Each public method takes the request bytes and returns the reply bytes; it
never raises.  Failures collapse into the fixed sentinels from
``core.errors`` so callers can match them byte-for-byte:

    NotFound    {"_error":"Not found","_code":404}
    Conflict    {"_error":"Conflict","_code":409}
    Unexpected  {"_error":"Unexpected error","_code":500}

Payloads carry plaintext passwords, so nothing here logs request bodies.
"""

from typing import Callable, Dict, Type, TypeVar

from pydantic import BaseModel, ValidationError

from core.errors import (
    DELETED,
    UNEXPECTED,
    InvalidRequestError,
    NotFoundError,
    UserStoreError,
)
from core.logger import logger
from users.schemas import UserDescriptor, UserPatch, UserRecord, UserRecordList
from users.service import UserService
from users.store import StoreScope

_M = TypeVar("_M", bound=BaseModel)


def _decode(model: Type[_M], data: bytes) -> _M:
    try:
        return model.model_validate_json(data or b"{}")
    except ValidationError as exc:
        raise InvalidRequestError("malformed request payload") from exc


def _guarded(operation: str):
    """Turn any failure of *operation* into its sentinel payload."""

    def wrap(fn: Callable[["UserDispatcher", bytes], bytes]):
        def handler(self: "UserDispatcher", data: bytes) -> bytes:
            try:
                return fn(self, data)
            except NotFoundError:
                logger.info("%s: not found", operation)
                return NotFoundError.sentinel
            except UserStoreError as exc:
                logger.warning("%s failed: %s (%s)", operation, type(exc).__name__, exc.message)
                return exc.encoded()
            except Exception:
                logger.exception("%s: unexpected failure", operation)
                return UNEXPECTED

        handler.__name__ = fn.__name__
        handler.__doc__ = fn.__doc__
        return handler

    return wrap


class UserDispatcher:
    """get / del / set / find on top of ``UserService``."""

    def __init__(self, store_scope: StoreScope):
        self._store_scope = store_scope

    @_guarded("get")
    def get(self, data: bytes) -> bytes:
        descriptor = _decode(UserDescriptor, data)
        with self._store_scope() as store:
            user = UserService(store).resolve_or_fail(descriptor)
            return UserRecord.model_validate(user).model_dump_json().encode()

    @_guarded("del")
    def delete(self, data: bytes) -> bytes:
        descriptor = _decode(UserDescriptor, data)
        with self._store_scope() as store:
            service = UserService(store)
            user = service.resolve_or_fail(descriptor)
            user_id = user.id
            service.delete(user)
        logger.info("del: user id=%s removed", user_id)
        return DELETED

    @_guarded("set")
    def set(self, data: bytes) -> bytes:
        """Update the record an id points at, or create one when no id is given."""
        patch = _decode(UserPatch, data)
        with self._store_scope() as store:
            service = UserService(store)
            if patch.has_id:
                user = service.merge(service.resolve_or_fail(patch), patch)
                action = "updated"
            else:
                user = service.create(patch)
                action = "created"
            user = service.save(user)
            logger.info("set: user id=%s %s", user.id, action)
            return UserRecord.model_validate(user).model_dump_json().encode()

    @_guarded("find")
    def find(self, data: bytes) -> bytes:
        descriptor = _decode(UserDescriptor, data)
        with self._store_scope() as store:
            users = UserService(store).search(descriptor)
            return UserRecordList.dump_json(
                [UserRecord.model_validate(u) for u in users]
            )


def user_handlers(dispatcher: UserDispatcher, prefix: str = "user") -> Dict[str, Callable[[bytes], bytes]]:
    """Static subject → handler mapping for the request router."""
    return {
        f"{prefix}.get": dispatcher.get,
        f"{prefix}.del": dispatcher.delete,
        f"{prefix}.set": dispatcher.set,
        f"{prefix}.find": dispatcher.find,
    }
