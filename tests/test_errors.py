"""Error taxonomy — sentinel payloads are fixed byte sequences."""

import json

from core.errors import (
    CONFLICT,
    DELETED,
    NOT_FOUND,
    UNEXPECTED,
    ConflictError,
    CredentialError,
    InvalidRequestError,
    NotFoundError,
    StorageError,
)


def test_sentinels_are_compact_json():
    assert NOT_FOUND == b'{"_error":"Not found","_code":404}'
    assert CONFLICT == b'{"_error":"Conflict","_code":409}'
    assert UNEXPECTED == b'{"_error":"Unexpected error","_code":500}'
    assert json.loads(DELETED) == "deleted"


def test_each_error_encodes_its_sentinel():
    assert NotFoundError().encoded() == NOT_FOUND
    assert ConflictError().encoded() == CONFLICT
    assert CredentialError().encoded() == UNEXPECTED
    assert StorageError().encoded() == UNEXPECTED
    assert InvalidRequestError().encoded() == UNEXPECTED


def test_encoded_never_carries_the_message():
    err = CredentialError("urandom: device not configured")
    assert b"urandom" not in err.encoded()
    assert err.message == "urandom: device not configured"
