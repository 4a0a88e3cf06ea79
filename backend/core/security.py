# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
Central security module.  All cryptographic primitives live here.  No other
module should touch raw crypto directly.

Responsibilities
----------------
1. Password hashing / verification          (scrypt via cryptography)
2. MFA secret generation                    (base32, RFC 4648)
"""

import base64
import secrets

from cryptography.exceptions import InvalidKey, UnsupportedAlgorithm
from cryptography.hazmat.primitives.kdf.scrypt import Scrypt

from core.errors import CredentialError

# ---------------------------------------------------------------------------
# 1.  scrypt – password hashing
# ---------------------------------------------------------------------------
# Cost parameters are fixed for every stored hash.  Changing any of them
# invalidates verification of rows hashed before the change.
# ---------------------------------------------------------------------------

SALT_SIZE = 32        # bytes
HASH_SIZE = 64        # bytes
SCRYPT_N = 16384
SCRYPT_R = 8
SCRYPT_P = 1

MFA_SECRET_SIZE = 10  # bytes → 16 base32 characters


def _kdf(salt: bytes) -> Scrypt:
    return Scrypt(salt=salt, length=HASH_SIZE, n=SCRYPT_N, r=SCRYPT_R, p=SCRYPT_P)


def hash_password(plain: str) -> tuple[str, str]:
    """
    Hash a plaintext password with scrypt and a fresh random salt.

    Returns
    -------
    password_hash : str   base64( 64-byte scrypt key )
    salt          : str   base64( 32-byte salt )

    Raises ``CredentialError`` if the random source or the KDF is unavailable.
    """
    try:
        salt = secrets.token_bytes(SALT_SIZE)
        key = _kdf(salt).derive(plain.encode("utf-8"))
    except (OSError, MemoryError, UnsupportedAlgorithm) as exc:
        raise CredentialError("password hashing failed") from exc

    return (
        base64.b64encode(key).decode("ascii"),
        base64.b64encode(salt).decode("ascii"),
    )


def verify_password(plain: str, password_hash: str, salt: str) -> bool:
    """
    Constant-time verification of a plaintext password against a pair
    produced by :func:`hash_password`.
    """
    try:
        _kdf(base64.b64decode(salt)).verify(
            plain.encode("utf-8"), base64.b64decode(password_hash)
        )
    except (InvalidKey, ValueError):
        # ValueError: stored hash or salt is not valid base64
        return False
    return True


# ---------------------------------------------------------------------------
# 2.  MFA secret
# ---------------------------------------------------------------------------


def generate_mfa_secret() -> str:
    """Return a random base32 secret suitable for a TOTP authenticator."""
    try:
        raw = secrets.token_bytes(MFA_SECRET_SIZE)
    except OSError as exc:
        raise CredentialError("MFA secret generation failed") from exc
    return base64.b32encode(raw).decode("ascii")
