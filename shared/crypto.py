"""
Cryptographic helpers for verification codes and secret components.

Uses argon2id (via argon2-cffi) for everything that is hashed: verification
codes are low-entropy, so they get a slow salted hash exactly like a password
would.
"""

from __future__ import annotations

import secrets

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

_code_hasher = PasswordHasher()


def hash_code(code: str) -> str:
    """Hash a verification *code* with argon2id.

    Returns:
        Argon2 hash string (includes algorithm parameters and salt).
    """
    return _code_hasher.hash(code)


def verify_code(code: str, code_hash: str) -> bool:
    """Verify *code* against an argon2 *code_hash*.

    Returns:
        ``True`` if the code matches, ``False`` for a wrong code or a
        malformed hash.
    """
    try:
        return _code_hasher.verify(code_hash, code)
    except (VerificationError, InvalidHashError):
        return False


def derive_secret_component() -> str:
    """Derive a fresh opaque secret component.

    A random value is hashed with argon2id and only the final ``$`` segment
    (the base64 digest) is kept. The parameter/salt prefix has a fixed format
    and carries nothing worth signing with, so it is dropped.

    Returns:
        43-character unpadded base64 string.
    """
    digest = _code_hasher.hash(secrets.token_urlsafe(32))
    return digest.rsplit("$", 1)[1]
