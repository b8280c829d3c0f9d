"""
Cryptographic helpers: one-way hashing for passwords and reset codes.

Uses argon2id (via argon2-cffi) for both, so a stored reset code gets the same
salted, slow-hash treatment as a password.
"""

from __future__ import annotations

from argon2 import PasswordHasher

_password_hasher = PasswordHasher()


def hash_secret(plain_secret: str) -> str:
    """Hash *plain_secret* with argon2id.

    Returns:
        Argon2 hash string (includes algorithm parameters and salt).
    """
    return _password_hasher.hash(plain_secret)


def verify_secret(plain_secret: str, secret_hash: str) -> bool:
    """Verify *plain_secret* against an argon2 *secret_hash*.

    Returns:
        ``True`` if it matches, ``False`` for any failure
        (mismatch, malformed hash, etc.).
    """
    try:
        return _password_hasher.verify(secret_hash, plain_secret)
    except Exception:
        return False


def hash_password(plain_password: str) -> str:
    return hash_secret(plain_password)


def verify_password(plain_password: str, password_hash: str) -> bool:
    return verify_secret(plain_password, password_hash)
