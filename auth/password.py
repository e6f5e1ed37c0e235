"""
Password hashing and verification.

Uses bcrypt for password hashing with automatic
salting and configurable work factor.
"""

from __future__ import annotations

import bcrypt

from auth.errors import HashingError

# Deliberately low; configurable through ``BCRYPT_ROUNDS``.
DEFAULT_ROUNDS = 6

# bcrypt reads at most 72 bytes of input and rejects longer passwords.
MAX_PASSWORD_BYTES = 72


def hash_password(password: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """Hash a password with bcrypt (fresh salt, ``rounds`` work factor)."""
    if not password:
        raise HashingError("password cannot be empty")
    try:
        salt = bcrypt.gensalt(rounds=rounds)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")
    except (ValueError, TypeError) as exc:
        raise HashingError(str(exc)) from exc


def verify_password(password: str, password_hash: str) -> bool:
    """
    Constant-time comparison against a bcrypt hash.

    A mismatch returns ``False``; a hash bcrypt cannot parse raises
    ``HashingError``.
    """
    if not password_hash:
        raise HashingError("stored hash is empty")
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except (ValueError, TypeError) as exc:
        raise HashingError(f"malformed password hash: {exc}") from exc
