"""
Password hashing and verification.

Uses bcrypt for password hashing with automatic
salting and configurable work factor.  bcrypt only reads 72 bytes, so
longer passwords are refused rather than silently cut short.
"""

from __future__ import annotations

import logging

import bcrypt

from utils.errors import InternalError

logger = logging.getLogger(__name__)

DEFAULT_ROUNDS = 12
MAX_PASSWORD_BYTES = 72


def password_too_long(password: str) -> bool:
    return len(password.encode()) > MAX_PASSWORD_BYTES


def hash_password(password: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """Hash a password with bcrypt (auto-salted, work factor 12 by default)."""
    if password_too_long(password):
        raise ValueError(f"password exceeds {MAX_PASSWORD_BYTES} bytes")
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=rounds)).decode()


def verify_password(password: str, password_hash: str) -> bool:
    """
    Constant-time comparison against a bcrypt hash.

    Returns ``False`` on mismatch, including passwords too long to have
    been hashed.  A stored hash that bcrypt cannot parse raises
    ``InternalError``.
    """
    if password_too_long(password):
        return False
    try:
        return bcrypt.checkpw(password.encode(), password_hash.encode())
    except (ValueError, TypeError) as exc:
        logger.error("Malformed password hash: %s", exc)
        raise InternalError("malformed password hash") from exc
