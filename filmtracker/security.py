"""
Password hashing for Filmtracker.

Salted bcrypt hashes with a fixed cost factor. Hashes are stored as UTF-8
text in users.password.

bcrypt only reads the first 72 bytes of a password, and bcrypt>=5 raises
instead of ignoring the rest. Both hashing and verification truncate to
that limit so long passwords keep working.
"""

import bcrypt

BCRYPT_ROUNDS = 10
BCRYPT_MAX_PASSWORD_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode('utf-8')[:BCRYPT_MAX_PASSWORD_BYTES]


def hash_password(password: str) -> str:
    """Return a salted bcrypt hash of password."""
    return bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode('utf-8')


def check_password(password: str, password_hash: str) -> bool:
    """
    Compare a candidate password against a stored hash.

    A malformed stored hash compares as a mismatch.
    """
    try:
        return bcrypt.checkpw(_password_bytes(password), password_hash.encode('utf-8'))
    except ValueError:
        return False
