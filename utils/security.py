"""Password hashing (salted PBKDF2-HMAC-SHA256)."""

import base64
import hashlib
import hmac
import os

_ALGORITHM = 'pbkdf2_sha256'
_ITERATIONS = 260_000
_SALT_BYTES = 16


def hash_password(password: str, iterations: int = _ITERATIONS) -> str:
    """
    Hash a password for storage.

    Returns:
        'pbkdf2_sha256$<iterations>$<salt b64>$<digest b64>'
    """
    salt = os.urandom(_SALT_BYTES)
    digest = hashlib.pbkdf2_hmac('sha256', password.encode('utf-8'), salt, iterations)
    return '$'.join([
        _ALGORITHM,
        str(iterations),
        base64.b64encode(salt).decode('ascii'),
        base64.b64encode(digest).decode('ascii'),
    ])


def verify_password(password: str, stored_hash: str) -> bool:
    """
    Check a password against a stored hash in constant time.
    Malformed hashes and non-string passwords never match.
    """
    if not isinstance(password, str):
        return False
    try:
        algorithm, iterations, salt_b64, digest_b64 = stored_hash.split('$')
        if algorithm != _ALGORITHM:
            return False
        salt = base64.b64decode(salt_b64)
        expected = base64.b64decode(digest_b64)
        rounds = int(iterations)
    except (AttributeError, ValueError):
        return False
    actual = hashlib.pbkdf2_hmac('sha256', password.encode('utf-8'), salt, rounds)
    return hmac.compare_digest(actual, expected)
