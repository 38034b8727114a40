"""
Password hashing with PBKDF2-HMAC-SHA256.

Hashes are stored as ``pbkdf2_sha256$<iterations>$<salt>$<hex digest>`` so the
iteration count can be raised later without invalidating existing rows.
"""

import hashlib
import secrets

ALGORITHM = "pbkdf2_sha256"
DEFAULT_ITERATIONS = 310_000

# Well-formed hash no password derives to; checked when the email is unknown
UNKNOWN_USER_HASH = f"{ALGORITHM}${DEFAULT_ITERATIONS}${'0' * 32}${'0' * 64}"


def _derive(password: str, salt: str, iterations: int) -> str:
    return hashlib.pbkdf2_hmac(
        "sha256",
        password.encode("utf-8"),
        salt.encode("utf-8"),
        iterations,
    ).hex()


def hash_password(
    password: str,
    salt: str | None = None,
    iterations: int = DEFAULT_ITERATIONS,
) -> str:
    """Hash a plaintext password.

    Args:
        password: The plaintext password.
        salt: Optional salt (generated if not provided).
        iterations: PBKDF2 iteration count.

    Returns:
        Encoded hash string.
    """
    if salt is None:
        salt = secrets.token_hex(16)
    return f"{ALGORITHM}${iterations}${salt}${_derive(password, salt, iterations)}"


def verify_password(password: str, encoded: str) -> bool:
    """Verify a password against an encoded hash."""
    try:
        algorithm, iterations, salt, expected = encoded.split("$", 3)
        rounds = int(iterations)
    except ValueError:
        return False
    if algorithm != ALGORITHM:
        return False
    return secrets.compare_digest(_derive(password, salt, rounds), expected)
