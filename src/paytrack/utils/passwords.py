"""Password hashing helpers."""

import hashlib
import hmac
import os

ALGORITHM = "pbkdf2_sha256"
ITERATIONS = 260_000


def hash_password(password: str, salt: str | None = None, iterations: int = ITERATIONS) -> str:
    """Hash a password with a random salt.

    Returns:
        Encoded hash "pbkdf2_sha256$<iterations>$<salt>$<hex digest>"
    """
    if salt is None:
        salt = os.urandom(16).hex()
    digest = hashlib.pbkdf2_hmac(
        "sha256", password.encode("utf-8"), salt.encode("utf-8"), iterations
    )
    return f"{ALGORITHM}${iterations}${salt}${digest.hex()}"


def verify_password(password: str, encoded: str) -> bool:
    """Verify a password against an encoded hash in constant time."""
    try:
        algorithm, iterations, salt, _ = encoded.split("$", 3)
        rounds = int(iterations)
    except ValueError:
        return False
    if algorithm != ALGORITHM:
        return False
    candidate = hash_password(password, salt=salt, iterations=rounds)
    return hmac.compare_digest(candidate.encode("utf-8"), encoded.encode("utf-8"))
