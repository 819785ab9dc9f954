"""Security utilities for upwatch.

Password hashing and verification use Argon2id.
"""

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerifyMismatchError

_hasher = PasswordHasher()


def hash_password(password: str) -> str:
    """Hash a password using Argon2id."""
    return _hasher.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its hash."""
    try:
        _hasher.verify(password_hash, password)
        return True
    except (VerifyMismatchError, InvalidHashError):
        return False


def calculate_lockout_duration(
    failed_attempts: int,
    threshold: int = 5,
    base_seconds: int = 30,
    max_seconds: int = 1800,
) -> int:
    """Calculate lockout duration in seconds based on failed attempt count.

    Uses exponential backoff starting at ``threshold`` failures:
    - 5 failures: 30 seconds
    - 6 failures: 60 seconds
    - 7 failures: 120 seconds
    - ...
    - capped at 1800 seconds (30 minutes)

    Args:
        failed_attempts: Number of consecutive failed login attempts
        threshold: Failures before lockout starts
        base_seconds: Lockout duration at the threshold
        max_seconds: Upper bound on the lockout duration

    Returns:
        Lockout duration in seconds (0 if below threshold)
    """
    if failed_attempts < threshold:
        return 0

    exponent = failed_attempts - threshold
    duration = base_seconds * (2**exponent)
    return int(min(duration, max_seconds))
