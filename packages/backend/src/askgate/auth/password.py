"""Password hashing utilities.

bcrypt handles salting itself and checkpw compares in constant time, so
secrets are never compared with plain equality. Passwords are truncated
to 72 bytes (bcrypt's limit).
"""

from functools import lru_cache

import bcrypt

DEFAULT_ROUNDS = 12


def hash_password(password: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """Hash a password with bcrypt. Produces a "$2b$..." string."""
    pw_bytes = password.encode("utf-8")[:72]
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(pw_bytes, salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its bcrypt hash."""
    try:
        pw_bytes = password.encode("utf-8")[:72]
        hash_bytes = password_hash.encode("utf-8")
        return bcrypt.checkpw(pw_bytes, hash_bytes)
    except (ValueError, TypeError):
        return False


@lru_cache(maxsize=None)
def dummy_hash(rounds: int = DEFAULT_ROUNDS) -> str:
    """A throwaway hash to check against when the user doesn't exist.

    Spending the same bcrypt work on unknown emails keeps login timing
    from revealing which addresses are registered.
    """
    return hash_password("askgate-dummy-password", rounds=rounds)
