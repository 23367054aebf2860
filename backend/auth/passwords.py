from __future__ import annotations

from functools import lru_cache

import bcrypt

from backend.auth.errors import CorruptCredential
from backend.auth.models import NO_PASSWORD

DEFAULT_ROUNDS = 10

# bcrypt only looks at the first 72 bytes; bcrypt>=5 raises on longer input.
MAX_PASSWORD_BYTES = 72


def password_too_long(password: str) -> bool:
    return len(password.encode("utf-8")) > MAX_PASSWORD_BYTES


def hash_password(password: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """
    Hash password with bcrypt.

    Args:
        password: Plain text password, at most MAX_PASSWORD_BYTES once UTF-8 encoded
        rounds: bcrypt cost factor

    Returns:
        Bcrypt hash string (salted, so two calls never return the same value)
    """
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """
    Verify password against bcrypt hash with constant-time comparison.

    An empty hash (no local password) and an over-length password never match.

    Raises:
        CorruptCredential: if the stored hash is not a valid bcrypt hash
    """
    if password_hash == NO_PASSWORD or password_too_long(password):
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError as e:
        # Password length is checked above, so this is the hash.
        raise CorruptCredential() from e


@lru_cache(maxsize=4)
def _dummy_hash(rounds: int) -> bytes:
    return bcrypt.hashpw(b"not-a-real-password", bcrypt.gensalt(rounds=rounds))


def burn_verify(password: str, rounds: int = DEFAULT_ROUNDS) -> None:
    """
    Spend one bcrypt verification that can never succeed, so a login that fails
    before reaching a real hash costs the same as a wrong password.
    """
    bcrypt.checkpw(password.encode("utf-8")[:MAX_PASSWORD_BYTES], _dummy_hash(rounds))
