"""
Password hashing (bcrypt).

Why: Credentials are never stored or compared in plaintext. Each hash carries
its own random salt and cost factor, so verification needs only the stored
hash.

Note: bcrypt considers at most 72 bytes of input; longer passwords are
truncated consistently on hash and verify.
"""
from __future__ import annotations

import bcrypt

_BCRYPT_MAX_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


class PasswordHasher:
    def __init__(self, rounds: int = 12) -> None:
        if rounds < 4 or rounds > 31:
            raise ValueError("invalid_bcrypt_rounds")
        self.rounds = rounds

    def hash(self, password: str) -> str:
        return bcrypt.hashpw(_encode(password), bcrypt.gensalt(rounds=self.rounds)).decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        if not password or not password_hash:
            return False
        try:
            return bcrypt.checkpw(_encode(password), password_hash.encode("utf-8"))
        except ValueError:
            # Malformed stored hash
            return False


__all__ = ["PasswordHasher"]
