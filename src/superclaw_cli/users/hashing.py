"""Password hashing for dashboard accounts."""

from __future__ import annotations

import bcrypt

DEFAULT_ROUNDS = 12


class BcryptHasher:
    """Salted, cost-factored bcrypt hashing.

    The dashboard verifies logins with bcrypt as well, so hashes written here
    must stay in the ``$2b$`` format.
    """

    def __init__(self, rounds: int = DEFAULT_ROUNDS):
        self.rounds = rounds

    def hash(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        try:
            return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
        except ValueError:
            # Malformed hash
            return False


__all__ = ["BcryptHasher", "DEFAULT_ROUNDS"]
