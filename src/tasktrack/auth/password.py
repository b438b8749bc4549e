"""Password hashing utilities.

Learn: Uses bcrypt for secure password hashing. bcrypt automatically
handles salting and is resistant to rainbow table attacks. The work
factor comes from config (TASKTRACK_BCRYPT_ROUNDS, default 10).

checkpw does the comparison itself, so there is no string equality on
digests anywhere in this module.
"""

import secrets
from typing import Optional

import bcrypt

# bcrypt ignores everything past 72 bytes; newer releases raise instead.
_MAX_PASSWORD_BYTES = 72


class PasswordHasher:
    """Salted one-way hash + verify with a fixed cost factor."""

    def __init__(self, rounds: int = 10):
        self.rounds = rounds
        self._dummy_hash: Optional[str] = None

    def hash(self, password: str) -> str:
        """Hash a password with bcrypt.

        Learn: bcrypt includes a random salt automatically and produces
        hashes starting with "$2b$". Two calls with the same password
        never return the same digest.
        """
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(_encode(password), salt).decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        """Verify a password against its hash. Malformed hashes never match."""
        try:
            return bcrypt.checkpw(_encode(password), password_hash.encode("utf-8"))
        except (ValueError, TypeError):
            return False

    def verify_dummy(self, password: str) -> bool:
        """Run one full bcrypt check that can never succeed.

        Used when there is no account to check against, so that path
        costs the same as a wrong password.
        """
        if self._dummy_hash is None:
            self._dummy_hash = self.hash(secrets.token_urlsafe(16))
        self.verify(password, self._dummy_hash)
        return False


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:_MAX_PASSWORD_BYTES]
