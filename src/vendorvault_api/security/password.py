"""Bcrypt password hashing for user accounts."""

from functools import cached_property, lru_cache

import bcrypt

BCRYPT_ROUNDS = 12


class PasswordService:
    """Hash and check account passwords."""

    def hash_password(self, password: str) -> str:
        """Hash a password with a fresh salt.

        Args:
            password: Plain text password

        Returns:
            Bcrypt hash as text
        """
        return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")

    @cached_property
    def _dummy_hash(self) -> str:
        return self.hash_password("vendorvault-dummy-password")

    def verify_password(self, password: str, hashed: str | None) -> bool:
        """Check a password against a stored hash.

        A missing hash is checked against a dummy hash so unknown emails take
        as long as wrong passwords.

        Args:
            password: Plain text password
            hashed: Stored hash, or None when the account does not exist

        Returns:
            True if the password matches
        """
        candidate = hashed or self._dummy_hash
        try:
            matches = bcrypt.checkpw(password.encode("utf-8"), candidate.encode("utf-8"))
        except ValueError:
            # Malformed stored hash
            return False
        return matches and hashed is not None

    @staticmethod
    def needs_rehash(hashed: str) -> bool:
        """Whether a hash was made with fewer rounds than the current cost."""
        try:
            rounds = int(hashed.split("$")[2])
        except (IndexError, ValueError):
            return True
        return rounds < BCRYPT_ROUNDS


@lru_cache
def get_password_service() -> PasswordService:
    """Get the shared PasswordService instance."""
    return PasswordService()
