"""
Password hasher interface (Port).

The domain only needs a one-way hash and a verify operation; the algorithm
itself lives in the infrastructure layer.
"""

from abc import ABC, abstractmethod


class PasswordHasher(ABC):
    """Abstract one-way password hashing capability."""

    @abstractmethod
    def hash(self, password: str) -> str:
        """
        Hash a plain text password.

        Args:
            password: Plain text password

        Returns:
            An encoded hash suitable for storage
        """
        pass

    @abstractmethod
    def verify(self, password: str, password_hash: str) -> bool:
        """
        Check a plain text password against a stored hash.

        Returns:
            True if the password matches, False otherwise (never raises on
            a malformed hash)
        """
        pass
