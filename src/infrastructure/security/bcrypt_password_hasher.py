"""
bcrypt implementation of PasswordHasher.

bcrypt handles salting automatically; the cost factor is configurable so
tests can use the minimum while production keeps 12 (2^12 iterations).
"""

import logging

import bcrypt

from src.domain.password_hasher import PasswordHasher

logger = logging.getLogger(__name__)

BCRYPT_ROUNDS = 12


class BcryptPasswordHasher(PasswordHasher):
    """Password hashing with bcrypt, used directly (no passlib wrapper)."""

    def __init__(self, rounds: int = BCRYPT_ROUNDS):
        self.rounds = rounds

    def hash(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        try:
            is_pwd_match: bool = bcrypt.checkpw(
                password.encode("utf-8"), password_hash.encode("utf-8")
            )
            return is_pwd_match
        except ValueError as e:
            # Malformed stored hash, or a password over bcrypt's 72-byte limit
            logger.warning(f"bcrypt verification failed: {e}")
            return False
