"""
ActivationCode entity.

Represents a short-lived numeric code proving ownership of a registered
email. A code is created at registration and ends either validated (exactly
once) or expired.
"""

import secrets
import uuid
from datetime import UTC, datetime, timedelta

from src.domain.exceptions import (
    ActivationCodeAlreadyValidatedError,
    InvalidActivationCodeError,
)


class ActivationCode:
    """
    A one-time activation code owned by an account.

    The code expires after a configurable duration (default: 10 minutes).
    Once ``validated_at`` is set it is never cleared or overwritten.
    """

    ALPHABET = "0123456789"
    DEFAULT_LENGTH = 6
    DEFAULT_EXPIRY_SECONDS = 600

    def __init__(
        self,
        code: str,
        account_id: uuid.UUID,
        created_at: datetime,
        expires_at: datetime,
        validated_at: datetime | None = None,
    ):
        """
        Initialize an ActivationCode.

        Args:
            code: The numeric code as a string
            account_id: Identifier of the owning account
            created_at: When the code was created
            expires_at: When the code stops being accepted
            validated_at: When the code was accepted, if it has been

        Raises:
            InvalidActivationCodeError: If the code format is invalid
        """
        if not self.is_valid_format(code):
            raise InvalidActivationCodeError()

        self._code = code
        self._account_id = account_id
        self._created_at = created_at
        self._expires_at = expires_at
        self._validated_at = validated_at

    @classmethod
    def is_valid_format(cls, code: str, length: int | None = None) -> bool:
        """
        Check that a value is made only of alphabet characters.

        Args:
            code: The value to check
            length: Exact length required (any non-empty length if None)
        """
        if not code or any(char not in cls.ALPHABET for char in code):
            return False
        return length is None or len(code) == length

    @classmethod
    def generate_value(cls, length: int = DEFAULT_LENGTH) -> str:
        """
        Draw a code uniformly at random from the alphabet.

        Uses the ``secrets`` CSPRNG, which is safe to call from concurrent
        threads.
        """
        return "".join(secrets.choice(cls.ALPHABET) for _ in range(length))

    @classmethod
    def generate(
        cls,
        account_id: uuid.UUID,
        length: int = DEFAULT_LENGTH,
        expires_in_seconds: int = DEFAULT_EXPIRY_SECONDS,
        now: datetime | None = None,
    ) -> "ActivationCode":
        """
        Generate a new random activation code for an account.

        Args:
            account_id: Owner of the code
            length: Number of digits
            expires_in_seconds: How long the code should be valid
            now: Creation time (default: now)

        Returns:
            A new, unvalidated ActivationCode
        """
        created_at = now or datetime.now(UTC)
        return cls(
            code=cls.generate_value(length),
            account_id=account_id,
            created_at=created_at,
            expires_at=created_at + timedelta(seconds=expires_in_seconds),
        )

    def is_expired(self, current_time: datetime | None = None) -> bool:
        """
        Check if the activation code has expired.

        A code is still accepted at exactly ``expires_at``.
        """
        check_time = current_time or datetime.now(UTC)
        return check_time > self._expires_at

    @property
    def is_validated(self) -> bool:
        return self._validated_at is not None

    def mark_validated(self, now: datetime | None = None) -> None:
        """
        Stamp the validation time.

        Raises:
            ActivationCodeAlreadyValidatedError: If the code was already validated
        """
        if self._validated_at is not None:
            raise ActivationCodeAlreadyValidatedError()
        self._validated_at = now or datetime.now(UTC)

    @property
    def code(self) -> str:
        """Get the activation code value."""
        return self._code

    @property
    def account_id(self) -> uuid.UUID:
        return self._account_id

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def expires_at(self) -> datetime:
        return self._expires_at

    @property
    def validated_at(self) -> datetime | None:
        return self._validated_at

    def __str__(self) -> str:
        return self._code

    def __repr__(self) -> str:
        return (
            f"ActivationCode(account_id={self._account_id}, expires_at={self._expires_at}, "
            f"validated={self.is_validated})"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ActivationCode):
            return False
        return self._code == other._code and self._created_at == other._created_at

    def __hash__(self) -> int:
        return hash((self._code, self._created_at))
