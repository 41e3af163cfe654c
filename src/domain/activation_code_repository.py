"""
Activation code repository interface (Port).

Codes are looked up by their value when a user submits one, and by owner
when codes need to be listed for an account.

A code value is unique among *pending* (not yet validated) codes only.
Validated codes release their value, so the same digits may later be
issued to another account.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from uuid import UUID

from src.domain.activation_code import ActivationCode


class ActivationCodeRepository(ABC):
    """Abstract repository interface for ActivationCode persistence."""

    @abstractmethod
    async def add(self, activation_code: ActivationCode) -> None:
        """
        Insert a newly issued code.

        Never merges into an existing row.

        Raises:
            ActivationCodeCollisionError: If a pending code already uses
                this value
        """
        pass

    @abstractmethod
    async def record_validation(self, activation_code: ActivationCode) -> None:
        """
        Store the validation timestamp of a pending code.

        Only the row owned by ``activation_code.account_id`` is touched, and
        a timestamp that is already stored is never overwritten.
        """
        pass

    @abstractmethod
    async def find_by_code(self, code: str) -> ActivationCode | None:
        """
        Find a code by its value.

        The pending code with this value wins over validated ones; among
        validated codes the newest is returned.
        """
        pass

    @abstractmethod
    async def find_by_account_id(self, account_id: UUID) -> list[ActivationCode]:
        """List every stored code owned by an account, newest first."""
        pass

    @abstractmethod
    async def delete(self, activation_code: ActivationCode) -> None:
        """Remove an account's code so it can no longer be submitted."""
        pass

    @abstractmethod
    async def delete_stale(self, validated_before: datetime, expired_before: datetime) -> int:
        """
        Remove codes validated before ``validated_before`` and pending codes
        that expired before ``expired_before``.

        Returns:
            Number of removed codes
        """
        pass
