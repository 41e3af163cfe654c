"""
Account repository interface (Port).

This interface defines the contract for account persistence.
Following Hexagonal Architecture, the domain defines the interface,
and the infrastructure layer provides the implementation.
"""

from abc import ABC, abstractmethod
from uuid import UUID

from src.domain.account import Account


class AccountRepository(ABC):
    """
    Abstract repository interface for Account persistence.

    This is a "port" in Hexagonal Architecture terminology.
    """

    @abstractmethod
    async def save(self, account: Account) -> None:
        """
        Persist an account entity, including its role assignments.

        This method handles both creation and updates.

        Raises:
            Exception: If persistence fails
        """
        pass

    @abstractmethod
    async def find_by_email(self, email: str) -> Account | None:
        """
        Find an account by its email address (case-insensitive).

        Returns:
            The Account if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_id(self, account_id: UUID) -> Account | None:
        """
        Find an account by its ID.

        Returns:
            The Account if found, None otherwise
        """
        pass

    @abstractmethod
    async def exists_by_email(self, email: str) -> bool:
        """Check if an account with the given email exists."""
        pass
