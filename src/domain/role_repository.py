"""
Role repository interface (Port).

The authentication core only ever looks roles up by name.
"""

from abc import ABC, abstractmethod

from src.domain.role import Role


class RoleRepository(ABC):
    """Abstract read-only access to the role catalog."""

    @abstractmethod
    async def find_by_name(self, name: str) -> Role | None:
        """
        Find a role by its unique name.

        Returns:
            The Role if configured, None otherwise
        """
        pass
