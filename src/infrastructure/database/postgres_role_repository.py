"""PostgreSQL implementation of RoleRepository."""

import logging

from src.domain.role import Role
from src.domain.role_repository import RoleRepository
from src.infrastructure.database.connection import DatabaseConnection

logger = logging.getLogger(__name__)


class PostgresRoleRepository(RoleRepository):
    """Looks roles up in the seeded roles table."""

    def __init__(self, db_connection: DatabaseConnection):
        self.db = db_connection

    async def find_by_name(self, name: str) -> Role | None:
        query = "SELECT name, created_at, updated_at FROM roles WHERE name = $1"

        try:
            result = await self.db.execute(query, name, fetchone=True)
            if not result:
                return None
            assert isinstance(result, dict)
            return Role(
                name=result["name"],
                created_at=result["created_at"],
                updated_at=result["updated_at"],
            )
        except Exception as e:
            logger.error(f"Failed to find role {name}: {e}")
            raise
