"""
PostgreSQL implementation of AccountRepository.

Translates between the Account entity and the accounts / account_roles
tables using raw SQL with asyncpg.
"""

import logging
from uuid import UUID

from src.domain.account import Account
from src.domain.account_repository import AccountRepository
from src.infrastructure.database.connection import DatabaseConnection

logger = logging.getLogger(__name__)

SELECT_ACCOUNT = """
SELECT
    a.id, a.first_name, a.last_name, a.email, a.password_hash,
    a.locked, a.enabled, a.created_at, a.updated_at,
    COALESCE(
        ARRAY_AGG(r.name) FILTER (WHERE r.name IS NOT NULL), ARRAY[]::VARCHAR[]
    ) AS roles
FROM accounts a
LEFT JOIN account_roles ar ON ar.account_id = a.id
LEFT JOIN roles r ON r.id = ar.role_id
"""


class PostgresAccountRepository(AccountRepository):
    """PostgreSQL adapter for account persistence."""

    def __init__(self, db_connection: DatabaseConnection):
        self.db = db_connection

    async def save(self, account: Account) -> None:
        """
        Upsert the account row and replace its role assignments atomically.

        Role names that are not in the catalog are ignored by the join.
        """
        upsert = """
        INSERT INTO accounts (
            id, first_name, last_name, email, password_hash,
            locked, enabled, created_at, updated_at
        ) VALUES (
            $1, $2, $3, $4, $5, $6, $7, $8, $9
        )
        ON CONFLICT (id) DO UPDATE SET
            first_name = EXCLUDED.first_name,
            last_name = EXCLUDED.last_name,
            email = EXCLUDED.email,
            password_hash = EXCLUDED.password_hash,
            locked = EXCLUDED.locked,
            enabled = EXCLUDED.enabled,
            updated_at = EXCLUDED.updated_at
        """
        clear_roles = "DELETE FROM account_roles WHERE account_id = $1"
        assign_roles = """
        INSERT INTO account_roles (account_id, role_id)
        SELECT $1, id FROM roles WHERE name = ANY($2::VARCHAR[])
        """

        try:
            await self.db.execute_in_transaction(
                [
                    (
                        upsert,
                        (
                            account.id,
                            account.first_name,
                            account.last_name,
                            account.email,
                            account.password_hash,
                            account.locked,
                            account.enabled,
                            account.created_at,
                            account.updated_at,
                        ),
                    ),
                    (clear_roles, (account.id,)),
                    (assign_roles, (account.id, sorted(account.roles))),
                ]
            )
            logger.debug(f"Saved account: {account.email}")
        except Exception as e:
            logger.error(f"Failed to save account {account.email}: {e}")
            raise

    async def find_by_email(self, email: str) -> Account | None:
        query = SELECT_ACCOUNT + "WHERE a.email = $1 GROUP BY a.id"

        try:
            result = await self.db.execute(query, email.lower(), fetchone=True)
            if not result:
                return None
            assert isinstance(result, dict)
            return self._map_to_entity(result)
        except Exception as e:
            logger.error(f"Failed to find account by email {email}: {e}")
            raise

    async def find_by_id(self, account_id: UUID) -> Account | None:
        query = SELECT_ACCOUNT + "WHERE a.id = $1 GROUP BY a.id"

        try:
            result = await self.db.execute(query, account_id, fetchone=True)
            if not result:
                return None
            assert isinstance(result, dict)
            return self._map_to_entity(result)
        except Exception as e:
            logger.error(f"Failed to find account by id {account_id}: {e}")
            raise

    async def exists_by_email(self, email: str) -> bool:
        query = "SELECT EXISTS(SELECT 1 FROM accounts WHERE email = $1) AS found"

        try:
            result = await self.db.execute(query, email.lower(), fetchone=True)
            if result and isinstance(result, dict):
                return bool(result["found"])
            return False
        except Exception as e:
            logger.error(f"Failed to check if account exists {email}: {e}")
            raise

    def _map_to_entity(self, row: dict) -> Account:
        return Account(
            id=UUID(row["id"]) if isinstance(row["id"], str) else row["id"],
            first_name=row["first_name"],
            last_name=row["last_name"],
            email=row["email"],
            password_hash=row["password_hash"],
            locked=row["locked"],
            enabled=row["enabled"],
            roles=set(row["roles"] or ()),
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )
