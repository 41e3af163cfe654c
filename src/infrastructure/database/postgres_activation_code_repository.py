"""
PostgreSQL implementation of ActivationCodeRepository.

New codes are plain inserts guarded by the partial unique index on pending
code values. Validation is a separate conditional update that keeps an
already stored timestamp, so concurrent validations of the same code cannot
overwrite the first stamp.
"""

import logging
from datetime import datetime
from uuid import UUID

import asyncpg

from src.domain.activation_code import ActivationCode
from src.domain.activation_code_repository import ActivationCodeRepository
from src.domain.exceptions import ActivationCodeCollisionError
from src.infrastructure.database.connection import DatabaseConnection

logger = logging.getLogger(__name__)


class PostgresActivationCodeRepository(ActivationCodeRepository):
    """PostgreSQL adapter for activation code persistence."""

    def __init__(self, db_connection: DatabaseConnection):
        self.db = db_connection

    async def add(self, activation_code: ActivationCode) -> None:
        query = """
        INSERT INTO activation_codes (code, account_id, created_at, expires_at, validated_at)
        VALUES ($1, $2, $3, $4, $5)
        """

        try:
            await self.db.execute(
                query,
                activation_code.code,
                activation_code.account_id,
                activation_code.created_at,
                activation_code.expires_at,
                activation_code.validated_at,
            )
            logger.debug(f"Stored activation code for account {activation_code.account_id}")
        except asyncpg.UniqueViolationError as e:
            raise ActivationCodeCollisionError(activation_code.code) from e
        except Exception as e:
            logger.error(
                f"Failed to store activation code for account {activation_code.account_id}: {e}"
            )
            raise

    async def record_validation(self, activation_code: ActivationCode) -> None:
        query = """
        UPDATE activation_codes
        SET validated_at = COALESCE(validated_at, $3)
        WHERE code = $1 AND account_id = $2 AND validated_at IS NULL
        """

        try:
            await self.db.execute(
                query,
                activation_code.code,
                activation_code.account_id,
                activation_code.validated_at,
            )
            logger.debug(f"Recorded validation for account {activation_code.account_id}")
        except Exception as e:
            logger.error(
                f"Failed to record validation for account {activation_code.account_id}: {e}"
            )
            raise

    async def find_by_code(self, code: str) -> ActivationCode | None:
        query = """
        SELECT code, account_id, created_at, expires_at, validated_at
        FROM activation_codes
        WHERE code = $1
        ORDER BY (validated_at IS NULL) DESC, created_at DESC
        LIMIT 1
        """

        try:
            result = await self.db.execute(query, code, fetchone=True)
            if not result:
                return None
            assert isinstance(result, dict)
            return self._map_to_entity(result)
        except Exception as e:
            logger.error(f"Failed to find activation code: {e}")
            raise

    async def find_by_account_id(self, account_id: UUID) -> list[ActivationCode]:
        query = """
        SELECT code, account_id, created_at, expires_at, validated_at
        FROM activation_codes
        WHERE account_id = $1
        ORDER BY created_at DESC
        """

        try:
            rows = await self.db.execute(query, account_id, fetch=True)
            return [self._map_to_entity(row) for row in rows or []]
        except Exception as e:
            logger.error(f"Failed to list activation codes for account {account_id}: {e}")
            raise

    async def delete(self, activation_code: ActivationCode) -> None:
        query = "DELETE FROM activation_codes WHERE code = $1 AND account_id = $2"

        try:
            await self.db.execute(query, activation_code.code, activation_code.account_id)
        except Exception as e:
            logger.error(f"Failed to delete activation code: {e}")
            raise

    async def delete_stale(self, validated_before: datetime, expired_before: datetime) -> int:
        query = """
        DELETE FROM activation_codes
        WHERE validated_at < $1
           OR (validated_at IS NULL AND expires_at < $2)
        RETURNING code
        """

        try:
            rows = await self.db.execute(query, validated_before, expired_before, fetch=True)
            removed = len(rows or [])
            logger.info(f"Removed {removed} stale activation codes")
            return removed
        except Exception as e:
            logger.error(f"Failed to remove stale activation codes: {e}")
            raise

    def _map_to_entity(self, row: dict) -> ActivationCode:
        account_id = row["account_id"]
        return ActivationCode(
            code=row["code"],
            account_id=UUID(account_id) if isinstance(account_id, str) else account_id,
            created_at=row["created_at"],
            expires_at=row["expires_at"],
            validated_at=row["validated_at"],
        )
