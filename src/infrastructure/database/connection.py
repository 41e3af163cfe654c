"""
Database connection management.

Handles PostgreSQL connection pooling and lifecycle using asyncpg.
Queries are plain parameterized SQL; there is no ORM.

Decision: activation_codes has a surrogate key and only a partial unique
index on pending code values. With the default six digits the value space
is small, and holding a value for ever would make collisions more frequent
as accounts accumulate.
"""

import logging
from collections.abc import Sequence
from typing import Any

import asyncpg

logger = logging.getLogger(__name__)


SCHEMA = """
CREATE TABLE IF NOT EXISTS roles (
    id SERIAL PRIMARY KEY,
    name VARCHAR(64) UNIQUE NOT NULL,
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    updated_at TIMESTAMPTZ
);

CREATE TABLE IF NOT EXISTS accounts (
    id UUID PRIMARY KEY,
    first_name VARCHAR(255) NOT NULL,
    last_name VARCHAR(255) NOT NULL,
    email VARCHAR(255) UNIQUE NOT NULL,
    password_hash VARCHAR(255) NOT NULL,
    locked BOOLEAN NOT NULL DEFAULT FALSE,
    enabled BOOLEAN NOT NULL DEFAULT FALSE,
    created_at TIMESTAMPTZ NOT NULL,
    updated_at TIMESTAMPTZ
);

CREATE TABLE IF NOT EXISTS account_roles (
    account_id UUID NOT NULL REFERENCES accounts(id) ON DELETE CASCADE,
    role_id INTEGER NOT NULL REFERENCES roles(id) ON DELETE CASCADE,
    PRIMARY KEY (account_id, role_id)
);

CREATE TABLE IF NOT EXISTS activation_codes (
    id BIGSERIAL PRIMARY KEY,
    code VARCHAR(16) NOT NULL,
    account_id UUID NOT NULL REFERENCES accounts(id) ON DELETE CASCADE,
    created_at TIMESTAMPTZ NOT NULL,
    expires_at TIMESTAMPTZ NOT NULL,
    validated_at TIMESTAMPTZ
);

CREATE INDEX IF NOT EXISTS idx_accounts_email ON accounts(email);
CREATE INDEX IF NOT EXISTS idx_activation_codes_account ON activation_codes(account_id);
CREATE INDEX IF NOT EXISTS idx_activation_codes_code ON activation_codes(code);

-- A value is reserved only while its code is pending; validated codes release it
CREATE UNIQUE INDEX IF NOT EXISTS uq_activation_codes_pending_code
    ON activation_codes(code) WHERE validated_at IS NULL;
"""


class DatabaseConnection:
    """
    Manages PostgreSQL database connections using an asyncpg connection pool.

    One instance is shared per process (see get_database_connection); the
    pool is opened and closed by the application lifespan.
    """

    def __init__(
        self,
        host: str,
        port: int,
        database: str,
        user: str,
        password: str,
        min_connections: int = 1,
        max_connections: int = 10,
    ):
        """
        Initialize database connection parameters.

        Args:
            host: Database host
            port: Database port
            database: Database name
            user: Database user
            password: Database password
            min_connections: Minimum connections in pool
            max_connections: Maximum connections in pool
        """
        self.connection_params = {
            "host": host,
            "port": port,
            "database": database,
            "user": user,
            "password": password,
        }
        self.min_connections = min_connections
        self.max_connections = max_connections
        self._pool: asyncpg.Pool | None = None

    @property
    def pool(self) -> asyncpg.Pool | None:
        return self._pool

    async def connect(self) -> None:
        """
        Initialize the connection pool.

        Should be called on application startup.
        """
        try:
            self._pool = await asyncpg.create_pool(
                **self.connection_params,
                min_size=self.min_connections,
                max_size=self.max_connections,
                command_timeout=60,
            )
            logger.info(
                f"asyncpg connection pool initialized "
                f"(min={self.min_connections}, max={self.max_connections})"
            )
        except Exception as e:
            logger.error(f"Failed to initialize database connection pool: {e}")
            raise

    async def disconnect(self) -> None:
        """Close all connections in the pool."""
        if self._pool:
            await self._pool.close()
            self._pool = None
            logger.info("Database connection pool closed")

    async def execute(
        self,
        query: str,
        *args: Any,
        fetch: bool = False,
        fetchone: bool = False,
    ) -> list | dict | None:
        """
        Execute a SQL query.

        Args:
            query: SQL query to execute (use $1, $2, $3 for parameters)
            *args: Query parameters (passed positionally)
            fetch: Whether to fetch all results
            fetchone: Whether to fetch single result

        Returns:
            Query results as dicts if fetch=True/fetchone=True, None otherwise
        """
        if not self._pool:
            raise RuntimeError("Connection pool not initialized. Call connect() first.")

        async with self._pool.acquire() as conn:
            try:
                if fetchone:
                    row = await conn.fetchrow(query, *args)
                    return dict(row) if row else None
                elif fetch:
                    rows = await conn.fetch(query, *args)
                    return [dict(row) for row in rows]
                else:
                    await conn.execute(query, *args)
                    return None
            except Exception as e:
                logger.error(f"Database query failed: {e}\nQuery: {query}")
                raise

    async def execute_in_transaction(self, statements: Sequence[tuple[str, tuple]]) -> None:
        """
        Run several write statements atomically.

        Args:
            statements: (query, args) pairs executed in order
        """
        if not self._pool:
            raise RuntimeError("Connection pool not initialized. Call connect() first.")

        async with self._pool.acquire() as conn:
            async with conn.transaction():
                for query, args in statements:
                    try:
                        await conn.execute(query, *args)
                    except Exception as e:
                        logger.error(f"Database query failed: {e}\nQuery: {query}")
                        raise

    async def init_schema(self, seed_roles: Sequence[str] = ()) -> None:
        """
        Create the tables if needed and seed the role catalog.

        Ideally this would be handled by migrations; running it at startup
        keeps local and test setups self-contained.

        Args:
            seed_roles: Role names guaranteed to exist afterwards
        """
        try:
            await self.execute(SCHEMA)
            logger.info("Database schema initialized")
        except asyncpg.exceptions.UniqueViolationError as e:
            # Another worker created the same objects concurrently
            logger.warning(f"Schema already exists (concurrent worker): {e}")
        except Exception as e:
            logger.error(f"Failed to initialize database schema: {e}")
            raise

        for role_name in seed_roles:
            await self.execute(
                "INSERT INTO roles (name, created_at) VALUES ($1, NOW()) "
                "ON CONFLICT (name) DO NOTHING",
                role_name,
            )
        if seed_roles:
            logger.info(f"Role catalog seeded: {', '.join(seed_roles)}")
