"""
FastAPI dependency injection.

Wires the domain, application and infrastructure layers together. Tests
replace any of these providers through ``app.dependency_overrides``.
"""

import logging
from functools import lru_cache
from typing import Annotated

from config.settings import settings
from fastapi import Depends, HTTPException, Request, status

from src.application.activation_workflow import ActivationWorkflow, TaskQueue
from src.application.authenticate_account import CredentialAuthenticator
from src.application.register_account import RegisterAccountUseCase
from src.application.request_authenticator import RequestAuthenticator
from src.application.token_codec import TokenCodec
from src.domain.account_repository import AccountRepository
from src.domain.activation_code_repository import ActivationCodeRepository
from src.domain.password_hasher import PasswordHasher
from src.domain.role_repository import RoleRepository
from src.domain.security_context import SecurityContext
from src.infrastructure.database.connection import DatabaseConnection
from src.infrastructure.database.postgres_account_repository import PostgresAccountRepository
from src.infrastructure.database.postgres_activation_code_repository import (
    PostgresActivationCodeRepository,
)
from src.infrastructure.database.postgres_role_repository import PostgresRoleRepository
from src.infrastructure.security.bcrypt_password_hasher import BcryptPasswordHasher
from src.infrastructure.security.jwt_token_codec import JwtTokenCodec

logger = logging.getLogger(__name__)


@lru_cache
def get_database_connection() -> DatabaseConnection:
    """
    Get database connection instance (singleton).

    A single pool is shared by every request in the process.
    """
    logger.info(f"Creating database connection to host: {settings.database_host}")
    return DatabaseConnection(
        host=settings.database_host,
        port=settings.database_port,
        database=settings.database_name,
        user=settings.database_user,
        password=settings.database_password,
        min_connections=1,
        max_connections=10,
    )


@lru_cache
def get_token_codec() -> TokenCodec:
    """Build the process-wide token codec from the signing configuration."""
    return JwtTokenCodec(
        signing_key=settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
        expires_in_seconds=settings.jwt_expiration_seconds,
        verification_key=settings.jwt_verification_key,
    )


@lru_cache
def get_password_hasher() -> PasswordHasher:
    return BcryptPasswordHasher(rounds=settings.bcrypt_rounds)


def get_account_repository(
    db: Annotated[DatabaseConnection, Depends(get_database_connection)],
) -> AccountRepository:
    return PostgresAccountRepository(db)


def get_activation_code_repository(
    db: Annotated[DatabaseConnection, Depends(get_database_connection)],
) -> ActivationCodeRepository:
    return PostgresActivationCodeRepository(db)


def get_role_repository(
    db: Annotated[DatabaseConnection, Depends(get_database_connection)],
) -> RoleRepository:
    return PostgresRoleRepository(db)


def get_task_queue() -> TaskQueue:
    """
    Get task queue instance.

    Always returns the real Celery task queue; tests override this
    dependency with MockTaskQueue.
    """
    from src.infrastructure.tasks.email.tasks import CeleryTaskQueue

    return CeleryTaskQueue()


def get_activation_workflow(
    code_repository: Annotated[ActivationCodeRepository, Depends(get_activation_code_repository)],
    account_repository: Annotated[AccountRepository, Depends(get_account_repository)],
    task_queue: Annotated[TaskQueue, Depends(get_task_queue)],
) -> ActivationWorkflow:
    return ActivationWorkflow(
        code_repository=code_repository,
        account_repository=account_repository,
        task_queue=task_queue,
        activation_url=settings.activation_url,
        code_length=settings.activation_code_length,
        expires_in_seconds=settings.activation_code_expiry_seconds,
    )


def get_register_account_use_case(
    account_repository: Annotated[AccountRepository, Depends(get_account_repository)],
    role_repository: Annotated[RoleRepository, Depends(get_role_repository)],
    password_hasher: Annotated[PasswordHasher, Depends(get_password_hasher)],
    workflow: Annotated[ActivationWorkflow, Depends(get_activation_workflow)],
) -> RegisterAccountUseCase:
    return RegisterAccountUseCase(
        account_repository=account_repository,
        role_repository=role_repository,
        password_hasher=password_hasher,
        activation_workflow=workflow,
        default_role=settings.default_role,
    )


def get_credential_authenticator(
    account_repository: Annotated[AccountRepository, Depends(get_account_repository)],
    password_hasher: Annotated[PasswordHasher, Depends(get_password_hasher)],
    token_codec: Annotated[TokenCodec, Depends(get_token_codec)],
) -> CredentialAuthenticator:
    return CredentialAuthenticator(account_repository, password_hasher, token_codec)


def get_request_authenticator() -> RequestAuthenticator:
    """
    Build the authenticator used by AuthenticationMiddleware.

    Middleware runs outside FastAPI's dependency resolution, so this
    provider takes no parameters; the middleware still honours an override
    registered for it.
    """
    return RequestAuthenticator(
        token_codec=get_token_codec(),
        account_repository=PostgresAccountRepository(get_database_connection()),
        public_paths=settings.public_paths,
    )


def get_security_context(request: Request) -> SecurityContext | None:
    """The context installed by AuthenticationMiddleware, if any."""
    return getattr(request.state, "security_context", None)


def require_security_context(
    context: Annotated[SecurityContext | None, Depends(get_security_context)],
) -> SecurityContext:
    """
    Require an authenticated request.

    Raises:
        HTTPException: 401 when no context was installed
    """
    if context is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"error": "Unauthenticated", "message": "Authentication required"},
            headers={"WWW-Authenticate": "Bearer"},
        )
    return context
