"""
pytest fixtures for integration tests.

Integration tests drive the real FastAPI application (routes, middleware,
use cases, bcrypt and JWT) through TestClient. Only the edges are swapped
through dependency overrides:
- in-memory repositories instead of PostgreSQL
- MockTaskQueue instead of Celery

The client is not used as a context manager, so the lifespan (database
pool, schema creation) does not run.
"""

import pytest
from fastapi.testclient import TestClient

from src.application.request_authenticator import RequestAuthenticator
from src.main import app
from src.presentation.dependencies import (
    get_account_repository,
    get_activation_code_repository,
    get_request_authenticator,
    get_role_repository,
    get_task_queue,
    get_token_codec,
)
from tests.mocks.in_memory_repositories import (
    InMemoryAccountRepository,
    InMemoryActivationCodeRepository,
    InMemoryRoleRepository,
)
from tests.mocks.mock_task_queue import MockTaskQueue


@pytest.fixture
def account_repository() -> InMemoryAccountRepository:
    return InMemoryAccountRepository()


@pytest.fixture
def code_repository() -> InMemoryActivationCodeRepository:
    return InMemoryActivationCodeRepository()


@pytest.fixture
def role_repository() -> InMemoryRoleRepository:
    return InMemoryRoleRepository(("USER",))


@pytest.fixture
def api_client(account_repository, code_repository, role_repository):
    """TestClient with storage and task queue replaced by in-memory fakes."""
    MockTaskQueue.clear()

    app.dependency_overrides[get_account_repository] = lambda: account_repository
    app.dependency_overrides[get_activation_code_repository] = lambda: code_repository
    app.dependency_overrides[get_role_repository] = lambda: role_repository
    app.dependency_overrides[get_task_queue] = lambda: MockTaskQueue()
    app.dependency_overrides[get_request_authenticator] = lambda: RequestAuthenticator(
        token_codec=get_token_codec(),
        account_repository=account_repository,
        public_paths=["/auth", "/health", "/docs", "/openapi.json"],
    )

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture
def register_account(api_client):
    """Register an account and return the response."""

    def _register(
        email: str = "ada@example.com",
        password: str = "secret1",
        first_name: str = "Ada",
        last_name: str = "Lovelace",
    ):
        return api_client.post(
            "/auth/register",
            json={
                "first_name": first_name,
                "last_name": last_name,
                "email": email,
                "password": password,
            },
        )

    return _register


@pytest.fixture
def get_activation_code_from_queue():
    """Most recent activation code enqueued for an email."""

    def _get_code(email: str) -> str:
        task = MockTaskQueue.get_task_for_email(email)
        assert task is not None, f"No task found for {email}: {MockTaskQueue.get_all_tasks()}"
        return task["code"]

    return _get_code
