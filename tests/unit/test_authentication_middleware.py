"""
Tests for AuthenticationMiddleware.

A small FastAPI app echoes whatever security context the middleware put on
the request.
"""

from uuid import uuid4

import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

from src.application.request_authenticator import RequestAuthenticator
from src.domain.account import Account
from src.infrastructure.security.authentication_middleware import AuthenticationMiddleware
from tests.mocks.in_memory_repositories import InMemoryAccountRepository


def unconfigured_authenticator() -> RequestAuthenticator:
    raise AssertionError("The override should have been used")


@pytest.fixture
def account() -> Account:
    return Account(
        id=uuid4(),
        first_name="Ada",
        last_name="Lovelace",
        email="ada@example.com",
        password_hash="hashed",
        enabled=True,
        roles={"USER"},
    )


@pytest.fixture
def app(account, token_codec) -> FastAPI:
    repository = InMemoryAccountRepository()
    repository.accounts[account.id] = account

    app = FastAPI()
    app.add_middleware(AuthenticationMiddleware, authenticator_factory=unconfigured_authenticator)
    app.dependency_overrides[unconfigured_authenticator] = lambda: RequestAuthenticator(
        token_codec, repository, public_paths=["/auth"]
    )

    @app.get("/whoami")
    async def whoami(request: Request) -> dict:
        context = request.state.security_context
        return {"name": context.name if context else None}

    @app.get("/auth/ping")
    async def ping(request: Request) -> dict:
        return {"authenticated": request.state.security_context is not None}

    return app


class TestAuthenticationMiddleware:
    def test_valid_token_installs_context(self, app, account, token_codec) -> None:
        token = token_codec.issue({}, account)

        response = TestClient(app).get("/whoami", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 200
        assert response.json() == {"name": "ada@example.com"}

    def test_missing_token_continues_anonymously(self, app) -> None:
        response = TestClient(app).get("/whoami")

        assert response.status_code == 200
        assert response.json() == {"name": None}

    def test_invalid_token_continues_anonymously(self, app) -> None:
        response = TestClient(app).get("/whoami", headers={"Authorization": "Bearer nope"})

        assert response.status_code == 200
        assert response.json() == {"name": None}

    def test_public_path_is_not_authenticated(self, app, account, token_codec) -> None:
        token = token_codec.issue({}, account)

        response = TestClient(app).get("/auth/ping", headers={"Authorization": f"Bearer {token}"})

        assert response.json() == {"authenticated": False}

    def test_factory_is_used_without_override(self, account, token_codec) -> None:
        repository = InMemoryAccountRepository()
        repository.accounts[account.id] = account
        calls = []

        def factory() -> RequestAuthenticator:
            calls.append(1)
            return RequestAuthenticator(token_codec, repository)

        app = FastAPI()
        app.add_middleware(AuthenticationMiddleware, authenticator_factory=factory)

        @app.get("/whoami")
        async def whoami(request: Request) -> dict:
            context = request.state.security_context
            return {"name": context.name if context else None}

        token = token_codec.issue({}, account)
        response = TestClient(app).get("/whoami", headers={"Authorization": f"Bearer {token}"})

        assert response.json() == {"name": "ada@example.com"}
        assert calls == [1]
