"""
Unit tests for RegisterAccount use case.

Tests the orchestration logic for account registration. Repositories and
the activation workflow are mocked to isolate the use case.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from src.application.register_account import RegisterAccountUseCase
from src.domain.exceptions import (
    AccountAlreadyExistsError,
    EmailDeliveryError,
    InvalidEmailError,
    RoleNotConfiguredError,
    WeakPasswordError,
)
from src.domain.role import Role


class TestRegisterAccountUseCase:
    """Test RegisterAccount use case."""

    @pytest.fixture
    def mock_account_repository(self) -> AsyncMock:
        repository = AsyncMock()
        repository.exists_by_email = AsyncMock(return_value=False)
        repository.save = AsyncMock()
        return repository

    @pytest.fixture
    def mock_role_repository(self) -> AsyncMock:
        repository = AsyncMock()
        repository.find_by_name = AsyncMock(return_value=Role(name="USER"))
        return repository

    @pytest.fixture
    def mock_workflow(self) -> MagicMock:
        workflow = MagicMock()
        workflow.issue = AsyncMock()
        return workflow

    @pytest.fixture
    def use_case(
        self,
        mock_account_repository: AsyncMock,
        mock_role_repository: AsyncMock,
        mock_workflow: MagicMock,
        password_hasher,
    ) -> RegisterAccountUseCase:
        return RegisterAccountUseCase(
            account_repository=mock_account_repository,
            role_repository=mock_role_repository,
            password_hasher=password_hasher,
            activation_workflow=mock_workflow,
        )

    async def test_register_account_success(
        self,
        use_case: RegisterAccountUseCase,
        mock_account_repository: AsyncMock,
        mock_workflow: MagicMock,
        password_hasher,
    ) -> None:
        account = await use_case.execute("Ada", "Lovelace", "Ada@Example.com", "secret1")

        assert account.email == "ada@example.com"
        assert account.full_name == "Ada Lovelace"
        assert account.enabled is False
        assert account.locked is False
        assert account.roles == {"USER"}
        assert password_hasher.verify("secret1", account.password_hash)

        mock_account_repository.exists_by_email.assert_awaited_once_with("ada@example.com")
        mock_account_repository.save.assert_awaited_once_with(account)
        mock_workflow.issue.assert_awaited_once_with(account)

    async def test_register_account_already_exists(
        self,
        use_case: RegisterAccountUseCase,
        mock_account_repository: AsyncMock,
        mock_workflow: MagicMock,
    ) -> None:
        mock_account_repository.exists_by_email = AsyncMock(return_value=True)

        with pytest.raises(AccountAlreadyExistsError) as exc_info:
            await use_case.execute("Ada", "Lovelace", "ada@example.com", "secret1")

        assert exc_info.value.email == "ada@example.com"
        mock_account_repository.save.assert_not_awaited()
        mock_workflow.issue.assert_not_awaited()

    async def test_missing_role_aborts_before_any_write(
        self,
        use_case: RegisterAccountUseCase,
        mock_account_repository: AsyncMock,
        mock_role_repository: AsyncMock,
        mock_workflow: MagicMock,
    ) -> None:
        mock_role_repository.find_by_name = AsyncMock(return_value=None)

        with pytest.raises(RoleNotConfiguredError) as exc_info:
            await use_case.execute("Ada", "Lovelace", "ada@example.com", "secret1")

        assert exc_info.value.role_name == "USER"
        mock_account_repository.save.assert_not_awaited()
        mock_workflow.issue.assert_not_awaited()

    async def test_invalid_email_is_not_persisted(
        self, use_case: RegisterAccountUseCase, mock_account_repository: AsyncMock
    ) -> None:
        with pytest.raises(InvalidEmailError):
            await use_case.execute("Ada", "Lovelace", "not-an-email", "secret1")

        mock_account_repository.save.assert_not_awaited()

    async def test_weak_password_is_not_persisted(
        self, use_case: RegisterAccountUseCase, mock_account_repository: AsyncMock
    ) -> None:
        with pytest.raises(WeakPasswordError):
            await use_case.execute("Ada", "Lovelace", "ada@example.com", "123")

        mock_account_repository.save.assert_not_awaited()

    async def test_delivery_failure_keeps_account(
        self,
        use_case: RegisterAccountUseCase,
        mock_account_repository: AsyncMock,
        mock_workflow: MagicMock,
    ) -> None:
        mock_workflow.issue = AsyncMock(
            side_effect=EmailDeliveryError("ada@example.com", "Broker unreachable")
        )

        with pytest.raises(EmailDeliveryError):
            await use_case.execute("Ada", "Lovelace", "ada@example.com", "secret1")

        mock_account_repository.save.assert_awaited_once()

    async def test_uses_configured_default_role(
        self,
        mock_account_repository: AsyncMock,
        mock_role_repository: AsyncMock,
        mock_workflow: MagicMock,
        password_hasher,
    ) -> None:
        mock_role_repository.find_by_name = AsyncMock(return_value=Role(name="READER"))
        use_case = RegisterAccountUseCase(
            mock_account_repository,
            mock_role_repository,
            password_hasher,
            mock_workflow,
            default_role="READER",
        )

        account = await use_case.execute("Ada", "Lovelace", "ada@example.com", "secret1")

        mock_role_repository.find_by_name.assert_awaited_once_with("READER")
        assert account.roles == {"READER"}
