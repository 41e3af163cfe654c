"""
Register Account use case.

Orchestrates the registration process:
1. Validating and creating the account (disabled until activation)
2. Persisting it with the default role
3. Issuing an activation code, whose email is sent asynchronously via Celery
"""

import logging

from src.application.activation_workflow import ActivationWorkflow
from src.domain.account import Account
from src.domain.account_repository import AccountRepository
from src.domain.exceptions import AccountAlreadyExistsError, RoleNotConfiguredError
from src.domain.password_hasher import PasswordHasher
from src.domain.role_repository import RoleRepository

logger = logging.getLogger(__name__)


class RegisterAccountUseCase:
    """
    Use case for registering a new account.

    All collaborators are injected so tests can swap in fakes.
    """

    def __init__(
        self,
        account_repository: AccountRepository,
        role_repository: RoleRepository,
        password_hasher: PasswordHasher,
        activation_workflow: ActivationWorkflow,
        default_role: str = "USER",
    ):
        self.account_repository = account_repository
        self.role_repository = role_repository
        self.password_hasher = password_hasher
        self.activation_workflow = activation_workflow
        self.default_role = default_role

    async def execute(
        self, first_name: str, last_name: str, email: str, password: str
    ) -> Account:
        """
        Execute the registration use case.

        Args:
            first_name: Given name
            last_name: Family name
            email: Email address
            password: Plain text password (hashed by the domain)

        Returns:
            The created Account (``enabled`` is False)

        Raises:
            RoleNotConfiguredError: If the default role has not been seeded
            AccountAlreadyExistsError: If the email is already registered
            InvalidEmailError: If email format is invalid
            WeakPasswordError: If password doesn't meet requirements
            EmailDeliveryError: If the activation email could not be enqueued.
                The account and its code remain persisted.
        """
        role = await self.role_repository.find_by_name(self.default_role)
        if role is None:
            logger.error(f"Role '{self.default_role}' missing from the role catalog")
            raise RoleNotConfiguredError(self.default_role)

        if await self.account_repository.exists_by_email(email.lower()):
            raise AccountAlreadyExistsError(email)

        account = Account.create(
            first_name=first_name,
            last_name=last_name,
            email=email,
            password=password,
            password_hasher=self.password_hasher,
            roles={role.name},
        )

        await self.account_repository.save(account)
        logger.info(f"Registered account {account.id} for {account.email}")

        await self.activation_workflow.issue(account)

        return account
