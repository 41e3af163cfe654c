"""
Activation workflow.

Issues one-time activation codes, hands the activation email to the task
queue and validates submitted codes, enabling the owning account.

Per-code state machine: Created -> {Validated | Expired}.
"""

import asyncio
import logging
from datetime import UTC, datetime
from typing import Protocol

from src.domain.account import Account
from src.domain.account_repository import AccountRepository
from src.domain.activation_code import ActivationCode
from src.domain.activation_code_repository import ActivationCodeRepository
from src.domain.exceptions import (
    AccountAlreadyActivatedError,
    AccountNotFoundError,
    ActivationCodeCollisionError,
    ActivationCodeExpiredError,
    ActivationCodeNotFoundError,
    ActivationCodeUnavailableError,
    EmailDeliveryError,
)

logger = logging.getLogger(__name__)


class TaskQueue(Protocol):
    """
    Protocol for task queue operations.

    This allows the workflow to remain agnostic of the specific
    task queue implementation (Celery, in our case).
    """

    def enqueue_send_activation_email(
        self, email: str, full_name: str, code: str, activation_url: str
    ) -> str:
        """
        Enqueue a task to send an activation email.

        Returns:
            Task ID for tracking
        """
        ...


class ActivationWorkflow:
    """
    Generates, persists and validates activation codes.

    Email delivery is fire-and-forget: ``issue`` returns as soon as the task
    is enqueued and never waits for the worker.

    Decision: Uniqueness of a new code is decided by the insert itself, not
    by a lookup beforehand. A lookup followed by a write races with other
    requests drawing the same digits; a rejected insert simply draws again.
    Enqueueing runs in a worker thread because broker clients block while
    they reconnect.
    """

    MAX_GENERATION_ATTEMPTS = 5

    def __init__(
        self,
        code_repository: ActivationCodeRepository,
        account_repository: AccountRepository,
        task_queue: TaskQueue,
        activation_url: str,
        code_length: int = ActivationCode.DEFAULT_LENGTH,
        expires_in_seconds: int = ActivationCode.DEFAULT_EXPIRY_SECONDS,
    ):
        self.code_repository = code_repository
        self.account_repository = account_repository
        self.task_queue = task_queue
        self.activation_url = activation_url
        self.code_length = code_length
        self.expires_in_seconds = expires_in_seconds

    async def issue(self, account: Account) -> ActivationCode:
        """
        Create and persist a new activation code and enqueue its email.

        Args:
            account: The account the code will activate

        Returns:
            The persisted ActivationCode

        Raises:
            ActivationCodeUnavailableError: If every drawn value is already
                pending for another account. Nothing is persisted.
            EmailDeliveryError: If the email task could not be enqueued. The
                code is persisted regardless and stays usable.
        """
        activation_code = await self._store_new_code(account)
        logger.info(
            f"Issued activation code for account {account.id} "
            f"(expires at {activation_code.expires_at.isoformat()})"
        )

        try:
            task_id = await asyncio.to_thread(
                self.task_queue.enqueue_send_activation_email,
                email=account.email,
                full_name=account.full_name,
                code=activation_code.code,
                activation_url=self.activation_url,
            )
        except Exception as e:
            logger.error(f"Failed to enqueue activation email for {account.email}: {e}")
            raise EmailDeliveryError(account.email, str(e)) from e

        logger.info(f"Enqueued activation email task {task_id} for {account.email}")
        return activation_code

    async def validate(self, code: str, now: datetime | None = None) -> Account:
        """
        Validate a submitted code and enable its account.

        Args:
            code: The submitted activation code
            now: Evaluation time (default: now)

        Returns:
            The (now enabled) owning account

        Raises:
            ActivationCodeNotFoundError: If no such code is stored
            ActivationCodeExpiredError: If the code expired; a replacement
                code has been issued and its email enqueued
            AccountNotFoundError: If the owning account no longer exists
            ActivationCodeUnavailableError: If no replacement for an expired
                code could be drawn
            EmailDeliveryError: If the replacement for an expired code could
                not be enqueued for delivery
        """
        check_time = now or datetime.now(UTC)

        activation_code = await self.code_repository.find_by_code(code)
        if activation_code is None:
            raise ActivationCodeNotFoundError()

        account = await self.account_repository.find_by_id(activation_code.account_id)

        if activation_code.is_validated:
            # Re-submitting an accepted code is a no-op
            if account is None:
                raise AccountNotFoundError(str(activation_code.account_id))
            logger.info(f"Activation code for account {account.id} was already validated")
            return account

        if activation_code.is_expired(check_time):
            if account is None:
                raise AccountNotFoundError(str(activation_code.account_id))
            await self.code_repository.delete(activation_code)
            logger.warning(
                f"Expired activation code submitted for {account.email}, issuing a new one"
            )
            await self.issue(account)
            raise ActivationCodeExpiredError(account.email)

        if account is None:
            raise AccountNotFoundError(str(activation_code.account_id))

        account.enable(check_time)
        activation_code.mark_validated(check_time)
        await self.account_repository.save(account)
        await self.code_repository.record_validation(activation_code)

        logger.info(f"Account {account.email} activated")
        return account

    async def resend(self, email: str) -> ActivationCode:
        """
        Issue a fresh code for a registered account that is not yet enabled.

        Raises:
            AccountNotFoundError: If no account uses this email
            AccountAlreadyActivatedError: If the account is already enabled
            ActivationCodeUnavailableError: If no free code value could be drawn
            EmailDeliveryError: If the email task could not be enqueued
        """
        account = await self.account_repository.find_by_email(email.lower())
        if account is None:
            raise AccountNotFoundError(email)
        if account.enabled:
            raise AccountAlreadyActivatedError(account.email)
        return await self.issue(account)

    async def _store_new_code(self, account: Account) -> ActivationCode:
        for attempt in range(1, self.MAX_GENERATION_ATTEMPTS + 1):
            candidate = ActivationCode.generate(
                account_id=account.id,
                length=self.code_length,
                expires_in_seconds=self.expires_in_seconds,
            )
            try:
                await self.code_repository.add(candidate)
                return candidate
            except ActivationCodeCollisionError:
                logger.debug(f"Activation code collision on attempt {attempt}, drawing again")

        logger.error(
            f"No free activation code for account {account.id} "
            f"after {self.MAX_GENERATION_ATTEMPTS} attempts"
        )
        raise ActivationCodeUnavailableError(self.MAX_GENERATION_ATTEMPTS)
