"""
Credential authentication.

Verifies an email/password pair and issues a signed bearer token for the
authenticated account.
"""

import logging

from src.application.token_codec import TokenCodec
from src.domain.account_repository import AccountRepository
from src.domain.exceptions import InvalidCredentialsError
from src.domain.password_hasher import PasswordHasher

logger = logging.getLogger(__name__)


class CredentialAuthenticator:
    """
    Use case for logging in with email and password.

    Every failure (unknown email, wrong password, disabled or locked account)
    raises the same InvalidCredentialsError.

    Decision: An unknown email still costs one bcrypt verification against a
    dummy hash, so response time does not reveal which emails exist.
    """

    def __init__(
        self,
        account_repository: AccountRepository,
        password_hasher: PasswordHasher,
        token_codec: TokenCodec,
    ):
        self.account_repository = account_repository
        self.password_hasher = password_hasher
        self.token_codec = token_codec
        self._dummy_hash: str | None = None

    async def authenticate(self, email: str, password: str) -> str:
        """
        Authenticate the credentials and return a signed token.

        Raises:
            InvalidCredentialsError: On any authentication failure
        """
        account = await self.account_repository.find_by_email(email.lower())

        if account is None:
            # Run the hash check anyway so timing does not reveal unknown emails
            self.password_hasher.verify(password, self._timing_hash())
            logger.warning("Authentication failed: unknown account")
            raise InvalidCredentialsError()

        if not self.password_hasher.verify(password, account.credentials):
            logger.warning(f"Authentication failed: wrong password for account {account.id}")
            raise InvalidCredentialsError()

        if not account.is_authenticatable:
            logger.warning(
                f"Authentication failed: account {account.id} "
                f"(enabled={account.enabled}, locked={account.locked})"
            )
            raise InvalidCredentialsError()

        claims = {"full_name": account.full_name}
        token = self.token_codec.issue(claims, account)
        logger.info(f"Issued token for account {account.id}")
        return token

    def _timing_hash(self) -> str:
        if self._dummy_hash is None:
            self._dummy_hash = self.password_hasher.hash("timing-equalization-dummy")
        return self._dummy_hash
