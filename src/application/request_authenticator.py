"""
Per-request bearer token authentication.

Turns the Authorization header of an inbound request into a SecurityContext,
or into nothing. It never raises for missing or bad credentials: rejecting
anonymous requests is left to the routes that require a context.
"""

import logging
from collections.abc import Sequence

from src.application.token_codec import TokenCodec
from src.domain.account_repository import AccountRepository
from src.domain.exceptions import InvalidTokenError
from src.domain.security_context import SecurityContext

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


class RequestAuthenticator:
    """
    Resolves the principal of a request from its bearer token.

    Decision: The account is reloaded from storage on every request instead of
    trusting the token claims, so locking or disabling an account takes effect
    before its tokens expire.
    """

    def __init__(
        self,
        token_codec: TokenCodec,
        account_repository: AccountRepository,
        public_paths: Sequence[str] = (),
    ):
        self.token_codec = token_codec
        self.account_repository = account_repository
        self.public_paths = tuple(public_paths)

    def is_public(self, path: str) -> bool:
        for prefix in self.public_paths:
            if path == prefix or path.startswith(prefix.rstrip("/") + "/"):
                return True
        return False

    @staticmethod
    def extract_bearer_token(authorization: str | None) -> str | None:
        if not authorization or not authorization.startswith(BEARER_PREFIX):
            return None
        token = authorization[len(BEARER_PREFIX) :].strip()
        return token or None

    async def authenticate(
        self,
        path: str,
        authorization: str | None,
        existing: SecurityContext | None = None,
    ) -> SecurityContext | None:
        """
        Build the security context for one request.

        Args:
            path: Request path
            authorization: Raw Authorization header value, if any
            existing: Context already installed for this request, if any

        Returns:
            The existing context when one is present, a new context when the
            token verifies and is bound to an authenticatable account, None
            otherwise
        """
        if existing is not None:
            return existing

        if self.is_public(path):
            return None

        token = self.extract_bearer_token(authorization)
        if token is None:
            return None

        try:
            subject = self.token_codec.extract_subject(token)
        except InvalidTokenError as e:
            logger.info(f"Rejected bearer token on {path}: {e.reason}")
            return None

        account = await self.account_repository.find_by_email(subject)
        if account is None:
            logger.warning(f"Token subject {subject} has no matching account")
            return None

        if not self.token_codec.is_valid(token, account):
            return None

        if not account.is_authenticatable:
            logger.info(f"Token presented for non-authenticatable account {account.id}")
            return None

        return SecurityContext.for_account(account)
