"""
JWT implementation of TokenCodec (PyJWT).

Tokens carry the subject email in ``sub`` plus arbitrary claims, with
``iat``/``exp`` set from the configured lifetime. Symmetric (HS*) keys sign
and verify with the same secret; for asymmetric algorithms pass the public
key as ``verification_key``.
"""

import logging
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt

from src.application.token_codec import TokenCodec
from src.domain.exceptions import InvalidTokenError
from src.domain.identity import Identity

logger = logging.getLogger(__name__)


class JwtTokenCodec(TokenCodec):
    """Signs and verifies JWT bearer tokens."""

    def __init__(
        self,
        signing_key: str,
        algorithm: str = "HS256",
        expires_in_seconds: int = 86400,
        verification_key: str | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        """
        Initialize the codec.

        Args:
            signing_key: Secret (HS*) or private key PEM (RS*/ES*/EdDSA)
            algorithm: JWS algorithm name
            expires_in_seconds: Token lifetime from issuance
            verification_key: Public key PEM for asymmetric algorithms;
                defaults to signing_key
            clock: Source of the issuance time (default: UTC now)
        """
        self._signing_key = signing_key
        self._verification_key = verification_key or signing_key
        self.algorithm = algorithm
        self.expires_in_seconds = expires_in_seconds
        self._clock = clock or (lambda: datetime.now(UTC))

    def issue(self, claims: dict[str, Any], subject: Identity) -> str:
        issued_at = self._clock()
        payload: dict[str, Any] = {
            **claims,
            "sub": subject.name,
            "iat": issued_at,
            "exp": issued_at + timedelta(seconds=self.expires_in_seconds),
        }
        return jwt.encode(payload, self._signing_key, algorithm=self.algorithm)

    def decode(self, token: str) -> dict[str, Any]:
        """
        Verify a token and return its claims.

        Raises:
            InvalidTokenError: If verification fails for any reason
        """
        try:
            payload: dict[str, Any] = jwt.decode(
                token,
                self._verification_key,
                algorithms=[self.algorithm],
                options={"require": ["sub", "exp", "iat"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise InvalidTokenError("Token has expired") from e
        except jwt.PyJWTError as e:
            raise InvalidTokenError(f"Token verification failed: {e}") from e
        return payload

    def extract_subject(self, token: str) -> str:
        subject = self.decode(token).get("sub")
        if not isinstance(subject, str) or not subject:
            raise InvalidTokenError("Token has no subject")
        return subject

    def is_valid(self, token: str, candidate: Identity) -> bool:
        try:
            return self.extract_subject(token) == candidate.name
        except InvalidTokenError:
            return False
