"""
Token codec interface (Port).

Signs and verifies the compact bearer tokens handed to clients after login.
Validity is decided purely from the signature and the expiry claim; no
server-side lookup is involved.
"""

from abc import ABC, abstractmethod
from typing import Any

from src.domain.identity import Identity


class TokenCodec(ABC):
    """Abstract signer/verifier for authentication tokens."""

    @abstractmethod
    def issue(self, claims: dict[str, Any], subject: Identity) -> str:
        """
        Produce a signed, expiring token bound to the subject's identity.

        Args:
            claims: Extra claims to embed (e.g. display name)
            subject: The identity the token is issued for

        Returns:
            The encoded token
        """
        pass

    @abstractmethod
    def extract_subject(self, token: str) -> str:
        """
        Recover the subject identity from a token.

        Raises:
            InvalidTokenError: If the token is malformed, expired, or its
                signature does not verify
        """
        pass

    @abstractmethod
    def is_valid(self, token: str, candidate: Identity) -> bool:
        """
        Check that the token verifies, is unexpired and names the candidate.

        Never raises.
        """
        pass
