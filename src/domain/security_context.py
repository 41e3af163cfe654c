"""
Per-request security context.

Built by the request authenticator once a bearer token has been verified
and bound to a freshly loaded account. It lives on ``request.state`` and is
discarded with the request.
"""

from dataclasses import dataclass

from src.domain.account import Account


@dataclass(frozen=True)
class SecurityContext:
    """The authenticated principal and its granted authorities."""

    principal: Account
    authorities: frozenset[str]

    @classmethod
    def for_account(cls, account: Account) -> "SecurityContext":
        return cls(principal=account, authorities=account.authorities)

    @property
    def name(self) -> str:
        return self.principal.name

    def has_authority(self, authority: str) -> bool:
        return authority in self.authorities
