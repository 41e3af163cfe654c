"""
Account entity.

Represents a registered member of the book network. Contains the business
rules for account creation and the enable transition driven by activation.
"""

import re
import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime

from src.domain.exceptions import InvalidEmailError, WeakPasswordError
from src.domain.password_hasher import PasswordHasher


@dataclass(eq=False)
class Account:
    """
    Account aggregate root.

    Implements both the Identity and Authenticatable capabilities: the email
    is the identity name, the password hash is the credential and every
    assigned role name becomes one authority.

    Attributes:
        id: Unique identifier for the account
        first_name: Given name
        last_name: Family name
        email: Email address (unique, lowercase)
        password_hash: Hashed password
        locked: Whether the account has been locked by an operator
        enabled: Whether the account has been confirmed through activation
        roles: Names of the assigned roles
        created_at: When the account was created
        updated_at: When the account was last modified
    """

    EMAIL_REGEX = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")
    MIN_PASSWORD_LENGTH = 6

    id: uuid.UUID
    first_name: str
    last_name: str
    email: str
    password_hash: str
    locked: bool = False
    enabled: bool = False
    roles: set[str] = field(default_factory=set)
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime | None = None

    @classmethod
    def create(
        cls,
        first_name: str,
        last_name: str,
        email: str,
        password: str,
        password_hasher: PasswordHasher,
        roles: set[str] | None = None,
    ) -> "Account":
        """
        Create a new, not yet activated account.

        Validation runs before the password is hashed, so nothing is built
        (or persisted by the caller) for invalid input.

        Args:
            first_name: Given name
            last_name: Family name
            email: Email address
            password: Plain text password (hashed through password_hasher)
            password_hasher: Hashing capability
            roles: Role names to assign

        Raises:
            InvalidEmailError: If email format is invalid
            WeakPasswordError: If password is shorter than MIN_PASSWORD_LENGTH
        """
        if not cls.is_valid_email(email):
            raise InvalidEmailError(email)

        if len(password) < cls.MIN_PASSWORD_LENGTH:
            raise WeakPasswordError(
                f"Password must be at least {cls.MIN_PASSWORD_LENGTH} characters long"
            )

        return cls(
            id=uuid.uuid4(),
            first_name=first_name.strip(),
            last_name=last_name.strip(),
            email=email.lower(),
            password_hash=password_hasher.hash(password),
            locked=False,
            enabled=False,
            roles=set(roles or ()),
            created_at=datetime.now(UTC),
        )

    @classmethod
    def is_valid_email(cls, email: str) -> bool:
        return bool(cls.EMAIL_REGEX.match(email))

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def name(self) -> str:
        return self.email

    @property
    def credentials(self) -> str:
        return self.password_hash

    @property
    def authorities(self) -> frozenset[str]:
        return frozenset(self.roles)

    @property
    def is_authenticatable(self) -> bool:
        """An account may log in only once enabled and while not locked."""
        return self.enabled and not self.locked

    def enable(self, now: datetime | None = None) -> None:
        """Mark the account as confirmed."""
        self.enabled = True
        self.updated_at = now or datetime.now(UTC)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Account):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)
