"""
Unit tests for Account entity.

Tests account creation, the identity/authenticatable capabilities and the
enable transition.
"""

from datetime import UTC, datetime
from uuid import uuid4

import pytest

from src.domain.account import Account
from src.domain.exceptions import InvalidEmailError, WeakPasswordError
from src.domain.identity import Authenticatable, Identity


def make_account(**overrides) -> Account:
    values = {
        "id": uuid4(),
        "first_name": "Ada",
        "last_name": "Lovelace",
        "email": "ada@example.com",
        "password_hash": "hashed",
        "roles": {"USER"},
    }
    values.update(overrides)
    return Account(**values)


class TestAccountCreation:
    """Test account creation logic."""

    def test_create_account_with_valid_data(self, password_hasher) -> None:
        account = Account.create(
            first_name="Ada",
            last_name="Lovelace",
            email="ada@example.com",
            password="secret1",
            password_hasher=password_hasher,
            roles={"USER"},
        )

        assert account.id is not None
        assert account.email == "ada@example.com"
        assert account.password_hash != "secret1"
        assert password_hasher.verify("secret1", account.password_hash)
        assert account.enabled is False
        assert account.locked is False
        assert account.roles == {"USER"}

    def test_create_account_normalizes_email_to_lowercase(self, password_hasher) -> None:
        account = Account.create("Ada", "Lovelace", "Ada@EXAMPLE.com", "secret1", password_hasher)

        assert account.email == "ada@example.com"

    def test_create_account_strips_names(self, password_hasher) -> None:
        account = Account.create(
            "  Ada ", " Lovelace ", "ada@example.com", "secret1", password_hasher
        )

        assert account.full_name == "Ada Lovelace"

    def test_create_account_with_invalid_email_raises_error(self, password_hasher) -> None:
        for email in ("invalid-email", "@example.com", "ada@"):
            with pytest.raises(InvalidEmailError):
                Account.create("Ada", "Lovelace", email, "secret1", password_hasher)

    def test_create_account_with_short_password_raises_error(self, password_hasher) -> None:
        with pytest.raises(WeakPasswordError):
            Account.create("Ada", "Lovelace", "ada@example.com", "12345", password_hasher)

    def test_six_character_password_is_accepted(self, password_hasher) -> None:
        account = Account.create("Ada", "Lovelace", "ada@example.com", "123456", password_hasher)

        assert account.enabled is False


class TestAccountCapabilities:
    """Test the Identity and Authenticatable views of an account."""

    def test_account_satisfies_identity_protocols(self) -> None:
        account = make_account()

        assert isinstance(account, Identity)
        assert isinstance(account, Authenticatable)

    def test_name_is_email(self) -> None:
        assert make_account().name == "ada@example.com"

    def test_credentials_is_password_hash(self) -> None:
        assert make_account(password_hash="$2b$04$abc").credentials == "$2b$04$abc"

    def test_authorities_are_role_names(self) -> None:
        account = make_account(roles={"USER", "ADMIN"})

        assert account.authorities == frozenset({"USER", "ADMIN"})

    def test_account_without_roles_has_no_authorities(self) -> None:
        assert make_account(roles=set()).authorities == frozenset()

    @pytest.mark.parametrize(
        ("enabled", "locked", "expected"),
        [(True, False, True), (False, False, False), (True, True, False), (False, True, False)],
    )
    def test_is_authenticatable(self, enabled: bool, locked: bool, expected: bool) -> None:
        account = make_account(enabled=enabled, locked=locked)

        assert account.is_authenticatable is expected


class TestAccountEnable:
    def test_enable_sets_flag_and_timestamp(self) -> None:
        account = make_account()
        now = datetime(2024, 1, 1, 12, 0, tzinfo=UTC)

        account.enable(now)

        assert account.enabled is True
        assert account.updated_at == now

    def test_accounts_compare_by_id(self) -> None:
        account_id = uuid4()

        assert make_account(id=account_id) == make_account(id=account_id, first_name="Other")
        assert make_account() != make_account()
