"""
Unit tests for ActivationCode entity.

Tests code generation, format checks, expiry and the one-time validation
stamp.
"""

from collections import Counter
from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest

from src.domain.activation_code import ActivationCode
from src.domain.exceptions import (
    ActivationCodeAlreadyValidatedError,
    InvalidActivationCodeError,
)

NOW = datetime(2024, 1, 1, 12, 0, tzinfo=UTC)


class TestActivationCodeGeneration:
    """Test activation code generation."""

    def test_generate_creates_six_digit_code(self) -> None:
        code = ActivationCode.generate(uuid4())

        assert len(code.code) == 6
        assert code.code.isdigit()

    def test_generate_respects_length(self) -> None:
        assert len(ActivationCode.generate(uuid4(), length=8).code) == 8

    def test_leading_zeros_are_kept(self) -> None:
        code = ActivationCode("000123", uuid4(), NOW, NOW + timedelta(minutes=10))

        assert code.code == "000123"

    def test_generate_sets_owner_and_window(self) -> None:
        account_id = uuid4()

        code = ActivationCode.generate(account_id, expires_in_seconds=600, now=NOW)

        assert code.account_id == account_id
        assert code.created_at == NOW
        assert code.expires_at == NOW + timedelta(minutes=10)
        assert code.validated_at is None
        assert not code.is_validated

    def test_generate_sets_created_at_to_now_by_default(self) -> None:
        before = datetime.now(UTC)
        code = ActivationCode.generate(uuid4())
        after = datetime.now(UTC)

        assert before <= code.created_at <= after

    def test_digits_are_uniformly_distributed(self) -> None:
        """Chi-square test over the digits of 2000 codes (df=9, p=0.001)."""
        digits = Counter("".join(ActivationCode.generate_value(6) for _ in range(2000)))
        total = sum(digits.values())
        expected = total / 10

        chi_square = sum((digits.get(d, 0) - expected) ** 2 / expected for d in "0123456789")

        assert chi_square < 27.88


class TestActivationCodeFormat:
    def test_non_numeric_code_is_rejected(self) -> None:
        with pytest.raises(InvalidActivationCodeError):
            ActivationCode("12ab56", uuid4(), NOW, NOW)

    def test_empty_code_is_rejected(self) -> None:
        with pytest.raises(InvalidActivationCodeError):
            ActivationCode("", uuid4(), NOW, NOW)

    def test_is_valid_format_with_length(self) -> None:
        assert ActivationCode.is_valid_format("123456", length=6)
        assert not ActivationCode.is_valid_format("12345", length=6)
        assert not ActivationCode.is_valid_format("12345a", length=6)


class TestActivationCodeExpiry:
    """Test activation code expiry logic."""

    def test_code_not_expired_before_deadline(self) -> None:
        code = ActivationCode.generate(uuid4(), expires_in_seconds=600, now=NOW)

        assert not code.is_expired(NOW + timedelta(minutes=9))

    def test_code_still_valid_at_exact_deadline(self) -> None:
        code = ActivationCode.generate(uuid4(), expires_in_seconds=600, now=NOW)

        assert not code.is_expired(NOW + timedelta(minutes=10))

    def test_code_expired_after_deadline(self) -> None:
        code = ActivationCode.generate(uuid4(), expires_in_seconds=600, now=NOW)

        assert code.is_expired(NOW + timedelta(minutes=10, seconds=1))


class TestActivationCodeValidation:
    def test_mark_validated_stamps_time(self) -> None:
        code = ActivationCode.generate(uuid4(), now=NOW)

        code.mark_validated(NOW + timedelta(minutes=1))

        assert code.is_validated
        assert code.validated_at == NOW + timedelta(minutes=1)

    def test_mark_validated_twice_raises_error(self) -> None:
        code = ActivationCode.generate(uuid4(), now=NOW)
        code.mark_validated(NOW)

        with pytest.raises(ActivationCodeAlreadyValidatedError):
            code.mark_validated(NOW + timedelta(minutes=1))

        assert code.validated_at == NOW

    def test_str_returns_code_and_repr_hides_it(self) -> None:
        code = ActivationCode("482913", uuid4(), NOW, NOW + timedelta(minutes=10))

        assert str(code) == "482913"
        assert "482913" not in repr(code)
