"""Unit tests for AmountPolicy.

Test categories:
- Amount parsing (integers, integral floats, numeric strings, invalid input)
- Minimum and maximum bounds
- Currency defaults
- Receipt replacement and generation
"""

import pytest

from broker.config import BrokerSettings
from broker.models import ErrorCode
from broker.models.errors import BrokerError
from broker.services.amount_policy import AmountPolicy


class TestNormalizeAmount:
    """Test amount validation order and normalisation."""

    @pytest.mark.parametrize("raw", [100, 50000, 50_000_000])
    def test_valid_amounts_kept_exactly(self, policy: AmountPolicy, raw: int):
        """Amounts within bounds are returned unchanged."""
        assert policy.normalize_amount(raw) == raw

    def test_integral_float_normalised_to_int(self, policy: AmountPolicy):
        result = policy.normalize_amount(50000.0)

        assert result == 50000
        assert isinstance(result, int)

    def test_numeric_string_accepted(self, policy: AmountPolicy):
        assert policy.normalize_amount(" 50000 ") == 50000

    @pytest.mark.parametrize("raw", [None, "", "abc", True, False, 100.5, "12.5", [100], {}])
    def test_invalid_amount(self, policy: AmountPolicy, raw):
        """Missing, non-numeric, boolean and fractional amounts are invalid."""
        with pytest.raises(BrokerError) as exc_info:
            policy.normalize_amount(raw)

        assert exc_info.value.code == ErrorCode.INVALID_AMOUNT

    @pytest.mark.parametrize("raw", [float("nan"), float("inf")])
    def test_non_finite_amount_invalid(self, policy: AmountPolicy, raw: float):
        with pytest.raises(BrokerError) as exc_info:
            policy.normalize_amount(raw)

        assert exc_info.value.code == ErrorCode.INVALID_AMOUNT

    def test_amount_below_minimum(self, policy: AmountPolicy):
        """50 paise is rejected when the minimum is 100."""
        with pytest.raises(BrokerError) as exc_info:
            policy.normalize_amount(50)

        error = exc_info.value
        assert error.code == ErrorCode.AMOUNT_TOO_SMALL
        assert "100" in error.message
        assert "50" in error.message
        assert error.details == {"minimum": "100", "received": "50"}

    @pytest.mark.parametrize("raw", [0, -100])
    def test_zero_and_negative_below_minimum(self, policy: AmountPolicy, raw: int):
        with pytest.raises(BrokerError) as exc_info:
            policy.normalize_amount(raw)

        assert exc_info.value.code == ErrorCode.AMOUNT_TOO_SMALL

    def test_amount_above_maximum(self, policy: AmountPolicy):
        with pytest.raises(BrokerError) as exc_info:
            policy.normalize_amount(50_000_001)

        error = exc_info.value
        assert error.code == ErrorCode.AMOUNT_TOO_LARGE
        assert "50000000" in error.message

    @pytest.mark.parametrize("raw", ["1e5000", "1e1000000", "1E999999999"])
    def test_exponent_string_above_maximum(self, policy: AmountPolicy, raw: str):
        """Huge exponents are bounded without expanding them into integers."""
        with pytest.raises(BrokerError) as exc_info:
            policy.normalize_amount(raw)

        error = exc_info.value
        assert error.code == ErrorCode.AMOUNT_TOO_LARGE
        assert error.details["received"].startswith("1E+")
        assert len(error.message) < 200

    def test_negative_exponent_string_below_minimum(self, policy: AmountPolicy):
        with pytest.raises(BrokerError) as exc_info:
            policy.normalize_amount("-1e5000")

        error = exc_info.value
        assert error.code == ErrorCode.AMOUNT_TOO_SMALL
        assert error.details["received"] == "-1E+5000"

    def test_exponent_string_within_bounds(self, policy: AmountPolicy):
        assert policy.normalize_amount("5e4") == 50000

    def test_long_invalid_string_truncated_in_details(self, policy: AmountPolicy):
        with pytest.raises(BrokerError) as exc_info:
            policy.normalize_amount("x" * 10_000)

        assert exc_info.value.code == ErrorCode.INVALID_AMOUNT
        assert len(exc_info.value.details["received"]) < 50

    def test_custom_bounds(self):
        policy = AmountPolicy(BrokerSettings(min_amount=500, max_amount=1000))

        assert policy.normalize_amount(500) == 500
        with pytest.raises(BrokerError):
            policy.normalize_amount(499)
        with pytest.raises(BrokerError):
            policy.normalize_amount(1001)


class TestNormalizeCurrency:
    """Test currency defaults."""

    @pytest.mark.parametrize("raw", [None, "", "   "])
    def test_defaults_to_inr(self, policy: AmountPolicy, raw):
        assert policy.normalize_currency(raw) == "INR"

    def test_uppercased(self, policy: AmountPolicy):
        assert policy.normalize_currency(" usd ") == "USD"


class TestReceipts:
    """Test receipt replacement."""

    def test_short_receipt_kept(self, policy: AmountPolicy):
        assert policy.normalize_receipt("rcpt_signup_42") == "rcpt_signup_42"

    def test_receipt_at_limit_kept(self, policy: AmountPolicy):
        receipt = "r" * 40

        assert policy.normalize_receipt(receipt) == receipt

    def test_long_receipt_replaced(self, policy: AmountPolicy):
        """Receipts over 40 characters are replaced, not rejected."""
        result = policy.normalize_receipt("r" * 41)

        assert result != "r" * 41
        assert result.startswith("rcpt_")
        assert len(result) <= 40

    @pytest.mark.parametrize("raw", [None, "", "  "])
    def test_missing_receipt_generated(self, policy: AmountPolicy, raw):
        assert policy.normalize_receipt(raw).startswith("rcpt_")

    def test_generated_receipts_are_unique(self, policy: AmountPolicy):
        receipts = {policy.generate_receipt() for _ in range(50)}

        assert len(receipts) == 50

    def test_generated_receipt_respects_short_limit(self):
        policy = AmountPolicy(BrokerSettings(receipt_max_length=12))

        assert len(policy.generate_receipt()) == 12


class TestBuildOrder:
    """Test building the creation command."""

    def test_defaults(self, policy: AmountPolicy):
        command = policy.build_order(50000)

        assert command.amount == 50000
        assert command.currency == "INR"
        assert command.receipt.startswith("rcpt_")

    def test_amount_checked_before_receipt(self, policy: AmountPolicy):
        with pytest.raises(BrokerError) as exc_info:
            policy.build_order(None, receipt="r" * 100)

        assert exc_info.value.code == ErrorCode.INVALID_AMOUNT
