"""Amount and receipt validation for order creation.

Amounts are always in the smallest currency unit (paise for INR); no
major-to-minor conversion is performed. Validation order is fixed:
invalid amount, below minimum, above maximum. Receipts that are missing or
too long are replaced with a generated value instead of being rejected.
"""

import secrets
import time
from decimal import Decimal, InvalidOperation
from typing import Any

from broker.config import BrokerSettings
from broker.models import BrokerError, ErrorCode, OrderCreate
from broker.utils.logging import get_logger

logger = get_logger(__name__)

RECEIPT_PREFIX = "rcpt"

# Amounts with more digits than this are echoed back in exponent form
DISPLAY_DIGITS = 20
REPR_MAX_LENGTH = 40


def _display(value: Decimal) -> str:
    if value.adjusted() < DISPLAY_DIGITS:
        return str(int(value))
    return format(value, "E")


def _short_repr(raw: Any) -> str:
    if isinstance(raw, str) and len(raw) > REPR_MAX_LENGTH:
        return repr(raw[:REPR_MAX_LENGTH] + "...")
    return repr(raw)


class AmountPolicy:
    """Validates order requests against the configured bounds."""

    def __init__(self, settings: BrokerSettings) -> None:
        """Initialize the policy.

        Args:
            settings: Broker settings holding bounds and defaults
        """
        self.min_amount = settings.min_amount
        self.max_amount = settings.max_amount
        self.receipt_max_length = settings.receipt_max_length
        self.default_currency = settings.default_currency

    def normalize_amount(self, raw: Any) -> int:
        """Convert a raw amount into an integer number of minor units.

        Accepts integers, integral floats and numeric strings.

        Args:
            raw: Amount as received from the caller

        Returns:
            The amount as an int, within [min_amount, max_amount].

        Raises:
            BrokerError: INVALID_AMOUNT, AMOUNT_TOO_SMALL or AMOUNT_TOO_LARGE.
        """
        value = self._parse_amount(raw)

        # Bounds are checked on the Decimal; int() is only applied to bounded values
        if value < self.min_amount:
            received = _display(value)
            raise BrokerError(
                ErrorCode.AMOUNT_TOO_SMALL,
                details={"minimum": str(self.min_amount), "received": received},
                message=(
                    f"Amount too small. Minimum amount is {self.min_amount}, "
                    f"received {received}"
                ),
            )
        if value > self.max_amount:
            received = _display(value)
            raise BrokerError(
                ErrorCode.AMOUNT_TOO_LARGE,
                details={"maximum": str(self.max_amount), "received": received},
                message=(
                    f"Amount too large. Maximum amount is {self.max_amount}, "
                    f"received {received}"
                ),
            )
        return int(value)

    @staticmethod
    def _parse_amount(raw: Any) -> Decimal:
        if raw is None or isinstance(raw, bool):
            raise BrokerError(ErrorCode.INVALID_AMOUNT, details={"received": _short_repr(raw)})

        if isinstance(raw, int):
            return Decimal(raw)

        if isinstance(raw, str):
            raw = raw.strip()

        try:
            value = Decimal(str(raw))
        except (InvalidOperation, ValueError) as e:
            raise BrokerError(
                ErrorCode.INVALID_AMOUNT, details={"received": _short_repr(raw)}
            ) from e

        if not value.is_finite() or value != value.to_integral_value():
            raise BrokerError(ErrorCode.INVALID_AMOUNT, details={"received": _short_repr(raw)})

        return value

    def normalize_currency(self, raw: str | None) -> str:
        """Uppercase the currency code, falling back to the default."""
        if raw is None or not raw.strip():
            return self.default_currency
        return raw.strip().upper()

    def normalize_receipt(self, raw: str | None) -> str:
        """Return the caller's receipt, or a generated one if unusable."""
        if raw is not None and raw.strip() and len(raw) <= self.receipt_max_length:
            return raw

        if raw:
            logger.info(
                "Receipt of length %d exceeds %d characters, generating replacement",
                len(raw),
                self.receipt_max_length,
            )
        return self.generate_receipt()

    def generate_receipt(self) -> str:
        """Generate a receipt from a millisecond timestamp and random suffix.

        Returns:
            Receipt like ``rcpt_1760000000000_9f2c1ab4``, cut to the maximum length.
        """
        receipt = f"{RECEIPT_PREFIX}_{int(time.time() * 1000)}_{secrets.token_hex(4)}"
        return receipt[: self.receipt_max_length]

    def build_order(
        self,
        amount: Any,
        currency: str | None = None,
        receipt: str | None = None,
    ) -> OrderCreate:
        """Validate raw request fields into an order creation command.

        Args:
            amount: Raw amount
            currency: Optional currency code
            receipt: Optional receipt

        Returns:
            Validated OrderCreate command.

        Raises:
            BrokerError: If the amount is invalid or out of bounds.
        """
        return OrderCreate(
            amount=self.normalize_amount(amount),
            currency=self.normalize_currency(currency),
            receipt=self.normalize_receipt(receipt),
        )
