"""Payment verification.

A client claims a payment completed by submitting the order ID, payment ID
and signature from the checkout. The claim is trusted only if the signature
equals HMAC-SHA256(key_secret, "order_id|payment_id").

Checks run in a fixed order: missing parameters, server configuration,
ledger membership (decided under the ledger lock), then the signature
itself. A mismatch is the caller's fault and is reported as a client error.
"""

import datetime as dt
from typing import TYPE_CHECKING, Any

from broker.models import (
    BrokerError,
    ErrorCode,
    Order,
    PaymentVerification,
    VerificationResult,
)
from broker.utils.logging import get_logger, log_verification_attempt

from .ledger import OrderLedger
from .signature import compute_signature, signatures_match

if TYPE_CHECKING:
    from .razorpay_service import RazorpayService

logger = get_logger(__name__)

# Checked in this order; the first missing one is reported
REQUIRED_FIELDS: tuple[tuple[str, str], ...] = (
    ("order_id", "Order ID"),
    ("payment_id", "Payment ID"),
    ("signature", "Signature"),
)


def parse_verification(
    order_id: Any, payment_id: Any, signature: Any
) -> PaymentVerification:
    """Validate and trim the three claimed identifiers.

    Raises:
        BrokerError: MISSING_PARAMETER naming the first missing field.
    """
    values = {"order_id": order_id, "payment_id": payment_id, "signature": signature}
    cleaned: dict[str, str] = {}

    for field, label in REQUIRED_FIELDS:
        value = values[field]
        if not isinstance(value, str) or not value.strip():
            raise BrokerError(
                ErrorCode.MISSING_PARAMETER,
                details={"field": field},
                message=f"{label} is required",
            )
        cleaned[field] = value.strip()

    return PaymentVerification(**cleaned)


class VerificationService:
    """Verifies payment signatures and updates the ledger."""

    def __init__(
        self,
        ledger: OrderLedger,
        gateway: "RazorpayService",
        *,
        require_known_order: bool = True,
    ) -> None:
        """Initialize verification service.

        Args:
            ledger: Order ledger shared with order creation
            gateway: Gateway service supplying the key secret
            require_known_order: Reject orders this process never created
        """
        self.ledger = ledger
        self.gateway = gateway
        self.require_known_order = require_known_order

    def verify_payment(
        self, order_id: Any, payment_id: Any, signature: Any
    ) -> VerificationResult:
        """Verify a payment claim.

        Args:
            order_id: Claimed gateway order ID
            payment_id: Claimed gateway payment ID
            signature: Claimed signature (lowercase hex)

        Returns:
            VerificationResult with the verification timestamp.

        Raises:
            BrokerError: MISSING_PARAMETER, SERVER_MISCONFIGURED,
                ORDER_NOT_FOUND or SIGNATURE_MISMATCH.
        """
        claim = parse_verification(order_id, payment_id, signature)

        secret = self.gateway.key_secret
        if not secret:
            logger.error("Payment verification impossible: key secret is not configured")
            raise BrokerError(ErrorCode.SERVER_MISCONFIGURED)

        expected = compute_signature(claim.order_id, claim.payment_id, secret)
        matched = signatures_match(expected, claim.signature)
        now = dt.datetime.now(dt.UTC)

        def record(order: Order) -> tuple[int, dt.datetime | None]:
            if matched:
                order.mark_verified(claim.payment_id, now)
            else:
                order.record_mismatch(claim.payment_id)
            return order.verification_attempts, order.verified_at

        # Membership is decided under the ledger lock, together with the update
        try:
            attempts, verified_at = self.ledger.update(claim.order_id, record)
        except BrokerError:
            if self.require_known_order:
                log_verification_attempt(
                    logger,
                    claim.order_id,
                    claim.payment_id,
                    claim.signature,
                    result="unknown_order",
                )
                raise
            attempts, verified_at = None, now

        if not matched:
            log_verification_attempt(
                logger,
                claim.order_id,
                claim.payment_id,
                claim.signature,
                result="mismatch",
                attempts=attempts,
            )
            raise BrokerError(
                ErrorCode.SIGNATURE_MISMATCH,
                details={
                    "order_id": claim.order_id,
                    "payment_id": claim.payment_id,
                },
            )

        log_verification_attempt(
            logger, claim.order_id, claim.payment_id, claim.signature, result="verified"
        )
        return VerificationResult(
            order_id=claim.order_id,
            payment_id=claim.payment_id,
            verified_at=verified_at or now,
        )
