"""Order model for payment attempts tracked by the broker."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .enums import OrderStatus


class Order(BaseModel):
    """A payment order created through the gateway.

    Amounts are stored in the smallest currency unit (paise for INR).
    ``amount``, ``currency`` and ``receipt`` never change after creation;
    only the verification fields are updated in place.
    """

    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(..., min_length=1, description="Gateway-assigned order ID")
    amount: int = Field(..., gt=0, description="Amount in smallest currency unit")
    currency: str = Field(default="INR", description="ISO currency code")
    receipt: str = Field(..., min_length=1, description="Receipt reference token")
    status: OrderStatus = Field(default=OrderStatus.CREATED, description="Verification status")
    payment_id: str | None = Field(
        default=None, description="Gateway payment ID, set on verification attempt"
    )
    verification_attempts: int = Field(
        default=0, ge=0, description="Number of failed signature checks"
    )
    created_at: datetime = Field(..., description="Creation timestamp")
    verified_at: datetime | None = Field(
        default=None, description="Timestamp of successful verification"
    )

    def mark_verified(self, payment_id: str, at: datetime) -> None:
        """Record a successful signature check.

        Re-verifying a verified order keeps the original payment ID and
        timestamp.
        """
        if self.status is OrderStatus.VERIFIED:
            return
        self.payment_id = payment_id
        self.verified_at = at
        self.status = OrderStatus.VERIFIED

    def record_mismatch(self, payment_id: str) -> None:
        """Record a failed signature check.

        A verified order stays verified; only the attempt counter moves.
        """
        self.verification_attempts += 1
        if self.status is OrderStatus.VERIFIED:
            return
        self.payment_id = payment_id
        self.status = OrderStatus.VERIFICATION_FAILED


class OrderCreate(BaseModel):
    """Validated command to create an order.

    Produced by the amount policy from raw request data.
    """

    model_config = ConfigDict(strict=True, frozen=True)

    amount: int = Field(..., gt=0)
    currency: str
    receipt: str


class OrderCreationResult(BaseModel):
    """Result of a successful order creation."""

    order: Order
    gateway_order: dict[str, Any] = Field(
        default_factory=dict, description="Order descriptor returned by the gateway"
    )


class PaymentVerification(BaseModel):
    """Validated payment claim: the three identifiers, trimmed."""

    model_config = ConfigDict(strict=True, frozen=True)

    order_id: str
    payment_id: str
    signature: str


class VerificationResult(BaseModel):
    """Outcome of a successful payment verification."""

    order_id: str
    payment_id: str
    verified_at: datetime


class LedgerSummary(BaseModel):
    """Aggregate view over all orders in the ledger."""

    count: int = Field(..., ge=0)
    total_amount: int = Field(..., ge=0, description="Sum of order amounts")
    orders: list[Order] = Field(default_factory=list)
