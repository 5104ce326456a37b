"""API models for order and payment endpoints."""

from datetime import datetime
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from broker.models import Order


class CreateOrderRequest(BaseModel):
    """Request to create a payment order.

    ``amount`` is left untyped here; the amount policy decides what counts
    as a valid number so every failure carries a broker error code.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {"amount": 50000, "currency": "INR", "receipt": "rcpt_signup_42"},
                {"amount": 50000},
            ]
        },
    )

    amount: Any = Field(
        default=None,
        description="Amount in smallest currency unit (paise for INR)",
        examples=[50000],
    )
    currency: str | None = Field(
        default=None,
        description="ISO currency code, defaults to INR",
        examples=["INR"],
    )
    receipt: str | None = Field(
        default=None,
        description="Receipt reference; replaced when missing or longer than 40 characters",
        examples=["rcpt_signup_42"],
    )


class OrderDescriptor(BaseModel):
    """Order as returned to the checkout client."""

    id: str = Field(..., description="Gateway order ID", examples=["order_Nf8wJ3aKq2"])
    entity: str = Field(default="order")
    amount: int = Field(..., description="Amount in smallest currency unit")
    currency: str
    receipt: str
    status: str = Field(default="created", description="Gateway order status")
    created_at: int | None = Field(
        default=None, description="Gateway creation time (unix seconds)"
    )


class CreateOrderResponse(BaseModel):
    """Successful order creation."""

    success: bool = True
    message: str = "Order created successfully"
    order: OrderDescriptor
    key_id: str | None = Field(
        default=None, description="Public gateway key id for the checkout widget"
    )


class VerifyPaymentRequest(BaseModel):
    """Payment claim submitted after checkout.

    Accepts both the short names and the ``razorpay_*`` names the checkout
    handler returns.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "order_id": "order_Nf8wJ3aKq2",
                    "payment_id": "pay_Nf8x1Yb7Qz",
                    "signature": "9f1c...e2",
                }
            ]
        },
    )

    order_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("order_id", "razorpay_order_id"),
    )
    payment_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("payment_id", "razorpay_payment_id"),
    )
    signature: str | None = Field(
        default=None,
        validation_alias=AliasChoices("signature", "razorpay_signature"),
    )


class VerifyPaymentResponse(BaseModel):
    """Successful payment verification."""

    success: bool = True
    message: str = "Payment verified successfully"
    order_id: str
    payment_id: str
    verified_at: datetime


class OrderListResponse(BaseModel):
    """All orders in the ledger."""

    success: bool = True
    count: int
    total_amount: int = Field(..., description="Sum of order amounts")
    orders: list[Order]


class OrderDetailResponse(BaseModel):
    """A single order."""

    success: bool = True
    order: Order


class ClearOrdersResponse(BaseModel):
    """Result of clearing the ledger."""

    success: bool = True
    cleared: int = Field(..., description="Number of orders removed")
