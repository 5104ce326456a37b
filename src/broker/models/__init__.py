"""Pydantic models for payment broker data entities."""

from .enums import CredentialsSource, OrderStatus
from .errors import (
    ERROR_MESSAGES,
    ERROR_RECOVERY,
    BrokerError,
    ErrorClass,
    ErrorCode,
    ToolError,
)
from .order import (
    LedgerSummary,
    Order,
    OrderCreate,
    OrderCreationResult,
    PaymentVerification,
    VerificationResult,
)

__all__ = [
    "BrokerError",
    "CredentialsSource",
    "ERROR_MESSAGES",
    "ERROR_RECOVERY",
    "ErrorClass",
    "ErrorCode",
    "LedgerSummary",
    "Order",
    "OrderCreate",
    "OrderCreationResult",
    "OrderStatus",
    "PaymentVerification",
    "ToolError",
    "VerificationResult",
]
