"""Backend services for the payment broker."""

from .amount_policy import AmountPolicy
from .ledger import DuplicateOrderError, OrderLedger
from .order_service import OrderService
from .razorpay_service import (
    GatewayNotConfiguredError,
    GatewayServiceError,
    RazorpayService,
)
from .signature import compute_signature, signatures_match
from .ssm_service import SSMService, SSMServiceError, get_ssm_service
from .verification_service import VerificationService, parse_verification

__all__ = [
    "AmountPolicy",
    "DuplicateOrderError",
    "GatewayNotConfiguredError",
    "GatewayServiceError",
    "OrderLedger",
    "OrderService",
    "RazorpayService",
    "SSMService",
    "SSMServiceError",
    "VerificationService",
    "compute_signature",
    "get_ssm_service",
    "parse_verification",
    "signatures_match",
]
