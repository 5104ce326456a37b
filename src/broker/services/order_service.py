"""Order creation and ledger queries.

Creation validates the request, asks the gateway to mint an order and
records it in the ledger with status ``created``. Nothing is recorded
when validation or the gateway call fails.
"""

import datetime as dt
from typing import TYPE_CHECKING, Any

from broker.models import (
    BrokerError,
    ErrorCode,
    LedgerSummary,
    Order,
    OrderCreationResult,
    OrderStatus,
)
from broker.utils.logging import get_logger, log_payment_operation

from .amount_policy import AmountPolicy
from .ledger import DuplicateOrderError, OrderLedger
from .razorpay_service import GatewayNotConfiguredError, GatewayServiceError

if TYPE_CHECKING:
    from .razorpay_service import RazorpayService

logger = get_logger(__name__)


class OrderService:
    """Service for creating orders and reading the ledger."""

    def __init__(
        self,
        ledger: OrderLedger,
        gateway: "RazorpayService",
        policy: AmountPolicy,
    ) -> None:
        """Initialize order service.

        Args:
            ledger: Order ledger shared with verification
            gateway: Gateway service that mints orders
            policy: Amount and receipt validation policy
        """
        self.ledger = ledger
        self.gateway = gateway
        self.policy = policy

    def create_order(
        self,
        amount: Any,
        currency: str | None = None,
        receipt: str | None = None,
    ) -> OrderCreationResult:
        """Create an order on the gateway and record it.

        Args:
            amount: Requested amount in smallest currency unit
            currency: Optional ISO currency code (defaults to INR)
            receipt: Optional receipt; replaced when missing or too long

        Returns:
            OrderCreationResult with the ledger order and gateway descriptor.

        Raises:
            BrokerError: SERVICE_UNAVAILABLE, INVALID_AMOUNT, AMOUNT_TOO_SMALL,
                AMOUNT_TOO_LARGE or GATEWAY_ERROR.
        """
        if not self.gateway.is_configured:
            log_payment_operation(
                logger, "create_order", error="gateway not configured"
            )
            raise BrokerError(ErrorCode.SERVICE_UNAVAILABLE)

        command = self.policy.build_order(amount, currency, receipt)

        try:
            gateway_order = self.gateway.create_order(
                amount=command.amount,
                currency=command.currency,
                receipt=command.receipt,
                payment_capture=True,
            )
        except GatewayNotConfiguredError as e:
            raise BrokerError(ErrorCode.SERVICE_UNAVAILABLE) from e
        except GatewayServiceError as e:
            log_payment_operation(
                logger,
                "create_order",
                amount=command.amount,
                currency=command.currency,
                error=str(e),
            )
            details = {"gateway_error_code": e.gateway_error_code} if e.gateway_error_code else None
            raise BrokerError(
                ErrorCode.GATEWAY_ERROR,
                details=details,
                message=str(e) or None,
            ) from e

        order = Order(
            id=gateway_order["id"],
            amount=command.amount,
            currency=command.currency,
            receipt=command.receipt,
            status=OrderStatus.CREATED,
            created_at=dt.datetime.now(dt.UTC),
        )

        try:
            self.ledger.add(order)
        except DuplicateOrderError as e:
            logger.error("Gateway returned an order ID already in the ledger: %s", order.id)
            raise BrokerError(
                ErrorCode.GATEWAY_ERROR, message="Gateway returned a duplicate order ID"
            ) from e

        log_payment_operation(
            logger,
            "create_order",
            order_id=order.id,
            amount=order.amount,
            currency=order.currency,
            status=order.status.value,
        )
        return OrderCreationResult(order=order.model_copy(), gateway_order=gateway_order)

    def get_order(self, order_id: str) -> Order:
        """Get a snapshot of one order.

        Raises:
            BrokerError: ORDER_NOT_FOUND if the order is absent.
        """
        return self.ledger.require(order_id).model_copy()

    def list_orders(self) -> LedgerSummary:
        """List all orders with count and summed amount."""
        return self.ledger.summary()

    def clear_orders(self) -> int:
        """Remove every order from the ledger.

        Returns:
            Number of orders removed.
        """
        cleared = self.ledger.clear()
        log_payment_operation(logger, "clear_orders", cleared=cleared)
        return cleared
