"""In-memory order ledger.

The ledger is the broker's record of the orders it created and their
verification status. It lives for the lifetime of the process and is never
persisted. Every key equals its order's ``id``; an order is inserted once,
at creation, and afterwards only updated in place.

One re-entrant lock guards all access, so the ledger can be shared between
the event loop and the thread pool that runs gateway calls.
"""

import threading
from collections.abc import Callable
from typing import TypeVar

from broker.models import BrokerError, ErrorCode, LedgerSummary, Order
from broker.utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class DuplicateOrderError(ValueError):
    """Raised when an order ID is inserted twice."""


class OrderLedger:
    """Mapping from gateway order ID to Order."""

    def __init__(self) -> None:
        self._orders: dict[str, Order] = {}
        self._lock = threading.RLock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._orders)

    def __contains__(self, order_id: object) -> bool:
        with self._lock:
            return order_id in self._orders

    def add(self, order: Order) -> Order:
        """Insert a newly created order.

        Args:
            order: Order to insert; its ``id`` becomes the key

        Returns:
            The inserted order.

        Raises:
            DuplicateOrderError: If an order with the same ID already exists.
        """
        with self._lock:
            if order.id in self._orders:
                raise DuplicateOrderError(f"Order {order.id} is already in the ledger")
            self._orders[order.id] = order
            logger.debug("Order %s added to ledger (%d total)", order.id, len(self._orders))
            return order

    def get(self, order_id: str) -> Order | None:
        """Get an order by ID, or None if absent."""
        with self._lock:
            return self._orders.get(order_id)

    def require(self, order_id: str) -> Order:
        """Get an order by ID.

        Raises:
            BrokerError: ORDER_NOT_FOUND if the order is absent.
        """
        order = self.get(order_id)
        if order is None:
            raise BrokerError(ErrorCode.ORDER_NOT_FOUND, details={"order_id": order_id})
        return order

    def update(self, order_id: str, mutate: Callable[[Order], T]) -> T:
        """Apply a mutation to an order while holding the lock.

        Args:
            order_id: ID of the order to mutate
            mutate: Callable receiving the stored order, updating it in place

        Returns:
            Whatever ``mutate`` returns.

        Raises:
            BrokerError: ORDER_NOT_FOUND if the order is absent.
        """
        with self._lock:
            return mutate(self.require(order_id))

    def list_orders(self) -> list[Order]:
        """All orders in insertion order."""
        with self._lock:
            return list(self._orders.values())

    def summary(self) -> LedgerSummary:
        """Count, summed amount and copies of all orders."""
        with self._lock:
            orders = [order.model_copy() for order in self._orders.values()]
        return LedgerSummary(
            count=len(orders),
            total_amount=sum(order.amount for order in orders),
            orders=orders,
        )

    def clear(self) -> int:
        """Remove every order.

        Returns:
            Number of orders removed.
        """
        with self._lock:
            cleared = len(self._orders)
            self._orders.clear()
        logger.info("Ledger cleared: %d orders removed", cleared)
        return cleared
