"""Unit tests for OrderLedger and Order state transitions.

Test categories:
- Insertion and lookup
- Summary and clear
- Locked updates
- Order verification transitions
"""

import datetime as dt
import threading

import pytest

from broker.models import ErrorCode, Order, OrderStatus
from broker.models.errors import BrokerError
from broker.services.ledger import DuplicateOrderError, OrderLedger

NOW = dt.datetime(2026, 7, 1, 10, 0, tzinfo=dt.UTC)


def make_order(order_id: str = "order_abc", amount: int = 50000) -> Order:
    return Order(
        id=order_id,
        amount=amount,
        currency="INR",
        receipt=f"rcpt_{order_id}",
        created_at=NOW,
    )


class TestLedgerBasics:
    """Test insertion and lookup."""

    def test_starts_empty(self, ledger: OrderLedger):
        assert len(ledger) == 0
        assert ledger.list_orders() == []

    def test_add_and_get(self, ledger: OrderLedger):
        order = ledger.add(make_order())

        assert ledger.get("order_abc") is order
        assert "order_abc" in ledger
        assert len(ledger) == 1

    def test_key_equals_order_id(self, ledger: OrderLedger):
        ledger.add(make_order("order_1"))
        ledger.add(make_order("order_2"))

        assert [o.id for o in ledger.list_orders()] == ["order_1", "order_2"]

    def test_duplicate_insert_rejected(self, ledger: OrderLedger):
        """An order is only ever inserted once."""
        original = ledger.add(make_order())

        with pytest.raises(DuplicateOrderError):
            ledger.add(make_order(amount=999))

        assert ledger.get("order_abc") is original
        assert ledger.get("order_abc").amount == 50000

    def test_get_missing_returns_none(self, ledger: OrderLedger):
        assert ledger.get("order_missing") is None

    def test_require_missing_raises_not_found(self, ledger: OrderLedger):
        with pytest.raises(BrokerError) as exc_info:
            ledger.require("order_missing")

        assert exc_info.value.code == ErrorCode.ORDER_NOT_FOUND
        assert exc_info.value.details == {"order_id": "order_missing"}


class TestSummaryAndClear:
    """Test aggregate views and clearing."""

    def test_summary_counts_and_sums(self, ledger: OrderLedger):
        ledger.add(make_order("order_1", 100))
        ledger.add(make_order("order_2", 2500))

        summary = ledger.summary()

        assert summary.count == 2
        assert summary.total_amount == 2600
        assert {o.id for o in summary.orders} == {"order_1", "order_2"}

    def test_summary_returns_copies(self, ledger: OrderLedger):
        ledger.add(make_order())

        summary = ledger.summary()
        summary.orders[0].verification_attempts = 7

        assert ledger.get("order_abc").verification_attempts == 0

    def test_clear_reports_count(self, ledger: OrderLedger):
        """Clearing N entries reports N and leaves the ledger empty."""
        for i in range(3):
            ledger.add(make_order(f"order_{i}"))

        assert ledger.clear() == 3
        assert len(ledger) == 0
        assert ledger.summary().count == 0

    def test_clear_empty(self, ledger: OrderLedger):
        assert ledger.clear() == 0


class TestLockedUpdate:
    """Test in-place mutation under the lock."""

    def test_update_mutates_in_place(self, ledger: OrderLedger):
        order = ledger.add(make_order())

        ledger.update("order_abc", lambda o: o.record_mismatch("pay_1"))

        assert ledger.get("order_abc") is order
        assert order.verification_attempts == 1

    def test_update_missing_raises(self, ledger: OrderLedger):
        with pytest.raises(BrokerError) as exc_info:
            ledger.update("order_missing", lambda o: None)

        assert exc_info.value.code == ErrorCode.ORDER_NOT_FOUND

    def test_concurrent_mismatches_counted(self, ledger: OrderLedger):
        ledger.add(make_order())

        def worker() -> None:
            for _ in range(100):
                ledger.update("order_abc", lambda o: o.record_mismatch("pay_x"))

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert ledger.get("order_abc").verification_attempts == 400


class TestOrderTransitions:
    """Test forward-only status transitions."""

    def test_initial_status_created(self):
        order = make_order()

        assert order.status == OrderStatus.CREATED
        assert order.payment_id is None
        assert order.verified_at is None
        assert order.verification_attempts == 0

    def test_created_to_verified(self):
        order = make_order()

        order.mark_verified("pay_123", NOW)

        assert order.status == OrderStatus.VERIFIED
        assert order.payment_id == "pay_123"
        assert order.verified_at == NOW

    def test_created_to_verification_failed(self):
        order = make_order()

        order.record_mismatch("pay_123")

        assert order.status == OrderStatus.VERIFICATION_FAILED
        assert order.payment_id == "pay_123"
        assert order.verification_attempts == 1
        assert order.verified_at is None

    def test_failed_can_retry_to_verified(self):
        order = make_order()
        order.record_mismatch("pay_bad")

        order.mark_verified("pay_123", NOW)

        assert order.status == OrderStatus.VERIFIED
        assert order.payment_id == "pay_123"
        assert order.verification_attempts == 1

    def test_verified_never_downgraded(self):
        order = make_order()
        order.mark_verified("pay_123", NOW)

        order.record_mismatch("pay_evil")

        assert order.status == OrderStatus.VERIFIED
        assert order.payment_id == "pay_123"
        assert order.verification_attempts == 1

    def test_reverification_keeps_first_timestamp(self):
        order = make_order()
        order.mark_verified("pay_123", NOW)

        order.mark_verified("pay_123", NOW + dt.timedelta(minutes=5))

        assert order.verified_at == NOW

    def test_mismatch_leaves_immutable_fields(self):
        order = make_order()

        order.record_mismatch("pay_123")

        assert order.amount == 50000
        assert order.currency == "INR"
        assert order.receipt == "rcpt_order_abc"
