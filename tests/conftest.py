"""Pytest configuration and fixtures for payment broker tests.

This module provides reusable fixtures for testing:
- Settings with test gateway credentials
- A fresh order ledger per test
- A mocked Razorpay client (no network calls)
- Service instances and a FastAPI TestClient wired to them
"""

import hashlib
import hmac
import itertools
import os
from typing import Any, Generator
from unittest.mock import MagicMock

import pytest

# === Environment Setup ===

# Set before importing the app, which reads settings at import time
os.environ.setdefault("AWS_DEFAULT_REGION", "ap-south-1")
os.environ.setdefault("ENVIRONMENT", "test")
if not os.environ.get("AWS_PROFILE") and not os.environ.get("AWS_ACCESS_KEY_ID"):
    os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
    os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")

from broker.config import BrokerSettings  # noqa: E402
from broker.services.amount_policy import AmountPolicy  # noqa: E402
from broker.services.ledger import OrderLedger  # noqa: E402
from broker.services.order_service import OrderService  # noqa: E402
from broker.services.razorpay_service import RazorpayService  # noqa: E402
from broker.services.verification_service import VerificationService  # noqa: E402


# === Test Configuration ===

TEST_KEY_ID = "rzp_test_AbCdEf123456"
TEST_KEY_SECRET = "s3cr3t"


def sign(order_id: str, payment_id: str, secret: str = TEST_KEY_SECRET) -> str:
    """Independently compute the signature the gateway would send."""
    return hmac.new(
        secret.encode(), f"{order_id}|{payment_id}".encode(), hashlib.sha256
    ).hexdigest()


@pytest.fixture
def signer():
    """Signature helper computed independently of the broker code."""
    return sign


# === Settings and Gateway Fixtures ===


@pytest.fixture
def settings() -> BrokerSettings:
    """Settings with test credentials and default bounds."""
    return BrokerSettings(
        environment="test",
        razorpay_key_id=TEST_KEY_ID,
        razorpay_key_secret=TEST_KEY_SECRET,
    )


@pytest.fixture
def unconfigured_settings() -> BrokerSettings:
    """Settings with no gateway credentials."""
    return BrokerSettings(environment="test")


@pytest.fixture
def mock_razorpay_client() -> MagicMock:
    """Mock Razorpay client whose order.create echoes the request with an id."""
    client = MagicMock()
    counter = itertools.count(1)

    def create(data: dict[str, Any], **kwargs: Any) -> dict[str, Any]:
        return {
            "id": f"order_TEST{next(counter):06d}",
            "entity": "order",
            "amount": data["amount"],
            "amount_paid": 0,
            "amount_due": data["amount"],
            "currency": data["currency"],
            "receipt": data["receipt"],
            "status": "created",
            "attempts": 0,
            "created_at": 1760000000,
        }

    client.order.create.side_effect = create
    return client


@pytest.fixture
def gateway(settings: BrokerSettings, mock_razorpay_client: MagicMock) -> RazorpayService:
    """Gateway service backed by the mock client."""
    return RazorpayService(settings, client_factory=lambda key_id, secret: mock_razorpay_client)


@pytest.fixture
def unconfigured_gateway(
    unconfigured_settings: BrokerSettings, mock_razorpay_client: MagicMock
) -> RazorpayService:
    """Gateway service with no credentials."""
    return RazorpayService(
        unconfigured_settings, client_factory=lambda key_id, secret: mock_razorpay_client
    )


# === Ledger and Service Fixtures ===


@pytest.fixture
def ledger() -> OrderLedger:
    """Fresh, empty order ledger."""
    return OrderLedger()


@pytest.fixture
def policy(settings: BrokerSettings) -> AmountPolicy:
    """Amount policy with default bounds (100 to 50,000,000 paise)."""
    return AmountPolicy(settings)


@pytest.fixture
def order_service(
    ledger: OrderLedger, gateway: RazorpayService, policy: AmountPolicy
) -> OrderService:
    """Order service over the fresh ledger and mock gateway."""
    return OrderService(ledger=ledger, gateway=gateway, policy=policy)


@pytest.fixture
def verification_service(ledger: OrderLedger, gateway: RazorpayService) -> VerificationService:
    """Verification service enforcing ledger membership."""
    return VerificationService(ledger=ledger, gateway=gateway)


# === API Fixtures ===


@pytest.fixture
def client(
    settings: BrokerSettings, ledger: OrderLedger, gateway: RazorpayService
) -> Generator[Any, None, None]:
    """TestClient with services overridden to use the test fixtures."""
    from fastapi.testclient import TestClient

    from broker_api.dependencies import get_gateway, get_ledger, get_settings, reset_services
    from broker_api.main import app

    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_ledger] = lambda: ledger
    app.dependency_overrides[get_gateway] = lambda: gateway

    yield TestClient(app)

    app.dependency_overrides.clear()
    reset_services()
