"""FastAPI dependency injection providers for broker services.

The ledger, gateway service and flow services are created once per process
and shared by all requests.

Service Dependency Graph:
    BrokerSettings (from environment)
        ├── RazorpayService
        ├── AmountPolicy
        └── OrderLedger
                ├── OrderService (ledger, gateway, policy)
                └── VerificationService (ledger, gateway)

Testing:
    Override ``get_settings``/``get_gateway`` via ``app.dependency_overrides``,
    and call reset_services() between tests for a fresh ledger.
"""

from functools import lru_cache

from fastapi import Depends

from broker.config import BrokerSettings, load_settings
from broker.services.amount_policy import AmountPolicy
from broker.services.ledger import OrderLedger
from broker.services.order_service import OrderService
from broker.services.razorpay_service import RazorpayService
from broker.services.verification_service import VerificationService


@lru_cache
def get_settings() -> BrokerSettings:
    """Get cached settings loaded from the environment."""
    return load_settings()


@lru_cache
def get_ledger() -> OrderLedger:
    """Get the process-wide order ledger."""
    return OrderLedger()


@lru_cache
def _cached_gateway() -> RazorpayService:
    return RazorpayService(get_settings())


def get_gateway() -> RazorpayService:
    """Get the cached gateway service."""
    return _cached_gateway()


def get_amount_policy(settings: BrokerSettings = Depends(get_settings)) -> AmountPolicy:
    """Build the amount policy from settings."""
    return AmountPolicy(settings)


def get_order_service(
    ledger: OrderLedger = Depends(get_ledger),
    gateway: RazorpayService = Depends(get_gateway),
    policy: AmountPolicy = Depends(get_amount_policy),
) -> OrderService:
    """Get an OrderService bound to the shared ledger."""
    return OrderService(ledger=ledger, gateway=gateway, policy=policy)


def get_verification_service(
    ledger: OrderLedger = Depends(get_ledger),
    gateway: RazorpayService = Depends(get_gateway),
    settings: BrokerSettings = Depends(get_settings),
) -> VerificationService:
    """Get a VerificationService bound to the shared ledger."""
    return VerificationService(
        ledger=ledger,
        gateway=gateway,
        require_known_order=settings.require_known_order,
    )


def reset_services() -> None:
    """Clear all cached instances, including the ledger.

    Example:
        @pytest.fixture(autouse=True)
        def reset_state():
            yield
            reset_services()
    """
    get_settings.cache_clear()
    get_ledger.cache_clear()
    _cached_gateway.cache_clear()
