"""Razorpay gateway service for order creation and the shared key secret.

The broker depends on the gateway for exactly two things: minting orders and
supplying the key secret that signs completed payments. Credentials come from
the environment or, with ``CREDENTIALS_SOURCE=ssm``, from SSM Parameter Store.
"""

import logging
from typing import Any, Callable

import razorpay
import requests
from razorpay.errors import BadRequestError, GatewayError, ServerError

from broker.config import BrokerSettings, load_settings
from broker.models.enums import CredentialsSource

from .ssm_service import SSMService, SSMServiceError, get_ssm_service

logger = logging.getLogger(__name__)

_GATEWAY_ERRORS = (
    BadRequestError,
    GatewayError,
    ServerError,
)

_ERROR_CODES: dict[type, str] = {
    BadRequestError: "BAD_REQUEST_ERROR",
    GatewayError: "GATEWAY_ERROR",
    ServerError: "SERVER_ERROR",
}


class GatewayServiceError(Exception):
    """Raised when a gateway operation fails."""

    def __init__(self, message: str, gateway_error_code: str | None = None) -> None:
        """Initialize with message and optional gateway error code.

        Args:
            message: Human-readable error message.
            gateway_error_code: Gateway-specific error code if available.
        """
        super().__init__(message)
        self.gateway_error_code = gateway_error_code


class GatewayNotConfiguredError(GatewayServiceError):
    """Raised when key id or key secret is missing."""


class RazorpayService:
    """Service for Razorpay operations.

    Usage:
        gateway = RazorpayService(load_settings())
        order = gateway.create_order(amount=50000, currency="INR", receipt="rcpt_1")
    """

    def __init__(
        self,
        settings: BrokerSettings | None = None,
        *,
        ssm: SSMService | None = None,
        client_factory: Callable[[str, str], Any] | None = None,
    ) -> None:
        """Initialize the gateway service.

        Args:
            settings: Broker settings. Defaults to values from the environment.
            ssm: SSM service used when credentials live in Parameter Store.
            client_factory: Builds a gateway client from (key_id, key_secret).
        """
        self._settings = settings or load_settings()
        self._ssm = ssm
        self._client_factory = client_factory or _default_client_factory
        self._client: Any | None = None
        self._credentials: tuple[str | None, str | None] | None = None

    def _resolve_credentials(self) -> tuple[str | None, str | None]:
        if self._credentials is None:
            if self._settings.credentials_source is CredentialsSource.SSM:
                try:
                    self._credentials = self._credentials_from_ssm()
                except SSMServiceError as e:
                    # Not cached, so the next call retries SSM
                    logger.error("Failed to load gateway credentials from SSM: %s", e)
                    return (None, None)
            else:
                self._credentials = (
                    self._settings.razorpay_key_id,
                    self._settings.razorpay_key_secret,
                )
        return self._credentials

    def _credentials_from_ssm(self) -> tuple[str | None, str | None]:
        ssm = self._ssm or get_ssm_service()
        prefix = self._settings.ssm_prefix
        key_id = ssm.get_optional_parameter(f"{prefix}/key_id")
        key_secret = ssm.get_optional_parameter(f"{prefix}/key_secret")
        return (key_id or None, key_secret or None)

    @property
    def key_id(self) -> str | None:
        """Public key id, needed by the checkout widget."""
        return self._resolve_credentials()[0]

    @property
    def key_secret(self) -> str | None:
        """Shared secret used as the HMAC key for payment signatures."""
        return self._resolve_credentials()[1]

    @property
    def is_configured(self) -> bool:
        """Whether both key id and key secret are available."""
        key_id, key_secret = self._resolve_credentials()
        return bool(key_id and key_secret)

    def _get_client(self) -> Any:
        """Get or create the gateway client.

        Raises:
            GatewayNotConfiguredError: If credentials are missing.
        """
        if self._client is None:
            key_id, key_secret = self._resolve_credentials()
            if not (key_id and key_secret):
                raise GatewayNotConfiguredError(
                    "Razorpay not configured. Check RAZORPAY_KEY_ID and RAZORPAY_KEY_SECRET."
                )
            self._client = self._client_factory(key_id, key_secret)
            logger.info("Razorpay client initialized with key: %s...", key_id[:8])
        return self._client

    def create_order(
        self,
        *,
        amount: int,
        currency: str,
        receipt: str,
        payment_capture: bool = True,
    ) -> dict[str, Any]:
        """Create an order on the gateway.

        Args:
            amount: Amount in smallest currency unit.
            currency: ISO currency code.
            receipt: Receipt reference (at most 40 characters).
            payment_capture: Capture payments automatically.

        Returns:
            Order descriptor returned by the gateway, including its ``id``.

        Raises:
            GatewayNotConfiguredError: If credentials are missing.
            GatewayServiceError: If the gateway call fails.
        """
        client = self._get_client()
        data = {
            "amount": amount,
            "currency": currency,
            "receipt": receipt,
            "payment_capture": 1 if payment_capture else 0,
        }

        try:
            logger.info(
                "Creating Razorpay order: amount %d %s, receipt %s",
                amount,
                currency,
                receipt,
            )
            order = client.order.create(
                data=data, timeout=self._settings.gateway_timeout_seconds
            )
        except _GATEWAY_ERRORS as e:
            error_code = _ERROR_CODES.get(type(e))
            logger.error("Razorpay order creation failed: %s (code: %s)", e, error_code)
            raise GatewayServiceError(
                str(e) or "Failed to create order", gateway_error_code=error_code
            ) from e
        except requests.Timeout as e:
            logger.error("Razorpay order creation timed out: %s", e)
            raise GatewayServiceError(
                "Payment gateway timed out", gateway_error_code="TIMEOUT"
            ) from e
        except requests.RequestException as e:
            logger.error("Razorpay unreachable: %s", e)
            raise GatewayServiceError(
                "Payment gateway unreachable", gateway_error_code="CONNECTION_ERROR"
            ) from e

        if not isinstance(order, dict) or not order.get("id"):
            logger.error("Razorpay returned an order without an id: %r", order)
            raise GatewayServiceError("Gateway returned an invalid order")

        logger.info("Razorpay order created: %s", order["id"])
        return dict(order)


def _default_client_factory(key_id: str, key_secret: str) -> razorpay.Client:
    return razorpay.Client(auth=(key_id, key_secret))
