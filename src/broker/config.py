"""Runtime configuration for the payment broker.

All settings come from environment variables. Gateway credentials are read
from ``RAZORPAY_KEY_ID``/``RAZORPAY_KEY_SECRET`` by default, or from SSM
Parameter Store when ``CREDENTIALS_SOURCE=ssm``.

Usage:
    settings = load_settings()
    if settings.min_amount > amount:
        ...
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Mapping

from broker.models.enums import CredentialsSource

logger = logging.getLogger(__name__)

DEFAULT_CURRENCY = "INR"
DEFAULT_MIN_AMOUNT = 100  # ₹1 in paise
DEFAULT_MAX_AMOUNT = 50_000_000  # ₹5,00,000 in paise
DEFAULT_RECEIPT_MAX_LENGTH = 40
DEFAULT_GATEWAY_TIMEOUT_SECONDS = 10.0
DEFAULT_PORT = 3000

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


class ConfigurationError(ValueError):
    """Raised when an environment variable holds an unusable value."""


@dataclass(frozen=True)
class BrokerSettings:
    """Immutable broker settings.

    Amount bounds are expressed in the smallest currency unit.
    """

    environment: str = "dev"
    razorpay_key_id: str | None = field(default=None, repr=False)
    razorpay_key_secret: str | None = field(default=None, repr=False)
    credentials_source: CredentialsSource = CredentialsSource.ENV
    default_currency: str = DEFAULT_CURRENCY
    min_amount: int = DEFAULT_MIN_AMOUNT
    max_amount: int = DEFAULT_MAX_AMOUNT
    receipt_max_length: int = DEFAULT_RECEIPT_MAX_LENGTH
    gateway_timeout_seconds: float = DEFAULT_GATEWAY_TIMEOUT_SECONDS
    require_known_order: bool = True
    cors_allow_origins: tuple[str, ...] = ("*",)
    port: int = DEFAULT_PORT

    def __post_init__(self) -> None:
        if self.min_amount < 1:
            raise ConfigurationError("MIN_AMOUNT must be at least 1")
        if self.max_amount < self.min_amount:
            raise ConfigurationError("MAX_AMOUNT must not be below MIN_AMOUNT")
        if self.receipt_max_length < 1:
            raise ConfigurationError("RECEIPT_MAX_LENGTH must be at least 1")
        if self.gateway_timeout_seconds <= 0:
            raise ConfigurationError("GATEWAY_TIMEOUT_SECONDS must be positive")

    @property
    def ssm_prefix(self) -> str:
        """SSM parameter path prefix for gateway credentials."""
        return f"/payment-broker/{self.environment}/razorpay"


def _get_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from e


def _get_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from e


def _get_bool(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"{name} must be a boolean, got {raw!r}")


def _get_secret(env: Mapping[str, str], name: str) -> str | None:
    value = env.get(name, "").strip()
    return value or None


def load_settings(environ: Mapping[str, str] | None = None) -> BrokerSettings:
    """Build settings from environment variables.

    Args:
        environ: Mapping to read from. Defaults to ``os.environ``.

    Returns:
        Populated BrokerSettings.

    Raises:
        ConfigurationError: If a variable cannot be parsed.
    """
    env = os.environ if environ is None else environ

    source_raw = env.get("CREDENTIALS_SOURCE", CredentialsSource.ENV.value).strip().lower()
    try:
        credentials_source = CredentialsSource(source_raw)
    except ValueError as e:
        raise ConfigurationError(
            f"CREDENTIALS_SOURCE must be 'env' or 'ssm', got {source_raw!r}"
        ) from e

    origins = tuple(
        origin.strip()
        for origin in env.get("CORS_ALLOW_ORIGINS", "*").split(",")
        if origin.strip()
    )

    settings = BrokerSettings(
        environment=env.get("ENVIRONMENT", "dev"),
        razorpay_key_id=_get_secret(env, "RAZORPAY_KEY_ID"),
        razorpay_key_secret=_get_secret(env, "RAZORPAY_KEY_SECRET"),
        credentials_source=credentials_source,
        default_currency=env.get("DEFAULT_CURRENCY", DEFAULT_CURRENCY).strip().upper()
        or DEFAULT_CURRENCY,
        min_amount=_get_int(env, "MIN_AMOUNT", DEFAULT_MIN_AMOUNT),
        max_amount=_get_int(env, "MAX_AMOUNT", DEFAULT_MAX_AMOUNT),
        receipt_max_length=_get_int(env, "RECEIPT_MAX_LENGTH", DEFAULT_RECEIPT_MAX_LENGTH),
        gateway_timeout_seconds=_get_float(
            env, "GATEWAY_TIMEOUT_SECONDS", DEFAULT_GATEWAY_TIMEOUT_SECONDS
        ),
        require_known_order=_get_bool(env, "REQUIRE_KNOWN_ORDER", True),
        cors_allow_origins=origins or ("*",),
        port=_get_int(env, "PORT", DEFAULT_PORT),
    )
    logger.debug(
        "Settings loaded for environment %s (credentials from %s)",
        settings.environment,
        settings.credentials_source.value,
    )
    return settings
