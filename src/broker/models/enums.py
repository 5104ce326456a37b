"""Enumeration types for payment broker data models."""

from enum import Enum


class OrderStatus(str, Enum):
    """Verification status of a payment order."""

    CREATED = "created"
    VERIFIED = "verified"
    VERIFICATION_FAILED = "verification_failed"


class CredentialsSource(str, Enum):
    """Where gateway credentials are loaded from."""

    ENV = "env"
    SSM = "ssm"
